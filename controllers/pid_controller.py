"""Altitude PID control law with gravity feed-forward.

The controller is a pure function of its inputs. Integral and previous error
are carried by the caller (the simulation runner) between steps.
"""

from controllers.types import PIDGains, PIDState


def baseline_force(mass: float, gravity: float) -> float:
    """Thrust that exactly cancels the vehicle's weight.

    With zero gains this holds the vehicle at zero net acceleration.
    """
    return mass * gravity


def pid_step(
    gains: PIDGains,
    error: float,
    integral: float,
    previous_error: float,
    dt: float,
    feed_forward: float = 0.0,
) -> PIDState:
    """Evaluate the PID law for one timestep.

    The integral is accumulated before it is used, so the integral term of
    step ``i`` already includes ``error_i * dt``. There is no anti-windup:
    the integral is never clamped.

    Args:
        gains: PID gains
        error: Current error (setpoint - measurement)
        integral: Integral accumulated up to the previous step
        previous_error: Error of the previous step (0.0 on the first step)
        dt: Timestep, must be non-zero
        feed_forward: Baseline thrust added to the PID terms

    Returns:
        PIDState with the updated integral and the thrust command

    Example:
        >>> state = pid_step(PIDGains(kp=5.0, ki=1.0, kd=2.0), 10.0, 0.0, 0.0, 0.01, 9.81)
        >>> round(state.output, 2)
        2059.91
    """
    new_integral = integral + error * dt
    derivative = (error - previous_error) / dt

    output = (
        feed_forward
        + gains.kp * error
        + gains.ki * new_integral
        + gains.kd * derivative
    )

    return PIDState(
        error=error,
        integral=new_integral,
        derivative=derivative,
        output=output,
    )
