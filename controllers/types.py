"""Common data types for the altitude control and tuning system."""

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple


class InvalidConfig(ValueError):
    """Raised when a configuration cannot produce a valid simulation run.

    Raised before any simulation step executes, so a failed run never
    returns partial records.
    """


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidConfig(f"{name} must be a positive finite number, got {value!r}")


def _require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidConfig(f"{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class PIDGains:
    """PID controller gains.

    Attributes:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
    """

    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"kp": self.kp, "ki": self.ki, "kd": self.kd}

    @classmethod
    def from_dict(cls, d: dict) -> "PIDGains":
        return cls(
            kp=float(d.get("kp", 0.0)),
            ki=float(d.get("ki", 0.0)),
            kd=float(d.get("kd", 0.0)),
        )


@dataclass(frozen=True)
class EnvironmentConfig:
    """Environment for one closed-loop altitude run.

    Immutable for the duration of a run. The defaults reproduce the
    interactive tuning tool: a 1 kg vehicle climbing to 10 m under light wind.

    Attributes:
        setpoint: Target altitude (m)
        mass: Vehicle mass (kg)
        gravity: Gravitational acceleration (m/s^2)
        disturbance_magnitude: Peak wind acceleration (m/s^2), sampled
            uniformly in [-magnitude, magnitude] every step
        dt: Integration timestep (s)
        horizon: Simulated duration (s)
    """

    setpoint: float = 10.0
    mass: float = 1.0
    gravity: float = 9.81
    disturbance_magnitude: float = 0.5
    dt: float = 0.01
    horizon: float = 10.0

    @property
    def step_count(self) -> int:
        """Number of integration steps, floor(horizon / dt)."""
        return int(math.floor(self.horizon / self.dt))

    def validate(self) -> None:
        """Check that a run with this environment is well defined.

        Raises:
            InvalidConfig: If any parameter would produce a division by zero,
                NaN or an empty record sequence
        """
        _require_positive("dt", self.dt)
        _require_positive("horizon", self.horizon)
        _require_positive("setpoint", self.setpoint)
        _require_positive("mass", self.mass)
        _require_finite("gravity", self.gravity)
        _require_finite("disturbance_magnitude", self.disturbance_magnitude)
        if self.step_count < 1:
            raise InvalidConfig(
                f"horizon {self.horizon} is shorter than one timestep {self.dt}"
            )

    def with_timing(self, horizon: float, dt: float) -> "EnvironmentConfig":
        """Copy of this environment with a different horizon and timestep."""
        return EnvironmentConfig(
            setpoint=self.setpoint,
            mass=self.mass,
            gravity=self.gravity,
            disturbance_magnitude=self.disturbance_magnitude,
            dt=dt,
            horizon=horizon,
        )


@dataclass
class SimulationState:
    """Mutable state owned by the simulation runner during one run.

    Attributes:
        position: Altitude (m)
        velocity: Vertical velocity (m/s)
        integral: Accumulated integral of the error (m*s)
        previous_error: Error from the previous step (m)
    """

    position: float = 0.0
    velocity: float = 0.0
    integral: float = 0.0
    previous_error: float = 0.0


@dataclass(frozen=True)
class PIDState:
    """Result of one PID evaluation.

    Attributes:
        error: Error used for this step
        integral: Integral after this step's accumulation
        derivative: Finite-difference derivative of the error
        output: Thrust command including the feed-forward term
    """

    error: float = 0.0
    integral: float = 0.0
    derivative: float = 0.0
    output: float = 0.0


@dataclass(frozen=True)
class SampleRecord:
    """One timestep of a simulation run.

    ``position`` is the altitude after the plant update of this step;
    ``error`` is the error the controller acted on.
    """

    time: float
    position: float
    setpoint: float
    control_output: float
    error: float

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and charting."""
        return {
            "time": self.time,
            "position": self.position,
            "setpoint": self.setpoint,
            "control_output": self.control_output,
            "error": self.error,
        }


@dataclass(frozen=True)
class StepResponseMetrics:
    """Step response performance metrics.

    Attributes:
        rise_time: Time to first reach 90% of setpoint (s), horizon if never
        overshoot: Peak excursion above setpoint (% of setpoint). Negative
            when the response never reaches the setpoint.
        settling_time: Time of the most recent entry into the 2% band (s),
            horizon if never settled
    """

    rise_time: float
    overshoot: float
    settling_time: float

    def to_dict(self) -> dict:
        return {
            "rise_time": self.rise_time,
            "overshoot": self.overshoot,
            "settling_time": self.settling_time,
        }


@dataclass(frozen=True)
class ScoredGainSet:
    """A gain set together with the score it achieved (lower is better)."""

    gains: PIDGains
    score: float
    metrics: Optional[StepResponseMetrics] = None


@dataclass(frozen=True)
class GainBounds:
    """Inclusive search ranges for each PID gain.

    Defaults mirror the interactive tool's autotune ranges.
    """

    kp: Tuple[float, float] = (1.0, 20.0)
    ki: Tuple[float, float] = (0.0, 5.0)
    kd: Tuple[float, float] = (0.0, 10.0)

    def validate(self) -> None:
        """Check every range is finite and non-inverted.

        Raises:
            InvalidConfig: If a range is malformed
        """
        for name in ("kp", "ki", "kd"):
            bounds = getattr(self, name)
            try:
                low, high = bounds
                finite = math.isfinite(low) and math.isfinite(high)
            except (TypeError, ValueError) as e:
                raise InvalidConfig(
                    f"{name} bounds must be a numeric (min, max) pair, got {bounds!r}"
                ) from e
            if not finite:
                raise InvalidConfig(f"{name} bounds must be finite, got {bounds!r}")
            if low > high:
                raise InvalidConfig(f"{name} bounds are inverted: min {low} > max {high}")

    def contains(self, gains: PIDGains) -> bool:
        """Return True if every gain lies within its range."""
        return (
            self.kp[0] <= gains.kp <= self.kp[1]
            and self.ki[0] <= gains.ki <= self.ki[1]
            and self.kd[0] <= gains.kd <= self.kd[1]
        )


@dataclass
class TuningConfig:
    """Autotuner configuration.

    The search runs over its own fixed horizon, independent of the horizon
    used for interactive runs.
    """

    sample_count: int = 100
    horizon: float = 10.0
    dt: float = 0.01
    bounds: GainBounds = field(default_factory=GainBounds)
    fallback_gains: PIDGains = field(
        default_factory=lambda: PIDGains(kp=5.0, ki=1.0, kd=2.0)
    )
