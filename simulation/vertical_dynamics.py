"""Single-axis vertical dynamics for a thrust-driven vehicle.

Features:
- Net thrust against gravity
- Additive disturbance acceleration (wind)
- Semi-implicit Euler integration at a fixed timestep

Not modeled:
- Drag
- Thrust limits or actuator lag
- Ground contact (altitude may go negative)
"""

from typing import Tuple


def vertical_acceleration(
    force: float, mass: float, gravity: float, disturbance: float = 0.0
) -> float:
    """Net vertical acceleration, ``force/mass - gravity + disturbance``."""
    return force / mass - gravity + disturbance


def integrate_vertical(
    position: float,
    velocity: float,
    force: float,
    mass: float,
    gravity: float,
    disturbance: float,
    dt: float,
) -> Tuple[float, float]:
    """Advance the vehicle by one timestep.

    Velocity is updated first and the new velocity moves the position
    (semi-implicit Euler). Reordering changes the numeric output.

    Args:
        position: Current altitude (m)
        velocity: Current vertical velocity (m/s)
        force: Thrust command (N)
        mass: Vehicle mass (kg)
        gravity: Gravitational acceleration (m/s^2)
        disturbance: Disturbance acceleration for this step (m/s^2)
        dt: Timestep (s)

    Returns:
        (new_velocity, new_position)
    """
    acceleration = vertical_acceleration(force, mass, gravity, disturbance)
    new_velocity = velocity + acceleration * dt
    new_position = position + new_velocity * dt
    return new_velocity, new_position
