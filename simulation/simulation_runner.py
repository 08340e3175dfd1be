"""Closed-loop altitude simulation runner.

Composes the PID controller and the vertical dynamics over a fixed horizon
and returns the full time series. Each call owns a fresh SimulationState, so
runs never share mutable state.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from controllers.pid_controller import baseline_force, pid_step
from controllers.types import (
    EnvironmentConfig,
    PIDGains,
    SampleRecord,
    SimulationState,
    StepResponseMetrics,
)
from interfaces.disturbance import DisturbanceInterface, RandomSource, create_disturbance
from simulation.vertical_dynamics import integrate_vertical
from validation.metrics import compute_score, extract_metrics

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ["time", "position", "setpoint", "control_output", "error"]


def simulate(
    gains: PIDGains,
    environment: EnvironmentConfig,
    rng: RandomSource = None,
    disturbance: Optional[DisturbanceInterface] = None,
) -> Tuple[SampleRecord, ...]:
    """Run the closed loop for ``environment.step_count`` steps.

    Args:
        gains: PID gains
        environment: Plant and timing parameters
        rng: Random source for wind (Generator, seed, or None)
        disturbance: Explicit disturbance source, overrides ``rng`` and the
            environment's disturbance magnitude

    Returns:
        Tuple of exactly ``floor(horizon / dt)`` records, the first at t=0

    Raises:
        InvalidConfig: If the environment is invalid; no step is executed

    Example:
        >>> env = EnvironmentConfig(disturbance_magnitude=0.0)
        >>> records = simulate(PIDGains(kp=5.0, ki=1.0, kd=2.0), env)
        >>> len(records), records[0].time
        (1000, 0.0)
    """
    environment.validate()

    if disturbance is None:
        disturbance = create_disturbance(environment.disturbance_magnitude, rng)

    dt = environment.dt
    setpoint = environment.setpoint
    feed_forward = baseline_force(environment.mass, environment.gravity)
    num_steps = environment.step_count

    state = SimulationState()
    records = []

    for i in range(num_steps):
        t = i * dt

        error = setpoint - state.position
        pid = pid_step(
            gains,
            error,
            state.integral,
            state.previous_error,
            dt,
            feed_forward,
        )
        state.integral = pid.integral
        state.previous_error = error

        state.velocity, state.position = integrate_vertical(
            state.position,
            state.velocity,
            pid.output,
            environment.mass,
            environment.gravity,
            disturbance.sample(),
            dt,
        )

        records.append(SampleRecord(
            time=t,
            position=state.position,
            setpoint=setpoint,
            control_output=pid.output,
            error=error,
        ))

    logger.debug(
        "Simulated %d steps (kp=%.3f ki=%.3f kd=%.3f, disturbance=%s)",
        num_steps, gains.kp, gains.ki, gains.kd, disturbance.get_disturbance_type(),
    )
    return tuple(records)


@dataclass(frozen=True)
class SimulationResult:
    """Records and metrics of one run, as handed to the presentation layer."""

    gains: PIDGains
    environment: EnvironmentConfig
    records: Tuple[SampleRecord, ...]
    metrics: StepResponseMetrics

    @property
    def score(self) -> float:
        """Score of this run with the default weights."""
        return compute_score(self.metrics)

    def to_dataframe(self) -> pd.DataFrame:
        """Time series as a DataFrame, one row per step."""
        return pd.DataFrame([r.to_dict() for r in self.records], columns=RECORD_COLUMNS)

    def __len__(self) -> int:
        return len(self.records)


def run_simulation(
    gains: PIDGains,
    environment: EnvironmentConfig,
    rng: RandomSource = None,
    disturbance: Optional[DisturbanceInterface] = None,
    exit_resets: bool = False,
) -> SimulationResult:
    """Simulate and extract step response metrics.

    Args:
        gains: PID gains
        environment: Plant and timing parameters
        rng: Random source for wind
        disturbance: Explicit disturbance source (overrides ``rng``)
        exit_resets: Settling policy, see ``compute_settling_time``

    Returns:
        SimulationResult with records and metrics

    Raises:
        InvalidConfig: If the environment is invalid
    """
    records = simulate(gains, environment, rng=rng, disturbance=disturbance)
    metrics = extract_metrics(
        records,
        environment.setpoint,
        environment.horizon,
        exit_resets=exit_resets,
    )
    return SimulationResult(
        gains=gains,
        environment=environment,
        records=records,
        metrics=metrics,
    )
