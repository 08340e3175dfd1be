"""Random-search autotuner for altitude PID gains.

Draws gain triples uniformly from bounded ranges, simulates each candidate
over a fixed search horizon and keeps the lowest score. The sample count is
fixed: no early termination and no local refinement.
"""

import logging
import math
import threading
from typing import Callable, Optional

import numpy as np

from controllers.types import (
    EnvironmentConfig,
    GainBounds,
    InvalidConfig,
    PIDGains,
    ScoredGainSet,
    TuningConfig,
)
from interfaces.disturbance import RandomSource, UniformWindDisturbance, as_generator
from simulation.simulation_runner import run_simulation

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_COUNT = 100
SEARCH_HORIZON = 10.0
SEARCH_DT = 0.01

ProgressCallback = Callable[[int, int, Optional[ScoredGainSet]], None]


class TuningCancelled(RuntimeError):
    """Raised when an autotune run is cancelled between samples.

    Attributes:
        best: Best result found before cancellation, or None
        samples_done: Number of fully evaluated samples
    """

    def __init__(self, best: Optional[ScoredGainSet], samples_done: int):
        super().__init__(f"Autotune cancelled after {samples_done} samples")
        self.best = best
        self.samples_done = samples_done


def sample_gains(bounds: GainBounds, rng: np.random.Generator) -> PIDGains:
    """Draw one gain set uniformly within bounds (kp, then ki, then kd)."""
    kp = bounds.kp[0] + rng.random() * (bounds.kp[1] - bounds.kp[0])
    ki = bounds.ki[0] + rng.random() * (bounds.ki[1] - bounds.ki[0])
    kd = bounds.kd[0] + rng.random() * (bounds.kd[1] - bounds.kd[0])
    return PIDGains(kp=kp, ki=ki, kd=kd)


def evaluate_gains(
    gains: PIDGains,
    environment: EnvironmentConfig,
    rng: RandomSource = None,
    exit_resets: bool = False,
) -> ScoredGainSet:
    """Simulate one candidate and score it.

    Args:
        gains: Candidate gains
        environment: Search environment (already carrying the search timing)
        rng: Random source for this candidate's wind
        exit_resets: Settling policy, see ``compute_settling_time``

    Returns:
        ScoredGainSet with metrics attached
    """
    disturbance = UniformWindDisturbance(environment.disturbance_magnitude, rng)
    result = run_simulation(
        gains, environment, disturbance=disturbance, exit_resets=exit_resets
    )
    return ScoredGainSet(gains=gains, score=result.score, metrics=result.metrics)


def autotune(
    environment: EnvironmentConfig,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
    bounds: Optional[GainBounds] = None,
    rng: RandomSource = None,
    horizon: float = SEARCH_HORIZON,
    dt: float = SEARCH_DT,
    fallback_gains: Optional[PIDGains] = None,
    exit_resets: bool = False,
    cancel_event: Optional[threading.Event] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ScoredGainSet:
    """Search the gain space by uniform random sampling.

    Only the environment's setpoint, mass, gravity and disturbance magnitude
    are used; the horizon and timestep come from the search settings.
    Every candidate sees a fresh gust sequence drawn from the same
    generator, which makes the search noisy but reproducible under a seed.

    Args:
        environment: Plant parameters
        sample_count: Number of candidates to evaluate (>= 1)
        bounds: Search ranges, defaults to kp [1, 20], ki [0, 5], kd [0, 10]
        rng: Random source for gains and wind
        horizon: Search horizon (s)
        dt: Search timestep (s)
        fallback_gains: Returned with an infinite score if no candidate
            produced a finite score
        exit_resets: Settling policy, see ``compute_settling_time``
        cancel_event: Checked before each sample; when set the search stops
        progress_callback: Called as ``(samples_done, sample_count, best)``
            after each sample

    Returns:
        Best ScoredGainSet (strictly lowest score, first found on ties)

    Raises:
        InvalidConfig: If bounds, sample count or environment are invalid
        TuningCancelled: If ``cancel_event`` was set before completion
    """
    bounds = bounds or GainBounds()
    bounds.validate()
    if sample_count < 1:
        raise InvalidConfig(f"sample_count must be at least 1, got {sample_count}")

    search_env = environment.with_timing(horizon=horizon, dt=dt)
    search_env.validate()

    generator = as_generator(rng)

    logger.info(
        "Autotune started: %d samples, horizon=%.2fs, dt=%.4fs, wind=%.2f",
        sample_count, horizon, dt, search_env.disturbance_magnitude,
    )

    best: Optional[ScoredGainSet] = None
    best_score = math.inf

    for i in range(sample_count):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Autotune cancelled after %d/%d samples", i, sample_count)
            raise TuningCancelled(best, i)

        candidate = evaluate_gains(
            sample_gains(bounds, generator),
            search_env,
            rng=generator,
            exit_resets=exit_resets,
        )

        if candidate.score < best_score:
            best_score = candidate.score
            best = candidate
            logger.debug(
                "Sample %d improved score to %.3f (kp=%.3f ki=%.3f kd=%.3f)",
                i, candidate.score,
                candidate.gains.kp, candidate.gains.ki, candidate.gains.kd,
            )

        if progress_callback is not None:
            progress_callback(i + 1, sample_count, best)

    if best is None:
        fallback = fallback_gains or TuningConfig().fallback_gains
        logger.warning(
            "No candidate produced a finite score, returning fallback gains %s",
            fallback,
        )
        return ScoredGainSet(gains=fallback, score=math.inf)

    logger.info(
        "Autotune complete: best score %.3f (kp=%.3f ki=%.3f kd=%.3f)",
        best.score, best.gains.kp, best.gains.ki, best.gains.kd,
    )
    return best


def autotune_from_config(
    environment: EnvironmentConfig,
    config: TuningConfig,
    rng: RandomSource = None,
    **kwargs,
) -> ScoredGainSet:
    """Run ``autotune`` with the settings of a TuningConfig."""
    return autotune(
        environment,
        sample_count=config.sample_count,
        bounds=config.bounds,
        rng=rng,
        horizon=config.horizon,
        dt=config.dt,
        fallback_gains=config.fallback_gains,
        **kwargs,
    )


def apply_gains(scored: ScoredGainSet) -> PIDGains:
    """Project a tuning result onto the gains to commit as active config."""
    return scored.gains
