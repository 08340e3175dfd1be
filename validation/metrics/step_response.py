"""Step response metrics and scoring for altitude runs."""

from dataclasses import dataclass
from typing import Sequence

from controllers.types import InvalidConfig, SampleRecord, StepResponseMetrics

SETTLING_THRESHOLD = 0.02  # 2% criterion
RISE_FRACTION = 0.9

RISE_TIME_WEIGHT = 1.0
OVERSHOOT_WEIGHT = 0.5
SETTLING_TIME_WEIGHT = 1.5


@dataclass(frozen=True)
class ScoreWeights:
    """Weights for reducing step response metrics to a single score."""

    rise_time: float = RISE_TIME_WEIGHT
    overshoot: float = OVERSHOOT_WEIGHT
    settling_time: float = SETTLING_TIME_WEIGHT


DEFAULT_WEIGHTS = ScoreWeights()


def compute_rise_time(
    records: Sequence[SampleRecord],
    setpoint: float,
    horizon: float,
    rise_fraction: float = RISE_FRACTION,
) -> float:
    """Time of the first record at or above ``rise_fraction * setpoint``.

    Returns the horizon when the threshold is never reached.
    """
    target = rise_fraction * setpoint
    for record in records:
        if record.position >= target:
            return record.time
    return horizon


def compute_overshoot(records: Sequence[SampleRecord], setpoint: float) -> float:
    """Peak of ``(position - setpoint) / setpoint * 100`` over the run.

    Not floored at zero: a response that stays below the setpoint reports
    a negative value.
    """
    return max((r.position - setpoint) / setpoint * 100.0 for r in records)


def compute_settling_time(
    records: Sequence[SampleRecord],
    setpoint: float,
    horizon: float,
    threshold: float = SETTLING_THRESHOLD,
    exit_resets: bool = False,
) -> float:
    """Time of the most recent entry into the settling band.

    Leaving the band re-arms the detector, so a response that settles,
    drifts out and settles again reports the second entry.

    Args:
        records: Simulation records
        setpoint: Target altitude
        horizon: Value returned when the band is never entered
        threshold: Relative band half-width
        exit_resets: Also fall back to the horizon on each exit, so a
            response that leaves the band for good reports the horizon

    Returns:
        Settling time (s)
    """
    settling_time = horizon
    settled = False

    for record in records:
        relative_error = abs((record.position - setpoint) / setpoint)
        if relative_error <= threshold:
            if not settled:
                settled = True
                settling_time = record.time
        elif settled:
            settled = False
            if exit_resets:
                settling_time = horizon

    return settling_time


def extract_metrics(
    records: Sequence[SampleRecord],
    setpoint: float,
    horizon: float,
    settling_threshold: float = SETTLING_THRESHOLD,
    rise_fraction: float = RISE_FRACTION,
    exit_resets: bool = False,
) -> StepResponseMetrics:
    """Compute rise time, overshoot and settling time from a run.

    Args:
        records: Non-empty record sequence from the simulation runner
        setpoint: Target altitude, must be positive
        horizon: Run duration, used as the "never reached" sentinel
        settling_threshold: Relative band for settling (default 2%)
        rise_fraction: Fraction of setpoint defining rise (default 90%)
        exit_resets: See ``compute_settling_time``

    Returns:
        StepResponseMetrics

    Raises:
        InvalidConfig: If records are empty or setpoint is not positive
    """
    if not records:
        raise InvalidConfig("Cannot extract metrics from an empty record sequence")
    if setpoint <= 0.0:
        raise InvalidConfig(f"setpoint must be positive, got {setpoint!r}")

    return StepResponseMetrics(
        rise_time=compute_rise_time(records, setpoint, horizon, rise_fraction),
        overshoot=compute_overshoot(records, setpoint),
        settling_time=compute_settling_time(
            records, setpoint, horizon, settling_threshold, exit_resets
        ),
    )


def compute_score(
    metrics: StepResponseMetrics, weights: ScoreWeights = DEFAULT_WEIGHTS
) -> float:
    """Weighted sum of the metrics (lower is better).

    Defaults: ``1.0*rise_time + 0.5*overshoot + 1.5*settling_time``.
    Negative overshoot lowers the score.
    """
    return (
        weights.rise_time * metrics.rise_time
        + weights.overshoot * metrics.overshoot
        + weights.settling_time * metrics.settling_time
    )


def print_metrics(metrics: StepResponseMetrics, name: str = "Controller") -> None:
    """Print formatted summary of metrics.

    Args:
        metrics: Metrics to display
        name: Label for the header
    """
    print(f"\n{'='*60}")
    print(f"{name} Step Response")
    print(f"{'='*60}")
    print(f"Rise Time (s):      {metrics.rise_time:.3f}")
    print(f"Overshoot (%):      {metrics.overshoot:.2f}")
    print(f"Settling Time (s):  {metrics.settling_time:.3f}")
    print(f"Score:              {compute_score(metrics):.2f}")
    print(f"{'='*60}\n")
