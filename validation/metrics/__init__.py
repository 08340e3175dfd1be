"""Step response metrics and scoring."""

from validation.metrics.step_response import (
    DEFAULT_WEIGHTS,
    SETTLING_THRESHOLD,
    ScoreWeights,
    compute_overshoot,
    compute_rise_time,
    compute_score,
    compute_settling_time,
    extract_metrics,
    print_metrics,
)

__all__ = [
    "DEFAULT_WEIGHTS",
    "SETTLING_THRESHOLD",
    "ScoreWeights",
    "compute_overshoot",
    "compute_rise_time",
    "compute_score",
    "compute_settling_time",
    "extract_metrics",
    "print_metrics",
]
