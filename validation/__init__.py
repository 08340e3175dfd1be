"""Performance evaluation of closed-loop altitude runs."""

from validation.metrics import (
    ScoreWeights,
    compute_score,
    extract_metrics,
)

__all__ = ["ScoreWeights", "compute_score", "extract_metrics"]
