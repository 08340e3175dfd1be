"""PID gain search for the altitude loop."""

from tuning.autotuner import (
    TuningCancelled,
    apply_gains,
    autotune,
    autotune_from_config,
    evaluate_gains,
    sample_gains,
)
from tuning.tuning_worker import AutotuneWorker, TuningState, TuningStatus

__all__ = [
    "TuningCancelled",
    "apply_gains",
    "autotune",
    "autotune_from_config",
    "evaluate_gains",
    "sample_gains",
    "AutotuneWorker",
    "TuningState",
    "TuningStatus",
]
