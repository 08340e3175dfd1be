"""Altitude controller modules - data types, PID law and configuration."""

# Types
from controllers.types import (
    InvalidConfig,
    PIDGains,
    EnvironmentConfig,
    SimulationState,
    PIDState,
    SampleRecord,
    StepResponseMetrics,
    ScoredGainSet,
    GainBounds,
    TuningConfig,
)

# Control law
from controllers.pid_controller import baseline_force, pid_step

__all__ = [
    # Types
    "InvalidConfig",
    "PIDGains",
    "EnvironmentConfig",
    "SimulationState",
    "PIDState",
    "SampleRecord",
    "StepResponseMetrics",
    "ScoredGainSet",
    "GainBounds",
    "TuningConfig",
    # Control law
    "baseline_force",
    "pid_step",
]
