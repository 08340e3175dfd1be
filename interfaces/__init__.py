"""Interfaces for disturbance implementations."""

from interfaces.disturbance import (
    DisturbanceInterface,
    NoDisturbance,
    UniformWindDisturbance,
    ReplayDisturbance,
    RandomSource,
    as_generator,
    create_disturbance,
)

__all__ = [
    "DisturbanceInterface",
    "NoDisturbance",
    "UniformWindDisturbance",
    "ReplayDisturbance",
    "RandomSource",
    "as_generator",
    "create_disturbance",
]
