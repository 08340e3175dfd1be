"""Pytest fixtures for test suite.

This module provides common fixtures to eliminate code duplication across tests.
"""

import numpy as np
import pytest

from controllers.types import EnvironmentConfig, PIDGains, SampleRecord


@pytest.fixture
def default_environment() -> EnvironmentConfig:
    """Create the default windy environment.

    Standard conditions:
    - Setpoint: 10 m
    - Mass: 1 kg
    - Gravity: 9.81 m/s^2
    - Wind: 0.5 m/s^2 peak
    - 10 s horizon at 100 Hz

    Returns:
        EnvironmentConfig with default values
    """
    return EnvironmentConfig()


@pytest.fixture
def calm_environment() -> EnvironmentConfig:
    """Create the default environment without wind.

    Returns:
        EnvironmentConfig with zero disturbance
    """
    return EnvironmentConfig(disturbance_magnitude=0.0)


@pytest.fixture
def reference_gains() -> PIDGains:
    """Gains of the reference scenario (kp=5, ki=1, kd=2)."""
    return PIDGains(kp=5.0, ki=1.0, kd=2.0)


@pytest.fixture
def seeded_rng() -> np.random.Generator:
    """Create a seeded random generator for reproducible runs."""
    return np.random.default_rng(12345)


@pytest.fixture
def make_records():
    """Factory building a record sequence from positions (t = i * dt)."""
    def _make(positions, dt=1.0, setpoint=10.0):
        return tuple(
            SampleRecord(
                time=i * dt,
                position=p,
                setpoint=setpoint,
                control_output=0.0,
                error=setpoint - p,
            )
            for i, p in enumerate(positions)
        )
    return _make
