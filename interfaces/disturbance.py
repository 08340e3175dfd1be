"""Disturbance interface for wind and gust implementations."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Union

import numpy as np

RandomSource = Union[np.random.Generator, int, None]


def as_generator(rng: RandomSource) -> np.random.Generator:
    """Normalize a random source into a numpy Generator.

    Args:
        rng: Existing Generator (used as-is), integer seed, or None for a
            generator seeded from OS entropy

    Returns:
        numpy Generator
    """
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


class DisturbanceInterface(ABC):
    """Abstract interface for vertical disturbance sources.

    The plant draws one sample per step and adds it to the vertical
    acceleration. Implementations enable swapping between:
    - No disturbance (calm air)
    - Random uniform wind (interactive and autotune runs)
    - Replay of a recorded gust sequence (regression tests)
    """

    @abstractmethod
    def sample(self) -> float:
        """Draw the disturbance acceleration for the next step.

        Returns:
            Disturbance acceleration (m/s^2)
        """
        pass

    @abstractmethod
    def get_disturbance_type(self) -> str:
        """Return disturbance type identifier."""
        pass

    def is_deterministic(self) -> bool:
        """True if samples do not depend on a random source."""
        return self.get_disturbance_type() != "uniform"

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(type={self.get_disturbance_type()})"


class NoDisturbance(DisturbanceInterface):
    """Calm air: every sample is exactly zero."""

    def sample(self) -> float:
        return 0.0

    def get_disturbance_type(self) -> str:
        return "none"


class UniformWindDisturbance(DisturbanceInterface):
    """Uniform random wind, ``magnitude * U(-1, 1)`` per step.

    A zero magnitude never touches the random source, so a calm run is
    deterministic and leaves the generator untouched for later consumers.

    Example:
        >>> wind = UniformWindDisturbance(0.5, rng=42)
        >>> -0.5 <= wind.sample() <= 0.5
        True
    """

    def __init__(self, magnitude: float, rng: RandomSource = None):
        """Initialize wind source.

        Args:
            magnitude: Peak disturbance acceleration (m/s^2)
            rng: Generator, seed, or None for a non-reproducible stream
        """
        self.magnitude = magnitude
        self._rng = as_generator(rng) if magnitude != 0.0 else None

    def sample(self) -> float:
        if self.magnitude == 0.0:
            return 0.0
        return self.magnitude * self._rng.uniform(-1.0, 1.0)

    def get_disturbance_type(self) -> str:
        return "uniform" if self.magnitude != 0.0 else "none"


class ReplayDisturbance(DisturbanceInterface):
    """Replays a fixed sequence of disturbance samples.

    Raises:
        RuntimeError: If more samples are requested than were recorded
    """

    def __init__(self, samples: Iterable[float]):
        self._samples = [float(s) for s in samples]
        self._index = 0

    def sample(self) -> float:
        if self._index >= len(self._samples):
            raise RuntimeError(
                f"Disturbance sequence exhausted after {len(self._samples)} samples"
            )
        value = self._samples[self._index]
        self._index += 1
        return value

    def reset(self) -> None:
        """Rewind to the first sample."""
        self._index = 0

    @property
    def remaining(self) -> int:
        return len(self._samples) - self._index

    def get_disturbance_type(self) -> str:
        return "replay"


def create_disturbance(
    magnitude: float,
    rng: RandomSource = None,
    samples: Optional[Iterable[float]] = None,
) -> DisturbanceInterface:
    """Build the disturbance source for a run.

    Args:
        magnitude: Peak wind acceleration; 0 gives calm air
        rng: Random source for uniform wind
        samples: Recorded sequence to replay instead of random wind

    Returns:
        Disturbance implementation
    """
    if samples is not None:
        return ReplayDisturbance(samples)
    if magnitude == 0.0:
        return NoDisturbance()
    return UniformWindDisturbance(magnitude, rng)
