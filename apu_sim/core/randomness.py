"""
Randomness for the APU surrogate.

All randomized behavior (generator voltage jitter and the per-instance
constants drawn when a turbine or load model is created) comes from a single
``numpy.random.Generator`` that is passed explicitly to constructors. Seeding
that generator makes a whole run reproducible.
"""

from typing import Generic, Optional, Sequence, TypeVar

import numpy as np


T = TypeVar('T')


def create_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the random source shared by one APU instance.
    
    Args:
        seed: Random seed for reproducibility (None for entropy)
        
    Returns:
        Seeded random generator
    """
    return np.random.default_rng(seed)


def random_integer(rng: np.random.Generator, upper: int) -> int:
    """Draw a uniform integer in ``[0, upper)``."""
    return int(rng.integers(0, upper))


class TimedRandom(Generic[T]):
    """Value that is resampled from a fixed set at a fixed interval.
    
    Used to emulate instrument noise: the selected value is stable between
    resamples. Overshooting the interval within one update resamples only
    once and restarts the interval from zero.
    
    Usage:
        voltage = TimedRandom(1.0, [114., 115., 115., 115., 115.], rng)
        
        for _ in range(ticks):
            voltage.update(0.05)
            reading = voltage.current_value()
    """
    
    def __init__(
        self,
        interval: float,
        values: Sequence[T],
        rng: np.random.Generator,
    ):
        """Initialize timed random value.
        
        Args:
            interval: Time between resamples (s)
            values: Candidate values; duplicates weight the selection
            rng: Random generator
        """
        if not values:
            raise ValueError("TimedRandom requires at least one candidate value")
        
        self.interval = interval
        self.values = list(values)
        self.rng = rng
        
        self._time = 0.0
        self._current_value = self._sample()
    
    def _sample(self) -> T:
        return self.values[random_integer(self.rng, len(self.values))]
    
    def update(self, delta: float) -> None:
        """Accumulate elapsed time and resample when the interval is reached.
        
        Args:
            delta: Elapsed time (s)
        """
        self._time += delta
        if self._time >= self.interval:
            self._time = 0.0
            self._current_value = self._sample()
    
    def current_value(self) -> T:
        """Return the currently selected value."""
        return self._current_value
