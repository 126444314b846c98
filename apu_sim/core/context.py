"""
Per-tick inputs supplied by the host simulation.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class UpdateContext:
    """Read-only context for a single simulation tick.
    
    Attributes:
        delta: Elapsed simulation time since the previous tick (s)
        ambient_temperature: Outside air temperature (°C)
    """
    delta: float
    ambient_temperature: float = 0.0
    
    def __post_init__(self):
        if self.delta < 0:
            raise ValueError(f"Tick delta must be non-negative, got {self.delta}")


class TurbineController(Protocol):
    """Source of start and stop requests, polled once per tick."""
    
    def should_start(self) -> bool:
        ...
    
    def should_stop(self) -> bool:
        ...
