"""Shared fixtures for the APU surrogate tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from apu_sim.core.context import UpdateContext
from apu_sim.core.randomness import create_rng


class FixedController:
    """Controller returning constant start/stop requests."""
    
    def __init__(self, start: bool = False, stop: bool = False):
        self.start = start
        self.stop = stop
    
    def should_start(self) -> bool:
        return self.start
    
    def should_stop(self) -> bool:
        return self.stop


@pytest.fixture
def rng():
    """Seeded random generator."""
    return create_rng(42)


@pytest.fixture
def context():
    """50 ms tick at 15 °C."""
    return UpdateContext(delta=0.05, ambient_temperature=15.0)


@pytest.fixture
def idle_controller():
    return FixedController()


@pytest.fixture
def start_controller():
    return FixedController(start=True)


@pytest.fixture
def stop_controller():
    return FixedController(stop=True)


@pytest.fixture
def controller_factory():
    """Factory for controllers with given start/stop requests."""
    return FixedController
