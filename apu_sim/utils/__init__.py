"""Utility modules for the APU surrogate."""

from apu_sim.utils.config import APUConfig, TurbineConfig, GeneratorConfig, SimulationConfig
from apu_sim.utils.logging_config import setup_logging, LogContext

__all__ = [
    "APUConfig",
    "TurbineConfig",
    "GeneratorConfig",
    "SimulationConfig",
    "setup_logging",
    "LogContext",
]
