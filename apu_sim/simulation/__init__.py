"""
APU Simulation Package.

This package provides a reference host driver for running the APS3200
APU on its own, outside an aircraft simulation.

Components:
    - apu: Turbine, generator and telemetry advanced together per tick
    - controller: Manual and time-scheduled start/stop controllers
"""

from .apu import (
    AuxiliaryPowerUnit,
    ApuSnapshot,
)

from .controller import (
    SimulationController,
    ManualTurbineController,
    ScheduledTurbineController,
)


__all__ = [
    'AuxiliaryPowerUnit',
    'ApuSnapshot',
    'SimulationController',
    'ManualTurbineController',
    'ScheduledTurbineController',
]
