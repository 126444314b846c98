"""
APU Sim: APS3200 auxiliary power unit surrogate model

An empirical model of an aircraft APU for systems simulation:
1. Turbine: four-state machine (Shutdown, Starting, Running, Stopping)
   driven by curves fitted to reference hardware recordings
2. Electrical: generator potential, frequency and current derived from
   turbine speed, with instrument-like voltage jitter
3. Simulation: reference host driver, controllers and scenario runner

Licensed under the MIT License
"""

__version__ = "1.0.0"
__author__ = "APU Sim Development Team"

from apu_sim.utils.config import APUConfig
from apu_sim.core.context import UpdateContext
from apu_sim.turbine.aps3200 import Aps3200Turbine, TurbineState, update_turbine
from apu_sim.electrical.generator import Aps3200ApuGenerator
from apu_sim.simulation.apu import AuxiliaryPowerUnit

__all__ = [
    "APUConfig",
    "UpdateContext",
    "Aps3200Turbine",
    "TurbineState",
    "update_turbine",
    "Aps3200ApuGenerator",
    "AuxiliaryPowerUnit",
]
