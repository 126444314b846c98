"""
APS3200 turbine model.

Components:
    - aps3200: Four-state turbine (Shutdown, Starting, Running, Stopping)
      driven by fitted speed and EGT curves
    - egt_delta: EGT contributions of bleed air and generator load
"""

from .aps3200 import (
    TurbineState,
    Turbine,
    ShutdownTurbine,
    StartingTurbine,
    RunningTurbine,
    StoppingTurbine,
    Aps3200Turbine,
    update_turbine,
    calculate_starting_n,
    calculate_starting_egt,
    calculate_stopping_n,
    calculate_stopping_egt_delta,
)

from .egt_delta import (
    BleedAirUsageEgtDelta,
    ApuGenUsageEgtDelta,
)


__all__ = [
    'TurbineState',
    'Turbine',
    'ShutdownTurbine',
    'StartingTurbine',
    'RunningTurbine',
    'StoppingTurbine',
    'Aps3200Turbine',
    'update_turbine',
    'calculate_starting_n',
    'calculate_starting_egt',
    'calculate_stopping_n',
    'calculate_stopping_egt_delta',
    'BleedAirUsageEgtDelta',
    'ApuGenUsageEgtDelta',
]
