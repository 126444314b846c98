"""
Ambient temperature convergence.

Cooling (or warming) of an unpowered component towards the surrounding air
is modelled as a first-order lag: the rate of change is proportional to the
remaining difference, so every step closes a fixed fraction of the gap for a
given time step and never overshoots the target.
"""

import math

from apu_sim.core.context import UpdateContext


# Convergence coefficient (1/s) used for the APU exhaust gas temperature.
APU_AMBIENT_COEFFICIENT = 1.0


def calculate_towards_target_temperature(
    current: float,
    target: float,
    coefficient: float,
    delta: float,
) -> float:
    """Move a temperature towards a target temperature.
    
    Args:
        current: Current temperature (°C)
        target: Target temperature (°C)
        coefficient: Convergence coefficient (1/s)
        delta: Elapsed time (s)
        
    Returns:
        New temperature (°C)
    """
    return target + (current - target) * math.exp(-coefficient * delta)


def calculate_towards_ambient_egt(egt: float, context: UpdateContext) -> float:
    """EGT after converging towards the ambient temperature for one tick."""
    return calculate_towards_target_temperature(
        egt,
        context.ambient_temperature,
        APU_AMBIENT_COEFFICIENT,
        context.delta,
    )
