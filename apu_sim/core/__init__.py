"""
Core building blocks for the APU surrogate.

Modules:
- context.py: Per-tick update context and the turbine controller protocol
- thermal.py: First-order convergence towards ambient temperature
- randomness.py: Seedable random source and the timed random (jitter) sampler
- polynomial.py: Term-by-term evaluation of calibration polynomials
"""

from apu_sim.core.context import UpdateContext, TurbineController
from apu_sim.core.thermal import (
    APU_AMBIENT_COEFFICIENT,
    calculate_towards_target_temperature,
    calculate_towards_ambient_egt,
)
from apu_sim.core.randomness import TimedRandom, create_rng, random_integer
from apu_sim.core.polynomial import evaluate_polynomial, integer_power

__all__ = [
    "UpdateContext",
    "TurbineController",
    "APU_AMBIENT_COEFFICIENT",
    "calculate_towards_target_temperature",
    "calculate_towards_ambient_egt",
    "TimedRandom",
    "create_rng",
    "random_integer",
    "evaluate_polynomial",
    "integer_power",
]
