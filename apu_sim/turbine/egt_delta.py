"""
EGT contributions of auxiliary loads on a running APU.

Two loads raise the exhaust gas temperature while engaged and let it fall
back once released:

- Bleed air: the offset approaches its target at a rate that depends on the
  remaining distance (fast when far away, slow when close).
- Generator: the offset ramps linearly over a fixed number of seconds.

Both models are immutable; ``update`` returns the successor instance so they
can live inside the frozen Running turbine payload.
"""

import sys
from dataclasses import dataclass, replace

import numpy as np

from apu_sim.core.context import UpdateContext
from apu_sim.core.polynomial import evaluate_polynomial
from apu_sim.core.randomness import random_integer


BLEED_AIR_MAX_EGT_DELTA = 90.0
APU_GEN_SECONDS_TO_REACH_TARGET = 10.0

# Rate of change (°C/s) as a function of the remaining distance to the target.
# Loosely based on bleed data observed on the real unit; to be revisited once
# pneumatics are modelled.
BLEED_AIR_DELTA_TEMP_COEFFICIENTS = (
    0.46763348242588143,
    0.43114440400626697,
    -0.11064487957454393,
    0.010414691679270397,
    -0.00045307219981909655,
    0.00001063664878607912,
    -0.00000013763963889674,
    0.00000000091837058563,
    -0.00000000000246054885,
)


@dataclass(frozen=True)
class BleedAirUsageEgtDelta:
    """EGT offset caused by drawing bleed air from the APU.
    
    Attributes:
        max_delta: Offset reached with bleed in use (°C), randomized per instance
        min_delta: Offset reached with bleed unused (°C)
        current: Current offset (°C)
        target: Offset currently approached (°C)
    """
    max_delta: float
    min_delta: float = 0.0
    current: float = 0.0
    target: float = 0.0
    
    @classmethod
    def create(
        cls,
        rng: np.random.Generator,
        max_egt_delta: float = BLEED_AIR_MAX_EGT_DELTA,
    ) -> 'BleedAirUsageEgtDelta':
        """Create a model with a maximum offset scaled by [0.95, 1.05].
        
        Args:
            rng: Random generator
            max_egt_delta: Nominal maximum offset (°C)
            
        Returns:
            New bleed air usage model
        """
        randomisation = 0.95 + random_integer(rng, 101) / 1000.
        return cls(max_delta=max_egt_delta * randomisation)
    
    def update(
        self,
        context: UpdateContext,
        apu_bleed_is_used: bool,
    ) -> 'BleedAirUsageEgtDelta':
        """Advance the offset towards its target for one tick."""
        target = self.max_delta if apu_bleed_is_used else self.min_delta
        current = self.current
        
        if abs(current - target) > sys.float_info.epsilon:
            change = self.delta_per_second(abs(current - target)) * context.delta
            if current > target:
                current -= change
            else:
                current += change
        
        current = min(max(current, self.min_delta), self.max_delta)
        
        return replace(self, current=current, target=target)
    
    @staticmethod
    def delta_per_second(difference: float) -> float:
        """Rate of change (°C/s) for a remaining distance to the target."""
        return evaluate_polynomial(BLEED_AIR_DELTA_TEMP_COEFFICIENTS, difference)
    
    def egt_delta(self) -> float:
        return self.current


@dataclass(frozen=True)
class ApuGenUsageEgtDelta:
    """EGT offset caused by electrical load on the APU generator.
    
    The offset grows linearly while the generator is used and reaches
    10 to 15 °C after ``seconds_to_reach_target``. It shrinks at the same
    rate when the generator is released.
    
    Attributes:
        base_egt_delta_per_second: Ramp rate (°C/s), randomized per instance
        seconds_to_reach_target: Ramp duration (s)
        time: Accumulated usage time, in [0, seconds_to_reach_target] (s)
    """
    base_egt_delta_per_second: float
    seconds_to_reach_target: float = APU_GEN_SECONDS_TO_REACH_TARGET
    time: float = 0.0
    
    @classmethod
    def create(
        cls,
        rng: np.random.Generator,
        seconds_to_reach_target: float = APU_GEN_SECONDS_TO_REACH_TARGET,
    ) -> 'ApuGenUsageEgtDelta':
        return cls(
            base_egt_delta_per_second=(10. + random_integer(rng, 6)) / seconds_to_reach_target,
            seconds_to_reach_target=seconds_to_reach_target,
        )
    
    def update(
        self,
        context: UpdateContext,
        apu_gen_is_used: bool,
    ) -> 'ApuGenUsageEgtDelta':
        if apu_gen_is_used:
            time = min(self.time + context.delta, self.seconds_to_reach_target)
        else:
            time = max(self.time - context.delta, 0.)
        
        return replace(self, time=time)
    
    def egt_delta(self) -> float:
        return self.time * self.base_egt_delta_per_second
