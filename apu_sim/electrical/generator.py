"""
APS3200 APU generator electrical model.

Maps turbine speed to generator output:

- Below 84% N (or during an emergency shutdown) the generator provides
  nothing: 0 V, 0 Hz, 0 A.
- Potential is 105 V between 84% and 85% N. From 85% N it is 115 V with
  occasional 114 V readings, resampled once per second.
- Frequency follows a fitted ramp curve up to 100% N and is 400 Hz at
  100% N.
- Current is a fixed nominal draw until loads are modelled.

Only the speed value matters; the turbine state that produced it does not.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from apu_sim.core.context import UpdateContext
from apu_sim.core.polynomial import evaluate_polynomial
from apu_sim.core.randomness import TimedRandom
from apu_sim.electrical.writer import ElectricalStateWriter, TelemetryWriter
from apu_sim.utils.config import GeneratorConfig


logger = logging.getLogger(__name__)


# Frequency (Hz) as a function of N (%), valid from 84% up to 100% N.
APU_FREQ_COEFFICIENTS = (
    1076894372064.8204,
    -118009165327.71873,
    5296044666.7118,
    -108419965.09400678,
    -36793.31899267512,
    62934.36386220135,
    -1870.5197158547767,
    31.376473743149806,
    -0.3510150716459761,
    0.002726493614147866,
    -0.00001463272647792659,
    0.00000005203375009496,
    -0.00000000011071318044,
    0.00000000000010697005,
)

APU_GEN_POWERED_N = 84.
APU_GEN_FIXED_POTENTIAL_BELOW_N = 85.
APU_GEN_RAMP_POTENTIAL = 105.
APU_GEN_RATED_N = 100.
APU_GEN_RATED_FREQUENCY = 400.


class PotentialOrigin(Enum):
    """Where the potential offered by a source comes from."""
    NONE = 'none'
    APU_GENERATOR = 'apu_generator'


@dataclass(frozen=True)
class Potential:
    """Potential offered to the electrical network.

    Attributes:
        origin: Kind of source providing the potential
        number: Index of the providing source, if any
    """
    origin: PotentialOrigin = PotentialOrigin.NONE
    number: Optional[int] = None

    @classmethod
    def none(cls) -> 'Potential':
        return cls()

    @classmethod
    def apu_generator(cls, number: int) -> 'Potential':
        return cls(PotentialOrigin.APU_GENERATOR, number)

    def is_powered(self) -> bool:
        return self.origin is not PotentialOrigin.NONE

    def is_unpowered(self) -> bool:
        return not self.is_powered()


@dataclass(frozen=True)
class GeneratorOutput:
    """Electrical output of the generator for one tick.

    Attributes:
        potential: Voltage (V)
        frequency: Frequency (Hz)
        current: Current (A)
        powered: Whether the generator provides output
    """
    potential: float
    frequency: float
    current: float
    powered: bool


class Aps3200ApuGenerator:
    """APS3200 APU generator.

    Usage:
        generator = Aps3200ApuGenerator(1, rng=create_rng(42))

        generator.update(context, turbine.n, is_emergency_shutdown=False)
        if generator.potential_normal() and generator.frequency_normal():
            ...
        generator.write(telemetry)
    """

    def __init__(
        self,
        number: int,
        rng: np.random.Generator,
        config: Optional[GeneratorConfig] = None,
    ):
        """Initialize generator.

        Args:
            number: Generator index, used in telemetry names
            rng: Random generator for the voltage jitter
            config: Generator configuration (defaults if None)
        """
        self.number = number
        self.config = config or GeneratorConfig(number=number)

        self._writer = ElectricalStateWriter(f"APU_GEN_{number}")
        self._output = Potential.none()
        self._random_voltage = TimedRandom(
            self.config.jitter_interval,
            self.config.jitter_values,
            rng,
        )
        self._current = 0.
        self._potential = 0.
        self._frequency = 0.

    def update(
        self,
        context: UpdateContext,
        n: float,
        is_emergency_shutdown: bool,
    ) -> None:
        """Derive the electrical output from the turbine speed.

        Args:
            context: Tick context
            n: Turbine speed (%)
            is_emergency_shutdown: Whether an emergency shutdown is active
        """
        self._random_voltage.update(context.delta)

        was_powered = self.is_powered()
        if is_emergency_shutdown or n < APU_GEN_POWERED_N:
            self._output = Potential.none()
        else:
            self._output = Potential.apu_generator(self.number)

        if self.is_powered() != was_powered:
            logger.info(
                f"APU GEN {self.number} {'powered' if self.is_powered() else 'unpowered'} "
                f"(N={n:.2f}%, emergency_shutdown={is_emergency_shutdown})"
            )

        if self.is_powered():
            self._current = self.config.nominal_current
            self._potential = self.calculate_potential(n)
            self._frequency = self.calculate_frequency(n)
        else:
            self._current = 0.
            self._potential = 0.
            self._frequency = 0.

    def calculate_potential(self, n: float) -> float:
        """Potential (V) for a speed at or above the powered threshold.

        Args:
            n: Turbine speed (%), must be at least the powered threshold

        Returns:
            Potential (V)
        """
        assert n >= APU_GEN_POWERED_N, \
            f"Potential is undefined below {APU_GEN_POWERED_N}% N, got {n}%"

        if n < APU_GEN_FIXED_POTENTIAL_BELOW_N:
            return APU_GEN_RAMP_POTENTIAL
        return self._random_voltage.current_value()

    def calculate_frequency(self, n: float) -> float:
        """Frequency (Hz) for a speed at or above the powered threshold.

        Args:
            n: Turbine speed (%), must be at least the powered threshold

        Returns:
            Frequency (Hz)
        """
        assert n >= APU_GEN_POWERED_N, \
            f"Frequency is undefined below {APU_GEN_POWERED_N}% N, got {n}%"

        if n < APU_GEN_RATED_N:
            return evaluate_polynomial(APU_FREQ_COEFFICIENTS, n)
        return APU_GEN_RATED_FREQUENCY

    def potential(self) -> float:
        return self._potential

    def potential_normal(self) -> bool:
        low, high = self.config.potential_normal_range
        return low <= self._potential <= high

    def frequency(self) -> float:
        return self._frequency

    def frequency_normal(self) -> bool:
        low, high = self.config.frequency_normal_range
        return low <= self._frequency <= high

    def current(self) -> float:
        return self._current

    def load(self) -> float:
        # TODO: derive from the connected consumers once loads are modelled.
        return 0.

    def load_normal(self) -> bool:
        return True

    def output_potential(self) -> Potential:
        return self._output

    def is_powered(self) -> bool:
        return self._output.is_powered()

    def is_unpowered(self) -> bool:
        return self._output.is_unpowered()

    def output(self) -> GeneratorOutput:
        """Snapshot of the current electrical output."""
        return GeneratorOutput(
            potential=self._potential,
            frequency=self._frequency,
            current=self._current,
            powered=self.is_powered(),
        )

    def write(self, writer: TelemetryWriter) -> None:
        """Publish potential, frequency and load with their normal flags."""
        self._writer.write_alternating_with_load(self, writer)
