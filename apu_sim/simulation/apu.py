"""
Reference host driver for the APS3200 APU.

Wires the turbine state machine, the generator and a telemetry sink
together and advances them one tick at a time, the way an aircraft
simulation would every frame. Useful for scenario runs, plotting and
testing the models in isolation from an aircraft.

Per tick:
1. The turbine advances using the controller's start/stop request.
2. The generator derives its output from the resulting speed.
3. The generator publishes its state to the telemetry sink.
4. The controller is told about the elapsed time.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from apu_sim.core.context import UpdateContext
from apu_sim.core.randomness import create_rng
from apu_sim.electrical.generator import Aps3200ApuGenerator
from apu_sim.electrical.writer import InMemoryTelemetrySink
from apu_sim.simulation.controller import SimulationController
from apu_sim.turbine.aps3200 import Aps3200Turbine, TurbineState
from apu_sim.utils.config import APUConfig
from apu_sim.utils.logging_config import LogContext


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApuSnapshot:
    """State of the APU after a tick.

    Attributes:
        time: Simulation time at the end of the tick (s)
        state: Turbine state
        n: Turbine speed (%)
        egt: Exhaust gas temperature (°C)
        potential: Generator potential (V)
        frequency: Generator frequency (Hz)
        current: Generator current (A)
        powered: Whether the generator provides output
        potential_normal: Whether the potential is within its normal range
        frequency_normal: Whether the frequency is within its normal range
    """
    time: float
    state: TurbineState
    n: float
    egt: float
    potential: float
    frequency: float
    current: float
    powered: bool
    potential_normal: bool
    frequency_normal: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for tabulation."""
        d = asdict(self)
        d['state'] = self.state.name
        return d


class AuxiliaryPowerUnit:
    """APS3200 APU: turbine, generator and telemetry advanced together.

    Usage:
        apu = AuxiliaryPowerUnit(ScheduledTurbineController(start_at=0.0, stop_at=120.0))

        trajectory = apu.run(duration=200.0)

        # Or step-by-step
        for _ in range(ticks):
            snapshot = apu.step(apu_gen_is_used=True)
    """

    def __init__(
        self,
        controller: SimulationController,
        config: Optional[APUConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize APU.

        Args:
            controller: Source of start/stop requests
            config: APU configuration (defaults if None)
            rng: Random generator shared by turbine and generator. Created
                from ``config.simulation.random_seed`` if None.
        """
        self.config = config or APUConfig()
        self.config.validate()

        self.controller = controller
        self.rng = rng if rng is not None else create_rng(self.config.simulation.random_seed)

        self.turbine = Aps3200Turbine(self.rng, self.config.turbine)
        self.generator = Aps3200ApuGenerator(
            self.config.generator.number,
            self.rng,
            self.config.generator,
        )
        self.telemetry = InMemoryTelemetrySink()

        self._time = 0.0

    @property
    def time(self) -> float:
        return self._time

    def default_context(self) -> UpdateContext:
        """Tick context from the simulation configuration."""
        return UpdateContext(
            delta=self.config.simulation.dt,
            ambient_temperature=self.config.simulation.ambient_temperature,
        )

    def step(
        self,
        context: Optional[UpdateContext] = None,
        apu_bleed_is_used: bool = False,
        apu_gen_is_used: bool = False,
        is_emergency_shutdown: bool = False,
    ) -> ApuSnapshot:
        """Advance the APU by one tick.

        Args:
            context: Tick context (configured time step and ambient if None)
            apu_bleed_is_used: Whether bleed air is drawn from the APU
            apu_gen_is_used: Whether the APU generator supplies a load
            is_emergency_shutdown: Whether an emergency shutdown is active

        Returns:
            Snapshot after the tick
        """
        context = context or self.default_context()

        self.turbine.update(context, apu_bleed_is_used, apu_gen_is_used, self.controller)
        self.generator.update(context, self.turbine.n, is_emergency_shutdown)
        self.generator.write(self.telemetry)
        self.controller.update(context)

        self._time += context.delta

        return self.snapshot()

    def snapshot(self) -> ApuSnapshot:
        """Current state of the APU."""
        return ApuSnapshot(
            time=self._time,
            state=self.turbine.state,
            n=self.turbine.n,
            egt=self.turbine.egt,
            potential=self.generator.potential(),
            frequency=self.generator.frequency(),
            current=self.generator.current(),
            powered=self.generator.is_powered(),
            potential_normal=self.generator.potential_normal(),
            frequency_normal=self.generator.frequency_normal(),
        )

    def run(
        self,
        duration: float,
        apu_bleed_is_used: bool = False,
        apu_gen_is_used: bool = False,
        is_emergency_shutdown: bool = False,
    ) -> pd.DataFrame:
        """Run for a fixed duration at the configured time step.

        Args:
            duration: Simulated time to run (s)
            apu_bleed_is_used: Whether bleed air is drawn throughout
            apu_gen_is_used: Whether the generator is loaded throughout
            is_emergency_shutdown: Whether an emergency shutdown is active throughout

        Returns:
            DataFrame with one row per tick (see ``ApuSnapshot``)
        """
        if duration < 0:
            raise ValueError(f"Duration must be non-negative, got {duration}")

        n_steps = int(round(duration / self.config.simulation.dt))
        rows = []

        with LogContext(logger, "apu_run", duration=duration, steps=n_steps):
            for _ in range(n_steps):
                snapshot = self.step(
                    apu_bleed_is_used=apu_bleed_is_used,
                    apu_gen_is_used=apu_gen_is_used,
                    is_emergency_shutdown=is_emergency_shutdown,
                )
                rows.append(snapshot.to_dict())

        return pd.DataFrame(rows, columns=list(ApuSnapshot.__dataclass_fields__))
