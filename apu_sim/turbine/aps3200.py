"""
APS3200 APU turbine state machine.

The turbine is always in exactly one of four states. Each state is an
immutable payload; a tick consumes the current payload and returns its
successor, which may be a payload of a different state:

    Shutdown --start--> Starting --N=100%--> Running
        ^                  |                    |
        |                 stop                 stop
        |                  v                    |
        +---N=0%------- Stopping <--------------+

Speed (N) and exhaust gas temperature (EGT) are recomputed in full every
tick from curves fitted to reference hardware recordings. The fitted
polynomials are only valid inside their recording window, so elapsed time
is clamped before evaluation.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Dict, Optional, Tuple, Union

import numpy as np

from apu_sim.core.context import TurbineController, UpdateContext
from apu_sim.core.polynomial import evaluate_polynomial
from apu_sim.core.randomness import random_integer
from apu_sim.core.thermal import calculate_towards_ambient_egt
from apu_sim.turbine.egt_delta import ApuGenUsageEgtDelta, BleedAirUsageEgtDelta
from apu_sim.utils.config import TurbineConfig


logger = logging.getLogger(__name__)


# Starting: N (%) as a function of seconds since ignition.
APU_STARTING_N_COEFFICIENTS = (
    -0.08013606018640967,
    2.129832736394534,
    3.928273438786404,
    -1.88613299921213,
    0.42749452749180916,
    -0.05757707967690426,
    0.005022142795451004,
    -0.00029612873626050866,
    0.00001204152497871946,
    -0.00000033829604438116,
    0.00000000645140818528,
    -0.00000000007974743535,
    0.00000000000057654695,
    -0.00000000000000185126,
)

# Starting: EGT (°C) as a function of N (%).
APU_STARTING_EGT_COEFFICIENTS = (
    -92.3417137705543,
    -14.36417426895237,
    12.210567963472547,
    -3.005504263233662,
    0.3808066398934025,
    -0.02679731462093699,
    0.001163901295794232,
    -0.0000332668380497951,
    0.00000064601180727581,
    -0.00000000859285727074,
    0.00000000007717119413,
    -0.00000000000044761099,
    0.00000000000000151429,
    -0.00000000000000000227,
)

# Stopping: N (%) as a function of seconds since the stop began.
APU_STOPPING_N_COEFFICIENTS = (
    100.22975364965701,
    -24.692008355859773,
    2.6116524551318787,
    0.006812541903222142,
    -0.03134644787752123,
    0.0036345606954833213,
    -0.00021794252200618456,
    0.00000798097055109138,
    -0.00000018481154462604,
    0.00000000264691628669,
    -0.00000000002143677577,
    0.00000000000007515448,
)

# Stopping: EGT change (°C) relative to the EGT at stop, as a function of N (%).
APU_STOPPING_EGT_DELTA_COEFFICIENTS = (
    -125.73137672208446,
    2.7141683591219037,
    -0.8102923071483102,
    0.08890509495240731,
    -0.003509532681984154,
    -0.00002709133732344767,
    0.00000749250123766767,
    -0.00000030306978045244,
    0.00000000641099706269,
    -0.00000000008068326110,
    0.00000000000060754088,
    -0.00000000000000253354,
    0.00000000000000000451,
)

START_IGNITION_AFTER_SECONDS = 1.5
# The starting curve decreases after this many seconds of ignition.
STARTING_TIME_LIMIT = 45.12
# The stopping curve increases after this many seconds.
STOPPING_TIME_LIMIT = 49.411


class TurbineState(Enum):
    """Operating state of the APU turbine."""
    SHUTDOWN = 'shutdown'
    STARTING = 'starting'
    RUNNING = 'running'
    STOPPING = 'stopping'


@dataclass(frozen=True)
class ShutdownTurbine:
    """Turbine at rest; EGT converges towards ambient temperature."""
    egt: float = 0.0

    state: ClassVar[TurbineState] = TurbineState.SHUTDOWN

    @property
    def n(self) -> float:
        return 0.0


@dataclass(frozen=True)
class StartingTurbine:
    """Turbine spooling up after a start request.

    Attributes:
        since: Time since the start request (s)
        n: Speed (%)
        egt: Exhaust gas temperature (°C)
        ignore_calculated_egt: While set, the EGT follows ambient convergence
            instead of the starting curve. Released for good once the curve
            exceeds the converging temperature.
    """
    since: float = 0.0
    n: float = 0.0
    egt: float = 0.0
    ignore_calculated_egt: bool = True

    state: ClassVar[TurbineState] = TurbineState.STARTING

    @classmethod
    def enter(cls, egt: float) -> 'StartingTurbine':
        return cls(egt=egt)


@dataclass(frozen=True)
class RunningTurbine:
    """Turbine at full speed.

    Attributes:
        egt: Exhaust gas temperature (°C)
        base_egt: Unloaded steady-state EGT, drawn on entry (°C)
        base_egt_deviation: Remaining EGT excess carried over from the start (°C)
        bleed_air_usage: EGT contribution of bleed air
        apu_gen_usage: EGT contribution of generator load
    """
    egt: float
    base_egt: float
    base_egt_deviation: float
    bleed_air_usage: BleedAirUsageEgtDelta
    apu_gen_usage: ApuGenUsageEgtDelta

    state: ClassVar[TurbineState] = TurbineState.RUNNING

    @property
    def n(self) -> float:
        return 100.0

    @classmethod
    def enter(
        cls,
        egt: float,
        rng: np.random.Generator,
        config: TurbineConfig,
    ) -> 'RunningTurbine':
        """Enter Running with fresh load models and a new base EGT.

        The entry EGT is expected to exceed the base EGT; the excess decays
        over time. A lower entry EGT is absorbed on the first tick.

        Args:
            egt: EGT at the moment of entering Running (°C)
            rng: Random generator
            config: Turbine configuration

        Returns:
            New Running payload
        """
        base_egt = config.base_egt + random_integer(rng, config.base_egt_variation + 1)
        return cls(
            egt=egt,
            base_egt=base_egt,
            base_egt_deviation=egt - base_egt,
            bleed_air_usage=BleedAirUsageEgtDelta.create(
                rng, config.bleed_air_max_egt_delta
            ),
            apu_gen_usage=ApuGenUsageEgtDelta.create(
                rng, config.apu_gen_seconds_to_reach_target
            ),
        )


@dataclass(frozen=True)
class StoppingTurbine:
    """Turbine spooling down.

    Attributes:
        since: Time since the stop request (s)
        base_temperature: EGT at the moment of the stop request (°C)
        n: Speed (%)
        egt: Exhaust gas temperature (°C)
    """
    since: float
    base_temperature: float
    n: float
    egt: float

    state: ClassVar[TurbineState] = TurbineState.STOPPING

    @classmethod
    def enter(cls, egt: float, n: float) -> 'StoppingTurbine':
        return cls(since=0.0, base_temperature=egt, n=n, egt=egt)


Turbine = Union[ShutdownTurbine, StartingTurbine, RunningTurbine, StoppingTurbine]


def calculate_starting_n(since: float) -> float:
    """Speed (%) while starting, ``since`` seconds after the start request."""
    ignition_turned_on_secs = min(since - START_IGNITION_AFTER_SECONDS, STARTING_TIME_LIMIT)

    if ignition_turned_on_secs > 0.:
        n = evaluate_polynomial(APU_STARTING_N_COEFFICIENTS, ignition_turned_on_secs)
        return max(min(n, 100.), 0.)

    return 0.


def calculate_starting_egt(
    n: float,
    egt: float,
    ignore_calculated_egt: bool,
    context: UpdateContext,
) -> Tuple[float, bool]:
    """EGT while starting.

    At low N the starting curve lies below ambient temperature (or below the
    EGT of a turbine still cooling down). The curve is ignored until it first
    exceeds the EGT converging towards ambient.

    Args:
        n: Current speed (%)
        egt: EGT of the previous tick (°C)
        ignore_calculated_egt: Current latch state
        context: Tick context

    Returns:
        Tuple of (new EGT, new latch state)
    """
    temperature = evaluate_polynomial(APU_STARTING_EGT_COEFFICIENTS, n)

    towards_ambient_egt = calculate_towards_ambient_egt(egt, context)
    if temperature > towards_ambient_egt:
        ignore_calculated_egt = False

    if ignore_calculated_egt:
        return towards_ambient_egt, ignore_calculated_egt
    return temperature, ignore_calculated_egt


def calculate_stopping_n(since: float) -> float:
    """Speed (%) while stopping, ``since`` seconds after the stop request."""
    since = min(since, STOPPING_TIME_LIMIT)
    n = evaluate_polynomial(APU_STOPPING_N_COEFFICIENTS, since)
    return max(min(n, 100.), 0.)


def calculate_stopping_egt_delta(n: float) -> float:
    """EGT change (°C) relative to the EGT at the stop request."""
    return evaluate_polynomial(APU_STOPPING_EGT_DELTA_COEFFICIENTS, n)


def _update_shutdown(
    turbine: ShutdownTurbine,
    context: UpdateContext,
    apu_bleed_is_used: bool,
    apu_gen_is_used: bool,
    controller: TurbineController,
    rng: np.random.Generator,
    config: TurbineConfig,
) -> Turbine:
    egt = calculate_towards_ambient_egt(turbine.egt, context)

    if controller.should_start():
        return StartingTurbine.enter(egt)
    return ShutdownTurbine(egt=egt)


def _update_starting(
    turbine: StartingTurbine,
    context: UpdateContext,
    apu_bleed_is_used: bool,
    apu_gen_is_used: bool,
    controller: TurbineController,
    rng: np.random.Generator,
    config: TurbineConfig,
) -> Turbine:
    since = turbine.since + context.delta
    n = calculate_starting_n(since)
    egt, ignore_calculated_egt = calculate_starting_egt(
        n, turbine.egt, turbine.ignore_calculated_egt, context
    )

    if controller.should_stop():
        return StoppingTurbine.enter(egt, n)
    elif abs(n - 100.) < sys.float_info.epsilon:
        return RunningTurbine.enter(egt, rng, config)
    return StartingTurbine(
        since=since,
        n=n,
        egt=egt,
        ignore_calculated_egt=ignore_calculated_egt,
    )


def _update_running(
    turbine: RunningTurbine,
    context: UpdateContext,
    apu_bleed_is_used: bool,
    apu_gen_is_used: bool,
    controller: TurbineController,
    rng: np.random.Generator,
    config: TurbineConfig,
) -> Turbine:
    # Creep back to the base EGT.
    base_egt_deviation = max(
        turbine.base_egt_deviation - context.delta * config.egt_deviation_decay_rate,
        0.,
    )
    apu_gen_usage = turbine.apu_gen_usage.update(context, apu_gen_is_used)
    bleed_air_usage = turbine.bleed_air_usage.update(context, apu_bleed_is_used)

    egt = (
        turbine.base_egt
        + base_egt_deviation
        + apu_gen_usage.egt_delta()
        + bleed_air_usage.egt_delta()
    )

    if controller.should_stop():
        return StoppingTurbine.enter(egt, 100.)
    return RunningTurbine(
        egt=egt,
        base_egt=turbine.base_egt,
        base_egt_deviation=base_egt_deviation,
        bleed_air_usage=bleed_air_usage,
        apu_gen_usage=apu_gen_usage,
    )


def _update_stopping(
    turbine: StoppingTurbine,
    context: UpdateContext,
    apu_bleed_is_used: bool,
    apu_gen_is_used: bool,
    controller: TurbineController,
    rng: np.random.Generator,
    config: TurbineConfig,
) -> Turbine:
    since = turbine.since + context.delta
    n = calculate_stopping_n(since)
    egt = turbine.base_temperature + calculate_stopping_egt_delta(n)

    if n == 0.:
        return ShutdownTurbine(egt=egt)
    return StoppingTurbine(
        since=since,
        base_temperature=turbine.base_temperature,
        n=n,
        egt=egt,
    )


_UPDATERS: Dict[TurbineState, Callable[..., Turbine]] = {
    TurbineState.SHUTDOWN: _update_shutdown,
    TurbineState.STARTING: _update_starting,
    TurbineState.RUNNING: _update_running,
    TurbineState.STOPPING: _update_stopping,
}


def update_turbine(
    turbine: Turbine,
    context: UpdateContext,
    apu_bleed_is_used: bool,
    apu_gen_is_used: bool,
    controller: TurbineController,
    rng: np.random.Generator,
    config: Optional[TurbineConfig] = None,
) -> Turbine:
    """Advance the turbine by one tick.

    Args:
        turbine: Current turbine payload (not modified)
        context: Tick context
        apu_bleed_is_used: Whether bleed air is drawn from the APU
        apu_gen_is_used: Whether the APU generator supplies a load
        controller: Source of start and stop requests
        rng: Random generator for values drawn on entering Running
        config: Turbine configuration (defaults if None)

    Returns:
        Successor payload, possibly of a different state
    """
    config = config or TurbineConfig()

    successor = _UPDATERS[turbine.state](
        turbine,
        context,
        apu_bleed_is_used,
        apu_gen_is_used,
        controller,
        rng,
        config,
    )

    if successor.state is not turbine.state:
        logger.info(
            f"APU turbine {turbine.state.name} -> {successor.state.name} "
            f"(N={successor.n:.2f}%, EGT={successor.egt:.1f}°C)"
        )

    return successor


class Aps3200Turbine:
    """Owner of the live turbine payload.

    Convenience wrapper for hosts that prefer a stateful object: every
    ``update`` replaces the held payload with its successor.

    Usage:
        turbine = Aps3200Turbine(rng=create_rng(42))

        for _ in range(ticks):
            turbine.update(context, False, False, controller)
            print(turbine.state, turbine.n, turbine.egt)
    """

    def __init__(
        self,
        rng: np.random.Generator,
        config: Optional[TurbineConfig] = None,
        turbine: Optional[Turbine] = None,
    ):
        """Initialize turbine.

        Args:
            rng: Random generator
            config: Turbine configuration
            turbine: Initial payload (shut down at 0 °C if None)
        """
        self.rng = rng
        self.config = config or TurbineConfig()
        self._turbine: Turbine = turbine if turbine is not None else ShutdownTurbine()

    def update(
        self,
        context: UpdateContext,
        apu_bleed_is_used: bool,
        apu_gen_is_used: bool,
        controller: TurbineController,
    ) -> None:
        self._turbine = update_turbine(
            self._turbine,
            context,
            apu_bleed_is_used,
            apu_gen_is_used,
            controller,
            self.rng,
            self.config,
        )

    @property
    def turbine(self) -> Turbine:
        return self._turbine

    @property
    def state(self) -> TurbineState:
        return self._turbine.state

    @property
    def n(self) -> float:
        return self._turbine.n

    @property
    def egt(self) -> float:
        return self._turbine.egt
