"""
Turbine controllers for driving the APU outside an aircraft.

In the aircraft the start and stop requests come from the APU control
logic (master switch, start push button, fire push button). These
controllers stand in for it when the APU is simulated on its own.
"""

from typing import Optional, Protocol

from apu_sim.core.context import TurbineController, UpdateContext


class SimulationController(TurbineController, Protocol):
    """Turbine controller that is told about elapsed simulation time."""
    
    def update(self, context: UpdateContext) -> None:
        ...


class ManualTurbineController:
    """Controller whose requests are set directly.
    
    Usage:
        controller = ManualTurbineController()
        controller.request_start()
        ...
        controller.request_stop()
    """
    
    def __init__(self, start: bool = False, stop: bool = False):
        self._start = start
        self._stop = stop
    
    def request_start(self) -> None:
        self._start = True
        self._stop = False
    
    def request_stop(self) -> None:
        self._start = False
        self._stop = True
    
    def release(self) -> None:
        """Withdraw any pending request."""
        self._start = False
        self._stop = False
    
    def update(self, context: UpdateContext) -> None:
        pass
    
    def should_start(self) -> bool:
        return self._start
    
    def should_stop(self) -> bool:
        return self._stop


class ScheduledTurbineController:
    """Controller requesting start and stop at fixed simulation times.
    
    A stop request, once due, takes precedence over the start request.
    """
    
    def __init__(
        self,
        start_at: Optional[float] = 0.0,
        stop_at: Optional[float] = None,
    ):
        """Initialize scheduled controller.
        
        Args:
            start_at: Time from which start is requested (s), None for never
            stop_at: Time from which stop is requested (s), None for never
        """
        if start_at is not None and stop_at is not None and stop_at < start_at:
            raise ValueError(
                f"Stop time ({stop_at}s) must not precede start time ({start_at}s)"
            )
        
        self.start_at = start_at
        self.stop_at = stop_at
        self._time = 0.0
    
    @property
    def time(self) -> float:
        return self._time
    
    def update(self, context: UpdateContext) -> None:
        self._time += context.delta
    
    def should_start(self) -> bool:
        if self.should_stop():
            return False
        return self.start_at is not None and self._time >= self.start_at
    
    def should_stop(self) -> bool:
        return self.stop_at is not None and self._time >= self.stop_at
