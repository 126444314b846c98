"""
Telemetry publishing for electrical sources.

Values are published under ``ELEC_<SOURCE>_<METRIC>`` names, e.g.
``ELEC_APU_GEN_1_POTENTIAL``. Downstream consumers depend on these names.
"""

from typing import Dict, Protocol, Union


TelemetryValue = Union[float, bool]


class TelemetryWriter(Protocol):
    """Sink receiving named scalar values."""
    
    def write(self, name: str, value: TelemetryValue) -> None:
        ...


class AlternatingSource(Protocol):
    """Electrical source providing potential, frequency and load."""
    
    def potential(self) -> float:
        ...
    
    def potential_normal(self) -> bool:
        ...
    
    def frequency(self) -> float:
        ...
    
    def frequency_normal(self) -> bool:
        ...
    
    def load(self) -> float:
        ...
    
    def load_normal(self) -> bool:
        ...


class InMemoryTelemetrySink:
    """Telemetry sink keeping the latest value per name."""
    
    def __init__(self):
        self._values: Dict[str, TelemetryValue] = {}
    
    def write(self, name: str, value: TelemetryValue) -> None:
        self._values[name] = value
    
    def read(self, name: str) -> TelemetryValue:
        return self._values[name]
    
    def contains(self, name: str) -> bool:
        return name in self._values
    
    def as_dict(self) -> Dict[str, TelemetryValue]:
        return dict(self._values)
    
    def __len__(self) -> int:
        return len(self._values)


class ElectricalStateWriter:
    """Publishes the state of an electrical source under stable names."""
    
    def __init__(self, source_id: str):
        """Initialize writer.
        
        Args:
            source_id: Source identifier, e.g. 'APU_GEN_1'
        """
        prefix = f"ELEC_{source_id}"
        self.potential_id = f"{prefix}_POTENTIAL"
        self.potential_normal_id = f"{prefix}_POTENTIAL_NORMAL"
        self.frequency_id = f"{prefix}_FREQUENCY"
        self.frequency_normal_id = f"{prefix}_FREQUENCY_NORMAL"
        self.load_id = f"{prefix}_LOAD"
        self.load_normal_id = f"{prefix}_LOAD_NORMAL"
    
    def write_alternating_with_load(
        self,
        source: AlternatingSource,
        writer: TelemetryWriter,
    ) -> None:
        """Write potential, frequency and load with their normal flags."""
        writer.write(self.potential_id, source.potential())
        writer.write(self.potential_normal_id, source.potential_normal())
        writer.write(self.frequency_id, source.frequency())
        writer.write(self.frequency_normal_id, source.frequency_normal())
        writer.write(self.load_id, source.load())
        writer.write(self.load_normal_id, source.load_normal())
