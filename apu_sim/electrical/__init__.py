"""
Electrical output of the APU.

Components:
    - generator: APS3200 generator potential, frequency and current
    - writer: Telemetry names and sinks for electrical sources
"""

from .generator import (
    Aps3200ApuGenerator,
    GeneratorOutput,
    Potential,
    PotentialOrigin,
)

from .writer import (
    ElectricalStateWriter,
    InMemoryTelemetrySink,
    TelemetryWriter,
)


__all__ = [
    'Aps3200ApuGenerator',
    'GeneratorOutput',
    'Potential',
    'PotentialOrigin',
    'ElectricalStateWriter',
    'InMemoryTelemetrySink',
    'TelemetryWriter',
]
