"""
Configuration management for the APU surrogate.

This module provides dataclass-based configuration for the turbine, the
generator and the reference simulation driver, with validation and YAML
persistence. Calibration polynomial coefficients are not configuration:
they live next to the models that use them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple
import yaml


@dataclass
class TurbineConfig:
    """Configuration for the APS3200 turbine state machine.

    Attributes:
        base_egt: Lowest steady-state EGT when running without load (°C)
        base_egt_variation: Upper bound of the integer degrees randomly added
            to ``base_egt`` each time the turbine enters Running
        egt_deviation_decay_rate: Rate at which the EGT excess present when
            entering Running decays (°C/s)
        bleed_air_max_egt_delta: Nominal EGT increase with bleed air in use (°C)
        apu_gen_seconds_to_reach_target: Ramp duration of the generator load
            EGT increase (s)
    """
    base_egt: float = 340.0
    base_egt_variation: int = 10
    egt_deviation_decay_rate: float = 1.0
    bleed_air_max_egt_delta: float = 90.0
    apu_gen_seconds_to_reach_target: float = 10.0

    def validate(self) -> None:
        """Validate configuration parameters."""
        assert self.base_egt_variation >= 0, "Base EGT variation must be non-negative"
        assert self.egt_deviation_decay_rate > 0, "Deviation decay rate must be positive"
        assert self.bleed_air_max_egt_delta >= 0, "Bleed air EGT delta must be non-negative"
        assert self.apu_gen_seconds_to_reach_target > 0, "Generator ramp duration must be positive"


@dataclass
class GeneratorConfig:
    """Configuration for the APS3200 APU generator.

    Attributes:
        number: Generator index used in telemetry names
        jitter_interval: Time between voltage resamples (s)
        jitter_values: Candidate voltages once above 85% N (V)
        nominal_current: Current drawn while powered (A)
        potential_normal_range: Inclusive normal voltage range (V)
        frequency_normal_range: Inclusive normal frequency range (Hz)
    """
    number: int = 1
    jitter_interval: float = 1.0
    jitter_values: List[float] = field(default_factory=lambda: [
        114., 115., 115., 115., 115.
    ])
    nominal_current: float = 782.60
    potential_normal_range: Tuple[float, float] = (110.0, 120.0)
    frequency_normal_range: Tuple[float, float] = (390.0, 410.0)

    def __post_init__(self):
        """Ensure ranges are tuples (YAML yields lists)."""
        self.potential_normal_range = tuple(self.potential_normal_range)
        self.frequency_normal_range = tuple(self.frequency_normal_range)

    def validate(self) -> None:
        """Validate configuration parameters."""
        assert self.number > 0, "Generator number must be positive"
        assert self.jitter_interval > 0, "Jitter interval must be positive"
        assert len(self.jitter_values) > 0, "At least one jitter value is required"
        assert self.potential_normal_range[0] <= self.potential_normal_range[1], \
            "Potential normal range must be ordered"
        assert self.frequency_normal_range[0] <= self.frequency_normal_range[1], \
            "Frequency normal range must be ordered"


@dataclass
class SimulationConfig:
    """Configuration for the reference simulation driver.

    Attributes:
        dt: Tick duration (s)
        ambient_temperature: Outside air temperature (°C)
        random_seed: Seed for the shared random generator (None for entropy)
        log_dir: Directory for log files (None disables file logging)
    """
    dt: float = 0.05
    ambient_temperature: float = 15.0
    random_seed: Optional[int] = 42
    log_dir: Optional[Path] = None

    def __post_init__(self):
        """Ensure paths are Path objects."""
        if self.log_dir is not None:
            self.log_dir = Path(self.log_dir)

    def validate(self) -> None:
        """Validate configuration parameters."""
        assert self.dt > 0, "Time step must be positive"


@dataclass
class APUConfig:
    """Master configuration for an APU instance.

    This configuration class aggregates all component configurations
    and provides methods for saving/loading from files.
    """
    turbine: TurbineConfig = field(default_factory=TurbineConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)

    def validate(self) -> None:
        """Validate all configurations."""
        self.turbine.validate()
        self.generator.validate()
        self.simulation.validate()

    def save(self, path: Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path to save configuration
        """
        path = Path(path)
        config_dict = self._to_dict()

        with open(path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load(cls, path: Path) -> 'APUConfig':
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            APUConfig instance
        """
        path = Path(path)

        with open(path, 'r') as f:
            config_dict = yaml.safe_load(f)

        return cls._from_dict(config_dict or {})

    def _to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            'turbine': {
                'base_egt': self.turbine.base_egt,
                'base_egt_variation': self.turbine.base_egt_variation,
                'egt_deviation_decay_rate': self.turbine.egt_deviation_decay_rate,
                'bleed_air_max_egt_delta': self.turbine.bleed_air_max_egt_delta,
                'apu_gen_seconds_to_reach_target': self.turbine.apu_gen_seconds_to_reach_target,
            },
            'generator': {
                'number': self.generator.number,
                'jitter_interval': self.generator.jitter_interval,
                'jitter_values': list(self.generator.jitter_values),
                'nominal_current': self.generator.nominal_current,
                'potential_normal_range': list(self.generator.potential_normal_range),
                'frequency_normal_range': list(self.generator.frequency_normal_range),
            },
            'simulation': {
                'dt': self.simulation.dt,
                'ambient_temperature': self.simulation.ambient_temperature,
                'random_seed': self.simulation.random_seed,
                'log_dir': str(self.simulation.log_dir) if self.simulation.log_dir else None,
            },
        }

    @classmethod
    def _from_dict(cls, d: dict) -> 'APUConfig':
        """Create configuration from dictionary."""
        return cls(
            turbine=TurbineConfig(**d.get('turbine', {})),
            generator=GeneratorConfig(**d.get('generator', {})),
            simulation=SimulationConfig(**d.get('simulation', {})),
        )
