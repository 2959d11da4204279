"""
Thermal Feedback Configuration

Parameters of the lumped thermal feedback model. Defaults describe a small,
air-cooled assembly sitting at room temperature; every coefficient can be
overridden in code or from a YAML parameter file.
"""

import dataclasses
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from reactor_transient.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Section name used when the parameters are nested inside a larger YAML file
YAML_SECTION = "thermal_feedback"


@dataclass
class ThermalFeedbackConfig:
    """Coefficients of the explicit-Euler thermal feedback step"""

    # Heat balance
    heat_per_flux_unit: float = 10.0  # heating per unit neutron flux
    heat_capacity: float = 4.2e3  # J/kg/K
    conduction_coeff: float = 2.0  # linear (Newton) loss coefficient

    # Radiative loss
    emissivity: float = 0.91  # concrete
    stefan_boltzmann: float = 5.670367e-8  # W/m²/K⁴

    # Reactivity feedback
    temperature_coefficient: float = -5e-5  # Δρ/ΔT (1/K), i.e. -5 pcm/K

    # Reference conditions
    equilibrium_temperature: float = 300.0  # K

    def __post_init__(self):
        """Reject coefficients that would make the feedback step fail"""
        for name in self.field_names():
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigurationError(f"Parameter '{name}' must be finite, got {value!r}")
        if self.heat_capacity <= 0.0:
            raise ConfigurationError(
                f"Parameter 'heat_capacity' must be positive, got {self.heat_capacity!r}"
            )

    @classmethod
    def field_names(cls):
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ThermalFeedbackConfig":
        """
        Build a configuration from a mapping of parameter overrides

        Args:
            data: Parameter names mapped to numeric values; missing names keep
                their defaults

        Returns:
            New ThermalFeedbackConfig

        Raises:
            ConfigurationError: If a name is unknown or a value is not numeric
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Expected a mapping of parameters, got {type(data).__name__}"
            )

        known = set(cls.field_names())
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown thermal feedback parameter(s): {', '.join(unknown)}")

        values = {}
        for name, value in data.items():
            if isinstance(value, bool):
                raise ConfigurationError(f"Parameter '{name}' must be numeric, got {value!r}")
            try:
                values[name] = float(value)
            except (TypeError, ValueError):
                raise ConfigurationError(f"Parameter '{name}' must be numeric, got {value!r}")

        return cls(**values)

    @classmethod
    def from_yaml_file(cls, filepath: Union[str, Path]) -> "ThermalFeedbackConfig":
        """
        Load a configuration from a YAML parameter file

        The parameters may sit at the top level of the document or under a
        ``thermal_feedback`` section.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigurationError: If the YAML is malformed or holds bad parameters
        """
        yaml_path = Path(filepath)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Parameter file not found: {yaml_path}")

        logger.debug(f"Loading thermal feedback parameters from {yaml_path}")
        try:
            with open(yaml_path, "r") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML file {yaml_path}: {e}")

        if isinstance(loaded, dict) and YAML_SECTION in loaded:
            loaded = loaded[YAML_SECTION]

        return cls.from_dict(loaded)

    def to_dict(self) -> Dict[str, float]:
        return dataclasses.asdict(self)

    def replace(self, **overrides) -> "ThermalFeedbackConfig":
        """Return a copy with the given parameters overridden"""
        merged = self.to_dict()
        merged.update(overrides)
        return type(self).from_dict(merged)
