"""Configuration for simulation runs."""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .simple_hh import SERIES, ConfigurationError, check_dt, check_step_count

# Plot labels used by the command line renderer
SERIES_LABELS = {
    "voltage": "voltage",
    "sodium_current": "Na+",
    "potassium_current": "K+",
    "leak_current": "leak",
    "injection_current": "injection",
    "m_gate": "m",
    "h_gate": "h",
    "n_gate": "n",
}


def _parse(kind, name, text):
    try:
        return kind(text)
    except ValueError:
        raise ConfigurationError(f"{name}: cannot read {text!r} as {kind.__name__}") from None


@dataclass
class SimulationConfig:
    """Settings for one simulation run and its plots."""

    dt: float = 0.001
    """Integration time step"""

    step_count: int = 200000
    """Number of forward Euler steps"""

    corrected_sodium: bool = False
    """Use the textbook sodium driving force (V - E_Na)"""

    output_dir: str = "graph"
    """Directory receiving the rendered PNG files"""

    series: List[str] = field(default_factory=lambda: ["voltage", "sodium_current"])
    """Series to plot after the run"""

    def __post_init__(self):
        # YAML 1.1 reads exponent forms such as 1e-3 as strings
        if isinstance(self.dt, str):
            self.dt = _parse(float, "dt", self.dt)
        if isinstance(self.step_count, str):
            self.step_count = _parse(int, "step_count", self.step_count)
        self.dt = check_dt(self.dt)
        self.step_count = check_step_count(self.step_count)

        if not isinstance(self.corrected_sodium, bool):
            raise ConfigurationError(
                f"corrected_sodium must be true or false, got {self.corrected_sodium!r}"
            )
        if not isinstance(self.output_dir, (str, Path)):
            raise ConfigurationError(
                f"output_dir must be a path, got {self.output_dir!r}"
            )
        self.output_dir = str(self.output_dir)

        if isinstance(self.series, str):
            self.series = [self.series]
        if not isinstance(self.series, (list, tuple)):
            raise ConfigurationError(f"series must be a list, got {self.series!r}")
        self.series = list(self.series)
        unknown = [name for name in self.series if name not in SERIES]
        if unknown:
            raise ConfigurationError(
                f"unknown series {unknown}; expected some of {list(SERIES)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "SimulationConfig":
        """Create a config from a dictionary, rejecting unknown keys."""
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"expected a mapping, got {config_dict!r}")
        known = set(cls.__dataclass_fields__)
        extra = sorted(set(config_dict) - known)
        if extra:
            raise ConfigurationError(f"unknown configuration keys: {extra}")
        return cls(**config_dict)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SimulationConfig":
        """Load a config from a YAML file; a missing or empty section means defaults."""
        with open(path, "r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"{path}: invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: expected a mapping at top level")
        section = data["simulation"] if "simulation" in data else data
        if section is None:
            section = {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"{path}: 'simulation' must be a mapping")
        return cls.from_dict(section)

    def save_yaml(self, path: Union[str, Path]) -> None:
        """Write the config to a YAML file."""
        with open(path, "w") as f:
            yaml.safe_dump({"simulation": self.to_dict()}, f, sort_keys=False)
