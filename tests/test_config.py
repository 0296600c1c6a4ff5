import pytest
import yaml

from hhsim.config import SimulationConfig
from hhsim.simple_hh import ConfigurationError


def test_defaults_match_reference_run():
    config = SimulationConfig()
    assert config.dt == 0.001
    assert config.step_count == 200000
    assert config.corrected_sodium is False
    assert config.series == ["voltage", "sodium_current"]


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "run.yaml"
    config = SimulationConfig(dt=0.01, step_count=10, series=["n_gate"])
    config.save_yaml(path)

    loaded = SimulationConfig.from_yaml(path)
    assert loaded == config


def test_yaml_without_section(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(yaml.safe_dump({"dt": 0.002, "step_count": 5}))

    loaded = SimulationConfig.from_yaml(path)
    assert loaded.dt == 0.002
    assert loaded.step_count == 5
    assert loaded.output_dir == "graph"


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert SimulationConfig.from_yaml(path) == SimulationConfig()


def test_unknown_key_rejected():
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_dict({"dt": 0.01, "stepcount": 3})


def test_unknown_series_rejected():
    with pytest.raises(ConfigurationError):
        SimulationConfig(series=["calcium_current"])


def test_exponent_dt_read_as_string_is_coerced(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("simulation:\n  dt: 1e-3\n  step_count: '12'\n")

    loaded = SimulationConfig.from_yaml(path)
    assert loaded.dt == 0.001
    assert loaded.step_count == 12


def test_empty_simulation_section_gives_defaults(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("simulation:\n")
    assert SimulationConfig.from_yaml(path) == SimulationConfig()


def test_non_mapping_section_rejected(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("simulation: [1, 2]\n")
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_yaml(path)


def test_malformed_yaml_rejected(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("simulation:\n  dt: [0.1\n")
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_yaml(path)


@pytest.mark.parametrize("values", [
    {"dt": "fast"},
    {"dt": -1.0},
    {"step_count": "many"},
    {"step_count": -3},
    {"step_count": float("inf")},
    {"corrected_sodium": "yes please"},
    {"output_dir": 3},
    {"series": 5},
])
def test_bad_values_rejected(values):
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_dict(values)
