"""シミュレーション条件の読み込み・バリデーションのテスト"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from common.enums import InitialProfile, Species
from common.exceptions import ConfigurationError
from config.sim_conditions import DEFAULT_CONDITIONS, SimulationConditions
from process.simulation_io import SimulationIO


def test_defaults():
    """省略時は既定値で補完される"""
    conds = SimulationConditions.from_dict()
    assert conds.num_nodes == 10
    assert conds.node_spacing == pytest.approx(1e-5 / 9)
    assert conds.membrane.diffusivity(Species.O2) == 5e-11
    assert conds.membrane.solubility(Species.N2) == 5e-4
    assert conds.feed_gas.component_flow(Species.O2) == pytest.approx(2.1e-4)
    assert conds.common.initial_profile_mode == InitialProfile.ZERO
    assert conds.solver.method == "RK45"


def test_partial_override_keeps_other_defaults():
    conds = SimulationConditions.from_dict({"membrane": {"area": 2.5}, "common": {"num_nodes": "20"}})
    assert conds.membrane.area == 2.5
    assert conds.membrane.thickness == DEFAULT_CONDITIONS["membrane"]["thickness"]
    assert conds.num_nodes == 20
    # 既定値の辞書は変更されない
    assert DEFAULT_CONDITIONS["membrane"]["area"] == 1.0


def test_load_default_condition_file():
    """conditions/default/sim_conds.yml の読み込み"""
    filepath = project_root / "conditions" / "default" / "sim_conds.yml"
    conds = SimulationConditions.from_yaml(str(filepath), cond_id="default")
    assert conds.cond_id == "default"
    assert conds.feed_pressure_step.start_time == 5.0
    assert conds.feed_pressure_step.offset == 1e5
    assert conds.feed_pressure_step.height == 5e4
    assert conds.tank.volume == pytest.approx(1e-4)


def test_missing_condition_file(tmp_path):
    with pytest.raises(ConfigurationError):
        SimulationConditions.from_yaml(str(tmp_path / "missing.yml"))


def test_load_settings(tmp_path):
    settings_path = tmp_path / "settings.yml"
    settings_path.write_text("cond_list:\n  - default\n", encoding="utf-8")
    settings = SimulationIO().load_settings(str(settings_path))
    assert settings["cond_list"] == ["default"]

    settings_path.write_text("mode_list: []\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        SimulationIO().load_settings(str(settings_path))


@pytest.mark.parametrize(
    "overrides",
    [
        {"common": {"num_nodes": 2}},
        {"common": {"end_time": 0.0}},
        {"common": {"output_interval": -0.1}},
        {"common": {"initial_profile": "parabolic"}},
        {"common": {"initial_tank_moles": -1.0}},
        {"membrane": {"thickness": 0.0}},
        {"membrane": {"area": -1.0}},
        {"membrane": {"o2_diffusivity": 0.0}},
        {"tank": {"volume": 0.0}},
        {"tank": {"temperature": -10.0}},
        {"feed_gas": {"molar_flow_rate": -1e-3}},
        {"feed_gas": {"o2_mole_fraction": 1.2, "n2_mole_fraction": -0.2}},
        {"feed_gas": {"o2_mole_fraction": 0.3}},
        {"permeate": {"pressure": -1.0}},
        {"valve": {"coefficient": -1e-8}},
        {"feed_pressure_step": {"offset": 1e5, "height": -2e5}},
        {"solver": {"method": "Euler"}},
        {"solver": {"rtol": 0.0}},
    ],
)
def test_invalid_conditions_are_rejected(overrides):
    """範囲外の条件は積分開始前に ConfigurationError"""
    with pytest.raises(ConfigurationError):
        SimulationConditions.from_dict(overrides)


def test_unknown_keys_are_rejected():
    with pytest.raises(ConfigurationError):
        SimulationConditions.from_dict({"membrane": {"porosity": 0.3}})
    with pytest.raises(ConfigurationError):
        SimulationConditions.from_dict({"ventilation": {}})


def test_non_numeric_value_is_rejected():
    with pytest.raises(ConfigurationError):
        SimulationConditions.from_dict({"membrane": {"area": "large"}})
