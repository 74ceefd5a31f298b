import json
import logging
import math

import pytest

from peridyn.inputs import EXPORTED_INPUT_FILE, InputError, Inputs, parse
from peridyn.tags import ThermalKind


def _base(**overrides):
    data = {
        "system_size": {"value": [2.0, 4.0, 1.0], "unit": "m"},
        "dx": {"value": [0.5, 0.5, 0.5], "unit": "m"},
        "final_time": {"value": 1.0},
        "timestep": {"value": 0.25},
        "horizon": {"value": 1.5},
        "density": {"value": 1.0},
        "bulk_modulus": {"value": 1.0},
    }
    data.update(overrides)
    return data


def _make(tmp_path, data, name="input.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return Inputs(path, export_dir=tmp_path)


def test_parse_reads_json(tmp_path):
    path = tmp_path / "a.json"
    path.write_text(json.dumps({"x": {"value": 3}}))
    assert parse(path) == {"x": {"value": 3}}


def test_system_size_derives_corners_and_cells(tmp_path):
    inputs = _make(tmp_path, _base())
    assert inputs["low_corner"] == [-1.0, -2.0, -0.5]
    assert inputs["high_corner"] == [1.0, 2.0, 0.5]
    assert inputs["num_cells"] == [4, 8, 2]
    assert inputs.to_dict()["low_corner"]["unit"] == "m"


def test_corners_derive_size_and_num_cells_derive_dx(tmp_path):
    data = _base()
    del data["system_size"]
    del data["dx"]
    data["low_corner"] = {"value": [0.0, 0.0, 0.0], "unit": "m"}
    data["high_corner"] = {"value": [2.0, 2.0, 4.0], "unit": "m"}
    data["num_cells"] = {"value": [4, 4, 8]}
    inputs = _make(tmp_path, data)
    assert inputs["system_size"] == [2.0, 2.0, 4.0]
    assert inputs["dx"] == [0.5, 0.5, 0.5]


def test_derived_steps_and_horizon_cells(tmp_path):
    inputs = _make(tmp_path, _base())
    assert inputs["num_steps"] == 4
    assert inputs["m"] == 3


def test_defaults(tmp_path):
    inputs = _make(tmp_path, _base())
    assert inputs["timestep_safety_factor"] == 0.85
    assert inputs["output_file"] == "cabanaPD.out"
    assert inputs["error_file"] == "cabanaPD.err"
    assert inputs["exported_input_file"] == EXPORTED_INPUT_FILE
    assert inputs["output_reference"] is True
    assert inputs["half_neigh"] is False
    assert inputs["input_file"] == str(tmp_path / "input.json")


def test_user_values_kept(tmp_path):
    data = _base(output_file={"value": "mine.out"}, timestep_safety_factor={"value": 0.5})
    inputs = _make(tmp_path, data)
    assert inputs["output_file"] == "mine.out"
    assert inputs["timestep_safety_factor"] == 0.5


def test_exported_file_written_before_late_defaults(tmp_path):
    inputs = _make(tmp_path, _base())
    exported = json.loads((tmp_path / EXPORTED_INPUT_FILE).read_text())
    assert "half_neigh" not in exported
    assert "output_reference" not in exported
    assert exported["num_steps"]["value"] == inputs["num_steps"]


def test_contains_units_and_missing_key(tmp_path):
    data = _base(density={"value": 1.0, "units": "kg/m^3"})
    inputs = _make(tmp_path, data)
    assert "density" in inputs
    assert "nothing" not in inputs
    assert inputs.units("density") == "kg/m^3"
    assert inputs.units("timestep") == ""
    with pytest.raises(KeyError):
        inputs["nothing"]


def test_to_dict_is_a_copy(tmp_path):
    inputs = _make(tmp_path, _base())
    d = inputs.to_dict()
    d["density"]["value"] = 99.0
    assert inputs["density"] == 1.0


def test_missing_modulus_raises(tmp_path):
    data = _base()
    del data["bulk_modulus"]
    with pytest.raises(InputError, match="bulk_modulus"):
        _make(tmp_path, data)


def test_elastic_modulus_accepted(tmp_path):
    data = _base()
    del data["bulk_modulus"]
    data["elastic_modulus"] = {"value": 2.0}
    assert _make(tmp_path, data)["elastic_modulus"] == 2.0


def test_missing_size_raises(tmp_path):
    data = _base()
    del data["system_size"]
    with pytest.raises(InputError, match="system_size"):
        _make(tmp_path, data)


def test_missing_spacing_raises(tmp_path):
    data = _base()
    del data["dx"]
    with pytest.raises(InputError, match="num_cells or dx"):
        _make(tmp_path, data)


def test_not_3d_raises(tmp_path):
    data = _base(system_size={"value": [1.0, 1.0], "unit": "m"})
    with pytest.raises(InputError, match="3d"):
        _make(tmp_path, data)


def test_unit_mismatch_raises(tmp_path):
    data = _base(dx={"value": [0.5, 0.5, 0.5], "unit": "mm"})
    with pytest.raises(InputError, match="dx"):
        _make(tmp_path, data)


def test_critical_timestep_warns_and_stores(tmp_path, caplog):
    inputs = _make(tmp_path, _base())
    with caplog.at_level(logging.WARNING):
        inputs.compute_critical_timestep(object())
    crit = inputs["critical_timestep_mechanics"]
    assert 0 < crit < 0.25
    assert "mechanics" in caplog.text
    assert "critical_timestep_heat_transfer" not in inputs


def test_critical_timestep_scales_with_density(tmp_path):
    a = _make(tmp_path, _base(), "a.json")
    b = _make(tmp_path, _base(density={"value": 4.0}), "b.json")
    a.compute_critical_timestep(object())
    b.compute_critical_timestep(object())
    ratio = b["critical_timestep_mechanics"] / a["critical_timestep_mechanics"]
    assert ratio == pytest.approx(2.0)


def test_critical_timestep_elastic_modulus_matches_bulk(tmp_path):
    a = _make(tmp_path, _base(), "a.json")
    data = _base()
    del data["bulk_modulus"]
    data["elastic_modulus"] = {"value": 1.5}
    b = _make(tmp_path, data, "b.json")
    a.compute_critical_timestep(object())
    b.compute_critical_timestep(object())
    assert b["critical_timestep_mechanics"] == pytest.approx(
        a["critical_timestep_mechanics"]
    )


class _HeatModel:
    thermal_type = ThermalKind.DYNAMIC_TEMPERATURE

    def microconductivity_function(self, xi):
        return 2.0


def test_heat_transfer_timestep_scales_with_heat_capacity(tmp_path):
    extra = {"thermal_subcycle_steps": {"value": 1}}
    a = _make(tmp_path, _base(specific_heat_capacity={"value": 1.0}, **extra), "a.json")
    b = _make(tmp_path, _base(specific_heat_capacity={"value": 3.0}, **extra), "b.json")
    a.compute_critical_timestep(_HeatModel())
    b.compute_critical_timestep(_HeatModel())
    ratio = b["critical_timestep_heat_transfer"] / a["critical_timestep_heat_transfer"]
    assert ratio == pytest.approx(3.0)
    assert math.isfinite(a["critical_timestep_heat_transfer"])