import pandas as pd
import pytest

from windcase.fuel_data import FuelProperties, fuels_as_dict, load_fuels_csv, resolve_fuel

def test_default_table_loads(fuels_csv):
    fuels = fuels_as_dict(load_fuels_csv(fuels_csv))
    assert {"HFO", "MDO", "B100"} <= set(fuels)
    hfo = fuels["HFO"]
    assert isinstance(hfo, FuelProperties)
    assert hfo.lcv_mj_per_g == pytest.approx(0.0405)
    assert not hfo.ets_exempt
    assert fuels["B100"].ets_exempt
    # blank CH4/N2O cells read as zero
    assert fuels["Methanol"].cf_ch4_t_per_tfuel == 0.0

def test_map_is_read_only(fuels_csv):
    fuels = fuels_as_dict(load_fuels_csv(fuels_csv))
    with pytest.raises(TypeError):
        fuels["HFO"] = None

def test_resolve_unknown_fuel_returns_none(fuels):
    assert resolve_fuel(fuels, "HFO") is fuels["HFO"]
    assert resolve_fuel(fuels, "Bio-LNG") is None

def test_missing_columns(tmp_path):
    path = tmp_path / "fuels.csv"
    pd.DataFrame({"fuel_key": ["HFO"], "fuel_name": ["Heavy"]}).to_csv(path, index=False)
    with pytest.raises(ValueError, match="missing columns"):
        load_fuels_csv(path)

def test_duplicate_keys():
    df = pd.DataFrame({
        "fuel_key": ["HFO", "HFO"],
        "fuel_name": ["a", "b"],
        "wtw_gco2eq_per_mj": [91.0, 92.0],
        "lcv_mj_per_g": [0.04, 0.04],
        "cf_co2_t_per_tfuel": [3.1, 3.1],
    })
    with pytest.raises(ValueError, match="Duplicate"):
        fuels_as_dict(df)
