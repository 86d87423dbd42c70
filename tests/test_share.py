from dataclasses import replace

import pytest

from windcase.fueleucalc import EngineLoad
from windcase.share import decode_request, encode_request, request_to_params

def test_round_trip(request_default):
    req = replace(
        request_default,
        ship=replace(request_default.ship, main=EngineLoad("B100", 4321.5), aux=EngineLoad("MGO", 12.0)),
        start_year=2030,
        end_year=2040,
        ship_type="Tanker",
        wind_savings=0.125,
        yearly_cost_eur=25_000.0,
    )
    assert decode_request(encode_request(req), request_default) == req

def test_all_keys_present(request_default):
    assert set(request_to_params(request_default)) == {
        "startYear", "endYear", "shipType", "dwt", "distance", "windSavings", "euExposure",
        "fuelPrice", "carbonPrice", "upfrontCost", "yearlyCost",
        "mainFuel", "mainConsumption", "auxFuel", "auxConsumption",
    }

def test_missing_keys_keep_defaults(request_default):
    req = decode_request("?dwt=80000&startYear=2031", request_default)
    assert req.dwt == 80000.0
    assert req.start_year == 2031
    assert req.end_year == request_default.end_year
    assert req.ship == request_default.ship

def test_engine_needs_fuel_and_consumption(request_default):
    req = decode_request({"mainFuel": "MGO"}, request_default)
    assert req.ship.main == request_default.ship.main
    req = decode_request({"auxFuel": "MGO", "auxConsumption": "150"}, request_default)
    assert req.ship.aux == EngineLoad("MGO", 150.0)

@pytest.mark.parametrize("params", [{"dwt": "lots"}, {"startYear": "2026.5"}])
def test_malformed_values(request_default, params):
    with pytest.raises(ValueError):
        decode_request(params, request_default)
