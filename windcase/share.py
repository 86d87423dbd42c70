"""
Flat key=value encoding of a projection request, used for shareable links.
Keys follow the query parameters of the web calculator.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Mapping
from urllib.parse import parse_qsl, urlencode

from .fueleucalc import EngineLoad
from .projection import ProjectionRequest

_SCALAR_KEYS = {
    "startYear": ("start_year", int),
    "endYear": ("end_year", int),
    "shipType": ("ship_type", str),
    "dwt": ("dwt", float),
    "distance": ("distance_nm", float),
    "windSavings": ("wind_savings", float),
    "euExposure": ("eu_exposure", float),
    "fuelPrice": ("fuel_price_eur_per_t", float),
    "carbonPrice": ("carbon_price_eur_per_tco2e", float),
    "upfrontCost": ("upfront_cost_eur", float),
    "yearlyCost": ("yearly_cost_eur", float),
}

def request_to_params(req: ProjectionRequest) -> dict:
    params = {key: getattr(req, attr) for key, (attr, _) in _SCALAR_KEYS.items()}
    params.update({
        "mainFuel": req.ship.main.fuel,
        "mainConsumption": req.ship.main.consumption_t,
        "auxFuel": req.ship.aux.fuel,
        "auxConsumption": req.ship.aux.consumption_t,
    })
    return {k: str(v) for k, v in params.items()}

def encode_request(req: ProjectionRequest) -> str:
    return urlencode(request_to_params(req))

def _parse_int(value: str) -> int:
    # "2026.0" from float formatting is accepted
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"Expected a whole year, got {value!r}")
    return int(number)

def decode_request(params: Mapping[str, str] | str, default: ProjectionRequest) -> ProjectionRequest:
    """
    Rebuild a request from shared parameters. Absent keys keep the default;
    an engine is only overridden when both its fuel and consumption are given.
    """
    if isinstance(params, str):
        params = dict(parse_qsl(params.lstrip("?")))

    changes = {}
    for key, (attr, cast) in _SCALAR_KEYS.items():
        if key in params:
            changes[attr] = _parse_int(params[key]) if cast is int else cast(params[key])

    ship = default.ship
    if "mainFuel" in params and "mainConsumption" in params:
        ship = replace(ship, main=EngineLoad(params["mainFuel"] or ship.main.fuel,
                                             float(params["mainConsumption"])))
    if "auxFuel" in params and "auxConsumption" in params:
        ship = replace(ship, aux=EngineLoad(params["auxFuel"] or ship.aux.fuel,
                                            float(params["auxConsumption"])))

    return replace(default, ship=ship, **changes)
