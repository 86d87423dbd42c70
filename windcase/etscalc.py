from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, Mapping

from .config import (
    GWP100_CH4,
    GWP100_N2O,
    ets_year_rate,
)
from .fuel_data import FuelProperties

@dataclass
class EtsInputs:
    reporting_year: int
    eua_price_eur_per_tco2e: float

    # Share of operation inside the EU/EEA, applied as a flat scalar
    eu_exposure: float

    # Annual fuel consumption in tonnes by engine ("main", "aux") -> (fuel_key, tonnes)
    consumption_tonnes: Dict[str, tuple]

def compute_ets(fuels: Mapping[str, FuelProperties], inp: EtsInputs) -> Dict[str, Any]:
    """
    EU ETS cost for maritime:
    - CO2, CH4, N2O in scope; CO2 from ETS-exempt biofuels is zero-rated
    - Convert CH4, N2O to CO2e using GWP100 (28 and 265)
    - Apply EU exposure share
    - Apply phase-in rate (2025: 0.7, otherwise 1.0)
    """
    rate = ets_year_rate(inp.reporting_year)

    totals = {
        "co2_t": 0.0,
        "ch4_t": 0.0,
        "n2o_t": 0.0,
        "co2e_t": 0.0,
        "ets_cost_eur": 0.0,
    }

    breakdown = []

    for engine, (fuel_key, tonnes) in inp.consumption_tonnes.items():
        if fuel_key not in fuels:
            raise KeyError(f"Fuel not found: {fuel_key}")
        f = fuels[fuel_key]

        # Exemption never suppresses the non-CO2 gases
        co2_t = 0.0 if f.ets_exempt else tonnes * f.cf_co2_t_per_tfuel
        ch4_t = tonnes * f.cf_ch4_t_per_tfuel
        n2o_t = tonnes * f.cf_n2o_t_per_tfuel

        co2e_t = co2_t + (ch4_t * GWP100_CH4) + (n2o_t * GWP100_N2O)

        totals["co2_t"] += co2_t
        totals["ch4_t"] += ch4_t
        totals["n2o_t"] += n2o_t
        totals["co2e_t"] += co2e_t

        breakdown.append({
            "engine": engine,
            "fuel_key": fuel_key,
            "fuel_name": f.fuel_name,
            "tonnes_fuel": tonnes,
            "ets_exempt": f.ets_exempt,
            "co2_t": co2_t,
            "ch4_t": ch4_t,
            "n2o_t": n2o_t,
            "co2e_t": co2e_t,
        })

    totals["ets_cost_eur"] = totals["co2e_t"] * float(inp.eua_price_eur_per_tco2e) \
                             * float(inp.eu_exposure) * rate

    return {
        "year_rate": rate,
        "totals": totals,
        "breakdown": breakdown,
    }

def ets_cost(
    main_consumption_t: float,
    aux_consumption_t: float,
    main_fuel: FuelProperties,
    aux_fuel: FuelProperties,
    carbon_price: float,
    eu_exposure: float,
    year: int,
) -> float:
    fuels = {main_fuel.fuel_key: main_fuel, aux_fuel.fuel_key: aux_fuel}
    res = compute_ets(
        fuels,
        EtsInputs(
            reporting_year=year,
            eua_price_eur_per_tco2e=carbon_price,
            eu_exposure=eu_exposure,
            consumption_tonnes={
                "main": (main_fuel.fuel_key, main_consumption_t),
                "aux": (aux_fuel.fuel_key, aux_consumption_t),
            },
        ),
    )
    return res["totals"]["ets_cost_eur"]
