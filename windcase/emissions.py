from __future__ import annotations

from typing import Dict, Any, Mapping

from .config import GWP100_CH4, GWP100_N2O
from .fuel_data import FuelProperties
from .fueleucalc import ShipConfiguration

def emissions_breakdown(
    config: ShipConfiguration,
    fuels: Mapping[str, FuelProperties],
    wind_savings: float,
) -> Dict[str, Any]:
    """
    Annual tank-to-wake emissions per gas (tonnes), baseline vs wind-assisted.
    Only the main engine share is reduced by wind savings. CO2 is reported
    in full here, regardless of ETS exemption.
    """
    main_f = fuels[config.main.fuel]
    aux_f = fuels[config.aux.fuel]
    main_t = config.main.consumption_t
    aux_t = config.aux.consumption_t

    factors = {
        "co2": (main_f.cf_co2_t_per_tfuel, aux_f.cf_co2_t_per_tfuel),
        "ch4": (main_f.cf_ch4_t_per_tfuel, aux_f.cf_ch4_t_per_tfuel),
        "n2o": (main_f.cf_n2o_t_per_tfuel, aux_f.cf_n2o_t_per_tfuel),
    }

    out: Dict[str, Any] = {}
    for gas, (main_cf, aux_cf) in factors.items():
        main_em = main_t * main_cf
        aux_em = aux_t * aux_cf
        baseline = main_em + aux_em
        with_wind = main_em * (1.0 - wind_savings) + aux_em
        out[gas] = {
            "baseline": baseline,
            "with_wind": with_wind,
            "savings": baseline - with_wind,
        }

    out["co2e_savings_t"] = out["co2"]["savings"] \
        + out["ch4"]["savings"] * GWP100_CH4 \
        + out["n2o"]["savings"] * GWP100_N2O
    return out

def total_co2_t(config: ShipConfiguration, fuels: Mapping[str, FuelProperties]) -> float:
    # CO2 basis for the CII (both engines, no wind reduction)
    return config.main.consumption_t * fuels[config.main.fuel].cf_co2_t_per_tfuel \
        + config.aux.consumption_t * fuels[config.aux.fuel].cf_co2_t_per_tfuel

def co2e_equivalents(savings_t: float) -> Dict[str, int]:
    """Everyday equivalents of an annual CO2e saving (tonnes)."""
    trees = round(savings_t / 0.022)          # t CO2 absorbed per tree and year
    hectares = round(trees / 1250)
    miles = round(savings_t * 4600)           # miles driven per t CO2
    return {
        "trees": trees,
        "forest_hectares": hectares,
        "forest_acres": round(hectares * 2.471),
        "homes": round(savings_t / 7.88),     # t CO2 per home and year
        "miles_driven": miles,
        "earth_circumnavigations": round(miles / 24901),
        "sea_ice_melt_m2": round(savings_t * 0.3),
    }
