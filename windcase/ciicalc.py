from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from .config import (
    CII_RATING_BOUNDARIES,
    SHIP_TYPE_PARAMETERS,
    cii_reduction_factor,
)

RATINGS = ("A", "B", "C", "D", "E")

@dataclass(frozen=True)
class CIIResults:
    baseline_cii: float
    required_cii: float
    attained_cii: float
    attained_cii_with_wind: float
    base_rating: str
    wind_rating: str

def baseline_cii(ship_type: str, dwt: float) -> float:
    # Reference line a * DWT^-c, DWT capped per ship type, in gCO2/(dwt.nm)
    params = SHIP_TYPE_PARAMETERS[ship_type]
    capped = min(dwt, params.max_dwt)
    return params.a * capped ** (-params.c) * 1000.0

def required_cii(ship_type: str, dwt: float, year: int) -> float:
    return baseline_cii(ship_type, dwt) * (1.0 - cii_reduction_factor(year))

def attained_cii(co2_emissions_t: float, dwt: float, distance_nm: float, wind_savings: float = 0.0) -> float:
    """CO2 tonnes per million dwt-nm; zero dwt or distance is rejected upstream."""
    adjusted_co2 = co2_emissions_t * (1.0 - wind_savings)
    transport_work = dwt * distance_nm / 1_000_000.0
    return adjusted_co2 / transport_work

def cii_rating(attained: float, required: float, ship_type: str) -> str:
    b = CII_RATING_BOUNDARIES[ship_type]
    ratio = attained / required
    if ratio <= b.d1:
        return "A"
    if ratio <= b.d2:
        return "B"
    if ratio <= b.d3:
        return "C"
    if ratio <= b.d4:
        return "D"
    return "E"

def calculate_cii(
    ship_type: str,
    dwt: float,
    year: int,
    co2_emissions_t: float,
    distance_nm: float,
    wind_savings: float,
) -> CIIResults:
    base = baseline_cii(ship_type, dwt)
    required = required_cii(ship_type, dwt, year)
    attained = attained_cii(co2_emissions_t, dwt, distance_nm)
    attained_wind = attained_cii(co2_emissions_t, dwt, distance_nm, wind_savings)

    return CIIResults(
        baseline_cii=base,
        required_cii=required,
        attained_cii=attained,
        attained_cii_with_wind=attained_wind,
        base_rating=cii_rating(attained, required, ship_type),
        wind_rating=cii_rating(attained_wind, required, ship_type),
    )

def cii_trajectory(ship_type: str, cii: CIIResults, start_year: int, end_year: int = 2030) -> pd.DataFrame:
    """
    Required CII and ratings year by year, holding the attained values fixed
    (operational profile is assumed unchanged).
    """
    rows = []
    for year in range(start_year, end_year + 1):
        rf = cii_reduction_factor(year)
        required = cii.baseline_cii * (1.0 - rf)
        rows.append({
            "year": year,
            "reduction_factor": rf,
            "required_cii": required,
            "base_ratio": cii.attained_cii / required,
            "wind_ratio": cii.attained_cii_with_wind / required,
            "base_rating": cii_rating(cii.attained_cii, required, ship_type),
            "wind_rating": cii_rating(cii.attained_cii_with_wind, required, ship_type),
        })
    return pd.DataFrame(rows, columns=[
        "year", "reduction_factor", "required_cii",
        "base_ratio", "wind_ratio", "base_rating", "wind_rating",
    ])
