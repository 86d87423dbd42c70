from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

# Regulatory constants and defaults for the wind-assist business case

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
FUELS_CSV = Path(os.environ.get("WINDCASE_FUELS_CSV", DATA_DIR / "fuels_default.csv"))

# FuelEU Maritime GHG intensity limits (gCO2eq/MJ), 91.16 reference value
# reduced by 2% / 6% / 14.5% / 31% / 62% / 80% in five-year steps.
_FUELEU_STEPS = (
    (2025, 89.3368),
    (2030, 85.6904),
    (2035, 77.9418),
    (2040, 62.9004),
    (2045, 34.6408),
    (2050, 18.232),
)

def _build_targets() -> Mapping[int, float]:
    targets = {}
    for year in range(2025, 2051):
        for step_year, value in _FUELEU_STEPS:
            if year >= step_year:
                targets[year] = value
    return MappingProxyType(targets)

YEARLY_TARGETS: Mapping[int, float] = _build_targets()
FIRST_TARGET_YEAR = min(YEARLY_TARGETS)
LAST_TARGET_YEAR = max(YEARLY_TARGETS)

def fueleu_target_intensity(reporting_year: int) -> float:
    # No extrapolation outside the table: callers restrict the window first.
    return YEARLY_TARGETS[reporting_year]

# FuelEU penalty constants (Annex IV Part B):
# 41,000 MJ per tonne VLSFO equivalent, 2,400 EUR per tonne VLSFO equivalent
FUELEU_PENALTY_MJ_PER_TONNE_VLSFO_EQ = 41_000.0
FUELEU_PENALTY_EUR_PER_TONNE_VLSFO_EQ = 2_400.0

# Each further consecutive non-compliant year adds 10% to the penalty
FUELEU_CONSECUTIVE_PENALTY_STEP = 0.1

# GWP100 per Commission Delegated Regulation (EU) 2020/1044
GWP100_CH4 = 28.0
GWP100_N2O = 265.0

# ETS surrender phase-in: 70% of 2025 emissions, full liability otherwise
def ets_year_rate(reporting_year: int) -> float:
    if reporting_year == 2025:
        return 0.70
    return 1.00

# CII (IMO MEPC.353(78) / MEPC.338(76))
BULK_CARRIER = "Bulk Carrier"
TANKER = "Tanker"
SHIP_TYPES = (BULK_CARRIER, TANKER)

@dataclass(frozen=True)
class ShipTypeParameters:
    a: float
    c: float
    max_dwt: float

@dataclass(frozen=True)
class RatingBoundaries:
    d1: float
    d2: float
    d3: float
    d4: float

SHIP_TYPE_PARAMETERS: Mapping[str, ShipTypeParameters] = MappingProxyType({
    BULK_CARRIER: ShipTypeParameters(a=4.745, c=0.622, max_dwt=279_000.0),
    TANKER: ShipTypeParameters(a=5.247, c=0.610, max_dwt=math.inf),
})

CII_RATING_BOUNDARIES: Mapping[str, RatingBoundaries] = MappingProxyType({
    TANKER: RatingBoundaries(d1=0.82, d2=0.93, d3=1.08, d4=1.28),
    BULK_CARRIER: RatingBoundaries(d1=0.86, d2=0.94, d3=1.06, d4=1.18),
})

# Reduction factors relative to the 2019 reference line
CII_REDUCTION_FACTORS: Mapping[int, float] = MappingProxyType({
    2023: 0.05,
    2024: 0.07,
    2025: 0.09,
    2026: 0.11,
    2027: 0.13,
    2028: 0.15,
    2029: 0.17,
    2030: 0.20,
})

def cii_reduction_factor(year: int) -> float:
    """
    Z factor for the required CII:
    - 0 before 2023
    - schedule value for 2023-2030
    - held at the 2030 value afterwards
    """
    if year < 2023:
        return 0.0
    if year > 2030:
        return CII_REDUCTION_FACTORS[2030]
    return CII_REDUCTION_FACTORS[year]

@dataclass(frozen=True)
class DefaultInputs:
    ship_name: str = "HMM SGS"
    main_fuel: str = "HFO"
    main_consumption_t: float = 5000.0
    aux_fuel: str = "MDO"
    aux_consumption_t: float = 200.0
    start_year: int = 2026
    end_year: int = 2050
    ship_type: str = BULK_CARRIER
    dwt: float = 61_000.0
    distance_nm: float = 40_000.0
    wind_savings: float = 0.20
    eu_exposure: float = 0.5
    fuel_price_eur_per_t: float = 600.0
    carbon_price_eur_per_tco2e: float = 65.0
    upfront_cost_eur: float = 6_000_000.0
    yearly_cost_eur: float = 0.0
