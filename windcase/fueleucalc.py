from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Mapping, Optional, Tuple

from .config import (
    FUELEU_CONSECUTIVE_PENALTY_STEP,
    FUELEU_PENALTY_MJ_PER_TONNE_VLSFO_EQ,
    FUELEU_PENALTY_EUR_PER_TONNE_VLSFO_EQ,
)
from .fuel_data import FuelProperties, resolve_fuel

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class EngineLoad:
    fuel: str
    consumption_t: float  # annual tonnes

@dataclass(frozen=True)
class ShipConfiguration:
    name: str
    main: EngineLoad
    aux: EngineLoad

    def with_wind_savings(self, wind_savings: float) -> "ShipConfiguration":
        # Wind assist only offsets propulsion, the auxiliary load is untouched.
        main = replace(self.main, consumption_t=self.main.consumption_t * (1.0 - wind_savings))
        return replace(self, main=main)

    def fuel_keys(self) -> Tuple[str, str]:
        return self.main.fuel, self.aux.fuel

@dataclass(frozen=True)
class IntensityResult:
    ghg_intensity: float  # gCO2eq/MJ
    energy_mj: float
    main: Optional[FuelProperties]
    aux: Optional[FuelProperties]

    @property
    def resolved(self) -> bool:
        return self.main is not None and self.aux is not None

UNRESOLVED_INTENSITY = IntensityResult(0.0, 0.0, None, None)

def _energy_mj(load: EngineLoad, fuel: FuelProperties) -> float:
    # tonnes -> grams -> MJ
    return load.consumption_t * 1_000_000.0 * fuel.lcv_mj_per_g

def compute_intensity(config: ShipConfiguration, fuels: Mapping[str, FuelProperties]) -> IntensityResult:
    """
    WtW GHG intensity of the energy used on board:
    - energy per engine = tonnes * 1e6 g/t * LCV (MJ/g)
    - emissions per engine = energy * WtW CO2eq intensity (gCO2eq/MJ)
    - intensity = total emissions / total energy
    An unknown fuel on either engine yields UNRESOLVED_INTENSITY, which
    callers must not read as zero emissions.
    """
    main_fuel = resolve_fuel(fuels, config.main.fuel)
    aux_fuel = resolve_fuel(fuels, config.aux.fuel)
    if main_fuel is None or aux_fuel is None:
        logger.warning("Fuel type not found (main=%s, aux=%s)", config.main.fuel, config.aux.fuel)
        return UNRESOLVED_INTENSITY

    main_mj = _energy_mj(config.main, main_fuel)
    aux_mj = _energy_mj(config.aux, aux_fuel)
    total_mj = main_mj + aux_mj
    total_gco2eq = main_mj * main_fuel.wtw_gco2eq_per_mj + aux_mj * aux_fuel.wtw_gco2eq_per_mj

    if total_mj <= 0:
        return IntensityResult(0.0, 0.0, main_fuel, aux_fuel)
    return IntensityResult(total_gco2eq / total_mj, total_mj, main_fuel, aux_fuel)

def wind_reward_factor(wind_savings: float) -> float:
    """
    FuelEU Annex I reward factor for wind-assisted propulsion:
    - >=0.15 -> 0.95
    - >=0.10 -> 0.97
    - >=0.05 -> 0.99
    Otherwise 1.00
    """
    if wind_savings >= 0.15:
        return 0.95
    if wind_savings >= 0.10:
        return 0.97
    if wind_savings >= 0.05:
        return 0.99
    return 1.00

def compliance_balance(ghg_intensity: float, target: float, energy_mj: float, eu_exposure: float) -> float:
    # gCO2eq (Annex IV Part A), positive => surplus, negative => deficit
    return (target - ghg_intensity) * energy_mj * eu_exposure

def fueleu_penalty(balance_g: float, ghg_intensity: float, multiplier: float = 1.0) -> float:
    # Annex IV Part B
    if balance_g >= 0:
        return 0.0
    return (abs(balance_g) / (ghg_intensity * FUELEU_PENALTY_MJ_PER_TONNE_VLSFO_EQ)) \
           * FUELEU_PENALTY_EUR_PER_TONNE_VLSFO_EQ * multiplier

@dataclass(frozen=True)
class ComplianceState:
    consecutive_years: int = 0

@dataclass(frozen=True)
class ComplianceYear:
    year: int
    target: float
    ghg_intensity: float
    deficit: float
    compliance_balance_g: float
    multiplier: float
    penalty_eur: float

def compliance_step(
    state: ComplianceState,
    year: int,
    target: float,
    ghg_intensity: float,
    energy_mj: float,
    eu_exposure: float,
) -> Tuple[ComplianceState, ComplianceYear]:
    """
    One transition of the consecutive non-compliance recurrence.

    A deficit year increments the streak and applies
    1.0 + 0.1 * (streak - 1) to the penalty; a compliant year resets the
    streak to 0.
    """
    deficit = ghg_intensity - target
    balance = compliance_balance(ghg_intensity, target, energy_mj, eu_exposure)

    if balance < 0:
        state = ComplianceState(state.consecutive_years + 1)
        multiplier = 1.0 + max(0, state.consecutive_years - 1) * FUELEU_CONSECUTIVE_PENALTY_STEP
        penalty = fueleu_penalty(balance, ghg_intensity, multiplier)
    else:
        state = ComplianceState(0)
        multiplier = 1.0
        penalty = 0.0

    return state, ComplianceYear(
        year=year,
        target=target,
        ghg_intensity=ghg_intensity,
        deficit=deficit,
        compliance_balance_g=balance,
        multiplier=multiplier,
        penalty_eur=penalty,
    )

def walk_compliance(
    targets: Iterable[Tuple[int, float]],
    ghg_intensity: float,
    energy_mj: float,
    eu_exposure: float,
) -> List[ComplianceYear]:
    """Fold compliance_step over (year, target) pairs, starting from a clean streak."""
    state = ComplianceState()
    out = []
    for year, target in sorted(targets):
        state, row = compliance_step(state, year, target, ghg_intensity, energy_mj, eu_exposure)
        logger.debug("FuelEU %d: CB=%.0f g, streak=%d, penalty=%.0f EUR",
                     year, row.compliance_balance_g, state.consecutive_years, row.penalty_eur)
        out.append(row)
    return out
