from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from itertools import accumulate
from typing import Dict, Any, List, Mapping, Optional, Tuple

from .ciicalc import CIIResults, calculate_cii
from .config import SHIP_TYPES, YEARLY_TARGETS, DefaultInputs
from .emissions import emissions_breakdown, total_co2_t
from .etscalc import ets_cost
from .fuel_data import FuelProperties
from .fueleucalc import (
    EngineLoad,
    ShipConfiguration,
    compute_intensity,
    walk_compliance,
    wind_reward_factor,
)

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ProjectionRequest:
    ship: ShipConfiguration
    start_year: int
    end_year: int
    ship_type: str
    dwt: float
    distance_nm: float
    wind_savings: float  # fraction of main engine fuel saved, 0..1
    eu_exposure: float   # share of operation inside the EU/EEA, 0..1
    fuel_price_eur_per_t: float
    carbon_price_eur_per_tco2e: float
    upfront_cost_eur: float
    yearly_cost_eur: float

    @classmethod
    def from_defaults(cls, defaults: DefaultInputs = DefaultInputs()) -> "ProjectionRequest":
        return cls(
            ship=ShipConfiguration(
                name=defaults.ship_name,
                main=EngineLoad(defaults.main_fuel, defaults.main_consumption_t),
                aux=EngineLoad(defaults.aux_fuel, defaults.aux_consumption_t),
            ),
            start_year=defaults.start_year,
            end_year=defaults.end_year,
            ship_type=defaults.ship_type,
            dwt=defaults.dwt,
            distance_nm=defaults.distance_nm,
            wind_savings=defaults.wind_savings,
            eu_exposure=defaults.eu_exposure,
            fuel_price_eur_per_t=defaults.fuel_price_eur_per_t,
            carbon_price_eur_per_tco2e=defaults.carbon_price_eur_per_tco2e,
            upfront_cost_eur=defaults.upfront_cost_eur,
            yearly_cost_eur=defaults.yearly_cost_eur,
        )

@dataclass(frozen=True)
class YearlyResult:
    year: int
    target: float
    base_ghg_intensity: float
    wind_ghg_intensity: float
    base_deficit: float
    wind_deficit: float
    base_compliance_balance: float
    wind_compliance_balance: float
    base_multiplier: float
    wind_multiplier: float
    base_penalty: float
    wind_penalty: float
    base_ets_cost: float
    wind_ets_cost: float
    fuel_savings: float
    penalty_savings: float
    ets_savings: float
    yearly_cost: float
    total_savings: float
    cumulative_savings: float

@dataclass(frozen=True)
class ProjectionResult:
    years: List[YearlyResult] = field(default_factory=list)
    cii: Optional[CIIResults] = None
    base_ghg_intensity: float = 0.0
    wind_ghg_intensity: float = 0.0
    base_energy_mj: float = 0.0
    wind_energy_mj: float = 0.0
    wind_reward_factor: float = 1.0
    emissions: Dict[str, Any] = field(default_factory=dict)
    unresolved_fuels: Tuple[str, ...] = ()

    @property
    def available(self) -> bool:
        return not self.unresolved_fuels

def validate_request(req: ProjectionRequest, targets: Mapping[int, float] = YEARLY_TARGETS) -> None:
    first, last = min(targets), max(targets)
    if req.start_year > req.end_year:
        raise ValueError(f"Start year {req.start_year} is after end year {req.end_year}")
    if req.start_year < first or req.end_year > last:
        raise ValueError(f"Projection years must lie within {first}-{last}")
    if req.ship_type not in SHIP_TYPES:
        raise ValueError(f"Unknown ship type: {req.ship_type}")
    for name, value in (
        ("Deadweight tonnage", req.dwt),
        ("Distance", req.distance_nm),
        ("Wind savings", req.wind_savings),
        ("EU exposure", req.eu_exposure),
        ("Main engine consumption", req.ship.main.consumption_t),
        ("Auxiliary engine consumption", req.ship.aux.consumption_t),
        ("Fuel price", req.fuel_price_eur_per_t),
        ("Carbon price", req.carbon_price_eur_per_tco2e),
        ("Upfront cost", req.upfront_cost_eur),
        ("Yearly cost", req.yearly_cost_eur),
    ):
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value}")
    if req.dwt <= 0:
        raise ValueError("Deadweight tonnage must be positive")
    if req.distance_nm <= 0:
        raise ValueError("Distance must be positive")
    for name, value in (("Wind savings", req.wind_savings), ("EU exposure", req.eu_exposure)):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be between 0 and 1, got {value}")
    for name, value in (
        ("Main engine consumption", req.ship.main.consumption_t),
        ("Auxiliary engine consumption", req.ship.aux.consumption_t),
        ("Fuel price", req.fuel_price_eur_per_t),
        ("Carbon price", req.carbon_price_eur_per_tco2e),
        ("Upfront cost", req.upfront_cost_eur),
        ("Yearly cost", req.yearly_cost_eur),
    ):
        if value < 0:
            raise ValueError(f"{name} must not be negative")

def run_projection(
    fuels: Mapping[str, FuelProperties],
    req: ProjectionRequest,
    targets: Mapping[int, float] = YEARLY_TARGETS,
) -> ProjectionResult:
    """
    Year-by-year FuelEU / ETS / CII projection, baseline vs wind-assisted:
    - baseline intensity from the ship configuration as given
    - wind intensity recomputed with reduced main engine fuel, then
      multiplied by the wind reward factor
    - independent consecutive-deficit streaks for both scenarios
    - savings = fuel + penalty + ETS - recurring cost, cumulated in year order
    """
    validate_request(req, targets)

    missing = tuple(k for k in dict.fromkeys(req.ship.fuel_keys()) if k not in fuels)
    if missing:
        logger.warning("Projection unavailable, unresolved fuels: %s", ", ".join(missing))
        return ProjectionResult(unresolved_fuels=missing)
    base = compute_intensity(req.ship, fuels)

    wind_ship = req.ship.with_wind_savings(req.wind_savings)
    wind = compute_intensity(wind_ship, fuels)
    reward = wind_reward_factor(req.wind_savings)
    wind_ghg = wind.ghg_intensity * reward

    window = [(y, t) for y, t in targets.items() if req.start_year <= y <= req.end_year]
    base_rows = walk_compliance(window, base.ghg_intensity, base.energy_mj, req.eu_exposure)
    wind_rows = walk_compliance(window, wind_ghg, wind.energy_mj, req.eu_exposure)

    fuel_savings = req.ship.main.consumption_t * req.wind_savings * req.fuel_price_eur_per_t

    partial = []
    for b, w in zip(base_rows, wind_rows):
        base_ets = ets_cost(
            req.ship.main.consumption_t, req.ship.aux.consumption_t,
            base.main, base.aux,
            req.carbon_price_eur_per_tco2e, req.eu_exposure, b.year,
        )
        wind_ets = ets_cost(
            wind_ship.main.consumption_t, wind_ship.aux.consumption_t,
            base.main, base.aux,
            req.carbon_price_eur_per_tco2e, req.eu_exposure, b.year,
        )
        penalty_savings = b.penalty_eur - w.penalty_eur
        ets_savings = base_ets - wind_ets
        total = fuel_savings + penalty_savings + ets_savings - req.yearly_cost_eur
        partial.append((b, w, base_ets, wind_ets, penalty_savings, ets_savings, total))

    cumulative = accumulate(p[-1] for p in partial)
    years = [
        YearlyResult(
            year=b.year,
            target=b.target,
            base_ghg_intensity=b.ghg_intensity,
            wind_ghg_intensity=w.ghg_intensity,
            base_deficit=b.deficit,
            wind_deficit=w.deficit,
            base_compliance_balance=b.compliance_balance_g,
            wind_compliance_balance=w.compliance_balance_g,
            base_multiplier=b.multiplier,
            wind_multiplier=w.multiplier,
            base_penalty=b.penalty_eur,
            wind_penalty=w.penalty_eur,
            base_ets_cost=base_ets,
            wind_ets_cost=wind_ets,
            fuel_savings=fuel_savings,
            penalty_savings=penalty_savings,
            ets_savings=ets_savings,
            yearly_cost=req.yearly_cost_eur,
            total_savings=total,
            cumulative_savings=cum,
        )
        for (b, w, base_ets, wind_ets, penalty_savings, ets_savings, total), cum in zip(partial, cumulative)
    ]

    cii = calculate_cii(
        req.ship_type,
        req.dwt,
        req.start_year,
        total_co2_t(req.ship, fuels),
        req.distance_nm,
        req.wind_savings,
    )

    if years:
        logger.info("Projection %d-%d: base %.2f / wind %.2f gCO2eq/MJ, cumulative savings %.0f EUR",
                    req.start_year, req.end_year, base.ghg_intensity, wind_ghg,
                    years[-1].cumulative_savings)

    return ProjectionResult(
        years=years,
        cii=cii,
        base_ghg_intensity=base.ghg_intensity,
        wind_ghg_intensity=wind_ghg,
        base_energy_mj=base.energy_mj,
        wind_energy_mj=wind.energy_mj,
        wind_reward_factor=reward,
        emissions=emissions_breakdown(req.ship, fuels, req.wind_savings),
    )

def payback_year(years: List[YearlyResult], upfront_cost: float) -> Optional[int]:
    # cumulative savings are already net of the recurring cost
    for r in years:
        if r.cumulative_savings >= upfront_cost:
            return r.year
    return None

def payback_years(years: List[YearlyResult], upfront_cost: float, start_year: int) -> Optional[int]:
    year = payback_year(years, upfront_cost)
    if year is None:
        return None
    return year - start_year

def return_on_investment(years: List[YearlyResult], upfront_cost: float, yearly_cost: float) -> float:
    if not years:
        return 0.0
    total_costs = upfront_cost + yearly_cost * len(years)
    if total_costs <= 0:
        return 0.0
    return years[-1].cumulative_savings / total_costs
