from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import Mapping

import pandas as pd

from .ciicalc import cii_trajectory
from .fuel_data import FuelProperties
from .projection import ProjectionRequest, ProjectionResult
from .utils import results_to_frame

logger = logging.getLogger(__name__)

SHEETS = ["Inputs", "Cost Benefit Analysis", "CII Performance", "Emissions"]

CBA_COLUMNS = {
    "year": "Year",
    "target": "Target",
    "base_ghg_intensity": "Base GHG",
    "wind_ghg_intensity": "Wind GHG",
    "base_deficit": "Base Deficit",
    "wind_deficit": "Wind Deficit",
    "base_multiplier": "Base Mult.",
    "wind_multiplier": "Wind Mult.",
    "base_penalty": "Base Penalty",
    "wind_penalty": "Wind Penalty",
    "base_ets_cost": "Base ETS",
    "wind_ets_cost": "Wind ETS",
    "fuel_savings": "Fuel Savings",
    "penalty_savings": "Penalty Savings",
    "ets_savings": "ETS Savings",
    "yearly_cost": "Yearly Cost",
    "total_savings": "Total Savings",
    "cumulative_savings": "Cumulative Savings",
    "cumulative_costs": "Cumulative Costs",
    "net_cumulative": "Net Cumulative",
}

def export_filename(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"Wingsail Impact {now.strftime('%Y-%m-%dT%H-%M-%S')}.xlsx"

def _inputs_frame(req: ProjectionRequest, result: ProjectionResult,
                  fuels: Mapping[str, FuelProperties]) -> pd.DataFrame:
    def co2_factor(key: str):
        f = fuels.get(key)
        return f.cf_co2_t_per_tfuel if f is not None else None

    rows = [
        ("Start Year", req.start_year),
        ("End Year", req.end_year),
        ("Ship Type", req.ship_type),
        ("Deadweight Tonnage", req.dwt),
        ("Distance (nm/year)", req.distance_nm),
        ("Wind Savings (%)", req.wind_savings * 100.0),
        ("EU Time (%)", req.eu_exposure * 100.0),
        ("Fuel Price (EUR/t)", req.fuel_price_eur_per_t),
        ("Carbon Price (EUR/t CO2e)", req.carbon_price_eur_per_tco2e),
        ("Upfront Cost (EUR)", req.upfront_cost_eur),
        ("Yearly Cost (EUR)", req.yearly_cost_eur),
        ("Ship Name", req.ship.name),
        ("Main Engine Fuel", req.ship.main.fuel),
        ("Main Engine Consumption (t/year)", req.ship.main.consumption_t),
        ("Main Engine CO2 Factor (t CO2/t fuel)", co2_factor(req.ship.main.fuel)),
        ("Auxiliary Engine Fuel", req.ship.aux.fuel),
        ("Auxiliary Engine Consumption (t/year)", req.ship.aux.consumption_t),
        ("Auxiliary Engine CO2 Factor (t CO2/t fuel)", co2_factor(req.ship.aux.fuel)),
        ("Base GHG Intensity (gCO2eq/MJ)", result.base_ghg_intensity if result.available else None),
        ("Wind-Assisted GHG Intensity (gCO2eq/MJ)", result.wind_ghg_intensity if result.available else None),
        ("Wind Reward Factor", result.wind_reward_factor if result.available else None),
    ]
    if result.unresolved_fuels:
        rows.append(("Unresolved Fuels", ", ".join(result.unresolved_fuels)))
    return pd.DataFrame(rows, columns=["Parameter", "Value"])

def _cii_frame(req: ProjectionRequest, result: ProjectionResult) -> pd.DataFrame:
    if result.cii is None:
        return pd.DataFrame(columns=["Parameter", "Value"])
    cii = result.cii
    summary = pd.DataFrame([
        ("Assessment Year", req.start_year),
        ("Baseline CII", cii.baseline_cii),
        ("Required CII", cii.required_cii),
        ("Attained CII (Base)", cii.attained_cii),
        ("Base Rating", cii.base_rating),
        ("Attained CII (Wind)", cii.attained_cii_with_wind),
        ("Wind Rating", cii.wind_rating),
    ], columns=["Parameter", "Value"])
    traj = cii_trajectory(req.ship_type, cii, req.start_year, max(req.start_year, 2030))
    traj = traj.rename(columns={"year": "Parameter"})
    return pd.concat([summary, traj], ignore_index=True)

def _emissions_frame(result: ProjectionResult) -> pd.DataFrame:
    rows = []
    for gas, label in (("co2", "CO2"), ("ch4", "CH4"), ("n2o", "N2O")):
        e = result.emissions.get(gas)
        if not e:
            continue
        reduction = e["savings"] / e["baseline"] * 100.0 if e["baseline"] else 0.0
        rows.append((f"{label} (t/year)", e["baseline"], e["with_wind"], e["savings"], reduction))
    if "co2e_savings_t" in result.emissions:
        rows.append(("CO2e savings (t/year)", None, None, result.emissions["co2e_savings_t"], None))
    return pd.DataFrame(rows, columns=["Emissions Type", "Base Case", "Wind-Assisted", "Reduction", "Reduction (%)"])

def build_workbook(req: ProjectionRequest, result: ProjectionResult,
                   fuels: Mapping[str, FuelProperties]) -> bytes:
    cba = results_to_frame(result.years, req.carbon_price_eur_per_tco2e)
    cba = cba[[c for c in CBA_COLUMNS if c in cba.columns]].rename(columns=CBA_COLUMNS)

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        _inputs_frame(req, result, fuels).to_excel(writer, sheet_name="Inputs", index=False)
        cba.to_excel(writer, sheet_name="Cost Benefit Analysis", index=False)
        _cii_frame(req, result).to_excel(writer, sheet_name="CII Performance", index=False)
        _emissions_frame(result).to_excel(writer, sheet_name="Emissions", index=False)
    logger.info("Exported %d projection years to workbook", len(result.years))
    return buf.getvalue()
