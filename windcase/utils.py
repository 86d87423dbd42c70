from __future__ import annotations

from dataclasses import asdict
from typing import List

import numpy as np
import pandas as pd

from .projection import YearlyResult

def results_to_frame(years: List[YearlyResult], carbon_price: float) -> pd.DataFrame:
    df = pd.DataFrame([asdict(r) for r in years])
    if df.empty:
        return df
    df["raw_savings"] = df["fuel_savings"] + df["penalty_savings"] + df["ets_savings"]
    df["cumulative_raw_savings"] = df["raw_savings"].cumsum()
    df["cumulative_costs"] = df["yearly_cost"] * np.arange(1, len(df) + 1)
    df["net_cumulative"] = df["cumulative_raw_savings"] - df["cumulative_costs"]
    # CO2e liable under the ETS, recovered from the cost
    if carbon_price > 0:
        df["base_ets_co2e_t"] = df["base_ets_cost"] / carbon_price
        df["wind_ets_co2e_t"] = df["wind_ets_cost"] / carbon_price
    else:
        df["base_ets_co2e_t"] = 0.0
        df["wind_ets_co2e_t"] = 0.0
    return df

def investment_curve(years: List[YearlyResult], upfront_cost: float, yearly_cost: float) -> pd.DataFrame:
    """
    Gross savings (before the recurring cost) against upfront plus accrued
    recurring cost. The lines cross in the payback year.
    """
    gross = np.cumsum([r.fuel_savings + r.penalty_savings + r.ets_savings for r in years])
    return pd.DataFrame({
        "year": [r.year for r in years],
        "cumulative_raw_savings": gross,
        "total_cost": [upfront_cost + yearly_cost * (i + 1) for i in range(len(years))],
    })
