from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import pandas as pd

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    "fuel_key",
    "fuel_name",
    "wtw_gco2eq_per_mj",
    "lcv_mj_per_g",
    "cf_co2_t_per_tfuel",
]

@dataclass(frozen=True)
class FuelProperties:
    fuel_key: str
    fuel_name: str
    wtw_gco2eq_per_mj: float
    lcv_mj_per_g: float
    cf_co2_t_per_tfuel: float
    cf_ch4_t_per_tfuel: float = 0.0
    cf_n2o_t_per_tfuel: float = 0.0
    ets_exempt: bool = False
    notes: str = ""

def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y")
    if pd.isna(value):
        return False
    return bool(value)

def load_fuels_csv(csv_path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Fuel table {csv_path} is missing columns: {', '.join(missing)}")
    # Clean up blanks
    for c in ["cf_ch4_t_per_tfuel", "cf_n2o_t_per_tfuel"]:
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce").fillna(0.0)
    if "ets_exempt" in df.columns:
        df["ets_exempt"] = df["ets_exempt"].map(_as_bool)
    logger.info("Loaded %d fuels from %s", len(df), csv_path)
    return df

def fuels_as_dict(df: pd.DataFrame) -> Mapping[str, FuelProperties]:
    out = {}
    for _, r in df.iterrows():
        key = str(r["fuel_key"])
        if key in out:
            raise ValueError(f"Duplicate fuel key: {key}")
        notes = r.get("notes", "")
        out[key] = FuelProperties(
            fuel_key=key,
            fuel_name=str(r["fuel_name"]),
            wtw_gco2eq_per_mj=float(r["wtw_gco2eq_per_mj"]),
            lcv_mj_per_g=float(r["lcv_mj_per_g"]),
            cf_co2_t_per_tfuel=float(r["cf_co2_t_per_tfuel"]),
            cf_ch4_t_per_tfuel=float(r.get("cf_ch4_t_per_tfuel", 0.0)),
            cf_n2o_t_per_tfuel=float(r.get("cf_n2o_t_per_tfuel", 0.0)),
            ets_exempt=_as_bool(r.get("ets_exempt", False)),
            notes="" if pd.isna(notes) else str(notes),
        )
    return MappingProxyType(out)

def resolve_fuel(fuels: Mapping[str, FuelProperties], fuel_key: str) -> Optional[FuelProperties]:
    """None means the fuel is unknown; it is never replaced by default factors."""
    return fuels.get(fuel_key)
