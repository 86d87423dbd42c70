"""
Headless run of the wind-assist business case.

Usage:
    windcase                                  # default HFO/MDO bulk carrier
    windcase --wind-savings 0.1 --export out.xlsx
    windcase --share "startYear=2030&dwt=80000"
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import pandas as pd

from .config import FUELS_CSV, SHIP_TYPES
from .export import build_workbook
from .fuel_data import fuels_as_dict, load_fuels_csv
from .fueleucalc import EngineLoad
from .projection import (
    ProjectionRequest,
    payback_year,
    return_on_investment,
    run_projection,
)
from .share import decode_request, encode_request
from .utils import results_to_frame

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "year", "target", "base_ghg_intensity", "wind_ghg_intensity",
    "base_multiplier", "wind_multiplier", "base_penalty", "wind_penalty",
    "base_ets_cost", "wind_ets_cost", "total_savings", "cumulative_savings",
]

def setup_logging(level: str = "INFO"):
    """Configure logging to console."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="windcase", description="FuelEU / ETS / CII wind-assist business case")
    parser.add_argument("--fuels-csv", type=Path, default=FUELS_CSV, help="Fuel property table")
    parser.add_argument("--share", default=None, help="Shared query string to start from")
    parser.add_argument("--name", default=None)
    parser.add_argument("--main-fuel", default=None)
    parser.add_argument("--main-consumption", type=float, default=None, help="Main engine tonnes/year")
    parser.add_argument("--aux-fuel", default=None)
    parser.add_argument("--aux-consumption", type=float, default=None, help="Auxiliary engine tonnes/year")
    parser.add_argument("--start-year", type=int, default=None)
    parser.add_argument("--end-year", type=int, default=None)
    parser.add_argument("--ship-type", choices=SHIP_TYPES, default=None)
    parser.add_argument("--dwt", type=float, default=None)
    parser.add_argument("--distance", type=float, default=None, help="Nautical miles/year")
    parser.add_argument("--wind-savings", type=float, default=None, help="Fraction 0..1")
    parser.add_argument("--eu-exposure", type=float, default=None, help="Fraction 0..1")
    parser.add_argument("--fuel-price", type=float, default=None, help="EUR/tonne")
    parser.add_argument("--carbon-price", type=float, default=None, help="EUR/tCO2e")
    parser.add_argument("--upfront-cost", type=float, default=None)
    parser.add_argument("--yearly-cost", type=float, default=None)
    parser.add_argument("--export", type=Path, default=None, help="Write an .xlsx workbook")
    parser.add_argument("--log-level", default="INFO")
    return parser

def request_from_args(args: argparse.Namespace) -> ProjectionRequest:
    req = ProjectionRequest.from_defaults()
    if args.share:
        req = decode_request(args.share, req)

    ship = req.ship
    if args.name is not None:
        ship = replace(ship, name=args.name)
    if args.main_fuel is not None or args.main_consumption is not None:
        ship = replace(ship, main=EngineLoad(
            args.main_fuel if args.main_fuel is not None else ship.main.fuel,
            args.main_consumption if args.main_consumption is not None else ship.main.consumption_t,
        ))
    if args.aux_fuel is not None or args.aux_consumption is not None:
        ship = replace(ship, aux=EngineLoad(
            args.aux_fuel if args.aux_fuel is not None else ship.aux.fuel,
            args.aux_consumption if args.aux_consumption is not None else ship.aux.consumption_t,
        ))

    overrides = {
        "start_year": args.start_year,
        "end_year": args.end_year,
        "ship_type": args.ship_type,
        "dwt": args.dwt,
        "distance_nm": args.distance,
        "wind_savings": args.wind_savings,
        "eu_exposure": args.eu_exposure,
        "fuel_price_eur_per_t": args.fuel_price,
        "carbon_price_eur_per_tco2e": args.carbon_price,
        "upfront_cost_eur": args.upfront_cost,
        "yearly_cost_eur": args.yearly_cost,
    }
    return replace(req, ship=ship, **{k: v for k, v in overrides.items() if v is not None})

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        fuels = fuels_as_dict(load_fuels_csv(args.fuels_csv))
        req = request_from_args(args)
        result = run_projection(fuels, req)
    except (ValueError, FileNotFoundError) as e:
        parser.error(str(e))

    if not result.available:
        logger.error("Values unavailable: unknown fuel(s) %s", ", ".join(result.unresolved_fuels))
        return 1

    df = results_to_frame(result.years, req.carbon_price_eur_per_tco2e)
    with pd.option_context("display.max_columns", None, "display.width", 200,
                           "display.float_format", "{:,.2f}".format):
        print(df[SUMMARY_COLUMNS].to_string(index=False))

    cii = result.cii
    print(f"\nCII {req.start_year}: required {cii.required_cii:.2f}, "
          f"attained {cii.attained_cii:.2f} ({cii.base_rating}) / "
          f"with wind {cii.attained_cii_with_wind:.2f} ({cii.wind_rating})")
    paid_back = payback_year(result.years, req.upfront_cost_eur)
    print(f"Payback: {paid_back if paid_back is not None else 'N/A'}, "
          f"ROI: {return_on_investment(result.years, req.upfront_cost_eur, req.yearly_cost_eur):.2%}")
    print(f"Share: ?{encode_request(req)}")

    if args.export:
        args.export.write_bytes(build_workbook(req, result, fuels))
        logger.info("Workbook written to %s", args.export)
    return 0

if __name__ == "__main__":
    sys.exit(main())
