from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from windcase.ciicalc import cii_trajectory
from windcase.cli import setup_logging
from windcase.config import FUELS_CSV, SHIP_TYPES, YEARLY_TARGETS
from windcase.emissions import co2e_equivalents
from windcase.export import build_workbook, export_filename
from windcase.fuel_data import load_fuels_csv, fuels_as_dict
from windcase.fueleucalc import EngineLoad, ShipConfiguration
from windcase.projection import (
    ProjectionRequest,
    payback_years,
    return_on_investment,
    run_projection,
)
from windcase.share import decode_request, request_to_params
from windcase.utils import investment_curve, results_to_frame

st.set_page_config(page_title="Wind-Assist Business Case (FuelEU + EU ETS + CII)", layout="wide")
setup_logging()

st.title("Wind-Assist Business Case: FuelEU Maritime, EU ETS and CII")

# ---------------------------
# Load fuels
# ---------------------------
@st.cache_data
def _load_fuels(path: str) -> pd.DataFrame:
    return load_fuels_csv(path)

fuels_df = _load_fuels(str(FUELS_CSV))
fuels = fuels_as_dict(fuels_df)
fuel_keys = list(fuels.keys())
fuel_labels = {k: fuels[k].fuel_name for k in fuel_keys}

# Shared links pre-fill the form
try:
    initial = decode_request(dict(st.query_params), ProjectionRequest.from_defaults())
except ValueError:
    st.warning("The shared link contains invalid values; defaults are used instead.")
    initial = ProjectionRequest.from_defaults()

def _fuel_index(key: str) -> int:
    return fuel_keys.index(key) if key in fuel_keys else 0

years = sorted(YEARLY_TARGETS)

with st.sidebar:
    st.header("Ship")
    name = st.text_input("Ship name", value=initial.ship.name)
    main_fuel = st.selectbox("Main engine fuel", options=fuel_keys, index=_fuel_index(initial.ship.main.fuel),
                             format_func=lambda k: fuel_labels[k])
    main_t = st.number_input("Main engine consumption (t/year)", min_value=0.0,
                             value=float(initial.ship.main.consumption_t), step=100.0)
    aux_fuel = st.selectbox("Auxiliary engine fuel", options=fuel_keys, index=_fuel_index(initial.ship.aux.fuel),
                            format_func=lambda k: fuel_labels[k])
    aux_t = st.number_input("Auxiliary engine consumption (t/year)", min_value=0.0,
                            value=float(initial.ship.aux.consumption_t), step=10.0)
    if initial.ship.main.fuel not in fuels or initial.ship.aux.fuel not in fuels:
        st.caption("A shared fuel is not in the fuel table; the first fuel is preselected.")

    st.header("Projection")
    start_year = st.selectbox("Start year", options=years, index=years.index(initial.start_year)
                              if initial.start_year in years else 0)
    end_year = st.selectbox("End year", options=years, index=years.index(initial.end_year)
                            if initial.end_year in years else len(years) - 1)

    st.header("Wind assist & exposure")
    wind_savings = st.slider("Main engine fuel saved by wind (%)", 0.0, 100.0,
                             float(initial.wind_savings * 100.0), step=1.0) / 100.0
    eu_exposure = st.slider("Time in EU/EEA (%)", 0.0, 100.0, float(initial.eu_exposure * 100.0), step=5.0) / 100.0

    st.header("Prices & costs")
    fuel_price = st.number_input("Fuel price (EUR/t)", min_value=0.0, value=float(initial.fuel_price_eur_per_t), step=10.0)
    carbon_price = st.number_input("EUA price (EUR/tCO2e)", min_value=0.0,
                                   value=float(initial.carbon_price_eur_per_tco2e), step=1.0)
    upfront_cost = st.number_input("Upfront cost (EUR)", min_value=0.0, value=float(initial.upfront_cost_eur), step=100_000.0)
    yearly_cost = st.number_input("Yearly cost (EUR)", min_value=0.0, value=float(initial.yearly_cost_eur), step=10_000.0)

    st.header("CII")
    ship_type = st.selectbox("Ship type", options=list(SHIP_TYPES), index=SHIP_TYPES.index(initial.ship_type)
                             if initial.ship_type in SHIP_TYPES else 0)
    dwt = st.number_input("Deadweight tonnage (DWT)", min_value=0.0, value=float(initial.dwt), step=1000.0)
    distance = st.number_input("Distance travelled (nm/year)", min_value=0.0, value=float(initial.distance_nm), step=1000.0)

req = ProjectionRequest(
    ship=ShipConfiguration(name=name, main=EngineLoad(main_fuel, main_t), aux=EngineLoad(aux_fuel, aux_t)),
    start_year=int(start_year),
    end_year=int(end_year),
    ship_type=ship_type,
    dwt=float(dwt),
    distance_nm=float(distance),
    wind_savings=float(wind_savings),
    eu_exposure=float(eu_exposure),
    fuel_price_eur_per_t=float(fuel_price),
    carbon_price_eur_per_tco2e=float(carbon_price),
    upfront_cost_eur=float(upfront_cost),
    yearly_cost_eur=float(yearly_cost),
)

# ---------------------------
# Compute
# ---------------------------
try:
    result = run_projection(fuels, req)
except ValueError as e:
    st.error(str(e))
    st.stop()

if not result.available:
    st.error(f"Values unavailable: fuel(s) not found: {', '.join(result.unresolved_fuels)}")
    st.stop()

df = results_to_frame(result.years, req.carbon_price_eur_per_tco2e)

h1, h2, h3 = st.columns([1, 1, 2])
h1.download_button(
    "Export to Excel",
    data=build_workbook(req, result, fuels),
    file_name=export_filename(),
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)
if h2.button("Share"):
    st.query_params.from_dict(request_to_params(req))
    h3.success("Link updated: copy the URL from the address bar.")

s1, s2, s3, s4 = st.columns(4)
s1.metric("Base GHG intensity (gCO2eq/MJ)", f"{result.base_ghg_intensity:.2f}")
s2.metric("Wind GHG intensity (gCO2eq/MJ)", f"{result.wind_ghg_intensity:.2f}",
          delta=f"reward factor {result.wind_reward_factor:.2f}", delta_color="off")
s3.metric("Base energy (MJ)", f"{result.base_energy_mj:,.0f}")
s4.metric("Wind energy (MJ)", f"{result.wind_energy_mj:,.0f}")

tab_cb, tab_cii, tab_em = st.tabs(["Cost-Benefit Analysis", "CII Performance", "Emissions"])

# ---------------------------
# Cost-benefit
# ---------------------------
with tab_cb:
    paid_back = payback_years(result.years, req.upfront_cost_eur, req.start_year)
    roi = return_on_investment(result.years, req.upfront_cost_eur, req.yearly_cost_eur)

    m1, m2, m3 = st.columns(3)
    m1.metric("Payback period", f"{paid_back} years" if paid_back is not None else "N/A")
    m2.metric("Return on investment", f"{roi:.2%}")
    m3.metric("Cumulative savings (EUR)", f"{result.years[-1].cumulative_savings:,.0f}")

    cols = st.columns(4)
    for col, year in zip(cols, [2026, 2030, 2035, 2045]):
        row = df[df["year"] == year]
        if row.empty:
            continue
        col.metric(f"Savings {year} (EUR)", f"{row['total_savings'].iloc[0]:,.0f}",
                   delta=f"cumulative {row['cumulative_savings'].iloc[0]:,.0f}", delta_color="off")

    curve = investment_curve(result.years, req.upfront_cost_eur, req.yearly_cost_eur)
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=curve["year"], y=curve["cumulative_raw_savings"], name="Cumulative Savings",
                             line=dict(color="rgb(34, 197, 94)")))
    fig.add_trace(go.Scatter(x=curve["year"], y=curve["total_cost"], name="Total Cost",
                             line=dict(color="rgb(239, 68, 68)", dash="dash")))
    fig.update_layout(title="Cumulative Savings vs Total Cost", yaxis_title="EUR")
    st.plotly_chart(fig, use_container_width=True)

    with st.expander("Yearly breakdown"):
        st.dataframe(df, use_container_width=True, hide_index=True)

# ---------------------------
# CII
# ---------------------------
with tab_cii:
    cii = result.cii
    c1, c2, c3 = st.columns(3)
    c1.metric("Required CII", f"{cii.required_cii:.2f}", delta=f"baseline {cii.baseline_cii:.2f}", delta_color="off")
    c2.metric("Attained CII (base)", f"{cii.attained_cii:.2f}", delta=f"rating {cii.base_rating}", delta_color="off")
    c3.metric("Attained CII (wind)", f"{cii.attained_cii_with_wind:.2f}", delta=f"rating {cii.wind_rating}",
              delta_color="off")

    traj = cii_trajectory(req.ship_type, cii, req.start_year, max(req.start_year, 2030))
    fig_cii = px.line(traj, x="year", y=["base_ratio", "wind_ratio"], markers=True,
                      title="Attained / required CII ratio")
    st.plotly_chart(fig_cii, use_container_width=True)
    st.dataframe(traj, use_container_width=True, hide_index=True)

# ---------------------------
# Emissions
# ---------------------------
with tab_em:
    em = result.emissions
    e1, e2, e3 = st.columns(3)
    for col, gas, label in ((e1, "co2", "CO2"), (e2, "ch4", "CH4"), (e3, "n2o", "N2O")):
        col.metric(f"{label} baseline (t/year)", f"{em[gas]['baseline']:,.2f}",
                   delta=f"-{em[gas]['savings']:,.2f} with wind", delta_color="inverse")
    st.metric("Total CO2e reduction (t/year)", f"{em['co2e_savings_t']:,.0f}")

    facts = co2e_equivalents(em["co2e_savings_t"])
    st.subheader("What this reduction equals each year")
    f1, f2, f3, f4 = st.columns(4)
    f1.metric("Trees planted", f"{facts['trees']:,}",
              delta=f"{facts['forest_hectares']:,} ha / {facts['forest_acres']:,} acres of forest", delta_color="off")
    f2.metric("Homes' annual energy", f"{facts['homes']:,}")
    f3.metric("Car miles avoided", f"{facts['miles_driven']:,}",
              delta=f"{facts['earth_circumnavigations']:,} trips around the Earth", delta_color="off")
    f4.metric("Arctic sea ice preserved (m²)", f"{facts['sea_ice_melt_m2']:,}")

    edf = df.melt(id_vars="year", value_vars=["base_ets_co2e_t", "wind_ets_co2e_t"],
                  var_name="scenario", value_name="tCO2e")
    fig_em = px.bar(edf, x="year", y="tCO2e", color="scenario", barmode="group",
                    title="EU ETS liable emissions (tCO2e)")
    st.plotly_chart(fig_em, use_container_width=True)
