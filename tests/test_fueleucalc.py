import pytest

from windcase.config import FUELEU_PENALTY_EUR_PER_TONNE_VLSFO_EQ, FUELEU_PENALTY_MJ_PER_TONNE_VLSFO_EQ
from windcase.fueleucalc import (
    ComplianceState,
    EngineLoad,
    ShipConfiguration,
    UNRESOLVED_INTENSITY,
    compliance_step,
    compute_intensity,
    walk_compliance,
    wind_reward_factor,
)

def test_intensity_is_energy_weighted_wtw(ship, fuels):
    res = compute_intensity(ship, fuels)

    main_mj = 5000 * 1e6 * 0.0405
    aux_mj = 200 * 1e6 * 0.0427
    assert res.resolved
    assert res.energy_mj == pytest.approx(main_mj + aux_mj)
    assert res.ghg_intensity == pytest.approx((main_mj * 91.74 + aux_mj * 90.77) / (main_mj + aux_mj))
    assert res.main is fuels["HFO"]
    assert res.aux is fuels["MDO"]

def test_intensity_single_fuel_equals_fuel_wtw(fuels):
    cfg = ShipConfiguration("x", EngineLoad("B100", 1000.0), EngineLoad("B100", 50.0))
    assert compute_intensity(cfg, fuels).ghg_intensity == pytest.approx(20.80)

@pytest.mark.parametrize("main, aux", [("LNG", "MDO"), ("HFO", "unknown"), ("bio-something", "MDO")])
def test_unresolved_fuel_degrades(fuels, main, aux):
    cfg = ShipConfiguration("x", EngineLoad(main, 100.0), EngineLoad(aux, 10.0))
    res = compute_intensity(cfg, fuels)
    assert res == UNRESOLVED_INTENSITY
    assert not res.resolved
    assert (res.ghg_intensity, res.energy_mj, res.main, res.aux) == (0.0, 0.0, None, None)

def test_wind_savings_only_scale_main_engine(ship):
    wind = ship.with_wind_savings(0.2)
    assert wind.main.consumption_t == pytest.approx(4000.0)
    assert wind.aux.consumption_t == 200.0
    assert ship.main.consumption_t == 5000.0

@pytest.mark.parametrize("fraction, factor", [
    (0.0, 1.0), (0.049, 1.0), (0.05, 0.99), (0.07, 0.99), (0.10, 0.97),
    (0.12, 0.97), (0.15, 0.95), (0.20, 0.95), (1.0, 0.95),
])
def test_wind_reward_steps(fraction, factor):
    assert wind_reward_factor(fraction) == factor

def test_wind_reward_non_increasing():
    grid = [i / 100 for i in range(101)]
    factors = [wind_reward_factor(x) for x in grid]
    assert all(a >= b for a, b in zip(factors, factors[1:]))

def test_compliant_year_has_no_penalty():
    state, row = compliance_step(ComplianceState(3), 2026, 89.3368, 85.0, 1e9, 0.5)
    assert state.consecutive_years == 0
    assert row.multiplier == 1.0
    assert row.penalty_eur == 0.0
    assert row.compliance_balance_g > 0
    assert row.deficit == pytest.approx(85.0 - 89.3368)

def test_penalty_formula_first_deficit_year():
    state, row = compliance_step(ComplianceState(), 2030, 80.0, 90.0, 1e9, 0.5)
    balance = (80.0 - 90.0) * 1e9 * 0.5
    assert state.consecutive_years == 1
    assert row.compliance_balance_g == pytest.approx(balance)
    assert row.multiplier == 1.0
    assert row.penalty_eur == pytest.approx(
        abs(balance) / (90.0 * FUELEU_PENALTY_MJ_PER_TONNE_VLSFO_EQ) * FUELEU_PENALTY_EUR_PER_TONNE_VLSFO_EQ
    )

def test_zero_exposure_is_compliant():
    state, row = compliance_step(ComplianceState(2), 2030, 80.0, 90.0, 1e9, 0.0)
    assert row.penalty_eur == 0.0
    assert state.consecutive_years == 0

def test_multiplier_escalates_and_resets():
    targets = [(2030, 80.0), (2031, 80.0), (2032, 80.0), (2033, 95.0), (2034, 80.0)]
    rows = walk_compliance(targets, 90.0, 1e9, 1.0)

    assert [r.year for r in rows] == [2030, 2031, 2032, 2033, 2034]
    assert [r.multiplier for r in rows] == pytest.approx([1.0, 1.1, 1.2, 1.0, 1.0])
    assert rows[3].penalty_eur == 0.0
    assert rows[1].penalty_eur == pytest.approx(rows[0].penalty_eur * 1.1)
    assert rows[2].penalty_eur == pytest.approx(rows[0].penalty_eur * 1.2)
    assert rows[4].penalty_eur == pytest.approx(rows[0].penalty_eur)

def test_walk_is_ordered_and_restarts_each_call():
    targets = [(2032, 80.0), (2030, 80.0), (2031, 80.0)]
    first = walk_compliance(targets, 90.0, 1e9, 1.0)
    second = walk_compliance(targets, 90.0, 1e9, 1.0)
    assert [r.year for r in first] == [2030, 2031, 2032]
    assert first == second

def test_multiplier_monotone_over_streak():
    rows = walk_compliance([(y, 50.0) for y in range(2025, 2036)], 90.0, 1e8, 1.0)
    multipliers = [r.multiplier for r in rows]
    assert all(a <= b for a, b in zip(multipliers, multipliers[1:]))
    assert multipliers[-1] == pytest.approx(2.0)

def test_zero_consumption_with_known_fuels(fuels):
    cfg = ShipConfiguration("idle", EngineLoad("HFO", 0.0), EngineLoad("MDO", 0.0))
    res = compute_intensity(cfg, fuels)
    assert res.resolved
    assert res.ghg_intensity == 0.0
    assert res.energy_mj == 0.0
    assert res.main is fuels["HFO"]
    assert res.aux is fuels["MDO"]
