"""Tests for the month-by-month projection."""

from __future__ import annotations

import pytest

from retefuente.analytics.simulation import (
    MONTH_LABELS,
    monthly_incomes,
    simulate_year,
    stability_analysis,
)
from retefuente.config.defaults import DEMO_MONTHLY_INCOMES, demo_inputs
from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.engine import calculate_tax


class TestMonthlyIncomes:
    def test_repeats_salary(self, salary_15m: TaxInputs) -> None:
        assert monthly_incomes(salary_15m) == [15_000_000] * 12

    def test_uses_preloaded_monthlies(self) -> None:
        assert monthly_incomes(demo_inputs()) == DEMO_MONTHLY_INCOMES


class TestSimulateYear:
    def test_twelve_labelled_months(self, constants: TaxConstants, salary_15m: TaxInputs) -> None:
        sim = simulate_year(salary_15m, constants=constants)
        assert [row.month for row in sim.months] == list(MONTH_LABELS)
        assert all(row.income == 15_000_000 for row in sim.months)

    def test_flat_salary_is_a_tie(self, constants: TaxConstants, salary_15m: TaxInputs) -> None:
        """With no history the fixed rate reproduces Procedure 1 every month."""
        sim = simulate_year(salary_15m, constants=constants)
        assert sim.total_p1 == pytest.approx(sim.total_p2)
        assert sim.cheapest == "EQUAL"
        assert sim.stability.winner == "EQUAL"
        assert sim.stability.std_dev_p1 == pytest.approx(0.0, abs=1e-6)

    def test_rows_match_engine(self, constants: TaxConstants) -> None:
        inputs = demo_inputs()
        sim = simulate_year(inputs, fixed_rate=8.0, constants=constants)
        feb = sim.months[1]
        feb_inputs = inputs.model_copy(update={"monthly_salary": 25_000_000, "other_income": 0.0})
        assert feb.income == 25_000_000
        p1 = calculate_tax(feb_inputs, 1, constants)
        assert feb.p1_retention == pytest.approx(p1.retention_cop)
        p2 = calculate_tax(feb_inputs.model_copy(update={"procedure2_rate": 8.0}), 2, constants)
        assert feb.p2_retention == pytest.approx(p2.retention_cop)
        assert feb.p2_net == pytest.approx(p2.net_income)

    def test_default_rate_from_procedure_2(self, constants: TaxConstants) -> None:
        inputs = demo_inputs()
        sim = simulate_year(inputs, constants=constants)
        assert sim.fixed_rate == pytest.approx(calculate_tax(inputs, 2, constants).effective_rate)

    def test_totals(self, constants: TaxConstants) -> None:
        sim = simulate_year(demo_inputs(), constants=constants)
        assert sim.total_p1 == pytest.approx(sum(r.p1_retention for r in sim.months))
        assert sim.total_p2 == pytest.approx(sum(r.p2_retention for r in sim.months))
        assert sim.total_diff == pytest.approx(sim.total_p1 - sim.total_p2)
        for row in sim.months:
            assert row.diff == pytest.approx(row.p1_retention - row.p2_retention)

    def test_zero_rate_favors_procedure_2(
        self, constants: TaxConstants, salary_15m: TaxInputs
    ) -> None:
        sim = simulate_year(salary_15m, fixed_rate=0.0, constants=constants)
        assert sim.total_p2 == 0.0
        assert sim.cheapest == "PROCEDURE_2"

    def test_high_rate_favors_procedure_1(
        self, constants: TaxConstants, salary_15m: TaxInputs
    ) -> None:
        sim = simulate_year(salary_15m, fixed_rate=30.0, constants=constants)
        assert sim.cheapest == "PROCEDURE_1"

    def test_months_are_independent(self, constants: TaxConstants) -> None:
        inputs = demo_inputs()
        first = simulate_year(inputs, constants=constants)
        second = simulate_year(inputs, constants=constants)
        assert first == second


class TestStability:
    def test_lower_volatility_wins(self) -> None:
        steady = [10_000_000.0] * 12
        volatile = [9_000_000.0, 11_000_000.0] * 6
        result = stability_analysis(steady, volatile)
        assert result.winner == "PROCEDURE_1"
        assert result.std_dev_p2 == pytest.approx(1_000_000)
        assert result.percent_difference == pytest.approx(100.0)

    def test_procedure_2_can_win(self) -> None:
        result = stability_analysis([8e6, 12e6] * 6, [9e6, 11e6] * 6)
        assert result.winner == "PROCEDURE_2"
        assert result.percent_difference == pytest.approx(50.0)

    def test_small_difference_is_a_tie(self) -> None:
        result = stability_analysis([10_000_000.0, 10_000_400.0] * 6, [10_000_000.0] * 12)
        assert result.winner == "EQUAL"
        assert result.percent_difference == 0.0
