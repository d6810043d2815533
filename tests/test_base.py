"""Tests for the taxable base computation."""

from __future__ import annotations

import pytest

from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.base import compute_base, find_bracket, solidarity_rate, table_retention

UVT = 52_374
SMMLV = 1_500_000


class TestContributions:
    def test_zero_income(self, constants: TaxConstants) -> None:
        calc = compute_base(0, TaxInputs(), constants)
        assert calc.contributions == 0.0
        assert calc.base_cop == 0.0
        assert calc.table_retention_uvt == 0.0

    def test_ordinary_salary(self, constants: TaxConstants) -> None:
        """15M = 10 SMMLV: 4% + 4% + 1% solidarity."""
        calc = compute_base(15_000_000, TaxInputs(), constants)
        assert calc.ibc == 15_000_000
        assert calc.solidarity_rate == pytest.approx(0.01)
        assert calc.contributions == pytest.approx(1_350_000)
        assert calc.net_income == pytest.approx(13_650_000)

    def test_ibc_capped_at_25_smmlv(self, constants: TaxConstants) -> None:
        calc = compute_base(100_000_000, TaxInputs(), constants)
        assert calc.ibc == pytest.approx(25 * SMMLV)
        assert calc.solidarity_rate == pytest.approx(0.02)
        assert calc.contributions == pytest.approx(37_500_000 * 0.10)

    def test_integral_salary_uses_70_percent(self, constants: TaxConstants) -> None:
        """30M integral -> IBC 21M = 14 SMMLV, 1% solidarity."""
        calc = compute_base(30_000_000, TaxInputs(is_salario_integral=True), constants)
        assert calc.ibc == pytest.approx(21_000_000)
        assert calc.solidarity_rate == pytest.approx(0.01)
        assert calc.contributions == pytest.approx(1_890_000)

    def test_below_four_smmlv_no_solidarity(self, constants: TaxConstants) -> None:
        calc = compute_base(5_900_000, TaxInputs(), constants)
        assert calc.solidarity_rate == 0.0
        assert calc.contributions == pytest.approx(5_900_000 * 0.08)


class TestSolidaritySchedule:
    @pytest.mark.parametrize(
        ("ibc_smmlv", "expected"),
        [
            (0, 0.0),
            (3.99, 0.0),
            (4, 0.010),
            (10, 0.010),
            (15.99, 0.010),
            (16, 0.012),
            (17, 0.014),
            (18, 0.016),
            (19, 0.018),
            (19.99, 0.018),
            (20, 0.020),
            (25, 0.020),
        ],
    )
    def test_step_function(
        self, constants: TaxConstants, ibc_smmlv: float, expected: float
    ) -> None:
        rate = solidarity_rate(ibc_smmlv * SMMLV, SMMLV, constants.social_security)
        assert rate == pytest.approx(expected)


class TestDeductions:
    def test_housing_capped_at_100_uvt(self, constants: TaxConstants) -> None:
        calc = compute_base(20_000_000, TaxInputs(housing_interest=10_000_000), constants)
        assert calc.total_deductions == pytest.approx(100 * UVT)

    def test_housing_below_cap(self, constants: TaxConstants) -> None:
        calc = compute_base(20_000_000, TaxInputs(housing_interest=1_000_000), constants)
        assert calc.total_deductions == pytest.approx(1_000_000)

    def test_prepaid_medicine_capped_at_16_uvt(self, constants: TaxConstants) -> None:
        calc = compute_base(20_000_000, TaxInputs(prepaid_medicine=2_000_000), constants)
        assert calc.total_deductions == pytest.approx(16 * UVT)

    def test_dependents_ten_percent(self, constants: TaxConstants) -> None:
        calc = compute_base(10_000_000, TaxInputs(has_dependents=True), constants)
        assert calc.total_deductions == pytest.approx(1_000_000)

    def test_dependents_capped_at_32_uvt(self, constants: TaxConstants) -> None:
        calc = compute_base(20_000_000, TaxInputs(has_dependents=True), constants)
        assert calc.total_deductions == pytest.approx(32 * UVT)

    def test_dependents_require_flag(self, constants: TaxConstants) -> None:
        calc = compute_base(20_000_000, TaxInputs(has_dependents=False), constants)
        assert calc.total_deductions == 0.0

    def test_voluntary_and_afc_share_30_percent_cap(self, constants: TaxConstants) -> None:
        inputs = TaxInputs(voluntary_pension=2_000_000, afc_contribution=2_000_000)
        calc = compute_base(10_000_000, inputs, constants)
        assert calc.total_deductions == pytest.approx(3_000_000)


class TestExemptionAndGlobalLimit:
    def test_worked_example_15m(self, constants: TaxConstants) -> None:
        calc = compute_base(15_000_000, TaxInputs(), constants)
        assert calc.exempt_income == pytest.approx(3_412_500)
        assert calc.global_limit == pytest.approx(5_460_000)
        assert calc.allowed_deductions == pytest.approx(3_412_500)
        assert calc.base_cop == pytest.approx(10_237_500)
        assert calc.base_uvt == pytest.approx(10_237_500 / UVT)
        # bracket [150, 360): 28%, +10 UVT
        expected_uvt = (10_237_500 / UVT - 150) * 0.28 + 10
        assert calc.table_retention_uvt == pytest.approx(expected_uvt)
        assert calc.table_retention_uvt * UVT == pytest.approx(1_190_532, abs=1)

    def test_exempt_income_capped_monthly(self, constants: TaxConstants) -> None:
        calc = compute_base(60_000_000, TaxInputs(), constants)
        assert calc.exempt_income == pytest.approx(790 * UVT / 12)

    def test_global_limit_binds(self, constants: TaxConstants) -> None:
        """10M salary, 5M housing, 3M voluntary: deductions exceed 40% of net."""
        inputs = TaxInputs(housing_interest=5_000_000, voluntary_pension=3_000_000)
        calc = compute_base(10_000_000, inputs, constants)
        assert calc.net_income == pytest.approx(9_100_000)
        assert calc.total_deductions == pytest.approx(8_000_000)
        assert calc.exempt_income == pytest.approx(275_000)
        assert calc.global_limit == pytest.approx(3_640_000)
        assert calc.allowed_deductions == pytest.approx(3_640_000)
        assert calc.base_cop == pytest.approx(5_460_000)

    def test_absolute_global_cap(self, constants: TaxConstants) -> None:
        calc = compute_base(60_000_000, TaxInputs(housing_interest=5_000_000), constants)
        assert calc.global_limit == pytest.approx(1340 * UVT / 12)

    def test_exemption_zero_when_deductions_exceed_net(self, constants: TaxConstants) -> None:
        inputs = TaxInputs(
            housing_interest=5_000_000,
            voluntary_pension=3_000_000,
            has_dependents=True,
            prepaid_medicine=800_000,
        )
        calc = compute_base(4_000_000, inputs, constants)
        assert calc.exempt_income == 0.0
        assert calc.base_cop >= 0.0

    @pytest.mark.parametrize("income", [0, 1_000_000, 4_000_000, 9_000_000, 25_000_000, 80_000_000])
    @pytest.mark.parametrize("deduction", [0, 500_000, 3_000_000, 50_000_000])
    def test_invariants_hold(
        self, constants: TaxConstants, income: float, deduction: float
    ) -> None:
        inputs = TaxInputs(
            housing_interest=deduction,
            prepaid_medicine=deduction,
            voluntary_pension=deduction,
            afc_contribution=deduction,
            has_dependents=True,
            is_salario_integral=income > 20_000_000,
        )
        calc = compute_base(income, inputs, constants)
        cap = min(calc.net_income * 0.40, 1340 * UVT / 12)
        assert calc.allowed_deductions <= cap + 1e-6
        assert calc.base_cop >= 0.0
        assert calc.base_uvt >= 0.0
        assert calc.table_retention_uvt >= 0.0

    def test_negative_income_floored(self, constants: TaxConstants) -> None:
        calc = compute_base(-5_000_000, TaxInputs(), constants)
        assert calc.gross_income == 0.0
        assert calc.base_cop == 0.0


class TestBracketTable:
    @pytest.mark.parametrize(
        ("base_uvt", "expected"),
        [
            (0, 0.0),
            (94.99, 0.0),
            (95, 0.0),
            (100, 5 * 0.19),
            (150, 10.0),
            (360, 69.0),
            (640, 162.0),
            (945, 268.0),
            (3000, 700 * 0.39 + 770),
        ],
    )
    def test_table_retention(
        self, constants: TaxConstants, base_uvt: float, expected: float
    ) -> None:
        assert table_retention(base_uvt, constants.brackets) == pytest.approx(expected)

    def test_half_open_ranges(self, constants: TaxConstants) -> None:
        bracket = find_bracket(150, constants.brackets)
        assert bracket is not None
        assert bracket.lower == 150
        assert bracket.rate == pytest.approx(0.28)

    def test_no_bracket_for_negative_base(self, constants: TaxConstants) -> None:
        assert find_bracket(-1, constants.brackets) is None
        assert table_retention(-1, constants.brackets) == 0.0

    def test_implied_rate_zero_base(self, constants: TaxConstants) -> None:
        assert compute_base(0, TaxInputs(), constants).implied_rate == 0.0
