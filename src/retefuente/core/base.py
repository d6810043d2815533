"""Taxable base computation for one monthly income figure."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from retefuente.config.schema import SocialSecurityRules, TaxBracket, TaxConstants, TaxInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IntermediateCalc:
    """Breakdown of one taxable-base computation.

    All monetary attributes are COP and non-negative.

    Attributes:
        gross_income: Income the base was computed from.
        ibc: Contribution base after the integral-salary factor and cap.
        solidarity_rate: Solidarity-fund rate applied to the IBC.
        contributions: Health + pension + solidarity fund.
        net_income: Gross income minus contributions.
        total_deductions: Sum of the individually capped deductions.
        exempt_income: 25% labor exemption after its monthly cap.
        global_limit: Ceiling on deductions + exemption for this income.
        allowed_deductions: Deductions + exemption actually subtracted.
        base_cop: Taxable base in COP.
        base_uvt: Taxable base in UVT.
        table_retention_uvt: Bracket-table withholding on ``base_uvt``.
    """

    gross_income: float
    ibc: float
    solidarity_rate: float
    contributions: float
    net_income: float
    total_deductions: float
    exempt_income: float
    global_limit: float
    allowed_deductions: float
    base_cop: float
    base_uvt: float
    table_retention_uvt: float

    @property
    def implied_rate(self) -> float:
        """Table withholding as a percentage of the base (0 for a zero base)."""
        if self.base_uvt <= 0:
            return 0.0
        return self.table_retention_uvt / self.base_uvt * 100.0


def solidarity_rate(ibc: float, smmlv: float, rules: SocialSecurityRules) -> float:
    """Solidarity-fund rate for an IBC, from the step schedule in SMMLV multiples."""
    rate = 0.0
    for threshold, step_rate in rules.solidarity_schedule:
        if ibc >= threshold * smmlv:
            rate = step_rate
        else:
            break
    return rate


def find_bracket(base_uvt: float, brackets: list[TaxBracket]) -> TaxBracket | None:
    """Return the bracket whose half-open range contains ``base_uvt``."""
    for bracket in brackets:
        if bracket.contains(base_uvt):
            return bracket
    return None


def table_retention(base_uvt: float, brackets: list[TaxBracket]) -> float:
    """Withholding in UVT from the bracket table; 0 when no bracket matches."""
    bracket = find_bracket(base_uvt, brackets)
    if bracket is None:
        return 0.0
    return bracket.tax(base_uvt)


def compute_base(income: float, inputs: TaxInputs, constants: TaxConstants) -> IntermediateCalc:
    """Compute the taxable base for ``income`` with the deductions in ``inputs``.

    The same function serves the current month and the historical reference
    month of Procedure 2. It never raises: negative figures are floored at
    zero before use.

    Args:
        income: Gross monthly income in COP.
        inputs: Deduction figures and flags; its income fields are ignored.
        constants: Fiscal-year values.

    Returns:
        IntermediateCalc with every stage of the computation.
    """
    uvt = constants.uvt
    smmlv = constants.smmlv
    limits = constants.limits
    ss = constants.social_security

    gross = max(income, 0.0) if math.isfinite(income) else 0.0

    # Mandatory contributions (ingresos no constitutivos de renta)
    ibc = gross * ss.integral_salary_factor if inputs.is_salario_integral else gross
    ibc = min(ibc, ss.ibc_cap_smmlv * smmlv)
    fsp_rate = solidarity_rate(ibc, smmlv, ss)
    health = ibc * ss.health_rate
    pension = ibc * ss.pension_rate
    contributions = health + pension + ibc * fsp_rate
    net = max(gross - contributions, 0.0)

    # Deductions, each with its own cap
    housing = min(max(inputs.housing_interest, 0.0), limits.housing_interest_uvt * uvt)
    medicine = min(max(inputs.prepaid_medicine, 0.0), limits.prepaid_medicine_uvt * uvt)
    dependents = 0.0
    if inputs.has_dependents:
        dependents = min(gross * limits.dependents_rate, limits.dependents_uvt * uvt)
    voluntary = min(
        max(inputs.voluntary_pension, 0.0) + max(inputs.afc_contribution, 0.0),
        gross * limits.voluntary_contribution_rate,
    )
    total_deductions = housing + medicine + dependents + voluntary

    # 25% exempt labor income, computed after deductions
    exempt = max(net - total_deductions, 0.0) * limits.exempt_income_rate
    exempt = min(exempt, limits.exempt_income_cap_uvt_annual * uvt / 12)

    # Global 40% limit on deductions + exemption
    global_limit = min(net * limits.global_limit_rate, limits.global_limit_cap_uvt_annual * uvt / 12)
    allowed = min(total_deductions + exempt, global_limit)

    base_cop = max(net - allowed, 0.0)
    base_uvt = base_cop / uvt
    retention_uvt = table_retention(base_uvt, constants.brackets)

    logger.debug(
        "compute_base income=%.0f ibc=%.0f contributions=%.0f deductions=%.0f "
        "exempt=%.0f limit=%.0f base_uvt=%.4f retention_uvt=%.4f",
        gross,
        ibc,
        contributions,
        total_deductions,
        exempt,
        global_limit,
        base_uvt,
        retention_uvt,
    )

    return IntermediateCalc(
        gross_income=gross,
        ibc=ibc,
        solidarity_rate=fsp_rate,
        contributions=contributions,
        net_income=net,
        total_deductions=total_deductions,
        exempt_income=exempt,
        global_limit=global_limit,
        allowed_deductions=allowed,
        base_cop=base_cop,
        base_uvt=base_uvt,
        table_retention_uvt=retention_uvt,
    )
