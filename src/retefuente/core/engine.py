"""Withholding engine: procedure selection and result assembly."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from retefuente.config.defaults import default_constants
from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.base import IntermediateCalc, compute_base
from retefuente.taxes.base import WithholdingProcedure
from retefuente.taxes.fixed_rate import FixedRateProcedure
from retefuente.taxes.table import TableProcedure

logger = logging.getLogger(__name__)

Recommendation = Literal["PROCEDURE_1", "PROCEDURE_2", "EQUAL"]

# Withholding differences at or below this many COP count as a tie.
RECOMMENDATION_TOLERANCE: float = 100.0


@dataclass(frozen=True)
class TaxDetails:
    """Current-month breakdown shown alongside a result."""

    gross_income: float
    contributions: float  # health + pension + solidarity fund
    total_deductions: float
    exempt_income: float
    global_limit: float
    final_base: float


@dataclass(frozen=True)
class TaxResult:
    """Withholding for one month under one procedure."""

    procedure: int
    base_uvt: float
    base_cop: float
    retention_uvt: float
    retention_cop: float
    net_income: float
    effective_rate: float  # percent; 0 for Procedure 1
    details: TaxDetails


@dataclass(frozen=True)
class ComparisonResult:
    """Both procedures side by side for the same inputs."""

    procedure1: TaxResult
    procedure2: TaxResult
    recommendation: Recommendation
    difference: float  # absolute COP difference in withholding


def get_procedure(procedure_type: int) -> WithholdingProcedure:
    """Return the procedure implementation for ``procedure_type`` (1 or 2)."""
    if procedure_type == 1:
        return TableProcedure()
    if procedure_type == 2:
        return FixedRateProcedure()
    raise ValueError(f"procedure_type must be 1 or 2, got {procedure_type!r}")


def _details(current: IntermediateCalc) -> TaxDetails:
    return TaxDetails(
        gross_income=current.gross_income,
        contributions=current.contributions,
        total_deductions=current.total_deductions,
        exempt_income=current.exempt_income,
        global_limit=current.global_limit,
        final_base=current.base_cop,
    )


def run_procedure(
    inputs: TaxInputs,
    procedure: WithholdingProcedure,
    constants: TaxConstants | None = None,
) -> TaxResult:
    """Compute the current month's withholding with a procedure instance.

    Args:
        inputs: Income, deductions and Procedure 2 settings.
        procedure: ``TableProcedure`` or ``FixedRateProcedure`` (or any
            ``WithholdingProcedure``).
        constants: Fiscal-year values. Defaults to the packaged 2026 table.

    Returns:
        TaxResult whose details describe the current month.
    """
    if constants is None:
        constants = default_constants()

    gross = inputs.gross_income
    current = compute_base(gross, inputs, constants)
    retention_uvt, rate = procedure.withholding(current, inputs, constants)
    retention_cop = retention_uvt * constants.uvt

    logger.debug(
        "Procedure %d: base_uvt=%.4f retention_uvt=%.4f rate=%.4f%%",
        procedure.number,
        current.base_uvt,
        retention_uvt,
        rate,
    )

    return TaxResult(
        procedure=procedure.number,
        base_uvt=current.base_uvt,
        base_cop=current.base_cop,
        retention_uvt=retention_uvt,
        retention_cop=retention_cop,
        net_income=gross - current.contributions - retention_cop,
        effective_rate=rate,
        details=_details(current),
    )


def calculate_tax(
    inputs: TaxInputs,
    procedure_type: int,
    constants: TaxConstants | None = None,
) -> TaxResult:
    """Compute withholding under Procedure 1 or Procedure 2.

    Procedure 1 applies the bracket table to the month's base. Procedure 2
    applies a flat rate: the manual ``procedure2_rate`` if set, else the
    rate implied by ``historical_monthly_income``, else the rate implied by
    the current month.

    Raises:
        ValueError: If ``procedure_type`` is not 1 or 2.
    """
    return run_procedure(inputs, get_procedure(procedure_type), constants)


def recommend(procedure1: TaxResult, procedure2: TaxResult) -> tuple[Recommendation, float]:
    """Pick the procedure that withholds less, and by how much (COP)."""
    diff = procedure1.retention_cop - procedure2.retention_cop
    if diff < -RECOMMENDATION_TOLERANCE:
        recommendation: Recommendation = "PROCEDURE_1"
    elif diff > RECOMMENDATION_TOLERANCE:
        recommendation = "PROCEDURE_2"
    else:
        recommendation = "EQUAL"
    return recommendation, abs(diff)


def compare_procedures(
    inputs: TaxInputs,
    constants: TaxConstants | None = None,
) -> ComparisonResult:
    """Run both procedures on the same inputs and recommend the cheaper one."""
    if constants is None:
        constants = default_constants()
    p1 = calculate_tax(inputs, 1, constants)
    p2 = calculate_tax(inputs, 2, constants)
    recommendation, difference = recommend(p1, p2)
    logger.info(
        "Comparison: P1=%.0f COP P2=%.0f COP -> %s",
        p1.retention_cop,
        p2.retention_cop,
        recommendation,
    )
    return ComparisonResult(
        procedure1=p1,
        procedure2=p2,
        recommendation=recommendation,
        difference=difference,
    )
