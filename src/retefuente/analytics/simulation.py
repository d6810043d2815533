"""Month-by-month projection of both procedures over a year."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import numpy as np

from retefuente.config.defaults import default_constants
from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.engine import calculate_tax, run_procedure
from retefuente.taxes.fixed_rate import FixedRateProcedure
from retefuente.taxes.table import TableProcedure

logger = logging.getLogger(__name__)

MONTH_LABELS: tuple[str, ...] = (
    "Ene",
    "Feb",
    "Mar",
    "Abr",
    "May",
    "Jun",
    "Jul",
    "Ago",
    "Sep",
    "Oct",
    "Nov",
    "Dic",
)

# Yearly differences (COP) below this are reported as a tie.
TIE_TOLERANCE: float = 1000.0

Winner = Literal["PROCEDURE_1", "PROCEDURE_2", "EQUAL"]


@dataclass(frozen=True)
class MonthlyRow:
    """One month of the projection."""

    month: str
    income: float
    p1_retention: float
    p2_retention: float
    p1_net: float
    p2_net: float
    diff: float  # p1_retention - p2_retention


@dataclass(frozen=True)
class StabilityAnalysis:
    """Month-to-month volatility of net income under each procedure."""

    std_dev_p1: float
    std_dev_p2: float
    winner: Winner  # lower volatility
    percent_difference: float


@dataclass(frozen=True)
class YearSimulation:
    """Twelve-month projection with totals and the cheaper/steadier option."""

    fixed_rate: float
    months: list[MonthlyRow]
    total_p1: float
    total_p2: float
    total_diff: float
    cheapest: Winner
    stability: StabilityAnalysis


def monthly_incomes(inputs: TaxInputs) -> list[float]:
    """Incomes to project: ``simulation_monthlies`` or 12 x the salary."""
    if inputs.simulation_monthlies is not None:
        return list(inputs.simulation_monthlies)
    return [inputs.monthly_salary] * len(MONTH_LABELS)


def stability_analysis(p1_net: list[float], p2_net: list[float]) -> StabilityAnalysis:
    """Compare the population standard deviation of monthly net income."""
    std1 = float(np.std(np.asarray(p1_net, dtype=float)))
    std2 = float(np.std(np.asarray(p2_net, dtype=float)))

    if abs(std1 - std2) < TIE_TOLERANCE:
        return StabilityAnalysis(
            std_dev_p1=std1, std_dev_p2=std2, winner="EQUAL", percent_difference=0.0
        )
    winner: Winner = "PROCEDURE_1" if std1 < std2 else "PROCEDURE_2"
    return StabilityAnalysis(
        std_dev_p1=std1,
        std_dev_p2=std2,
        winner=winner,
        percent_difference=abs(std1 - std2) / max(std1, std2) * 100.0,
    )


def simulate_year(
    inputs: TaxInputs,
    fixed_rate: float | None = None,
    constants: TaxConstants | None = None,
) -> YearSimulation:
    """Project Procedure 1 and Procedure 2 withholding month by month.

    Each month is computed with that month's income as the salary and no
    other income. Procedure 2 holds ``fixed_rate`` (percent) for the whole
    year; when omitted it is the effective rate ``calculate_tax(inputs, 2)``
    derives for the current inputs.

    Args:
        inputs: Base inputs; deductions and flags apply to every month.
        fixed_rate: Procedure 2 rate in percent.
        constants: Fiscal-year values. Defaults to the packaged 2026 table.

    Returns:
        YearSimulation with per-month rows, totals and the two comparisons.
    """
    if constants is None:
        constants = default_constants()
    if fixed_rate is None:
        fixed_rate = calculate_tax(inputs, 2, constants).effective_rate

    table = TableProcedure()
    flat = FixedRateProcedure(rate=fixed_rate)

    rows: list[MonthlyRow] = []
    for label, income in zip(MONTH_LABELS, monthly_incomes(inputs), strict=True):
        month_inputs = inputs.model_copy(update={"monthly_salary": income, "other_income": 0.0})
        p1 = run_procedure(month_inputs, table, constants)
        p2 = run_procedure(month_inputs, flat, constants)
        rows.append(
            MonthlyRow(
                month=label,
                income=income,
                p1_retention=p1.retention_cop,
                p2_retention=p2.retention_cop,
                p1_net=p1.net_income,
                p2_net=p2.net_income,
                diff=p1.retention_cop - p2.retention_cop,
            )
        )

    total_p1 = sum(r.p1_retention for r in rows)
    total_p2 = sum(r.p2_retention for r in rows)
    total_diff = sum(r.diff for r in rows)

    if abs(total_diff) < TIE_TOLERANCE:
        cheapest: Winner = "EQUAL"
    elif total_diff > 0:
        cheapest = "PROCEDURE_2"
    else:
        cheapest = "PROCEDURE_1"

    logger.info(
        "Year projection at %.2f%%: P1=%.0f COP P2=%.0f COP cheapest=%s",
        fixed_rate,
        total_p1,
        total_p2,
        cheapest,
    )

    return YearSimulation(
        fixed_rate=fixed_rate,
        months=rows,
        total_p1=total_p1,
        total_p2=total_p2,
        total_diff=total_diff,
        cheapest=cheapest,
        stability=stability_analysis([r.p1_net for r in rows], [r.p2_net for r in rows]),
    )
