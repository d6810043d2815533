"""Base protocol for withholding procedures."""

from __future__ import annotations

from typing import Protocol

from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.base import IntermediateCalc


class WithholdingProcedure(Protocol):
    """Protocol for turning a taxable base into the month's withholding."""

    number: int

    def withholding(
        self,
        current: IntermediateCalc,
        inputs: TaxInputs,
        constants: TaxConstants,
    ) -> tuple[float, float]:
        """Compute the withholding for the current month.

        Args:
            current: Base computed from the current month's income.
            inputs: The caller's inputs (rate override, historical income).
            constants: Fiscal-year values.

        Returns:
            ``(withholding_uvt, effective_rate_percent)``. Procedures without
            a flat rate report 0 as the effective rate.
        """
        ...
