"""Procedure 1: progressive bracket table recomputed every month."""

from __future__ import annotations

from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.base import IntermediateCalc


class TableProcedure:
    """Withholding straight from the Art. 383 table on the month's own base."""

    number = 1

    def withholding(
        self,
        current: IntermediateCalc,
        inputs: TaxInputs,
        constants: TaxConstants,
    ) -> tuple[float, float]:
        """Table withholding; the effective rate is not meaningful here."""
        return current.table_retention_uvt, 0.0
