"""Procedure 2: fixed semester rate applied to the month's base."""

from __future__ import annotations

import logging
from collections.abc import Callable

from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.base import IntermediateCalc, compute_base

logger = logging.getLogger(__name__)

RateRule = Callable[[IntermediateCalc, TaxInputs, TaxConstants], float | None]


def _manual_rate(
    current: IntermediateCalc, inputs: TaxInputs, constants: TaxConstants
) -> float | None:
    if inputs.procedure2_rate > 0:
        return inputs.procedure2_rate
    return None


def _historical_rate(
    current: IntermediateCalc, inputs: TaxInputs, constants: TaxConstants
) -> float | None:
    if inputs.historical_monthly_income > 0:
        # Same deductions as today, applied to the reference-period income
        historical = compute_base(inputs.historical_monthly_income, inputs, constants)
        return historical.implied_rate
    return None


def _current_rate(
    current: IntermediateCalc, inputs: TaxInputs, constants: TaxConstants
) -> float | None:
    return current.implied_rate


# Evaluated in order; the first rule returning a rate wins.
RATE_RULES: tuple[tuple[str, RateRule], ...] = (
    ("manual", _manual_rate),
    ("historical", _historical_rate),
    ("current", _current_rate),
)


def derive_rate(
    current: IntermediateCalc, inputs: TaxInputs, constants: TaxConstants
) -> tuple[str, float]:
    """Pick the Procedure 2 rate (percent) and the name of the rule that set it."""
    for name, rule in RATE_RULES:
        rate = rule(current, inputs, constants)
        if rate is not None:
            logger.debug("Procedure 2 rate %.4f%% from %s rule", rate, name)
            return name, rate
    return "none", 0.0


class FixedRateProcedure:
    """Flat percentage of the current base.

    With ``rate=None`` the percentage is derived from ``RATE_RULES``; an
    explicit ``rate`` (percent) is applied as given, as when a semester's
    rate is already known.
    """

    number = 2

    def __init__(self, rate: float | None = None) -> None:
        self._rate = rate

    def rate(self, current: IntermediateCalc, inputs: TaxInputs, constants: TaxConstants) -> float:
        """Percentage applied to the current base."""
        if self._rate is not None:
            return max(self._rate, 0.0)
        return derive_rate(current, inputs, constants)[1]

    def withholding(
        self,
        current: IntermediateCalc,
        inputs: TaxInputs,
        constants: TaxConstants,
    ) -> tuple[float, float]:
        """Current base in UVT times the fixed rate."""
        rate = self.rate(current, inputs, constants)
        return current.base_uvt * (rate / 100.0), rate
