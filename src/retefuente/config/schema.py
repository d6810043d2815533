"""Pydantic v2 models for withholding inputs and fiscal-year constants."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _floor_at_zero(value: Any) -> Any:
    """Treat missing or non-finite amounts as zero and floor negatives at zero."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            return 0.0
        return max(float(value), 0.0)
    return value


class TaxInputs(BaseModel):
    """Monthly income and deduction figures for one employee.

    Amounts are in COP. The model normalises at the boundary: ``None`` and
    negative amounts become zero and ``procedure2_rate`` is clamped to
    ``[0, 100]``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    monthly_salary: float = Field(default=0.0, ge=0, description="Monthly salary")
    other_income: float = Field(
        default=0.0, ge=0, description="Bonuses, commissions and other labor income"
    )
    voluntary_pension: float = Field(default=0.0, ge=0)
    afc_contribution: float = Field(default=0.0, ge=0, description="AFC/AVC account deposits")
    housing_interest: float = Field(default=0.0, ge=0, description="Mortgage interest paid")
    prepaid_medicine: float = Field(default=0.0, ge=0)
    has_dependents: bool = False
    is_salario_integral: bool = Field(
        default=False, description="Integral salary: contributions on 70% of income"
    )
    procedure2_rate: float = Field(
        default=0.0,
        ge=0,
        le=100,
        description="Manual Procedure 2 rate in percent; 0 derives it automatically",
    )
    historical_monthly_income: float = Field(
        default=0.0,
        ge=0,
        description="Average monthly income of the reference period for Procedure 2",
    )
    simulation_monthlies: list[float] | None = Field(
        default=None,
        min_length=12,
        max_length=12,
        description="Twelve monthly incomes for the yearly projection",
    )

    @field_validator(
        "monthly_salary",
        "other_income",
        "voluntary_pension",
        "afc_contribution",
        "housing_interest",
        "prepaid_medicine",
        "historical_monthly_income",
        mode="before",
    )
    @classmethod
    def _normalize_amount(cls, value: Any) -> Any:
        return _floor_at_zero(value)

    @field_validator("procedure2_rate", mode="before")
    @classmethod
    def _normalize_rate(cls, value: Any) -> Any:
        value = _floor_at_zero(value)
        if isinstance(value, float):
            return min(value, 100.0)
        return value

    @field_validator("simulation_monthlies", mode="before")
    @classmethod
    def _normalize_monthlies(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [_floor_at_zero(v) for v in value]
        return value

    @property
    def gross_income(self) -> float:
        """Salary plus other income for the current month."""
        return self.monthly_salary + self.other_income


class TaxBracket(BaseModel):
    """One row of the withholding table, in UVT.

    The range is half-open, ``[lower, upper)``; ``upper=None`` is unbounded.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    lower: float = Field(ge=0)
    upper: float | None = Field(default=None)
    rate: float = Field(ge=0, le=1, description="Marginal rate")
    subtract: float = Field(default=0.0, ge=0, description="Fixed UVT added to the tax")

    @model_validator(mode="after")
    def _validate_range(self) -> TaxBracket:
        if self.upper is not None and self.upper <= self.lower:
            raise ValueError(f"bracket upper ({self.upper}) must exceed lower ({self.lower})")
        return self

    @property
    def upper_bound(self) -> float:
        return math.inf if self.upper is None else self.upper

    def contains(self, base_uvt: float) -> bool:
        return self.lower <= base_uvt < self.upper_bound

    def tax(self, base_uvt: float) -> float:
        """Withholding in UVT for a base inside this bracket."""
        return (base_uvt - self.lower) * self.rate + self.subtract


class DeductionLimits(BaseModel):
    """Statutory caps on deductions, exempt income and the global limit."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    housing_interest_uvt: float = Field(default=100, ge=0, description="Monthly cap")
    prepaid_medicine_uvt: float = Field(default=16, ge=0, description="Monthly cap")
    dependents_uvt: float = Field(default=32, ge=0, description="Monthly cap")
    dependents_rate: float = Field(default=0.10, ge=0, le=1)
    voluntary_contribution_rate: float = Field(
        default=0.30, ge=0, le=1, description="Voluntary pension + AFC cap on gross income"
    )
    exempt_income_rate: float = Field(default=0.25, ge=0, le=1)
    exempt_income_cap_uvt_annual: float = Field(default=790, ge=0)
    global_limit_rate: float = Field(default=0.40, ge=0, le=1)
    global_limit_cap_uvt_annual: float = Field(default=1340, ge=0)


class SocialSecurityRules(BaseModel):
    """Mandatory health, pension and solidarity-fund contribution rules."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    health_rate: float = Field(default=0.04, ge=0, le=1)
    pension_rate: float = Field(default=0.04, ge=0, le=1)
    integral_salary_factor: float = Field(default=0.70, gt=0, le=1)
    ibc_cap_smmlv: float = Field(default=25, gt=0)
    solidarity_schedule: list[tuple[float, float]] = Field(
        default_factory=lambda: [
            (4, 0.010),
            (16, 0.012),
            (17, 0.014),
            (18, 0.016),
            (19, 0.018),
            (20, 0.020),
        ],
        description="(IBC threshold in SMMLV, total rate) steps, ascending",
    )

    @model_validator(mode="after")
    def _validate_schedule(self) -> SocialSecurityRules:
        thresholds = [t for t, _ in self.solidarity_schedule]
        if thresholds != sorted(thresholds) or len(set(thresholds)) != len(thresholds):
            raise ValueError("solidarity_schedule thresholds must be strictly ascending")
        for _, rate in self.solidarity_schedule:
            if not 0 <= rate <= 1:
                raise ValueError(f"solidarity rate must be within [0, 1], got {rate}")
        return self


class TaxConstants(BaseModel):
    """Fiscal-year values: UVT, minimum wage, limits and the bracket table."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tax_year: int = Field(ge=2000, le=2100)
    uvt: float = Field(gt=0, description="Tax unit value in COP")
    smmlv: float = Field(gt=0, description="Monthly minimum wage in COP")
    limits: DeductionLimits = Field(default_factory=DeductionLimits)
    social_security: SocialSecurityRules = Field(default_factory=SocialSecurityRules)
    brackets: list[TaxBracket] = Field(min_length=1)

    @field_validator("brackets", mode="before")
    @classmethod
    def _coerce_bracket_rows(cls, value: Any) -> Any:
        # YAML tables use compact [lower, upper, rate, subtract] rows.
        if isinstance(value, list):
            return [
                dict(zip(("lower", "upper", "rate", "subtract"), row, strict=False))
                if isinstance(row, (list, tuple))
                else row
                for row in value
            ]
        return value

    @model_validator(mode="after")
    def _validate_brackets(self) -> TaxConstants:
        if self.brackets[0].lower != 0:
            raise ValueError("first bracket must start at 0 UVT")
        for prev, nxt in zip(self.brackets, self.brackets[1:]):
            if prev.upper is None:
                raise ValueError("only the last bracket may be unbounded")
            if nxt.lower != prev.upper:
                raise ValueError(
                    f"brackets must be contiguous: {prev.upper} followed by {nxt.lower}"
                )
        if self.brackets[-1].upper is not None:
            raise ValueError("last bracket must be unbounded (upper: null)")
        return self
