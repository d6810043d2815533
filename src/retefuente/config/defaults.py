"""Default fiscal-year constants and example inputs for retefuente."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.io.yaml_loader import load_package_yaml, load_yaml, package_path
from retefuente.utils.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TAX_YEAR: int = 2026

# Projection used by the demo scenario: bonuses in Feb, Jun and Nov.
DEMO_MONTHLY_INCOMES: list[float] = [
    15_000_000,
    25_000_000,
    16_000_000,
    15_000_000,
    15_000_000,
    22_000_000,
    15_000_000,
    15_000_000,
    15_000_000,
    15_000_000,
    30_000_000,
    15_000_000,
]


def available_tax_years() -> list[int]:
    """Fiscal years with a packaged withholding table."""
    tables = package_path("taxes/tables")
    years = []
    for path in tables.glob("colombia_*.yaml"):
        suffix = path.stem.rsplit("_", 1)[-1]
        if suffix.isdigit():
            years.append(int(suffix))
    return sorted(years)


def _validate_constants(data: object, source: str) -> TaxConstants:
    if not isinstance(data, dict):
        raise ConfigError(f"Tax table {source} must be a mapping, got {type(data).__name__}")
    try:
        constants = TaxConstants.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid tax table {source}: {exc}") from exc
    logger.debug("Loaded tax table %s (UVT=%s, SMMLV=%s)", source, constants.uvt, constants.smmlv)
    return constants


def load_constants_file(path: Path) -> TaxConstants:
    """Load and validate a fiscal-year table from a YAML file.

    Raises:
        ConfigError: If the file is missing or the table is invalid.
    """
    try:
        data = load_yaml(path)
    except FileNotFoundError as exc:
        raise ConfigError(f"Tax table not found: {path}") from exc
    return _validate_constants(data, str(path))


@lru_cache(maxsize=None)
def load_constants(tax_year: int = DEFAULT_TAX_YEAR) -> TaxConstants:
    """Load the packaged table for ``tax_year``.

    Results are cached; ``TaxConstants`` is immutable so sharing is safe.

    Raises:
        ConfigError: If no table is packaged for ``tax_year``.
    """
    relative_path = f"taxes/tables/colombia_{tax_year}.yaml"
    if not package_path(relative_path).exists():
        raise ConfigError(
            f"No withholding table for {tax_year}; available: {available_tax_years()}"
        )
    return _validate_constants(load_package_yaml(relative_path), relative_path)


def default_constants() -> TaxConstants:
    """Constants for the default fiscal year (2026)."""
    return load_constants(DEFAULT_TAX_YEAR)


def default_inputs() -> TaxInputs:
    """Empty inputs: no income, no deductions."""
    return TaxInputs()


def demo_inputs() -> TaxInputs:
    """Demo scenario: integral salary with dependents and irregular bonuses."""
    return TaxInputs(
        monthly_salary=15_000_000,
        other_income=0,
        voluntary_pension=1_000_000,
        afc_contribution=500_000,
        housing_interest=1_200_000,
        prepaid_medicine=450_000,
        has_dependents=True,
        is_salario_integral=True,
        procedure2_rate=0,
        historical_monthly_income=18_000_000,
        simulation_monthlies=list(DEMO_MONTHLY_INCOMES),
    )
