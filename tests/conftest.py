"""Shared test fixtures."""

from __future__ import annotations

import pytest

from retefuente.config.defaults import load_constants
from retefuente.config.schema import TaxConstants, TaxInputs


@pytest.fixture
def constants() -> TaxConstants:
    """Packaged 2026 table: UVT 52,374, SMMLV 1,500,000."""
    return load_constants(2026)


@pytest.fixture
def salary_15m() -> TaxInputs:
    """15M COP ordinary salary with no deductions."""
    return TaxInputs(monthly_salary=15_000_000)
