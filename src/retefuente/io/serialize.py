"""Serialization for inputs, comparison results and the yearly projection."""

from __future__ import annotations

import csv
import hashlib
import io
import json
from dataclasses import asdict
from typing import Any

from pydantic import ValidationError

from retefuente.analytics.simulation import YearSimulation
from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.engine import ComparisonResult
from retefuente.utils.exceptions import ConfigError


def compute_inputs_hash(inputs: TaxInputs, constants: TaxConstants) -> str:
    """Compute a deterministic SHA-256 hash of inputs and constants.

    Uses canonical JSON (sorted keys, no whitespace) so the same
    logical configuration always produces the same hash.
    """
    data = {
        "inputs": inputs.model_dump(),
        "constants": constants.model_dump(),
    }
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


def dump_inputs(inputs: TaxInputs) -> str:
    """Serialize inputs to a JSON string."""
    return json.dumps(inputs.model_dump(), indent=2)


def load_inputs(json_str: str) -> TaxInputs:
    """Deserialize inputs from a JSON string.

    Accepts either the bare inputs object or ``{"inputs": {...}}``.

    Raises:
        ConfigError: If the JSON is malformed or fails validation.
    """
    try:
        data: Any = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Inputs are not valid JSON: {exc}") from exc
    if isinstance(data, dict) and "inputs" in data:
        data = data["inputs"]
    try:
        return TaxInputs.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid inputs: {exc}") from exc


def dump_comparison(comparison: ComparisonResult, tax_year: int | None = None) -> str:
    """Serialize a procedure comparison to JSON."""
    data: dict[str, Any] = asdict(comparison)
    if tax_year is not None:
        data["tax_year"] = tax_year
    return json.dumps(data, indent=2)


def dump_simulation_csv(simulation: YearSimulation) -> str:
    """Export the monthly projection as CSV, with a trailing totals row.

    Returns:
        CSV string with Month, Income, P1/P2 withholding, P1/P2 net and
        Difference columns.
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(
        [
            "Month",
            "Income",
            "P1_Retention",
            "P2_Retention",
            "P1_Net",
            "P2_Net",
            "Difference",
        ]
    )
    for row in simulation.months:
        writer.writerow(
            [
                row.month,
                f"{row.income:.2f}",
                f"{row.p1_retention:.2f}",
                f"{row.p2_retention:.2f}",
                f"{row.p1_net:.2f}",
                f"{row.p2_net:.2f}",
                f"{row.diff:.2f}",
            ]
        )
    writer.writerow(
        [
            "Total",
            f"{sum(r.income for r in simulation.months):.2f}",
            f"{simulation.total_p1:.2f}",
            f"{simulation.total_p2:.2f}",
            f"{sum(r.p1_net for r in simulation.months):.2f}",
            f"{sum(r.p2_net for r in simulation.months):.2f}",
            f"{simulation.total_diff:.2f}",
        ]
    )
    return output.getvalue()
