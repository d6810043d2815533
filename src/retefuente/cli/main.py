"""CLI entry point for retefuente."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import click

from retefuente.analytics.simulation import simulate_year
from retefuente.config.defaults import (
    DEFAULT_TAX_YEAR,
    default_inputs,
    demo_inputs,
    load_constants,
    load_constants_file,
)
from retefuente.config.schema import TaxConstants, TaxInputs
from retefuente.core.engine import TaxResult, compare_procedures
from retefuente.io.serialize import dump_comparison, dump_simulation_csv, load_inputs
from retefuente.utils.exceptions import ConfigError
from retefuente.utils.log import configure_logging

_LABELS = {
    "PROCEDURE_1": "Procedimiento 1",
    "PROCEDURE_2": "Procedimiento 2",
    "EQUAL": "Empate",
}


def _cop(value: float) -> str:
    return f"${value:,.0f}".replace(",", ".")


def _load(
    config_path: Path | None,
    demo: bool,
    year: int,
    constants_path: Path | None,
) -> tuple[TaxInputs, TaxConstants]:
    try:
        if config_path is not None:
            inputs = load_inputs(config_path.read_text(encoding="utf-8"))
        elif demo:
            inputs = demo_inputs()
        else:
            inputs = default_inputs()
        if constants_path is not None:
            constants = load_constants_file(constants_path)
        else:
            constants = load_constants(year)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    return inputs, constants


def _common_options(func: Callable[..., None]) -> Callable[..., None]:
    options = [
        click.option(
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="Path to a JSON inputs file.",
        ),
        click.option("--demo", is_flag=True, help="Use the demo scenario inputs."),
        click.option(
            "--year",
            default=DEFAULT_TAX_YEAR,
            show_default=True,
            type=int,
            help="Fiscal year of the packaged withholding table.",
        ),
        click.option(
            "--constants",
            "constants_path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="Custom YAML withholding table (overrides --year).",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(package_name="retefuente")
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """retefuente: Colombian payroll withholding, Procedure 1 vs Procedure 2."""
    configure_logging(log_level)


def _echo_result(title: str, result: TaxResult) -> None:
    click.echo(f"{title}:")
    click.echo(f"  Base gravable: {_cop(result.base_cop)} ({result.base_uvt:.2f} UVT)")
    click.echo(f"  Retención: {_cop(result.retention_cop)} ({result.retention_uvt:.2f} UVT)")
    if result.procedure == 2:
        click.echo(f"  Tasa fija: {result.effective_rate:.2f}%")
    click.echo(f"  Ingreso neto: {_cop(result.net_income)}")


@cli.command()
@_common_options
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to write the comparison JSON.",
)
def compare(
    config_path: Path | None,
    demo: bool,
    year: int,
    constants_path: Path | None,
    output_path: Path | None,
) -> None:
    """Compare Procedure 1 and Procedure 2 for one month."""
    inputs, constants = _load(config_path, demo, year, constants_path)
    comparison = compare_procedures(inputs, constants)
    details = comparison.procedure1.details

    click.echo(f"Año gravable {constants.tax_year} (UVT {_cop(constants.uvt)})")
    click.echo(f"Ingreso bruto: {_cop(details.gross_income)}")
    click.echo(f"Aportes obligatorios: {_cop(details.contributions)}")
    click.echo(f"Deducciones: {_cop(details.total_deductions)}")
    click.echo(f"Renta exenta 25%: {_cop(details.exempt_income)}")
    click.echo(f"Límite 40%: {_cop(details.global_limit)}")
    click.echo("")
    _echo_result("Procedimiento 1", comparison.procedure1)
    _echo_result("Procedimiento 2", comparison.procedure2)
    click.echo("")
    click.echo(f"Recomendación: {_LABELS[comparison.recommendation]}")
    if comparison.recommendation != "EQUAL":
        click.echo(f"Diferencia a favor: {_cop(comparison.difference)}")

    if output_path is not None:
        output_path.write_text(dump_comparison(comparison, constants.tax_year), encoding="utf-8")
        click.echo(f"\nResults written to {output_path}")


@cli.command()
@_common_options
@click.option(
    "--rate",
    default=None,
    type=click.FloatRange(0, 100),
    help="Procedure 2 fixed rate in percent. Derived from the inputs if omitted.",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to write the monthly projection CSV.",
)
def simulate(
    config_path: Path | None,
    demo: bool,
    year: int,
    constants_path: Path | None,
    rate: float | None,
    output_path: Path | None,
) -> None:
    """Project both procedures month by month over a year."""
    inputs, constants = _load(config_path, demo, year, constants_path)
    sim = simulate_year(inputs, fixed_rate=rate, constants=constants)

    click.echo(f"Tasa fija Procedimiento 2: {sim.fixed_rate:.2f}%")
    click.echo(f"{'Mes':<5}{'Ingreso':>16}{'Ret. P1':>14}{'Ret. P2':>14}{'Diferencia':>14}")
    for row in sim.months:
        click.echo(
            f"{row.month:<5}{_cop(row.income):>16}{_cop(row.p1_retention):>14}"
            f"{_cop(row.p2_retention):>14}{_cop(row.diff):>14}"
        )
    click.echo(f"\nTotal año P1: {_cop(sim.total_p1)}")
    click.echo(f"Total año P2: {_cop(sim.total_p2)}")
    click.echo(f"Opción más económica: {_LABELS[sim.cheapest]}")
    if sim.cheapest != "EQUAL":
        click.echo(f"Ahorro anual: {_cop(abs(sim.total_diff))}")
    click.echo(f"Opción más estable: {_LABELS[sim.stability.winner]}")

    if output_path is not None:
        output_path.write_text(dump_simulation_csv(sim), encoding="utf-8")
        click.echo(f"\nProjection written to {output_path}")


if __name__ == "__main__":
    cli()
