"""Typer CLI interface for stocktax."""

import json
import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import typer
from pydantic import ValidationError

from stocktax.config import DEFAULT_SPLITS, CalculationSettings, load_splits
from stocktax.engines.calculator import CalculationRun, CapitalGainsCalculator
from stocktax.engines.splits import SplitAdjuster
from stocktax.exceptions import TaxComputationError
from stocktax.models.enums import RateGapPolicy, WarningSeverity
from stocktax.parsing.nbp import DEFAULT_COLUMN, load_nbp_rates
from stocktax.parsing.statement import StatementParser

app = typer.Typer(
    name="stocktax",
    help="stocktax: capital-gains tax on foreign stock trades, converted at NBP rates.",
)

_RATES_HELP = "NBP table A archive CSV (repeat for several years)"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """stocktax: capital-gains tax on foreign stock trades, converted at NBP rates."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _run(
    statement: Path,
    rates: list[Path],
    year: int,
    tax_rate: float,
    splits: Path | None,
    include_dividends: bool,
    rate_gap: RateGapPolicy,
    currency: str,
) -> CalculationRun:
    settings = CalculationSettings(
        fiscal_year=year,
        flat_rate=Decimal(str(tax_rate)),
        include_dividends=include_dividends,
        rate_gap_policy=rate_gap,
    )
    rate_table = load_nbp_rates(rates, column=currency)
    split_table = load_splits(splits) if splits else DEFAULT_SPLITS
    parsed = StatementParser().parse_file(statement)
    calculator = CapitalGainsCalculator(rate_table, SplitAdjuster(split_table))
    return calculator.calculate(parsed.transactions, settings, parse_warnings=parsed.warnings)


def _print_warnings(run: CalculationRun, show_info: bool = False) -> None:
    for warning in run.warnings:
        if warning.severity == WarningSeverity.INFO and not show_info:
            continue
        typer.echo(f"Warning: {warning}", err=True)


@app.command()
def calculate(
    statement: Path = typer.Argument(..., help="Statement text file (newest transactions first)"),
    rates: list[Path] = typer.Option(..., "--rates", "-r", help=_RATES_HELP),
    year: int = typer.Option(..., "--year", "-y", help="Fiscal year to tax"),
    tax_rate: float = typer.Option(0.19, "--tax-rate", help="Flat capital-gains tax rate"),
    splits: Path | None = typer.Option(None, "--splits", help="JSON split table (default: built-in)"),
    include_dividends: bool = typer.Option(
        False, "--include-dividends", help="Add converted dividends to the taxable base"
    ),
    rate_gap: RateGapPolicy = typer.Option(
        RateGapPolicy.ZERO, "--rate-gap", help="Handling of transactions the rate files do not cover"
    ),
    currency: str = typer.Option(DEFAULT_COLUMN, "--currency", help="Rate column in the NBP file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    show_info: bool = typer.Option(False, "--show-ignored", help="Also list ignored statement lines"),
) -> None:
    """Compute realized gain and tax due for a fiscal year."""
    try:
        run = _run(statement, rates, year, tax_rate, splits, include_dividends, rate_gap, currency)
    except (TaxComputationError, ValidationError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    if json_output:
        payload = {
            "summary": run.summary.model_dump(mode="json"),
            "warnings": [w.model_dump(mode="json") for w in run.warnings],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    from stocktax.reports.tax_summary import TaxSummaryGenerator

    typer.echo(TaxSummaryGenerator().render(run))
    _print_warnings(run, show_info)


@app.command()
def sales(
    statement: Path = typer.Argument(..., help="Statement text file (newest transactions first)"),
    rates: list[Path] = typer.Option(..., "--rates", "-r", help=_RATES_HELP),
    year: int | None = typer.Option(None, "--year", "-y", help="Only show sales in this year"),
    splits: Path | None = typer.Option(None, "--splits", help="JSON split table (default: built-in)"),
    rate_gap: RateGapPolicy = typer.Option(
        RateGapPolicy.ZERO, "--rate-gap", help="Handling of transactions the rate files do not cover"
    ),
    currency: str = typer.Option(DEFAULT_COLUMN, "--currency", help="Rate column in the NBP file"),
) -> None:
    """List matched sales with the FIFO lots behind each one."""
    from rich.console import Console
    from rich.table import Table

    try:
        run = _run(statement, rates, year or 0, 0.0, splits, False, rate_gap, currency)
    except TaxComputationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    table = Table(title="Matched sales")
    table.add_column("Date", no_wrap=True)
    table.add_column("Ticker", no_wrap=True)
    table.add_column("Shares", justify="right", no_wrap=True)
    table.add_column("Proceeds", justify="right", no_wrap=True)
    table.add_column("Cost basis", justify="right", no_wrap=True)
    table.add_column("Gain", justify="right", no_wrap=True)
    table.add_column("Lots")

    for sale in run.sales:
        if year is not None and sale.sale_date.year != year:
            continue
        lots = ", ".join(f"{a.lot_date} x{a.shares_taken}" for a in sale.allocations) or "-"
        gain_style = "red" if sale.realized_gain < 0 else "green"
        table.add_row(
            sale.sale_date.isoformat(),
            sale.security_id,
            str(sale.sale.adjusted_share_count),
            f"{sale.proceeds:.2f}",
            f"{sale.cost_basis:.2f}",
            f"[{gain_style}]{sale.realized_gain:.2f}[/{gain_style}]",
            lots if sale.is_fully_matched else f"{lots} [yellow](short {sale.unmatched_shares})[/yellow]",
        )

    Console().print(table)
    _print_warnings(run)


@app.command()
def rate(
    on: datetime = typer.Argument(..., formats=["%Y-%m-%d"], help="Transaction date (YYYY-MM-DD)"),
    rates: list[Path] = typer.Option(..., "--rates", "-r", help=_RATES_HELP),
    currency: str = typer.Option(DEFAULT_COLUMN, "--currency", help="Rate column in the NBP file"),
) -> None:
    """Show the conversion rate applied to a transaction on a given date."""
    try:
        rate_table = load_nbp_rates(rates, column=currency)
    except TaxComputationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    found = rate_table.lookup(on.date())
    if not found.available:
        typer.echo(f"No rate available for {on.date().isoformat()}")
        raise typer.Exit(1)
    typer.echo(f"{on.date().isoformat()}: {found.rate} (published {found.observed_on.isoformat()})")
