"""
Command-line interface for the Internet Banking verification engine.
"""

from pathlib import Path
from typing import Optional
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import load_config, generate_default_config, VerificationConfig
from .loaders.csv_loader import CsvDataLoader
from .matching.text_matcher import normalize_and_match
from .models.verification import ReconciliationResult, TransactionDirection
from .parsers.amount_parser import extract_currency_code, parse_amount
from .reconciliation.engine import BalanceReconciler, convert_amount
from .utils.exceptions import VerificationError
from .utils.logging_config import resolve_level, setup_logging

console = Console()


def _setup(verbose: bool, recon_config: VerificationConfig) -> None:
    log_config = recon_config.logging
    setup_logging(
        resolve_level(log_config.level, verbose),
        log_file=Path(log_config.file) if log_config.file else None,
        log_format=log_config.format,
    )


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def main():
    """Internet Banking transaction verification tool."""
    pass


@main.command("parse-amount")
@click.argument("raw_values", nargs=-1, required=True)
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def parse_amount_cmd(raw_values: tuple[str, ...], config: Optional[Path], verbose: bool):
    """
    Parse displayed amounts and show their value and currency.

    RAW_VALUES: Display strings such as "MUR 1,098.20"
    """
    recon_config = load_config(config)
    _setup(verbose, recon_config)
    symbols = recon_config.parsing.currency_symbols

    table = Table(title="Parsed Amounts")
    table.add_column("Raw")
    table.add_column("Value", justify="right")
    table.add_column("Currency")

    failed = False
    for raw in raw_values:
        try:
            value = parse_amount(raw)
            table.add_row(escape(raw), f"{value:,.2f}", extract_currency_code(raw, symbols))
        except VerificationError as e:
            failed = True
            table.add_row(escape(raw), "[red]unparsable[/red]", "-")
            if verbose:
                console.print(f"[yellow]{escape(str(e))}[/yellow]")

    console.print(table)
    if failed:
        sys.exit(1)


@main.command()
@click.argument("text")
@click.argument("terms", nargs=-1, required=True)
def match(text: str, terms: tuple[str, ...]):
    """
    Check that every TERM appears in TEXT after normalization.

    TEXT: Rendered transaction row
    """
    if normalize_and_match(text, terms):
        console.print("[green]MATCH[/green]")
    else:
        console.print("[red]NO MATCH[/red]")
        sys.exit(1)


@main.command()
@click.argument("amount")
@click.argument("rate")
@click.argument("direction")
def convert(amount: str, rate: str, direction: str):
    """
    Convert AMOUNT through an exchange RATE.

    DIRECTION: "buy" divides by the rate, "sell" multiplies
    """
    try:
        console.print(f"{convert_amount(amount, rate, direction):.2f}")
    except VerificationError as e:
        _fail(str(e))


@main.command()
@click.argument("before")
@click.argument("after")
@click.argument("amount")
@click.option("--credit", is_flag=True, help="Expect the balance to increase")
@click.option("--rate", default=None, help="Exchange rate for a foreign-currency amount")
@click.option("--direction", "rate_type", default=None, help="Exchange rate type: buy or sell")
@click.option("--tolerance", default=None, help="Allowed absolute difference")
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def reconcile(
    before: str,
    after: str,
    amount: str,
    credit: bool,
    rate: Optional[str],
    rate_type: Optional[str],
    tolerance: Optional[str],
    config: Optional[Path],
    verbose: bool,
):
    """
    Check that a balance moved by AMOUNT between BEFORE and AFTER.

    BEFORE, AFTER: Displayed balances, e.g. "MUR 1,000.00"
    """
    try:
        recon_config = load_config(config)
        _setup(verbose, recon_config)
        reconciler = BalanceReconciler(recon_config)
        if rate is not None:
            if rate_type is None:
                _fail("--direction is required with --rate")
            result = reconciler.check_cross_currency(
                before,
                after,
                parse_amount(amount),
                rate,
                rate_type,
                tolerance,
                direction=TransactionDirection.CREDIT if credit else TransactionDirection.DEBIT,
            )
        elif credit:
            result = reconciler.check_credit(before, after, parse_amount(amount), tolerance)
        else:
            result = reconciler.check_debit(before, after, parse_amount(amount), tolerance)
    except VerificationError as e:
        _fail(str(e))
        return

    _display_result(result)
    if not result.passed:
        sys.exit(1)


@main.command("check-cases")
@click.argument("csv_file", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def check_cases(csv_file: Path, config: Optional[Path], verbose: bool):
    """
    Run the balance checks listed in a CSV file.

    CSV_FILE: Rows with before, after, amount and optional direction,
    exchange_rate, exchange_rate_type, tolerance and name columns
    """
    try:
        recon_config = load_config(config)
        _setup(verbose, recon_config)
        cases = CsvDataLoader(recon_config).load_balance_checks(csv_file)
        results = BalanceReconciler(recon_config).run_cases(cases)
    except VerificationError as e:
        _fail(str(e))
        return

    table = Table(title=f"Balance Checks: {csv_file.name}")
    table.add_column("Case")
    table.add_column("Type")
    table.add_column("Expected", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Variance", justify="right")
    table.add_column("Result")

    for case, result in results:
        kind = result.direction.value
        if case.is_cross_currency:
            kind += f" @ {case.exchange_rate} {case.exchange_direction.value}"
        table.add_row(
            escape(case.name),
            kind,
            f"{result.expected_delta:,.2f}",
            f"{result.actual_delta:,.2f}",
            f"{result.variance:,.2f}",
            "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]",
        )

    console.print(table)

    failed = sum(1 for _, result in results if not result.passed)
    console.print(f"\nTotal cases: {len(results)}, failed: {failed}")
    if failed:
        sys.exit(1)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _display_result(result: ReconciliationResult) -> None:
    """Display a reconciliation result in the console."""
    table = Table(title="Balance Reconciliation")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Type", result.direction.value)
    table.add_row("Expected Delta", f"{result.expected_delta:,.2f}")
    table.add_row("Actual Delta", f"{result.actual_delta:,.2f}")
    table.add_row("Variance", f"{result.variance:,.2f}")
    table.add_row("Tolerance", f"{result.tolerance:,.2f}")
    if result.exchange_rate is not None:
        table.add_row("Exchange Rate", str(result.exchange_rate))
        table.add_row("Rate Type", result.exchange_direction.value)
    if result.currency_code:
        table.add_row("Currency", result.currency_code)
    table.add_row("Result", "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]")

    console.print(table)


if __name__ == "__main__":
    main()
