"""
Command-line interface for the bill reconciliation engine.
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import ReconConfig, generate_default_config, load_config
from .matching.confirmation import apply_match, select_auto_matches
from .matching.engine import BillMatchingEngine
from .matching.schedule import next_due_date
from .models.transaction import Bill, BillMatch, Confidence, MatchSummary
from .parsers.bill_parser import BillParser, write_bills
from .parsers.transaction_parser import TransactionParser
from .utils.dates import coerce_date
from .utils.exceptions import BillReconError, ConfigurationError, DateParseError
from .utils.logging_config import setup_logging

console = Console()
logger = logging.getLogger(__name__)

CONFIDENCE_STYLES = {
    Confidence.HIGH: "green",
    Confidence.MEDIUM: "yellow",
    Confidence.LOW: "red",
}


@click.group()
@click.version_option(version=__version__)
def main():
    """Match bank transactions to recurring bills."""
    pass


@main.command()
@click.argument("bills_file", type=click.Path(exists=True, path_type=Path))
@click.argument("transactions_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option("--min-score", type=int, default=None, help="Override minimum match score")
@click.option(
    "--amount-tolerance",
    type=click.FloatRange(min=0),
    default=None,
    help="Override amount tolerance in percent",
)
@click.option(
    "--date-tolerance",
    type=click.IntRange(min=0),
    default=None,
    help="Override date tolerance in days",
)
@click.option(
    "--apply",
    "apply_output",
    type=click.Path(path_type=Path),
    help="Write bills with auto-accepted matches applied to this YAML file",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def match(
    bills_file: Path,
    transactions_file: Path,
    config: Optional[Path],
    min_score: Optional[int],
    amount_tolerance: Optional[float],
    date_tolerance: Optional[int],
    apply_output: Optional[Path],
    verbose: bool,
):
    """
    Propose which transactions pay which bills.

    BILLS_FILE: YAML or JSON list of bills
    TRANSACTIONS_FILE: JSON list or CSV of bank transactions
    """
    try:
        recon_config = load_config(config)
        _setup_logging(recon_config, verbose)
        _apply_overrides(recon_config, min_score, amount_tolerance, date_tolerance)

        settings = recon_config.matching
        if not settings.enabled:
            console.print("[yellow]Bill matching is disabled in the configuration[/yellow]")
            return

        bills = BillParser().parse_file(bills_file)
        transactions = TransactionParser().parse_file(transactions_file)

        engine = BillMatchingEngine(settings)
        matches, summary = engine.reconcile(
            transactions, bills, config_file=recon_config.config_file_path
        )

        _display_matches(matches)
        _display_summary(summary)

        if apply_output:
            accepted = select_auto_matches(matches, settings)
            updated = _apply_matches(accepted)
            write_bills([updated.get(b.id, b) for b in bills], apply_output)
            console.print(
                f"\n[green]Applied {len(updated)} match(es), bills written to "
                f"{apply_output}[/green]"
            )

    except BillReconError as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command("next-due")
@click.argument("bills_file", type=click.Path(exists=True, path_type=Path))
@click.argument("bill_id")
@click.argument("payment_date")
def next_due(bills_file: Path, bill_id: str, payment_date: str):
    """
    Show when a bill is next due after a payment.

    PAYMENT_DATE: Date the payment was recognized (YYYY-MM-DD)
    """
    try:
        bills = BillParser().parse_file(bills_file)
        bill = next((b for b in bills if b.id == bill_id), None)
        if bill is None:
            console.print(f"[red]No bill with id {bill_id}[/red]")
            sys.exit(1)

        due = next_due_date(bill, coerce_date(payment_date))
        console.print(f"{bill.display_name} ({bill.interval.value}): next due {due.isoformat()}")

    except BillReconError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("bill_recon.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _setup_logging(config: ReconConfig, verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, config.logging.level.upper(), logging.INFO)
    setup_logging(level, log_format=config.logging.format)


def _display_matches(matches: list[BillMatch]) -> None:
    """Display proposed matches in console."""
    if not matches:
        console.print("[yellow]No matches found[/yellow]")
        return

    table = Table(title="Bill Matches")
    table.add_column("Bill")
    table.add_column("Transaction")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Confidence")
    table.add_column("Reasons")

    for m in matches:
        style = CONFIDENCE_STYLES[m.confidence]
        description = m.transaction.description
        table.add_row(
            m.bill.display_name,
            description[:40] + "..." if len(description) > 40 else description,
            str(m.transaction.date),
            f"{m.transaction.amount:,.2f}",
            str(m.score),
            f"[{style}]{m.confidence.value}[/{style}]",
            "; ".join(m.reasons),
        )

    console.print(table)


def _display_summary(summary: MatchSummary) -> None:
    """Display matching summary in console."""
    table = Table(title="Matching Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Bills", str(summary.total_bills))
    table.add_row("Transactions", str(summary.total_transactions))
    table.add_row("Expense Transactions", str(summary.expense_transactions))
    table.add_row("Candidate Pairs", str(summary.candidate_pairs))
    table.add_row("Matched", str(summary.matched_count))
    for tier in Confidence:
        table.add_row(
            f"  {tier.value.title()} Confidence",
            str(summary.matches_by_confidence.get(tier.value, 0)),
        )
    table.add_row("Unmatched Bills", str(len(summary.unmatched_bill_ids)))
    table.add_row("Bill Match Rate", f"{summary.match_rate_bills:.1f}%")
    table.add_row("Processing Time", f"{summary.processing_time_seconds:.2f}s")

    console.print(table)


def _apply_overrides(
    config: ReconConfig,
    min_score: Optional[int],
    amount_tolerance: Optional[float],
    date_tolerance: Optional[int],
) -> None:
    """Apply command-line overrides to the matching settings."""
    settings = config.matching
    try:
        if min_score is not None:
            settings.min_match_score = min_score
        if amount_tolerance is not None:
            settings.amount_tolerance = amount_tolerance
        if date_tolerance is not None:
            settings.date_tolerance_days = date_tolerance
    except ValidationError as e:
        raise ConfigurationError(f"Invalid override: {e}") from e


def _apply_matches(matches: list[BillMatch]) -> dict[str, Bill]:
    """
    Roll each accepted match's bill forward.

    A match whose transaction date cannot be read is left unapplied so the
    other bills are still written.
    """
    updated: dict[str, Bill] = {}
    for m in matches:
        try:
            updated[m.bill.id] = apply_match(m)
        except DateParseError as e:
            logger.warning(f"Not applying match for bill {m.bill.id}: {e}")
            console.print(f"[yellow]Skipped bill {m.bill.id}: {e}[/yellow]")
    return updated


if __name__ == "__main__":
    main()
