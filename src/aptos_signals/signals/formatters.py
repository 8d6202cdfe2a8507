"""Output formatters: Rich tables and JSON."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from aptos_signals.publishing.models import EntryFunctionPayload, TransactionOutcome
from aptos_signals.signals.models import StoredSignal
from aptos_signals.validation.models import ValidationReport


def format_payload_json(payload: EntryFunctionPayload) -> str:
    """Payload as JSON, in the shape wallets and ``aptos move run --json-file`` accept."""
    return json.dumps(payload.to_dict(), indent=2)


def format_signals_table(signals: list[StoredSignal], console: Console | None = None) -> None:
    """Print stored signals, newest first."""
    if console is None:
        console = Console()

    if not signals:
        console.print("[yellow]No signals stored.[/yellow]")
        return

    table = Table(title="Stored Signals", show_lines=True)
    table.add_column("ID", width=24)
    table.add_column("Market", width=40, no_wrap=False)
    table.add_column("Venue", width=16)
    table.add_column("Conf", width=8)
    table.add_column("Odds", width=11)
    table.add_column("Tx", width=14)

    for s in signals:
        tx = s.tx_hash[:12] if s.tx_hash else "[dim]unpublished[/dim]"
        table.add_row(
            s.id[:24],
            s.signal.market_title[:80],
            s.signal.venue[:16],
            s.signal.confidence.value,
            s.signal.odds_efficiency.value,
            tx,
        )

    console.print(table)
    console.print(f"\n[dim]{len(signals)} signal(s)[/dim]")


def format_outcome(outcome: TransactionOutcome, console: Console | None = None) -> None:
    if console is None:
        console = Console()

    if outcome.success:
        console.print(f"[green]Transaction {outcome.tx_hash} succeeded[/green]")
        return

    kind = outcome.error_kind.value if outcome.error_kind else "failure"
    console.print(f"[red]Transaction {outcome.tx_hash} failed ({kind}): {outcome.failure_reason}[/red]")


def format_validation(report: ValidationReport, console: Console | None = None) -> None:
    if console is None:
        console = Console()

    status = "[green]VALID[/green]" if report.valid else "[red]INVALID[/red]"
    console.print(f"[bold]Weather data:[/bold] {status}")
    for err in report.errors:
        console.print(f"  [red]error[/red]   {err}")
    for warn in report.warnings:
        console.print(f"  [yellow]warning[/yellow] {warn}")
    if report.data_quality is not None:
        q = report.data_quality
        console.print(f"  Quality: {q.level} ({q.score:.0f}%)")
        if q.missing_fields:
            console.print(f"  Missing: {', '.join(q.missing_fields)}")
