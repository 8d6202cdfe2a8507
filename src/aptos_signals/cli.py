"""Typer CLI: aptos-signals payload, wait, count, validate-weather, signals, serve."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

app = typer.Typer(
    name="aptos-signals",
    help="Publish and verify weather/market signals on Aptos",
    no_args_is_help=True,
)
console = Console()


def _load_json(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        console.print(f"[red]Could not read {path}: {exc}[/red]")
        raise typer.Exit(code=2)
    if not isinstance(data, dict):
        console.print(f"[red]{path} must contain a JSON object[/red]")
        raise typer.Exit(code=2)
    return data


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.command()
def payload(
    signal_file: Path = typer.Argument(help="JSON file with the signal fields"),
    module_address: Optional[str] = typer.Option(
        None, "--module-address", "-m",
        help="Override the signal_registry module address",
    ),
) -> None:
    """Print the publish_signal transaction payload for a signal."""
    from aptos_signals.config import get_settings
    from aptos_signals.publishing.models import Signal
    from aptos_signals.publishing.payload import build_publish_payload
    from aptos_signals.signals.formatters import format_payload_json

    signal = Signal.from_dict(_load_json(signal_file))
    address = module_address or get_settings().aptos_module_address
    typer.echo(format_payload_json(build_publish_payload(signal, address)))


@app.command()
def wait(
    tx_hash: str = typer.Argument(help="Transaction hash to confirm"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t",
        help="Seconds to wait before giving up",
    ),
) -> None:
    """Wait for a submitted transaction and report whether it succeeded."""

    async def _run() -> bool:
        from aptos_signals.chain.client import AptosClient
        from aptos_signals.publishing.publisher import SignalPublisher
        from aptos_signals.signals.formatters import format_outcome

        async with AptosClient(confirm_timeout=timeout) as chain:
            outcome = await SignalPublisher(chain).wait_for_transaction(tx_hash)
        format_outcome(outcome, console)
        return outcome.success

    if not asyncio.run(_run()):
        raise typer.Exit(code=1)


@app.command()
def count(
    address: str = typer.Argument(help="Account address"),
) -> None:
    """Show how many signals an account has published."""

    async def _run() -> bool:
        from aptos_signals.chain.client import AptosClient
        from aptos_signals.publishing.publisher import SignalPublisher

        async with AptosClient() as chain:
            result = await SignalPublisher(chain).query_signal_count(address)
        if not result.ok:
            console.print(f"[red]Could not query signal count: {result.error}[/red]")
            return False
        console.print(f"{address}: [bold]{result.count}[/bold] signal(s)")
        return True

    if not asyncio.run(_run()):
        raise typer.Exit(code=1)


@app.command(name="validate-weather")
def validate_weather(
    weather_file: Path = typer.Argument(help="JSON file with weather data"),
    data_type: str = typer.Option(
        "current", "--type",
        help="Data type: current, forecast, historical, location",
    ),
    analysis: Optional[str] = typer.Option(
        None, "--analysis",
        help="Also check support for an analysis type (e.g. aviation)",
    ),
) -> None:
    """Validate a weather data file."""
    from aptos_signals.signals.formatters import format_validation
    from aptos_signals.validation.weather import check_capabilities, validate_weather_data

    data = _load_json(weather_file)
    try:
        report = validate_weather_data(data_type, data)
        caps = check_capabilities(data, analysis) if analysis else None
    except (TypeError, AttributeError, ValueError) as exc:
        console.print(f"[red]Malformed weather data in {weather_file}: {exc}[/red]")
        raise typer.Exit(code=2)
    format_validation(report, console)

    if caps is not None:
        supported = "[green]yes[/green]" if caps.supported else "[red]no[/red]"
        console.print(f"  {analysis}: {supported} ({caps.completeness:.0f}% of fields)")

    if not report.valid:
        raise typer.Exit(code=1)


@app.command()
def signals(
    limit: int = typer.Option(20, "--limit", "-l", help="Number of signals to show"),
) -> None:
    """List locally stored signals."""

    async def _run() -> None:
        from aptos_signals.signals.formatters import format_signals_table
        from aptos_signals.signals.store import SignalStore

        stored = await SignalStore().latest_signals(limit)
        format_signals_table(stored, console)

    asyncio.run(_run())


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
) -> None:
    """Run the validation and signal intake HTTP API."""
    import uvicorn

    from aptos_signals.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "aptos_signals.api.app:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
    )


if __name__ == "__main__":
    app()
