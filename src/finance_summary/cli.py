from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .errors import FetchFailure
from .filters import preset_range
from .integrations.container import build_container
from .logging_utils import configure_logging
from .models.summary import SummarySnapshot
from .money import format_currency
from .services.report_service import export_summary_report
from .settings import load_settings

app = typer.Typer(help="Marketplace finance summary CLI.")
console = Console()


def _parse_day(value: str | None, option: str):
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise typer.BadParameter(f"{option} must be YYYY-MM-DD") from exc


def _load_snapshot(
    start: str | None,
    end: str | None,
    preset: str | None,
    base_url: str | None,
) -> tuple[SummarySnapshot, str, str]:
    """Resolve the date range, run one refresh and return the snapshot."""

    settings = load_settings()
    if base_url:
        settings = settings.model_copy(update={"api_url": base_url.rstrip("/")})
    configure_logging(settings.log_level)

    if preset:
        try:
            start_day, end_day = preset_range(preset)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
    else:
        start_day = _parse_day(start, "--start")
        end_day = _parse_day(end, "--end")

    container = build_container(settings)
    try:
        snapshot = asyncio.run(container.service.get_snapshot(start_day, end_day))
    except FetchFailure as exc:
        console.print(f"[red]Refresh failed[/red] ({exc.source}): {exc.message}")
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return snapshot, settings.locale, settings.currency


def _render_summary(snapshot: SummarySnapshot, *, locale: str, currency: str) -> None:
    summary = snapshot.summary
    span = f"{summary.start_date or '…'} → {summary.end_date or '…'}"
    table = Table(title=f"Financial summary {span}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    def money(value: float) -> str:
        return format_currency(value, locale, currency)

    table.add_row("Total revenue", money(summary.total_revenue))
    table.add_row("Total commission", money(summary.total_commission))
    table.add_row("Total discounts", money(summary.total_discounts))
    net_style = "red" if summary.net_income < 0 else "green"
    table.add_row("Net income", f"[{net_style}]{money(summary.net_income)}[/{net_style}]")
    table.add_row("Paid / pending amount", f"{money(summary.paid_amount)} / {money(summary.pending_amount)}")
    table.add_row("Transactions", str(summary.total_transactions))
    table.add_row("Invoices (paid / pending)", f"{summary.total_invoices} ({summary.paid_invoices} / {summary.pending_invoices})")
    table.add_row("Orders", str(summary.total_orders))
    table.add_row("Offers (active)", f"{summary.total_offers} ({summary.active_offers})")
    console.print(table)

    for warning in summary.warnings:
        color = "yellow" if warning.severity == "warning" else "cyan"
        console.print(f"[{color}]{warning.code.value}[/{color}] {warning.message}")


@app.command()
def summary(
    start: Optional[str] = typer.Option(None, help="Inclusive start date (YYYY-MM-DD)."),
    end: Optional[str] = typer.Option(None, help="Inclusive end date (YYYY-MM-DD)."),
    preset: Optional[str] = typer.Option(None, help="Date preset: all, today, week or month."),
    locale: Optional[str] = typer.Option(None, help="Display locale, overrides FINANCE_LOCALE."),
    base_url: Optional[str] = typer.Option(None, help="Override FINANCE_API_URL."),
) -> None:
    """Fetch invoices, orders and offers for a range and print the reconciled summary."""

    snapshot, default_locale, currency = _load_snapshot(start, end, preset, base_url)
    locale = locale or default_locale
    _render_summary(snapshot, locale=locale, currency=currency)


@app.command()
def export(
    out: Path = typer.Option(Path("outputs/finance_summary.xlsx"), help="Target .xlsx path."),
    start: Optional[str] = typer.Option(None, help="Inclusive start date (YYYY-MM-DD)."),
    end: Optional[str] = typer.Option(None, help="Inclusive end date (YYYY-MM-DD)."),
    preset: Optional[str] = typer.Option(None, help="Date preset: all, today, week or month."),
    locale: Optional[str] = typer.Option(None, help="Display locale, overrides FINANCE_LOCALE."),
    base_url: Optional[str] = typer.Option(None, help="Override FINANCE_API_URL."),
) -> None:
    """Write the summary and its lines to an Excel workbook."""

    snapshot, default_locale, currency = _load_snapshot(start, end, preset, base_url)
    locale = locale or default_locale
    try:
        path = export_summary_report(snapshot, out, locale=locale, currency=currency)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.print(f"[green]Wrote report[/green] {path}")


@app.command()
def serve() -> None:
    """Start the HTTP API with uvicorn."""

    from .api.main import run

    run()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
