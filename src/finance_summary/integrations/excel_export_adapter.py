from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from finance_summary.models.lines import InvoiceLine, OfferLine, OrderLine
from finance_summary.models.summary import SummarySnapshot
from finance_summary.money import format_currency

LINE_HEADERS = [
    "ID",
    "Reference",
    "Status",
    "Date",
    "Gross",
    "Discount",
    "Commission",
    "Net",
    "Search Text",
]

SUMMARY_METRICS: list[tuple[str, str, bool]] = [
    ("Total Revenue", "total_revenue", True),
    ("Total Commission", "total_commission", True),
    ("Total Discounts", "total_discounts", True),
    ("Net Income", "net_income", True),
    ("Paid Amount", "paid_amount", True),
    ("Pending Amount", "pending_amount", True),
    ("Transactions", "total_transactions", False),
    ("Invoices", "total_invoices", False),
    ("Paid Invoices", "paid_invoices", False),
    ("Pending Invoices", "pending_invoices", False),
    ("Orders", "total_orders", False),
    ("Offers", "total_offers", False),
    ("Active Offers", "active_offers", False),
]


def _excel_datetime(value: datetime) -> datetime:
    """openpyxl rejects tz-aware datetimes; store UTC wall time."""

    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _line_row(line: InvoiceLine | OrderLine | OfferLine) -> list[Any]:
    return [
        line.id,
        line.reference,
        line.status,
        _excel_datetime(line.occurred_at),
        line.gross_amount,
        line.discount,
        line.commission,
        line.net_amount,
        line.searchable_text,
    ]


def export_snapshot_excel(
    snapshot: SummarySnapshot,
    out_path: Path,
    *,
    locale: str = "en",
    currency: str = "OMR",
) -> Path:
    """Write summary metrics and per-source lines of a snapshot into one workbook."""

    orange_fill = PatternFill(start_color="FFA500", end_color="FFA500", fill_type="solid")
    bold = Font(bold=True)
    summary = snapshot.summary

    wb = Workbook()
    ws = wb.active
    ws.title = "Summary"
    ws.append(["Metric", "Value", "Display"])
    for cell in ws[1]:
        cell.font = bold
    ws.append(["Start Date", summary.start_date.isoformat() if summary.start_date else "", ""])
    ws.append(["End Date", summary.end_date.isoformat() if summary.end_date else "", ""])
    for label, attr, monetary in SUMMARY_METRICS:
        value = getattr(summary, attr)
        display = format_currency(value, locale, currency) if monetary else str(value)
        ws.append([label, value, display])
        if attr == "net_income" and value < 0:
            for col in range(1, 4):
                ws.cell(row=ws.max_row, column=col).fill = orange_fill

    if summary.warnings:
        ws.append([])
        ws.append(["Warning", "Message", "Severity"])
        for cell in ws[ws.max_row]:
            cell.font = bold
        for warning in summary.warnings:
            ws.append([warning.code.value, warning.message, warning.severity])
            if warning.severity == "warning":
                ws.cell(row=ws.max_row, column=1).fill = orange_fill

    sheets: list[tuple[str, tuple[Any, ...]]] = [
        ("Invoices", snapshot.invoices),
        ("Orders", snapshot.orders),
        ("Offers", snapshot.offers),
    ]
    for title, lines in sheets:
        sheet = wb.create_sheet(title)
        sheet.append(LINE_HEADERS)
        for cell in sheet[1]:
            cell.font = bold
        for line in lines:
            sheet.append(_line_row(line))
            if line.net_clamped:
                sheet.cell(row=sheet.max_row, column=LINE_HEADERS.index("Net") + 1).fill = orange_fill

    out_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(out_path)
    return out_path
