from __future__ import annotations

from pathlib import Path

from finance_summary.integrations.excel_export_adapter import export_snapshot_excel
from finance_summary.models.summary import SummarySnapshot


def export_summary_report(
    snapshot: SummarySnapshot,
    out_path: Path,
    *,
    locale: str = "en",
    currency: str = "OMR",
) -> Path:
    """Export a published snapshot into a review Excel workbook."""

    if out_path.suffix.lower() not in {".xlsx", ".xlsm"}:
        raise ValueError("report path must end with .xlsx or .xlsm")
    return export_snapshot_excel(snapshot, out_path, locale=locale, currency=currency)
