from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Literal

from pydantic import Field

from finance_summary.models.common import FrozenModel
from finance_summary.models.enums import SourceType, WarningCode
from finance_summary.models.lines import InvoiceLine, OfferLine, OrderLine


class ReconciliationWarning(FrozenModel):
    """Soft signal that a summary figure should be treated as suspect."""

    code: WarningCode
    message: str
    severity: Literal["info", "warning"] = "warning"
    source_type: SourceType | None = None
    line_id: int | None = None


class StatusBreakdown(FrozenModel):
    """Count and gross volume of one status within one source."""

    source_type: SourceType
    status: str
    count: int = 0
    gross_amount: float = 0.0


class FinancialSummary(FrozenModel):
    """Reconciled totals for one date range."""

    start_date: date | None = None
    end_date: date | None = None
    total_revenue: float = 0.0
    total_commission: float = 0.0
    total_discounts: float = 0.0
    net_income: float = 0.0
    total_transactions: int = 0
    total_invoices: int = 0
    total_orders: int = 0
    total_offers: int = 0
    active_offers: int = 0
    paid_invoices: int = 0
    pending_invoices: int = 0
    paid_amount: float = 0.0
    pending_amount: float = 0.0
    status_breakdown: tuple[StatusBreakdown, ...] = ()
    warnings: tuple[ReconciliationWarning, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class SummarySnapshot(FrozenModel):
    """One published refresh result: the summary plus the lines behind it."""

    sequence: int
    start_date: date | None = None
    end_date: date | None = None
    summary: FinancialSummary
    invoices: tuple[InvoiceLine, ...] = ()
    orders: tuple[OrderLine, ...] = ()
    offers: tuple[OfferLine, ...] = ()
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
