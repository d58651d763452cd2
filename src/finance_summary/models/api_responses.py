from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import Field

from finance_summary.models.common import StrictModel
from finance_summary.models.lines import FinancialLine
from finance_summary.models.summary import FinancialSummary, SummarySnapshot
from finance_summary.models.version import SCHEMA_VERSION


class SummaryResponse(StrictModel):
    """Public summary response contract returned by API endpoints."""

    schema_version: Literal["v1"] = SCHEMA_VERSION
    sequence: int
    start_date: date | None = None
    end_date: date | None = None
    summary: FinancialSummary
    invoices_count: int = 0
    orders_count: int = 0
    offers_count: int = 0
    created_at: datetime

    @classmethod
    def from_snapshot(cls, snapshot: SummarySnapshot) -> "SummaryResponse":
        """Map a published snapshot to the stable public response shape."""

        return cls(
            sequence=snapshot.sequence,
            start_date=snapshot.start_date,
            end_date=snapshot.end_date,
            summary=snapshot.summary,
            invoices_count=len(snapshot.invoices),
            orders_count=len(snapshot.orders),
            offers_count=len(snapshot.offers),
            created_at=snapshot.created_at,
        )


class LinesResponse(StrictModel):
    """List response wrapper for filtered financial lines."""

    schema_version: Literal["v1"] = SCHEMA_VERSION
    total: int
    items: list[FinancialLine] = Field(default_factory=list)


class CurrencyResponse(StrictModel):
    """Formatted currency value for display code."""

    schema_version: Literal["v1"] = SCHEMA_VERSION
    amount: float
    locale: str
    formatted: str
    number: str
    currency: str
    currency_muted: bool = False
