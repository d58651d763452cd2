from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from finance_summary.errors import RefreshSuperseded
from finance_summary.filters import filter_lines, sort_lines
from finance_summary.models.api_requests import FilterLinesRequest, LineFilter
from finance_summary.models.lines import InvoiceLine, OfferLine, OrderLine
from finance_summary.models.summary import FinancialSummary, SummarySnapshot
from finance_summary.money import CurrencyDisplay, format_currency_parts
from finance_summary.services.refresh_service import SummaryRefresher

DateBound = date | datetime | str | None
AnyLine = InvoiceLine | OrderLine | OfferLine


class FinanceService:
    """Application service exposing summaries, line filtering and currency display."""

    def __init__(self, refresher: SummaryRefresher, *, currency: str = "OMR") -> None:
        """Bind the refresher that owns fetch orchestration."""

        self.refresher = refresher
        self.currency = currency

    async def get_snapshot(self, start_date: DateBound = None, end_date: DateBound = None) -> SummarySnapshot:
        """Refresh for a range and return the resulting snapshot."""

        snapshot = await self.refresher.refresh(start_date, end_date)
        if snapshot is None:
            raise RefreshSuperseded(self.refresher.latest_sequence)
        return snapshot

    async def get_summary(self, start_date: DateBound = None, end_date: DateBound = None) -> FinancialSummary:
        """Refresh for a range and return only its summary."""

        snapshot = await self.get_snapshot(start_date, end_date)
        return snapshot.summary

    def current_snapshot(self) -> SummarySnapshot | None:
        return self.refresher.current

    def filter_lines(self, lines: Iterable[AnyLine], criteria: LineFilter | None = None) -> list[AnyLine]:
        return filter_lines(lines, criteria)

    def filter_request(self, request: FilterLinesRequest) -> list[AnyLine]:
        """Filter then sort the lines of a table request."""

        filtered = filter_lines(request.lines, request)
        return sort_lines(filtered, request.sort_field, request.sort_direction)

    def format_currency(self, amount: float, locale: str = "en") -> CurrencyDisplay:
        return format_currency_parts(amount, locale, self.currency)
