from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from typing import Any

from finance_summary.aggregator import aggregate
from finance_summary.errors import FetchFailure
from finance_summary.filters import apply_date_range, to_day
from finance_summary.models.summary import SummarySnapshot
from finance_summary.normalizers import normalize_invoices, normalize_offers, normalize_orders
from finance_summary.services.ports import FinanceSource

logger = logging.getLogger(__name__)

Fetch = Callable[[date | None, date | None], Awaitable[list[dict[str, Any]]]]


def build_snapshot(
    sequence: int,
    *,
    start_date: date | None,
    end_date: date | None,
    invoices: list[dict[str, Any]],
    orders: list[dict[str, Any]],
    offers: list[dict[str, Any]],
) -> SummarySnapshot:
    """Normalize, range-filter and aggregate one complete set of source records."""

    invoice_lines = apply_date_range(normalize_invoices(invoices), start_date, end_date)
    order_lines = apply_date_range(normalize_orders(orders), start_date, end_date)
    offer_lines = apply_date_range(normalize_offers(offers), start_date, end_date)
    summary = aggregate(
        invoice_lines,
        order_lines,
        offer_lines,
        start_date=start_date,
        end_date=end_date,
    )
    return SummarySnapshot(
        sequence=sequence,
        start_date=start_date,
        end_date=end_date,
        summary=summary,
        invoices=tuple(invoice_lines),
        orders=tuple(order_lines),
        offers=tuple(offer_lines),
    )


class SummaryRefresher:
    """Fetches all three sources as one unit and publishes the newest snapshot.

    Every refresh is tagged with a sequence number when it is issued. A result
    is published only if no newer refresh was issued meanwhile; older results
    are dropped, never merged.
    """

    def __init__(self, source: FinanceSource) -> None:
        """Bind the record source used for every refresh."""

        self.source = source
        self._counter = itertools.count(1)
        self._latest = 0
        self._current: SummarySnapshot | None = None

    @property
    def current(self) -> SummarySnapshot | None:
        """Latest published snapshot, if any refresh has succeeded."""

        return self._current

    @property
    def latest_sequence(self) -> int:
        return self._latest

    async def refresh(
        self,
        start_date: date | datetime | str | None = None,
        end_date: date | datetime | str | None = None,
    ) -> SummarySnapshot | None:
        """Run one fetch-normalize-aggregate cycle for a date range.

        Returns the published snapshot, or None when a newer refresh superseded
        this one, even if its fetch failed. Raises FetchFailure when a fetch of
        the latest refresh fails; the previously published snapshot stays in place.
        """

        start_day = to_day(start_date)
        end_day = to_day(end_date)
        if start_day and end_day and start_day > end_day:
            raise ValueError("start_date must not be after end_date")

        sequence = next(self._counter)
        self._latest = sequence
        logger.debug("refresh #%d issued for %s..%s", sequence, start_day, end_day)

        try:
            invoices, orders, offers = await self._fetch_all(sequence, start_day, end_day)
        except FetchFailure as exc:
            if sequence != self._latest:
                logger.info("discarding failed refresh #%d, superseded by #%d: %s", sequence, self._latest, exc)
                return None
            raise
        snapshot = build_snapshot(
            sequence,
            start_date=start_day,
            end_date=end_day,
            invoices=invoices,
            orders=orders,
            offers=offers,
        )
        if sequence != self._latest:
            logger.info("discarding refresh #%d, superseded by #%d", sequence, self._latest)
            return None
        self._current = snapshot
        logger.info(
            "published refresh #%d: %d invoices, %d orders, %d offers, %d warnings",
            sequence,
            len(snapshot.invoices),
            len(snapshot.orders),
            len(snapshot.offers),
            len(snapshot.summary.warnings),
        )
        return snapshot

    async def _fetch_all(
        self,
        sequence: int,
        start_date: date | None,
        end_date: date | None,
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]], list[dict[str, Any]]]:
        """Run the three fetches concurrently; the first failure cancels the rest."""

        fetches: list[tuple[str, Fetch]] = [
            ("invoices", self.source.fetch_invoices),
            ("orders", self.source.fetch_orders),
            ("offers", self.source.fetch_offers),
        ]
        tasks = [
            asyncio.create_task(_fetch_one(name, fetch, start_date, end_date))
            for name, fetch in fetches
        ]
        try:
            invoices, orders, offers = await asyncio.gather(*tasks)
        except FetchFailure as exc:
            logger.warning("refresh #%d failed: %s", sequence, exc)
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return invoices, orders, offers


async def _fetch_one(
    name: str,
    fetch: Fetch,
    start_date: date | None,
    end_date: date | None,
) -> list[dict[str, Any]]:
    try:
        records = await fetch(start_date, end_date)
    except FetchFailure:
        raise
    except Exception as exc:
        raise FetchFailure(name, str(exc) or type(exc).__name__) from exc
    if not isinstance(records, list):
        raise FetchFailure(name, f"expected a list of records, got {type(records).__name__}")
    return records
