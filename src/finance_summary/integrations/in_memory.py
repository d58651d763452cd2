from __future__ import annotations

import asyncio
import copy
from datetime import date
from typing import Any


class InMemoryFinanceSource:
    """In-memory finance source for local development and tests."""

    def __init__(
        self,
        *,
        invoices: list[dict[str, Any]] | None = None,
        orders: list[dict[str, Any]] | None = None,
        offers: list[dict[str, Any]] | None = None,
        delay: float = 0.0,
    ) -> None:
        """Initialize fixed payloads and an optional artificial latency."""

        self.invoices = list(invoices or [])
        self.orders = list(orders or [])
        self.offers = list(offers or [])
        self.delay = delay
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, date | None, date | None]] = []

    def fail(self, source: str, exc: Exception) -> None:
        """Make the next fetches of ``source`` raise ``exc``."""

        self.failures[source] = exc

    async def _serve(
        self,
        source: str,
        records: list[dict[str, Any]],
        start_date: date | None,
        end_date: date | None,
    ) -> list[dict[str, Any]]:
        self.calls.append((source, start_date, end_date))
        if self.delay:
            await asyncio.sleep(self.delay)
        if source in self.failures:
            raise self.failures[source]
        return copy.deepcopy(records)

    async def fetch_invoices(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        return await self._serve("invoices", self.invoices, start_date, end_date)

    async def fetch_orders(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        return await self._serve("orders", self.orders, start_date, end_date)

    async def fetch_offers(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        return await self._serve("offers", self.offers, start_date, end_date)
