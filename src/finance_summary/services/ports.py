from __future__ import annotations

from datetime import date
from typing import Any, Protocol


class FinanceSource(Protocol):
    """Read-only access to the three backend record collections."""

    async def fetch_invoices(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        """Fetch paid invoice records for an inclusive date range."""

        ...

    async def fetch_orders(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        """Fetch order records regardless of payment state."""

        ...

    async def fetch_offers(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        """Fetch promotional offer records."""

        ...
