from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any

import requests

from finance_summary.errors import FetchFailure

logger = logging.getLogger(__name__)

INVOICES_PATH = "/admin/reports/revenue"
ORDERS_PATH = "/admin/reports/orders"
OFFERS_PATH = "/offers"


def range_params(start_date: date | None, end_date: date | None) -> dict[str, str]:
    """Build optional inclusive ``startDate``/``endDate`` query bounds."""

    params: dict[str, str] = {}
    if start_date is not None:
        params["startDate"] = start_date.isoformat()
    if end_date is not None:
        params["endDate"] = end_date.isoformat()
    return params


def unwrap_records(payload: Any, *, source: str) -> list[dict[str, Any]]:
    """Accept a bare JSON list or a ``{"data": [...]}`` envelope."""

    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, list):
        raise FetchFailure(source, f"unexpected payload type {type(payload).__name__}")
    return payload


class HttpFinanceSource:
    """Finance source backed by the marketplace REST API.

    Requests run in worker threads so the three fetches of one refresh
    proceed concurrently. Each fetch opens its own ``requests.Session``; an
    injected ``session`` is shared by those threads and must be thread-safe.
    No retries happen here.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        """Bind API base URL, request timeout and an optional shared session."""

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session
        if session is not None:
            session.headers.setdefault("Accept", "application/json")

    async def fetch_invoices(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        return await asyncio.to_thread(
            self._get, "invoices", INVOICES_PATH, range_params(start_date, end_date)
        )

    async def fetch_orders(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        return await asyncio.to_thread(
            self._get, "orders", ORDERS_PATH, range_params(start_date, end_date)
        )

    async def fetch_offers(self, start_date: date | None, end_date: date | None) -> list[dict[str, Any]]:
        # The offers endpoint has no date bounds; the refresher filters by start date.
        return await asyncio.to_thread(self._get, "offers", OFFERS_PATH, {})

    def _get(self, source: str, path: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """Perform one GET and decode its record list."""

        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            if self.session is not None:
                resp = self.session.get(url, params=params, timeout=self.timeout)
            else:
                with requests.Session() as session:
                    session.headers["Accept"] = "application/json"
                    resp = session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise FetchFailure(source, str(exc)) from exc
        except ValueError as exc:
            raise FetchFailure(source, f"invalid JSON from {url}") from exc
        return unwrap_records(payload, source=source)
