"""Normalization boundary between loosely-typed backend payloads and FinancialLine.

Every function here is total over the record shapes the backend returns:
missing or null numeric fields become 0, missing statuses get the source's
default, and missing timestamps fall back to the normalization time (flagged
on the line so the aggregator can report it).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, date, datetime
from typing import Any, TypeVar

from finance_summary.errors import DataShapeError
from finance_summary.models.enums import InvoiceStatus, OfferStatus, OrderStatus
from finance_summary.models.lines import InvoiceLine, OfferLine, OrderLine
from finance_summary.money import round2, to_amount

logger = logging.getLogger(__name__)

LineT = TypeVar("LineT", InvoiceLine, OrderLine, OfferLine)


def _amount(raw: Mapping[str, Any], key: str, *, default: float = 0.0) -> float:
    """Read a non-negative amount, substituting ``default`` for unusable values."""

    try:
        value = to_amount(raw.get(key), field=key)
    except DataShapeError as exc:
        logger.debug("recovered data shape problem: %s", exc)
        return default
    return max(0.0, value)


def _record_id(raw: Mapping[str, Any], *keys: str) -> int:
    for key in keys:
        value = raw.get(key)
        if value is None or isinstance(value, bool):
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return 0


def _nested(raw: Mapping[str, Any], *path: str) -> Any:
    current: Any = raw
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _status(value: Any, default: str) -> str:
    text = _text(value).lower()
    return text or default


_TRUE_FLAGS = {"true", "1"}


def _flag(value: Any) -> bool:
    """Read a backend boolean; strings like ``"false"`` or ``"0"`` are false."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_FLAGS
    return False


def _aware(value: datetime) -> datetime:
    # Naive backend timestamps are treated as UTC so lines stay comparable.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse backend date values (ISO strings, dates, epoch millis) into datetimes."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return _aware(parsed)


def _occurred_at(raw: Mapping[str, Any], *keys: str) -> tuple[datetime, bool]:
    """Return the first parseable timestamp among ``keys`` and whether it was estimated."""

    for key in keys:
        parsed = parse_timestamp(raw.get(key))
        if parsed is not None:
            return parsed, False
    return datetime.now(UTC), True


def _searchable(*parts: Any) -> str:
    return " ".join(text for text in (_text(part) for part in parts) if text)


def _party_names(raw: Mapping[str, Any]) -> tuple[str, str, str]:
    """Customer, provider and service title, top level first, then under ``order``."""

    customer = _text(_nested(raw, "user", "name")) or _text(_nested(raw, "order", "user", "name"))
    provider = _text(_nested(raw, "provider", "name")) or _text(
        _nested(raw, "order", "provider", "name")
    )
    service = _text(_nested(raw, "service", "title")) or _text(
        _nested(raw, "order", "service", "title")
    )
    return customer, provider, service


def _breakdown_commission(raw: Mapping[str, Any]) -> float | None:
    """Sum breakdown commissions, or None when no breakdown entries exist."""

    breakdown = raw.get("servicesBreakdown")
    if not isinstance(breakdown, list) or not breakdown:
        breakdown = _nested(raw, "order", "servicesBreakdown")
    if not isinstance(breakdown, list) or not breakdown:
        return None
    total = 0.0
    for entry in breakdown:
        if isinstance(entry, Mapping):
            total += _amount(entry, "commissionAmount")
    return total


def normalize_invoice(raw: Mapping[str, Any]) -> InvoiceLine:
    """Normalize one invoice record; discount is already reflected in ``totalAmount``."""

    gross = _amount(raw, "totalAmount")
    commission = _breakdown_commission(raw)
    if commission is None:
        commission = _amount(raw, "commission")
    raw_net = gross - commission
    occurred_at, estimated = _occurred_at(raw, "paymentDate", "createdAt")
    customer, provider, service = _party_names(raw)
    order_id = _text(raw.get("orderId")) or _text(_nested(raw, "order", "id"))
    return InvoiceLine(
        id=_record_id(raw, "invoiceId", "id"),
        gross_amount=round2(gross),
        discount=round2(_amount(raw, "discount")),
        commission=round2(commission),
        net_amount=round2(max(0.0, raw_net)),
        status=_status(raw.get("paymentStatus"), InvoiceStatus.PENDING.value),
        occurred_at=occurred_at,
        searchable_text=_searchable(customer, provider, service, order_id),
        reference=order_id,
        net_clamped=raw_net < 0,
        occurred_at_estimated=estimated,
    )


def normalize_order(raw: Mapping[str, Any]) -> OrderLine:
    """Normalize one order record.

    Backend versions report either ``orderDate`` or ``createdAt``; when both
    are absent the normalization time is used and the line is flagged.
    """

    gross = _amount(raw, "totalAmount")
    commission = _amount(raw, "commissionAmount")
    raw_net = gross - commission
    occurred_at, estimated = _occurred_at(raw, "orderDate", "createdAt")
    customer, provider, service = _party_names(raw)
    order_id = _record_id(raw, "orderId", "id")
    booking = _text(raw.get("bookingId"))
    return OrderLine(
        id=order_id,
        gross_amount=round2(gross),
        discount=round2(_amount(raw, "discount")),
        commission=round2(commission),
        net_amount=round2(max(0.0, raw_net)),
        status=_status(raw.get("status"), OrderStatus.PENDING.value),
        occurred_at=occurred_at,
        searchable_text=_searchable(customer, provider, service, booking, raw.get("location")),
        reference=booking or str(order_id),
        net_clamped=raw_net < 0,
        occurred_at_estimated=estimated,
    )


def discount_percentage(gross: float, discount: float) -> float:
    """Discount as a percentage of gross; 0 when there is no gross to divide by."""

    if gross <= 0:
        return 0.0
    return round2(discount / gross * 100)


def normalize_offer(raw: Mapping[str, Any]) -> OfferLine:
    """Normalize one offer; ``offerPrice`` is already net of the offer's own discount."""

    gross = _amount(raw, "originalPrice")
    offer_price = _amount(raw, "offerPrice", default=gross)
    discount = max(0.0, gross - offer_price)
    occurred_at, estimated = _occurred_at(raw, "startDate", "createdAt")
    _, provider, service = _party_names(raw)
    return OfferLine(
        id=_record_id(raw, "id", "offerId"),
        gross_amount=round2(gross),
        discount=round2(discount),
        net_amount=round2(offer_price),
        status=OfferStatus.ACTIVE.value if _flag(raw.get("isActive")) else OfferStatus.EXPIRED.value,
        occurred_at=occurred_at,
        searchable_text=_searchable(provider, service, raw.get("description")),
        reference=service,
        occurred_at_estimated=estimated,
        discount_percentage=discount_percentage(gross, discount),
    )


def _normalize_many(
    records: Iterable[Any],
    normalize: Callable[[Mapping[str, Any]], LineT],
    *,
    kind: str,
) -> list[LineT]:
    lines: list[LineT] = []
    for index, raw in enumerate(records or []):
        if not isinstance(raw, Mapping):
            logger.warning("skipping %s record #%d: expected an object, got %s", kind, index, type(raw).__name__)
            continue
        lines.append(normalize(raw))
    return lines


def normalize_invoices(records: Iterable[Any]) -> list[InvoiceLine]:
    return _normalize_many(records, normalize_invoice, kind="invoice")


def normalize_orders(records: Iterable[Any]) -> list[OrderLine]:
    return _normalize_many(records, normalize_order, kind="order")


def normalize_offers(records: Iterable[Any]) -> list[OfferLine]:
    return _normalize_many(records, normalize_offer, kind="offer")
