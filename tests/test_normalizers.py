from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from finance_summary.normalizers import (
    discount_percentage,
    normalize_invoice,
    normalize_invoices,
    normalize_offer,
    normalize_order,
    parse_timestamp,
)


def test_invoice_commission_from_services_breakdown() -> None:
    """Breakdown commissions win over the flat field; discount is not subtracted twice."""

    line = normalize_invoice(
        {
            "invoiceId": 7,
            "totalAmount": 100,
            "discount": 10,
            "commission": 99,
            "paymentStatus": "paid",
            "paymentDate": "2025-03-01T10:00:00Z",
            "servicesBreakdown": [{"commissionAmount": 15}],
        }
    )
    assert line.source_type == "invoice"
    assert line.id == 7
    assert line.gross_amount == 100
    assert line.discount == 10
    assert line.commission == 15
    assert line.net_amount == 85
    assert line.status == "paid"
    assert line.is_paid
    assert line.net_clamped is False


def test_invoice_breakdown_nested_under_order() -> None:
    """Full invoice payloads carry the breakdown inside the related order."""

    line = normalize_invoice(
        {
            "id": 3,
            "orderId": 41,
            "totalAmount": "60.00",
            "paymentStatus": "unpaid",
            "order": {
                "servicesBreakdown": [{"commissionAmount": 4.5}, {"commissionAmount": None}, "bad"],
                "user": {"name": "Salim"},
                "provider": {"name": "Clean Co"},
                "service": {"title": "Deep Cleaning"},
            },
        }
    )
    assert line.id == 3
    assert line.commission == 4.5
    assert line.net_amount == 55.5
    assert line.status == "unpaid"
    assert line.reference == "41"
    assert line.searchable_text == "Salim Clean Co Deep Cleaning 41"


def test_invoice_flat_commission_when_breakdown_missing() -> None:
    """Without breakdown entries the flat commission field is used."""

    line = normalize_invoice({"totalAmount": 80, "commission": 8, "servicesBreakdown": []})
    assert line.commission == 8
    assert line.net_amount == 72


def test_invoice_defaults_for_missing_fields() -> None:
    """Missing numeric fields become zero and status defaults to pending."""

    line = normalize_invoice({"invoiceId": 1, "totalAmount": None, "paymentDate": "2025-01-05"})
    assert line.gross_amount == 0
    assert line.discount == 0
    assert line.commission == 0
    assert line.net_amount == 0
    assert line.status == "pending"
    assert line.occurred_at == datetime(2025, 1, 5, tzinfo=UTC)
    assert line.occurred_at_estimated is False


@pytest.mark.parametrize(
    "raw",
    [
        {"totalAmount": 10, "commissionAmount": 25},
        {"totalAmount": 0, "commissionAmount": 0.01},
        {"totalAmount": 99.99, "commissionAmount": 100},
    ],
)
def test_order_commission_above_gross_is_clamped(raw: dict) -> None:
    """Net amount never goes negative; the clamp is flagged on the line."""

    line = normalize_order(raw)
    assert line.net_amount == 0
    assert line.net_clamped is True


def test_invoice_commission_above_gross_is_clamped() -> None:
    """Invoices clamp the same way orders do."""

    line = normalize_invoice({"totalAmount": 20, "servicesBreakdown": [{"commissionAmount": 30}]})
    assert line.net_amount == 0
    assert line.net_clamped is True


def test_order_prefers_order_date_then_created_at() -> None:
    """orderDate wins; createdAt is the fallback."""

    with_both = normalize_order({"orderDate": "2025-02-01", "createdAt": "2025-01-01"})
    assert with_both.occurred_at.date().isoformat() == "2025-02-01"
    created_only = normalize_order({"createdAt": "2025-01-01T08:30:00"})
    assert created_only.occurred_at.date().isoformat() == "2025-01-01"
    assert created_only.occurred_at_estimated is False


def test_order_without_dates_uses_normalization_time() -> None:
    """An order with no dates still produces a line, flagged as estimated."""

    before = datetime.now(UTC)
    line = normalize_order({"orderId": 9, "totalAmount": 30, "commissionAmount": 3})
    after = datetime.now(UTC)
    assert before - timedelta(seconds=1) <= line.occurred_at <= after + timedelta(seconds=1)
    assert line.occurred_at_estimated is True
    assert line.status == "pending"
    assert line.net_amount == 27


def test_order_fields_and_search_text() -> None:
    """Orders carry booking id and location into the searchable text."""

    line = normalize_order(
        {
            "id": 12,
            "bookingId": "BK-0012",
            "status": "IN_PROGRESS",
            "totalAmount": 45,
            "discount": 5,
            "commissionAmount": 4.5,
            "orderDate": "2025-02-10T09:00:00.000Z",
            "location": "Muscat",
            "user": {"name": "Aisha"},
            "provider": {"name": "FixIt"},
            "service": {"title": "Plumbing"},
        }
    )
    assert line.id == 12
    assert line.reference == "BK-0012"
    assert line.status == "in_progress"
    assert line.has_known_status
    assert line.discount == 5
    assert line.net_amount == 40.5
    assert "Muscat" in line.searchable_text
    assert "FixIt" in line.searchable_text


def test_offer_scenario() -> None:
    """A 50 → 40 active offer has 10 discount, net 40 and 20 % off."""

    line = normalize_offer({"id": 5, "originalPrice": 50, "offerPrice": 40, "isActive": True})
    assert line.discount == 10
    assert line.net_amount == 40
    assert line.commission == 0
    assert line.status == "active"
    assert line.is_active
    assert line.discount_percentage == 20.0


def test_offer_price_above_original_has_no_negative_discount() -> None:
    """A malformed offer never produces a negative discount."""

    line = normalize_offer({"originalPrice": 40, "offerPrice": 55, "isActive": False})
    assert line.discount == 0
    assert line.net_amount == 55
    assert line.status == "expired"
    assert line.discount_percentage == 0


@pytest.mark.parametrize(
    ("flag", "status"),
    [
        (True, "active"),
        (False, "expired"),
        (1, "active"),
        (0, "expired"),
        ("true", "active"),
        ("TRUE", "active"),
        ("1", "active"),
        ("false", "expired"),
        ("0", "expired"),
        ("yes please", "expired"),
        (None, "expired"),
    ],
)
def test_offer_active_flag_coercion(flag: object, status: str) -> None:
    """String and numeric isActive values are read as booleans, not by truthiness."""

    line = normalize_offer({"id": 1, "originalPrice": 10, "offerPrice": 8, "isActive": flag})
    assert line.status == status


def test_offer_missing_prices() -> None:
    """Missing offer price falls back to the original price; zero gross guards division."""

    no_offer_price = normalize_offer({"originalPrice": 30})
    assert no_offer_price.discount == 0
    assert no_offer_price.net_amount == 30
    empty = normalize_offer({})
    assert empty.gross_amount == 0
    assert empty.discount_percentage == 0
    assert empty.occurred_at_estimated is True


def test_discount_percentage_guards_zero_gross() -> None:
    """Zero or negative gross yields 0 instead of dividing."""

    assert discount_percentage(0, 5) == 0
    assert discount_percentage(3, 1) == 33.33


def test_normalize_many_skips_non_objects() -> None:
    """List helpers skip entries that are not JSON objects."""

    lines = normalize_invoices([{"invoiceId": 1}, None, "oops", {"invoiceId": 2}])
    assert [line.id for line in lines] == [1, 2]


def test_parse_timestamp_variants() -> None:
    """ISO strings, Z suffixes and epoch millis are understood; junk is not."""

    assert parse_timestamp("2025-03-01T10:00:00Z") == datetime(2025, 3, 1, 10, tzinfo=UTC)
    assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=UTC)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None
