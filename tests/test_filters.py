from __future__ import annotations

import itertools
from datetime import UTC, date, datetime

import pytest

from finance_summary.filters import (
    apply_date_range,
    apply_status_filter,
    apply_text_filter,
    filter_lines,
    preset_range,
    sort_lines,
)
from finance_summary.models.api_requests import LineFilter
from finance_summary.models.lines import InvoiceLine, OrderLine


def _invoice(line_id: int, *, status: str, text: str, when: datetime, gross: float = 10.0) -> InvoiceLine:
    return InvoiceLine(
        id=line_id,
        gross_amount=gross,
        net_amount=gross,
        status=status,
        occurred_at=when,
        searchable_text=text,
        reference=str(line_id),
    )


@pytest.fixture
def lines() -> list[InvoiceLine]:
    return [
        _invoice(1, status="paid", text="Salim Clean Co Deep Cleaning", when=datetime(2025, 3, 1, 23, 59, tzinfo=UTC), gross=30),
        _invoice(2, status="pending", text="Aisha FixIt Plumbing", when=datetime(2025, 3, 2, 0, 0, tzinfo=UTC), gross=10),
        _invoice(3, status="paid", text="Omar FixIt Painting", when=datetime(2025, 3, 5, 12, 0, tzinfo=UTC), gross=20),
        _invoice(4, status="refunded", text="salim Garden Pros Lawn", when=datetime(2025, 2, 27, 8, 0, tzinfo=UTC), gross=10),
    ]


def test_text_filter_is_case_insensitive(lines: list[InvoiceLine]) -> None:
    """Search matches substrings regardless of case."""

    assert [line.id for line in apply_text_filter(lines, "SALIM")] == [1, 4]
    assert [line.id for line in apply_text_filter(lines, "fixit")] == [2, 3]


@pytest.mark.parametrize("term", ["", "   ", None])
def test_blank_text_filter_is_noop(lines: list[InvoiceLine], term: str | None) -> None:
    """A blank term returns the input unchanged, not an empty list."""

    assert apply_text_filter(lines, term) == lines


def test_status_filter_exact_and_all(lines: list[InvoiceLine]) -> None:
    """Exact status match; the 'all' sentinel disables filtering."""

    assert [line.id for line in apply_status_filter(lines, "paid")] == [1, 3]
    assert apply_status_filter(lines, "all") == lines
    assert apply_status_filter(lines, "pai") == []


def test_status_filter_ignores_case_on_both_sides() -> None:
    """Submitted lines may carry mixed-case statuses."""

    mixed = [
        _invoice(1, status="Paid", text="a", when=datetime(2025, 3, 1, tzinfo=UTC)),
        _invoice(2, status="PENDING", text="b", when=datetime(2025, 3, 1, tzinfo=UTC)),
    ]
    assert [line.id for line in apply_status_filter(mixed, "Paid")] == [1]
    assert [line.id for line in apply_status_filter(mixed, "paid")] == [1]
    assert [line.id for line in apply_status_filter(mixed, "pending")] == [2]


def test_date_range_is_inclusive_by_day(lines: list[InvoiceLine]) -> None:
    """Boundary days are kept regardless of time of day."""

    kept = apply_date_range(lines, date(2025, 3, 1), date(2025, 3, 2))
    assert [line.id for line in kept] == [1, 2]


def test_date_range_open_bounds(lines: list[InvoiceLine]) -> None:
    """A missing bound is unbounded on that side; ISO strings are accepted."""

    assert [line.id for line in apply_date_range(lines, "2025-03-02")] == [2, 3]
    assert [line.id for line in apply_date_range(lines, None, "2025-03-01")] == [1, 4]
    assert apply_date_range(lines) == lines


def test_date_range_rejects_garbage_bound(lines: list[InvoiceLine]) -> None:
    """Unparseable bounds are a caller error."""

    with pytest.raises(ValueError):
        apply_date_range(lines, "yesterday")


def test_filters_are_order_independent(lines: list[InvoiceLine]) -> None:
    """Any application order of the three filters yields the same set."""

    steps = [
        lambda ls: apply_text_filter(ls, "salim"),
        lambda ls: apply_status_filter(ls, "paid"),
        lambda ls: apply_date_range(ls, "2025-03-01", "2025-03-31"),
    ]
    results = set()
    for order in itertools.permutations(steps):
        current = lines
        for step in order:
            current = step(current)
        results.add(tuple(line.id for line in current))
    assert results == {(1,)}


@pytest.mark.parametrize("term", ["", "fixit", "salim", "zzz"])
@pytest.mark.parametrize("status", ["all", "paid", "pending", "refunded"])
def test_status_and_text_filters_commute(lines: list[InvoiceLine], term: str, status: str) -> None:
    """Status-then-text equals text-then-status."""

    assert apply_status_filter(apply_text_filter(lines, term), status) == apply_text_filter(
        apply_status_filter(lines, status), term
    )


def test_filter_lines_composes_criteria(lines: list[InvoiceLine]) -> None:
    """filter_lines intersects all criteria of a LineFilter."""

    criteria = LineFilter(search_term="fixit", status="paid", start_date=date(2025, 3, 1))
    assert [line.id for line in filter_lines(lines, criteria)] == [3]
    assert filter_lines(lines) == lines


def test_line_filter_rejects_inverted_range() -> None:
    """A start after the end is rejected at the model boundary."""

    with pytest.raises(ValueError):
        LineFilter(start_date=date(2025, 3, 2), end_date=date(2025, 3, 1))


def test_filters_work_across_sources(lines: list[InvoiceLine]) -> None:
    """Mixed invoice and order lines pass through the same filters."""

    order = OrderLine(
        id=1,
        status="completed",
        occurred_at=datetime(2025, 3, 1, tzinfo=UTC),
        searchable_text="Salim FixIt",
    )
    mixed = [*lines, order]
    assert [line.source_type for line in apply_text_filter(mixed, "salim fixit")] == ["order"]


def test_sort_lines_numeric_date_and_text(lines: list[InvoiceLine]) -> None:
    """Sorting handles numbers, dates and case-insensitive text; ties keep input order."""

    assert [line.id for line in sort_lines(lines, "gross_amount")] == [2, 4, 3, 1]
    assert [line.id for line in sort_lines(lines, "gross_amount", "desc")] == [1, 3, 2, 4]
    assert [line.id for line in sort_lines(lines, "occurred_at")] == [4, 1, 2, 3]
    assert [line.id for line in sort_lines(lines, "searchable_text")] == [2, 3, 1, 4]
    assert sort_lines(lines, None) == lines


def test_preset_range() -> None:
    """Quick presets resolve relative to today."""

    today = date(2025, 3, 31)
    assert preset_range("all", today) == (None, None)
    assert preset_range("today", today) == (today, today)
    assert preset_range("week", today) == (date(2025, 3, 24), today)
    assert preset_range("month", today) == (date(2025, 3, 1), today)
    with pytest.raises(ValueError):
        preset_range("decade", today)
