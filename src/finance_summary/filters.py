from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import Any, Literal, TypeVar

from finance_summary.models.api_requests import LineFilter, SortField
from finance_summary.models.enums import SortDirection
from finance_summary.models.lines import InvoiceLine, OfferLine, OrderLine

LineT = TypeVar("LineT", InvoiceLine, OrderLine, OfferLine)

ALL_STATUSES = "all"

DatePreset = Literal["all", "today", "week", "month"]
_PRESET_DAYS = {"week": 7, "month": 30}

_NUMERIC_FIELDS = {"id", "gross_amount", "discount", "commission", "net_amount"}


def to_day(value: date | datetime | str | None) -> date | None:
    """Coerce a date bound (date, datetime, ISO string) to a calendar day."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"invalid date bound: {value!r}") from exc


def apply_text_filter(lines: Iterable[LineT], term: str | None) -> list[LineT]:
    """Case-insensitive substring match on searchable text; a blank term keeps everything."""

    needle = (term or "").strip().casefold()
    if not needle:
        return list(lines)
    return [line for line in lines if needle in line.searchable_text.casefold()]


def apply_status_filter(lines: Iterable[LineT], status: str | None) -> list[LineT]:
    """Case-insensitive exact status match; ``"all"`` disables the filter."""

    wanted = (status or ALL_STATUSES).strip().casefold()
    if wanted in ("", ALL_STATUSES):
        return list(lines)
    return [line for line in lines if line.status.strip().casefold() == wanted]


def apply_date_range(
    lines: Iterable[LineT],
    start: date | datetime | str | None = None,
    end: date | datetime | str | None = None,
) -> list[LineT]:
    """Keep lines whose day falls in ``[start, end]``; a missing bound is open."""

    start_day = to_day(start)
    end_day = to_day(end)
    if start_day is None and end_day is None:
        return list(lines)
    kept: list[LineT] = []
    for line in lines:
        day = line.occurred_at.date()
        if start_day is not None and day < start_day:
            continue
        if end_day is not None and day > end_day:
            continue
        kept.append(line)
    return kept


def filter_lines(lines: Iterable[LineT], criteria: LineFilter | None = None) -> list[LineT]:
    """Intersect text, status and date-range filters."""

    criteria = criteria or LineFilter()
    filtered = apply_text_filter(lines, criteria.search_term)
    filtered = apply_status_filter(filtered, criteria.status)
    return apply_date_range(filtered, criteria.start_date, criteria.end_date)


def _sort_key(line: Any, field: SortField) -> Any:
    value = getattr(line, field)
    if field == "occurred_at":
        return value.timestamp()
    if field in _NUMERIC_FIELDS:
        return float(value)
    return str(value or "").casefold()


def sort_lines(
    lines: Sequence[LineT],
    field: SortField | None,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[LineT]:
    """Stable table sort on one line attribute."""

    if field is None:
        return list(lines)
    reverse = SortDirection(direction) == SortDirection.DESC
    return sorted(lines, key=lambda line: _sort_key(line, field), reverse=reverse)


def preset_range(preset: DatePreset | str, today: date | None = None) -> tuple[date | None, date | None]:
    """Resolve the table's quick date presets into an inclusive day range."""

    today = today or date.today()
    if preset == "all":
        return None, None
    if preset == "today":
        return today, today
    if preset in _PRESET_DAYS:
        return today - timedelta(days=_PRESET_DAYS[preset]), today
    raise ValueError(f"unknown date preset: {preset!r}")
