from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import Field, model_validator

from finance_summary.models.common import StrictModel
from finance_summary.models.enums import SortDirection
from finance_summary.models.lines import FinancialLine

SortField = Literal[
    "id",
    "gross_amount",
    "discount",
    "commission",
    "net_amount",
    "status",
    "occurred_at",
    "reference",
    "searchable_text",
]


class LineFilter(StrictModel):
    """Search, status, and date-range criteria applied to financial lines."""

    search_term: str = ""
    status: str = "all"
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def check_range(self) -> "LineFilter":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class FilterLinesRequest(LineFilter):
    """Lines submitted by a table view together with its filter state."""

    lines: list[FinancialLine] = Field(default_factory=list)
    sort_field: SortField | None = None
    sort_direction: SortDirection = SortDirection.ASC
