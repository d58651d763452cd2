"""Public model exports for the finance summary schema v1."""

from finance_summary.models.api_requests import FilterLinesRequest, LineFilter
from finance_summary.models.api_responses import CurrencyResponse, LinesResponse, SummaryResponse
from finance_summary.models.common import ErrorInfo
from finance_summary.models.enums import (
    InvoiceStatus,
    OfferStatus,
    OrderStatus,
    SortDirection,
    SourceType,
    WarningCode,
)
from finance_summary.models.lines import FinancialLine, InvoiceLine, OfferLine, OrderLine
from finance_summary.models.summary import (
    FinancialSummary,
    ReconciliationWarning,
    StatusBreakdown,
    SummarySnapshot,
)
from finance_summary.models.version import SCHEMA_VERSION

__all__ = [
    "CurrencyResponse",
    "ErrorInfo",
    "FilterLinesRequest",
    "FinancialLine",
    "FinancialSummary",
    "InvoiceLine",
    "InvoiceStatus",
    "LineFilter",
    "LinesResponse",
    "OfferLine",
    "OfferStatus",
    "OrderLine",
    "OrderStatus",
    "ReconciliationWarning",
    "SCHEMA_VERSION",
    "SortDirection",
    "SourceType",
    "StatusBreakdown",
    "SummaryResponse",
    "SummarySnapshot",
    "WarningCode",
]
