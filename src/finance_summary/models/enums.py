from __future__ import annotations

from enum import Enum


class SourceType(str, Enum):
    """Backend record streams merged into one financial picture."""

    INVOICE = "invoice"  # Paid or payable invoice.
    ORDER = "order"  # Booking, independent of payment state.
    OFFER = "offer"  # Time-bounded discounted price.


class InvoiceStatus(str, Enum):
    """Payment status vocabulary of invoice records."""

    PAID = "paid"
    PENDING = "pending"
    UNPAID = "unpaid"  # Older backend builds report unpaid instead of pending.
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderStatus(str, Enum):
    """Lifecycle status vocabulary of order records."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OfferStatus(str, Enum):
    """Derived status of offer records."""

    ACTIVE = "active"
    EXPIRED = "expired"


class WarningCode(str, Enum):
    """Non-fatal reconciliation signals attached to a summary."""

    NET_AMOUNT_CLAMPED = "NET_AMOUNT_CLAMPED"  # Commission exceeded gross.
    NEGATIVE_NET_INCOME = "NEGATIVE_NET_INCOME"  # Deductions exceed revenue.
    ESTIMATED_TIMESTAMP = "ESTIMATED_TIMESTAMP"  # Record had no usable date.


class SortDirection(str, Enum):
    """Ordering applied by table sorting."""

    ASC = "asc"
    DESC = "desc"
