from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, ClassVar, Literal, Union

from pydantic import Field, field_validator

from finance_summary.models.common import FrozenModel
from finance_summary.models.enums import InvoiceStatus, OfferStatus, OrderStatus, SourceType


class _LineBase(FrozenModel):
    """Fields shared by every normalized financial line."""

    known_statuses: ClassVar[frozenset[str]] = frozenset()

    id: int
    gross_amount: float = Field(default=0.0, ge=0)
    discount: float = Field(default=0.0, ge=0)
    commission: float = Field(default=0.0, ge=0)
    net_amount: float = Field(default=0.0, ge=0)
    status: str
    occurred_at: datetime
    searchable_text: str = ""
    reference: str = ""
    net_clamped: bool = False
    occurred_at_estimated: bool = False

    @field_validator("occurred_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)

    @property
    def has_known_status(self) -> bool:
        """Whether the status token belongs to this source's vocabulary."""

        return self.status in self.known_statuses


class InvoiceLine(_LineBase):
    """Normalized invoice record."""

    known_statuses: ClassVar[frozenset[str]] = frozenset(s.value for s in InvoiceStatus)

    source_type: Literal["invoice"] = SourceType.INVOICE.value

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID.value


class OrderLine(_LineBase):
    """Normalized order record."""

    known_statuses: ClassVar[frozenset[str]] = frozenset(s.value for s in OrderStatus)

    source_type: Literal["order"] = SourceType.ORDER.value


class OfferLine(_LineBase):
    """Normalized offer record; commission is always zero."""

    known_statuses: ClassVar[frozenset[str]] = frozenset(s.value for s in OfferStatus)

    source_type: Literal["offer"] = SourceType.OFFER.value
    commission: float = Field(default=0.0, ge=0, le=0)
    discount_percentage: float = Field(default=0.0, ge=0)

    @property
    def is_active(self) -> bool:
        return self.status == OfferStatus.ACTIVE.value


FinancialLine = Annotated[
    Union[InvoiceLine, OrderLine, OfferLine],
    Field(discriminator="source_type"),
]
