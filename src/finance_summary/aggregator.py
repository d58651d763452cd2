from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from finance_summary.models.enums import InvoiceStatus, SourceType, WarningCode
from finance_summary.models.lines import InvoiceLine, OfferLine, OrderLine
from finance_summary.models.summary import FinancialSummary, ReconciliationWarning, StatusBreakdown
from finance_summary.money import round2, to_decimal

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_PENDING_INVOICE_STATUSES = {InvoiceStatus.PENDING.value, InvoiceStatus.UNPAID.value}


class _Tally:
    """Running per-status counts and gross volume."""

    def __init__(self) -> None:
        self._buckets: dict[tuple[SourceType, str], list] = {}

    def add(self, source_type: SourceType, status: str, gross: float) -> None:
        bucket = self._buckets.setdefault((source_type, status), [0, _ZERO])
        bucket[0] += 1
        bucket[1] += to_decimal(gross)

    def freeze(self) -> tuple[StatusBreakdown, ...]:
        return tuple(
            StatusBreakdown(
                source_type=source_type,
                status=status,
                count=count,
                gross_amount=round2(gross),
            )
            for (source_type, status), (count, gross) in sorted(
                self._buckets.items(), key=lambda item: (item[0][0].value, item[0][1])
            )
        )


def _line_warnings(line: InvoiceLine | OrderLine | OfferLine, source_type: SourceType) -> list[ReconciliationWarning]:
    warnings: list[ReconciliationWarning] = []
    if line.net_clamped:
        warnings.append(
            ReconciliationWarning(
                code=WarningCode.NET_AMOUNT_CLAMPED,
                message=f"{source_type.value} #{line.id}: commission exceeds gross amount, net clamped to 0",
                source_type=source_type,
                line_id=line.id,
            )
        )
    if line.occurred_at_estimated:
        warnings.append(
            ReconciliationWarning(
                code=WarningCode.ESTIMATED_TIMESTAMP,
                message=f"{source_type.value} #{line.id}: no date on record, normalization time used",
                severity="info",
                source_type=source_type,
                line_id=line.id,
            )
        )
    return warnings


def aggregate(
    invoice_lines: Iterable[InvoiceLine],
    order_lines: Iterable[OrderLine],
    offer_lines: Iterable[OfferLine],
    *,
    start_date: date | None = None,
    end_date: date | None = None,
) -> FinancialSummary:
    """Combine normalized lines of all three sources into one summary.

    Revenue counts invoices only; orders contribute commission and offers
    contribute discounts. Orders are not deduplicated against invoices.
    Inconsistent data never raises: clamped lines and negative net income are
    reported as warnings on the summary.
    """

    tally = _Tally()
    warnings: list[ReconciliationWarning] = []

    revenue = commission = discounts = _ZERO
    paid_amount = pending_amount = _ZERO
    invoice_count = paid_count = pending_count = 0
    for line in invoice_lines:
        invoice_count += 1
        revenue += to_decimal(line.gross_amount)
        commission += to_decimal(line.commission)
        discounts += to_decimal(line.discount)
        if line.status == InvoiceStatus.PAID.value:
            paid_count += 1
            paid_amount += to_decimal(line.gross_amount)
        elif line.status in _PENDING_INVOICE_STATUSES:
            pending_count += 1
            pending_amount += to_decimal(line.gross_amount)
        tally.add(SourceType.INVOICE, line.status, line.gross_amount)
        warnings.extend(_line_warnings(line, SourceType.INVOICE))

    order_count = 0
    for line in order_lines:
        order_count += 1
        commission += to_decimal(line.commission)
        tally.add(SourceType.ORDER, line.status, line.gross_amount)
        warnings.extend(_line_warnings(line, SourceType.ORDER))

    offer_count = active_count = 0
    for line in offer_lines:
        offer_count += 1
        discounts += to_decimal(line.discount)
        if line.is_active:
            active_count += 1
        tally.add(SourceType.OFFER, line.status, line.gross_amount)
        warnings.extend(_line_warnings(line, SourceType.OFFER))

    total_revenue = round2(revenue)
    total_commission = round2(commission)
    total_discounts = round2(discounts)
    net_income = round2(
        to_decimal(total_revenue) - to_decimal(total_commission) - to_decimal(total_discounts)
    )
    if net_income < 0:
        logger.info("net income is negative (%.2f) for range %s..%s", net_income, start_date, end_date)
        warnings.append(
            ReconciliationWarning(
                code=WarningCode.NEGATIVE_NET_INCOME,
                message="commission and discounts exceed revenue for this range",
            )
        )

    return FinancialSummary(
        start_date=start_date,
        end_date=end_date,
        total_revenue=total_revenue,
        total_commission=total_commission,
        total_discounts=total_discounts,
        net_income=net_income,
        total_transactions=invoice_count,
        total_invoices=invoice_count,
        total_orders=order_count,
        total_offers=offer_count,
        active_offers=active_count,
        paid_invoices=paid_count,
        pending_invoices=pending_count,
        paid_amount=round2(paid_amount),
        pending_amount=round2(pending_amount),
        status_breakdown=tally.freeze(),
        warnings=tuple(warnings),
    )
