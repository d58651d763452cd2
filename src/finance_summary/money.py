from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from finance_summary.errors import DataShapeError

_CENT = Decimal("0.01")
# Beyond this magnitude a float cannot carry cents anyway.
_MAX_QUANTIZE = 1e15

DEFAULT_CURRENCY = "OMR"

# (group separator, decimal separator)
_SEPARATORS: dict[str, tuple[str, str]] = {
    "en": (",", "."),
    "ar": ("٬", "٫"),
    "de": (".", ","),
    "fr": ("\u202f", ","),
}
_TRAILING_CURRENCY_LOCALES = {"ar"}
# A separator followed by 3-digit groups is grouping, not a decimal point.
_GROUPED_COMMAS = re.compile(r"-?\d{1,3}(?:,\d{3})+")
_GROUPED_DOTS = re.compile(r"-?\d{1,3}(?:\.\d{3}){2,}")


def to_decimal(value: float) -> Decimal:
    """Exact decimal of a float's shortest repr, so 1.005 stays 1.005."""

    return Decimal(repr(float(value)))


def round2(value: Any) -> float:
    """Round to 2 decimals, half away from zero; non-finite input becomes 0."""

    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    if abs(number) >= _MAX_QUANTIZE:
        return number
    quantized = to_decimal(number).quantize(_CENT, rounding=ROUND_HALF_UP)
    return float(quantized) or 0.0


def to_amount(value: Any, *, field: str = "amount") -> float:
    """Convert number-like backend values into float with locale punctuation support.

    Raises DataShapeError when the value is missing or cannot be read as a
    finite number.
    """

    if value is None or isinstance(value, bool):
        raise DataShapeError(field, value)
    if isinstance(value, (int, float)):
        number = float(value)
        if not math.isfinite(number):
            raise DataShapeError(field, value)
        return number
    text = str(value).strip()
    if not text or text.lower() in {"none", "null", "nan"}:
        raise DataShapeError(field, value)
    text = re.sub(r"[^\d,.\-]", "", text)
    if not text or text in {"-", ".", ","}:
        raise DataShapeError(field, value)
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "")
            text = text.replace(",", ".")
        else:
            text = text.replace(",", "")
    elif _GROUPED_COMMAS.fullmatch(text):
        text = text.replace(",", "")
    elif _GROUPED_DOTS.fullmatch(text):
        text = text.replace(".", "")
    else:
        text = text.replace(",", ".")
    try:
        number = float(text)
    except ValueError as exc:
        raise DataShapeError(field, value) from exc
    if not math.isfinite(number):
        raise DataShapeError(field, value)
    return number


def _base_locale(locale: str | None) -> str:
    text = (locale or "en").strip().lower().replace("_", "-")
    base = text.split("-", 1)[0]
    return base if base in _SEPARATORS else "en"


@dataclass(frozen=True)
class CurrencyDisplay:
    """Formatted amount split into the number and its currency token."""

    number: str
    currency: str
    currency_muted: bool = False

    def __str__(self) -> str:
        if self.currency_muted:
            return f"{self.number}\u202f{self.currency}"
        return f"{self.number} {self.currency}"


def format_currency_parts(
    amount: Any,
    locale: str = "en",
    currency: str = DEFAULT_CURRENCY,
) -> CurrencyDisplay:
    """Format an amount with locale separators; Arabic marks the currency as muted."""

    value = round2(amount)
    base = _base_locale(locale)
    group_sep, decimal_sep = _SEPARATORS[base]
    integer, _, fraction = f"{abs(value):,.2f}".partition(".")
    sign = "-" if value < 0 else ""
    number = f"{sign}{integer.replace(',', group_sep)}{decimal_sep}{fraction}"
    return CurrencyDisplay(
        number=number,
        currency=currency.upper(),
        currency_muted=base in _TRAILING_CURRENCY_LOCALES,
    )


def format_currency(amount: Any, locale: str = "en", currency: str = DEFAULT_CURRENCY) -> str:
    """Render an amount with its 3-letter currency code, e.g. ``1,234.50 OMR``."""

    return str(format_currency_parts(amount, locale, currency))
