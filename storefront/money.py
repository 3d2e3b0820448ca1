"""
Money Utilities - Decimal operations for cart prices.

Catalog prices arrive as floats or preformatted strings ("€220.00");
everything is normalized to Decimal before arithmetic.
"""
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

MONEY_PRECISION = Decimal("0.01")

DEFAULT_CURRENCY = "EUR"
CURRENCY_SYMBOL = "€"

_NON_NUMERIC = re.compile(r"[^\d.]")

Number = Union[str, int, float, Decimal, None]


def to_decimal(value: Number) -> Decimal:
    """
    Convert any value to Decimal safely.

    Returns Decimal("0") for None or unparseable input.
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Via str to keep the float's shortest repr
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """Round to two decimal places, half up."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def parse_price_text(text: str | None) -> Decimal:
    """
    Extract the numeric part of a display price.

    "€220.00" -> Decimal("220.00"); anything unparseable -> Decimal("0").
    """
    if not text:
        return Decimal("0")
    digits = _NON_NUMERIC.sub("", str(text))
    if not digits:
        return Decimal("0")
    return to_decimal(digits)


def format_price(value: Number, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Fixed two-decimal display with a currency suffix.

    >>> format_price(220, "EUR")
    '€220.00 EUR'
    """
    return f"{CURRENCY_SYMBOL}{round_money(value):.2f} {currency}"


def display_price(price_text: str | None, currency: str | None, default: str) -> str:
    """Catalog display price with currency, symbol ensured."""
    if not price_text:
        return default
    text = price_text if CURRENCY_SYMBOL in price_text else f"{CURRENCY_SYMBOL}{price_text}"
    return f"{text} {currency or DEFAULT_CURRENCY}"


def to_float(value: Number) -> float:
    """Decimal to float for JSON serialization."""
    return float(to_decimal(value))
