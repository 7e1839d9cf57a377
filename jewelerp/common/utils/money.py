"""Decimal helpers for money and stock quantities."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from jewelerp.common.config.settings import settings

ZERO = Decimal("0")


def money_quantum() -> Decimal:
    """Smallest monetary unit, e.g. Decimal('0.01') for two decimal places."""
    return Decimal(1).scaleb(-settings.MONEY_DECIMAL_PLACES)


def to_decimal(value: Any) -> Decimal:
    """Converts ints, floats, strings and Decimals without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        raise TypeError("Boolean is not a numeric amount")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a numeric amount: {value!r}") from e


def to_money(value: Any) -> Decimal:
    """Rounds an amount half-up to the monetary unit."""
    return to_decimal(value).quantize(money_quantum(), rounding=ROUND_HALF_UP)


def to_quantity(value: Any) -> Decimal:
    """Raw-material quantities (grams, carats, pieces) are kept unrounded."""
    return to_decimal(value)
