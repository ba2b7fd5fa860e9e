"""Exact decimal helpers for currency and asset amounts.

All reported currency values are quantized once, at the point a per-unit
price or a cost-basis slice is computed, using half-up rounding at scale 2.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Final

from .errors import InvalidTradeError, MalformedInputError

CURRENCY_QUANTUM: Final[Decimal] = Decimal("0.01")
ZERO: Final[Decimal] = Decimal("0")

_MONEY_CONTEXT: Final[Context] = Context(prec=34, rounding=ROUND_HALF_UP)


def money_parse(value: str, source_row_ref: str | None = None) -> Decimal:
    """Parse one numeric source field into an exact decimal value.

    Args:
        value: Raw field text, optionally with thousands separators.
        source_row_ref: Optional row locator used in error messages.

    Returns:
        Decimal: Parsed finite decimal value.

    Raises:
        MalformedInputError: Raised when the text is blank, non-numeric, or non-finite.
    """

    normalized_value = value.strip().replace(",", "")
    if not normalized_value:
        raise MalformedInputError("numeric field must not be blank", source_row_ref=source_row_ref)

    try:
        parsed_value = Decimal(normalized_value)
    except InvalidOperation as error:
        raise MalformedInputError(f"not a number: {value!r}", source_row_ref=source_row_ref) from error

    if not parsed_value.is_finite():
        raise MalformedInputError(f"not a finite number: {value!r}", source_row_ref=source_row_ref)
    return parsed_value


def money_round_currency(value: Decimal) -> Decimal:
    """Quantize one value to currency scale using half-up rounding.

    Args:
        value: Exact decimal value.

    Returns:
        Decimal: Value with exactly two fractional digits.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    with localcontext(_MONEY_CONTEXT):
        return value.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def money_multiply_currency(quantity: Decimal, unit_price: Decimal) -> Decimal:
    """Multiply quantity by a unit price and round the product to currency scale.

    Args:
        quantity: Asset quantity.
        unit_price: Currency price per asset unit.

    Returns:
        Decimal: Rounded currency amount.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    with localcontext(_MONEY_CONTEXT):
        return (quantity * unit_price).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def money_divide_currency(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide two values and round the quotient to currency scale.

    Args:
        numerator: Currency amount.
        denominator: Asset quantity or rate divisor.

    Returns:
        Decimal: Quotient rounded half-up to two fractional digits.

    Raises:
        InvalidTradeError: Raised when the denominator is zero.
    """

    if denominator == ZERO:
        raise InvalidTradeError("division by zero while computing a currency amount")

    with localcontext(_MONEY_CONTEXT):
        return (numerator / denominator).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def money_format(value: Decimal) -> str:
    """Render a decimal without exponent notation.

    Args:
        value: Decimal value to render.

    Returns:
        str: Plain positional representation.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return format(value, "f")


__all__ = [
    "CURRENCY_QUANTUM",
    "ZERO",
    "money_divide_currency",
    "money_format",
    "money_multiply_currency",
    "money_parse",
    "money_round_currency",
]
