"""
Display formatting for amounts.

Amounts render with a fixed currency prefix and en-US thousands grouping,
with at most three fraction digits and no trailing zeros
("UGX 29,370,000", "UGX 1,250.5").
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

Number = Union[Decimal, int, float]

DEFAULT_CURRENCY = "UGX"

_FRACTION = Decimal("0.001")
_PERCENT = Decimal("0.1")


def _as_decimal(amount: Number) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def _quantize(value: Decimal, step: Decimal) -> Decimal:
    # The default 28-digit context cannot hold every integer digit plus the fraction.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - step.adjusted() + 2)
        return value.quantize(step, rounding=ROUND_HALF_UP)


def format_amount(amount: Number) -> str:
    """Format a number with thousands separators, e.g. 120000 -> '120,000'."""
    value = _quantize(_as_decimal(amount), _FRACTION)
    if value == 0:
        value = Decimal(0)
    text = f"{value:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_currency(amount: Number, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount as a currency string, e.g. 'UGX 29,370,000'."""
    return f"{currency} {format_amount(amount)}"


def format_percent(value: Number) -> str:
    """Format a percentage with exactly one decimal place (no % sign)."""
    return str(_quantize(_as_decimal(value), _PERCENT))
