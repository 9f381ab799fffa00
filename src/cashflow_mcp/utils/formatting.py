"""
Display formatting for monetary values.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def quantize_cents(value: Decimal) -> Decimal:
    """Round a monetary value to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """
    Format an amount as whole currency units, e.g. ``-$1,235``.

    Args:
        amount: Value to format
        symbol: Currency symbol prefix

    Returns:
        Formatted string with thousands separators and no fraction digits
    """
    whole = amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{abs(whole):,.0f}"
