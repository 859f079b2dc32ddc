# backend/portfolio_tracker/utils/money.py
"""
Money rounding.

Quote prices, per-stock values and every total go through round_money(),
so a figure is rounded once, where it is computed.
"""

from decimal import Decimal, ROUND_HALF_UP

# Currency amounts: 2 decimal places (e.g., $1234.56)
CURRENCY_PRECISION = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return value.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)
