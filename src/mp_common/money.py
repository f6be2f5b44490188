"""Decimal money helpers.

Prices, line totals, order totals and revenue are Decimal quantized to
cents and stored as NUMERIC(14, 2). Never float.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize any numeric value to two decimal places.

    Floats go through str() first so 19.99 stays 19.99 instead of
    19.989999999999998436805981327779591083526611328125.
    """
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """unit_price × quantity, quantized."""
    return to_money(unit_price * quantity)


def money_to_display(amount: Decimal) -> str:
    """Decimal to display string: 1234.5 -> '$1,234.50', -12 -> '-$12.00'."""
    amount = to_money(amount)
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
