from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")
FOURPLACES = Decimal("0.0001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def d(val) -> Decimal:
    """Coerce incoming values to Decimal safely."""
    if isinstance(val, Decimal):
        return val
    if val is None or val == "":
        return ZERO
    return Decimal(str(val))


def q2(val) -> Decimal:
    """Money: 2 decimals, half-up."""
    return d(val).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def q4(val) -> Decimal:
    """Quantities and unit measures (CBM, LM): 4 decimals, half-up."""
    return d(val).quantize(FOURPLACES, rounding=ROUND_HALF_UP)


def percent_of(base, percentage) -> Decimal:
    return d(base) * d(percentage) / HUNDRED


def apply_margin(base, percentage) -> Decimal:
    """base × (1 + percentage / 100). Negative percentages are discounts."""
    return d(base) * (Decimal("1") + d(percentage) / HUNDRED)


def parse_decimal(value):
    """
    Parse user-entered amounts. A comma is treated as the decimal point
    ("1.234,50" is not supported, "1234,50" is). Blank input gives None.

    Raises:
        InvalidOperation: If the text is not a number
    """
    if value is None:
        return None
    if isinstance(value, (int, float, Decimal)):
        return d(value)
    text = str(value).strip().replace(" ", "")
    if not text:
        return None
    text = text.replace(",", ".")
    try:
        return Decimal(text)
    except InvalidOperation:
        raise InvalidOperation(f"Not a number: {value!r}")
