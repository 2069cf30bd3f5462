"""Fixed-point money helpers.

Amounts are persisted as strings with exactly two fractional digits
("31.82"). Arithmetic happens on ``Decimal`` values and is only quantized
when a value is stored.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value, field="amount") -> Decimal:
    """Parse a stored or user-supplied amount into a ``Decimal``.

    ``None`` and empty strings read as zero. Floats go through ``str()`` so
    ``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError({field: [f"Not a valid amount: {value!r}"]}) from None


def quantize(value) -> Decimal:
    """Round to cents, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value) -> str:
    """Render an amount the way it is stored: two decimals, no grouping."""
    return f"{quantize(value):.2f}"


def clamp(value: Decimal, lower: Decimal, upper: Decimal) -> Decimal:
    return max(lower, min(value, upper))
