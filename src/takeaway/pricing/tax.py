"""Pricing engine — tax decomposition and the authoritative order recompute.

Menu prices are tax-inclusive (TTC). The engine derives the tax-exclusive
subtotal (HT) and the tax share from the summed line totals, then applies
delivery fee and discount to reach the order total.

``apply_order_totals`` is the single place where order money fields are
written. Both the order placement handler and the item revision paths call
it, so the formula cannot diverge between them.
"""

from dataclasses import dataclass
from decimal import Decimal

from takeaway.pricing.money import ZERO, clamp, format_amount, quantize, to_decimal


@dataclass(frozen=True)
class TaxBreakdown:
    """One amount expressed tax-exclusive, as tax, and tax-inclusive."""

    exclusive: Decimal
    tax: Decimal
    inclusive: Decimal
    rate: Decimal

    def to_dict(self) -> dict:
        return {
            "amount_without_tax": format_amount(self.exclusive),
            "tax_amount": format_amount(self.tax),
            "amount_with_tax": format_amount(self.inclusive),
            "tax_rate": str(self.rate),
        }


def from_tax_inclusive(amount, tax_rate) -> TaxBreakdown:
    """Split a TTC amount into HT and tax.

    Each component is rounded on its own from the unrounded quotient, so
    ``exclusive + tax`` may differ from ``inclusive`` by one cent.
    """
    amount = to_decimal(amount)
    rate = to_decimal(tax_rate, field="tax_rate")
    exclusive = amount / (1 + rate)
    return TaxBreakdown(
        exclusive=quantize(exclusive),
        tax=quantize(amount - exclusive),
        inclusive=quantize(amount),
        rate=rate,
    )


def from_tax_exclusive(amount, tax_rate) -> TaxBreakdown:
    """Add tax on top of an HT amount."""
    amount = to_decimal(amount)
    rate = to_decimal(tax_rate, field="tax_rate")
    tax = amount * rate
    return TaxBreakdown(
        exclusive=quantize(amount),
        tax=quantize(tax),
        inclusive=quantize(amount + tax),
        rate=rate,
    )


def line_total(unit_price, quantity) -> Decimal:
    return to_decimal(unit_price) * int(quantity)


def apply_order_totals(order, tax_rate, coupon=None) -> None:
    """Recompute every derived money field of ``order`` in place.

    1. Re-derive each item's line total from unit price and quantity.
    2. Sum line totals (tax-inclusive) and split them into subtotal and tax.
    3. With a coupon, recompute its discount against items + delivery fee;
       without one, keep the stored discount clamped to that same amount.
    4. Total is items + delivery fee - discount, never below zero.

    Stored values are formatted once at the end; intermediates stay
    unrounded. Calling this twice on an unchanged order writes identical
    strings.
    """
    subtotal_with_tax = ZERO
    for item in order.items:
        amount = line_total(item.unit_price, item.quantity)
        item.line_total = format_amount(amount)
        subtotal_with_tax += amount

    breakdown = from_tax_inclusive(subtotal_with_tax, tax_rate)
    order.subtotal = format_amount(breakdown.exclusive)
    order.tax_amount = format_amount(breakdown.tax)

    delivery_fee = to_decimal(order.delivery_fee)
    amount_before_discount = subtotal_with_tax + delivery_fee

    if coupon is not None:
        discount = coupon.discount_for(amount_before_discount)
    else:
        discount = to_decimal(order.discount_amount)
    discount = clamp(discount, ZERO, max(amount_before_discount, ZERO))
    order.discount_amount = format_amount(discount)

    order.total = format_amount(max(amount_before_discount - discount, ZERO))
