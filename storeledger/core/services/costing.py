"""
Inventory costing arithmetic.

All money is integer minor units (paise). Rounding is half-up to the
nearest minor unit and never goes through floats.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from storeledger.core.entities.purchase_order import PurchaseOrderItem

# Basis points per whole (100% == 10000 bps)
BPS_DENOMINATOR = 10_000


def round_half_up_div(numerator: int, denominator: int) -> int:
    """Divide two integers, rounding the quotient half-up."""
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    quotient, remainder = divmod(numerator, denominator)
    if 2 * remainder >= denominator:
        quotient += 1
    return quotient


def apply_bps(amount: int, bps: int) -> int:
    """Scale an amount by a basis-point rate, rounding half-up."""
    return round_half_up_div(amount * bps, BPS_DENOMINATOR)


@dataclass(frozen=True)
class CostUpdate:
    """New stock level and weighted-average cost after one receipt."""

    stock: int
    cost_price: int


def moving_average_cost(
    stock: int,
    cost_price: int | None,
    quantity: int,
    unit_cost: int,
) -> CostUpdate:
    """
    Blend a receipt into a product's running average cost.

    If the product has a cost and stock on hand, the new cost is the
    quantity-weighted average of old and incoming units. Otherwise the
    incoming unit cost becomes the cost outright.

    Args:
        stock: Units on hand before the receipt.
        cost_price: Current average unit cost, None if never costed.
        quantity: Units received, must be positive.
        unit_cost: Unit cost of this receipt.
    """
    if quantity <= 0:
        raise ValueError(f"quantity must be positive, got {quantity}")

    new_stock = stock + quantity
    if cost_price is not None and stock > 0:
        new_cost = round_half_up_div(
            cost_price * stock + unit_cost * quantity, new_stock
        )
    else:
        new_cost = unit_cost
    return CostUpdate(stock=new_stock, cost_price=new_cost)


@dataclass(frozen=True)
class OrderTotals:
    """Monetary totals of a purchase order."""

    subtotal: int
    tax_total: int
    total: int


def order_subtotal(items: Iterable[PurchaseOrderItem]) -> int:
    """Sum of qty x negotiated cost over all lines."""
    return sum(item.line_total for item in items)


def quotation_totals(items: Iterable[PurchaseOrderItem], tax_rate_bps: int) -> OrderTotals:
    """Subtotal from negotiated costs plus tax at the given rate."""
    subtotal = order_subtotal(items)
    tax = apply_bps(subtotal, tax_rate_bps)
    return OrderTotals(subtotal=subtotal, tax_total=tax, total=subtotal + tax)


def markup_price(unit_cost: int, markup_bps: int) -> int:
    """Default selling price for a newly stocked product."""
    return apply_bps(unit_cost, markup_bps)
