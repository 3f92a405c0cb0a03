"""Tests for the costing arithmetic."""

import pytest

from storeledger.core.entities import PurchaseOrderItem
from storeledger.core.services.costing import (
    apply_bps,
    markup_price,
    moving_average_cost,
    order_subtotal,
    quotation_totals,
    round_half_up_div,
)


class TestRoundHalfUpDiv:
    @pytest.mark.parametrize(
        ("numerator", "denominator", "expected"),
        [
            (10, 4, 3),  # 2.5 rounds up
            (9, 4, 2),  # 2.25 rounds down
            (11, 4, 3),  # 2.75 rounds up
            (8, 4, 2),
            (0, 7, 0),
            (5, 10, 1),  # 0.5 rounds up
        ],
    )
    def test_rounding(self, numerator, denominator, expected):
        assert round_half_up_div(numerator, denominator) == expected

    def test_rejects_non_positive_denominator(self):
        with pytest.raises(ValueError):
            round_half_up_div(1, 0)

    def test_apply_bps(self):
        assert apply_bps(800, 1800) == 144
        assert apply_bps(1, 5000) == 1  # 0.5 rounds up
        assert apply_bps(1, 4999) == 0


class TestMovingAverageCost:
    def test_first_receipt_takes_unit_cost(self):
        update = moving_average_cost(stock=0, cost_price=None, quantity=10, unit_cost=500)
        assert update.stock == 10
        assert update.cost_price == 500

    def test_no_stock_on_hand_resets_cost(self):
        update = moving_average_cost(stock=0, cost_price=300, quantity=5, unit_cost=700)
        assert update.cost_price == 700

    def test_weighted_average_rounds_half_up(self):
        # (500*10 + 550*3) / 13 = 511.53... -> 512
        update = moving_average_cost(stock=10, cost_price=500, quantity=3, unit_cost=550)
        assert update.stock == 13
        assert update.cost_price == 512

    def test_small_receipt_into_existing_stock(self):
        # (10*500 + 2*600) / 12 = 516.67 -> 517
        update = moving_average_cost(stock=10, cost_price=500, quantity=2, unit_cost=600)
        assert (update.stock, update.cost_price) == (12, 517)

    def test_weighted_average_exact(self):
        # (1000*10 + 1200*10) / 20 = 1100
        update = moving_average_cost(stock=10, cost_price=1000, quantity=10, unit_cost=1200)
        assert update.cost_price == 1100

    def test_sequential_application_is_order_dependent(self):
        first = moving_average_cost(0, None, 3, 100)
        second = moving_average_cost(first.stock, first.cost_price, 4, 333)
        third = moving_average_cost(second.stock, second.cost_price, 2, 50)
        # 100 -> (300 + 1332) / 7 = 233.14 -> 233 -> (1631 + 100) / 9 = 192.33 -> 192
        assert (second.cost_price, third.cost_price) == (233, 192)
        assert third.stock == 9

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_rejects_non_positive_quantity(self, quantity):
        with pytest.raises(ValueError):
            moving_average_cost(1, 100, quantity, 100)


class TestOrderTotals:
    def test_subtotal_uses_effective_cost(self):
        items = [
            PurchaseOrderItem(product_id=1, qty=2, cost=100, quoted_cost=150),
            PurchaseOrderItem(product_id=2, qty=5, cost=100),
        ]
        assert order_subtotal(items) == 800

    def test_quotation_totals_with_tax(self):
        items = [
            PurchaseOrderItem(product_id=1, qty=2, cost=100, quoted_cost=150),
            PurchaseOrderItem(product_id=2, qty=5, cost=100),
        ]
        totals = quotation_totals(items, tax_rate_bps=1800)
        assert (totals.subtotal, totals.tax_total, totals.total) == (800, 144, 944)

    def test_quotation_tax_rounding(self):
        items = [PurchaseOrderItem(product_id=1, qty=1, cost=0, quoted_cost=1003)]
        # 1003 * 0.18 = 180.54 -> 181
        assert quotation_totals(items, 1800).tax_total == 181

    def test_markup_price(self):
        assert markup_price(1000, 15000) == 1500
        assert markup_price(333, 15000) == 500  # 499.5 rounds up
