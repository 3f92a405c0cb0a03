"""
Core business logic services.

Layer-pure services that depend only on:
- storeledger/core/entities/*
- storeledger/core/interfaces/*
- storeledger/core/exceptions.py

NO infrastructure imports. Storage is reached through the unit of work
handed in by the caller.
"""

from storeledger.core.services.costing import (
    CostUpdate,
    OrderTotals,
    markup_price,
    moving_average_cost,
    order_subtotal,
    quotation_totals,
    round_half_up_div,
)
from storeledger.core.services.po_code import PurchaseOrderCodeGenerator, format_po_code
from storeledger.core.services.po_state_machine import (
    TRANSITION_RULES,
    PurchaseOrderStateMachine,
    Transition,
    TransitionRule,
    receipt_status,
)
from storeledger.core.services.receiving_engine import ReceiptResult, ReceivingEngine
from storeledger.core.services.slug import category_name_key, slug_candidates, slugify

__all__ = [
    # Costing
    "CostUpdate",
    "OrderTotals",
    "markup_price",
    "moving_average_cost",
    "order_subtotal",
    "quotation_totals",
    "round_half_up_div",
    # State machine
    "PurchaseOrderStateMachine",
    "Transition",
    "TransitionRule",
    "TRANSITION_RULES",
    "receipt_status",
    # Receiving
    "ReceivingEngine",
    "ReceiptResult",
    # Codes and slugs
    "PurchaseOrderCodeGenerator",
    "format_po_code",
    "slugify",
    "slug_candidates",
    "category_name_key",
]
