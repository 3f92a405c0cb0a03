"""Tests for the SQLite purchase order and audit log stores."""

import aiosqlite
import pytest

from storeledger.core.entities import (
    AuditAction,
    AuditLogEntry,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)
from storeledger.core.exceptions import InvalidQuantityError, PurchaseOrderItemNotFoundError

S = PurchaseOrderStatus


def new_po(world, code: str, status: S = S.DRAFT, qty: int = 10) -> PurchaseOrder:
    return PurchaseOrder(
        store_id=world.store_id,
        supplier_id=world.supplier_id,
        code=code,
        status=status,
        items=[
            PurchaseOrderItem(product_id=world.product_ids[0], qty=qty, cost=500),
            PurchaseOrderItem(product_id=world.product_ids[1], qty=2, cost=1200),
        ],
    )


class TestSQLitePurchaseOrderStore:
    async def test_create_and_get_round_trip(self, uow_factory, world):
        async with uow_factory() as uow:
            created = await uow.purchase_orders.create(new_po(world, "PO-2026-0001-000001"))

        assert created.id is not None
        assert all(item.id is not None and item.po_id == created.id for item in created.items)

        async with uow_factory(read_only=True) as uow:
            loaded = await uow.purchase_orders.get(created.id)

        assert loaded.code == "PO-2026-0001-000001"
        assert loaded.status == S.DRAFT
        assert [(i.qty, i.cost, i.received_qty) for i in loaded.items] == [(10, 500, 0), (2, 1200, 0)]

    async def test_get_is_scoped(self, uow_factory, world, other_world):
        async with uow_factory() as uow:
            po = await uow.purchase_orders.create(new_po(world, "PO-A"))

        async with uow_factory(read_only=True) as uow:
            assert await uow.purchase_orders.get(po.id, store_id=world.store_id) is not None
            assert await uow.purchase_orders.get(po.id, store_id=other_world.store_id) is None
            assert await uow.purchase_orders.get(po.id, supplier_id=world.supplier_id) is not None
            assert await uow.purchase_orders.get(po.id, supplier_id=other_world.supplier_id) is None

    async def test_update_persists_status_milestones_and_totals(self, uow_factory, world):
        async with uow_factory() as uow:
            po = await uow.purchase_orders.create(new_po(world, "PO-B"))

        async with uow_factory() as uow:
            po.status = S.QUOTATION_SUBMITTED
            po.quotation_submitted_at = po.created_at
            po.subtotal, po.tax_total, po.total = 800, 144, 944
            po.quotation_notes = None
            await uow.purchase_orders.update(po)
            await uow.purchase_orders.update_item_quoted_cost(po.items[0].id, 450)

        async with uow_factory(read_only=True) as uow:
            loaded = await uow.purchase_orders.get(po.id)

        assert loaded.status == S.QUOTATION_SUBMITTED
        assert loaded.quotation_submitted_at == po.created_at
        assert (loaded.subtotal, loaded.tax_total, loaded.total) == (800, 144, 944)
        assert loaded.items[0].quoted_cost == 450
        assert loaded.items[0].effective_cost == 450

    async def test_update_quoted_cost_of_missing_item(self, uow_factory):
        with pytest.raises(PurchaseOrderItemNotFoundError):
            async with uow_factory() as uow:
                await uow.purchase_orders.update_item_quoted_cost(12345, 10)

    async def test_increment_received_qty_is_bounded(self, uow_factory, world):
        async with uow_factory() as uow:
            po = await uow.purchase_orders.create(new_po(world, "PO-C", qty=10))
        item_id = po.items[0].id

        async with uow_factory() as uow:
            assert await uow.purchase_orders.increment_received_qty(item_id, 4) == 4
            assert await uow.purchase_orders.increment_received_qty(item_id, 6) == 10

        with pytest.raises(InvalidQuantityError) as exc_info:
            async with uow_factory() as uow:
                await uow.purchase_orders.increment_received_qty(item_id, 1)
        assert exc_info.value.details["remaining"] == 0

        with pytest.raises(PurchaseOrderItemNotFoundError):
            async with uow_factory() as uow:
                await uow.purchase_orders.increment_received_qty(99999, 1)

    async def test_duplicate_code_rejected(self, uow_factory, world):
        async with uow_factory() as uow:
            await uow.purchase_orders.create(new_po(world, "PO-DUP"))
            assert await uow.purchase_orders.code_exists("PO-DUP")
            assert not await uow.purchase_orders.code_exists("PO-OTHER")

        with pytest.raises(aiosqlite.IntegrityError):
            async with uow_factory() as uow:
                await uow.purchase_orders.create(new_po(world, "PO-DUP"))

    async def test_store_listing_newest_first_with_filter(self, uow_factory, world, other_world):
        async with uow_factory() as uow:
            first = await uow.purchase_orders.create(new_po(world, "PO-1"))
            second = await uow.purchase_orders.create(new_po(world, "PO-2", status=S.SENT))
            third = await uow.purchase_orders.create(new_po(world, "PO-3"))
            await uow.purchase_orders.create(new_po(other_world, "PO-X"))

        async with uow_factory(read_only=True) as uow:
            orders = await uow.purchase_orders.list_for_store(world.store_id)
            drafts = await uow.purchase_orders.list_for_store(world.store_id, status=S.DRAFT)
            page = await uow.purchase_orders.list_for_store(world.store_id, limit=1, offset=1)
            total = await uow.purchase_orders.count_for_store(world.store_id)
            sent = await uow.purchase_orders.count_for_store(world.store_id, status=S.SENT)

        assert [o.id for o in orders] == [third.id, second.id, first.id]
        assert [o.id for o in drafts] == [third.id, first.id]
        assert [o.id for o in page] == [second.id]
        assert len(orders[0].items) == 2
        assert (total, sent) == (3, 1)

    async def test_supplier_listing_by_status_set(self, uow_factory, world):
        async with uow_factory() as uow:
            await uow.purchase_orders.create(new_po(world, "PO-Q1", status=S.QUOTATION_REQUESTED))
            await uow.purchase_orders.create(new_po(world, "PO-Q2", status=S.QUOTATION_APPROVED))
            await uow.purchase_orders.create(new_po(world, "PO-S", status=S.SENT))

        quotation = S.quotation_statuses()
        async with uow_factory(read_only=True) as uow:
            inbox = await uow.purchase_orders.list_for_supplier(world.supplier_id, statuses=quotation)
            everything = await uow.purchase_orders.count_for_supplier(world.supplier_id)
            none = await uow.purchase_orders.count_for_supplier(world.supplier_id, statuses=[])

        assert sorted(o.code for o in inbox) == ["PO-Q1", "PO-Q2"]
        assert everything == 3
        assert none == 0


class TestSQLiteAuditLogStore:
    async def test_append_and_list_newest_first(self, uow_factory, world):
        async with uow_factory() as uow:
            po = await uow.purchase_orders.create(new_po(world, "PO-AUD"))
            await uow.audit_log.append(
                AuditLogEntry(
                    po_id=po.id, user_id=1, action=AuditAction.CREATED, new_status=S.DRAFT
                )
            )
            await uow.audit_log.append(
                AuditLogEntry(
                    po_id=po.id,
                    user_id=1,
                    action=AuditAction.SENT,
                    previous_status=S.DRAFT,
                    new_status=S.SENT,
                    notes="placed by phone",
                )
            )

        async with uow_factory(read_only=True) as uow:
            entries = await uow.audit_log.list_for_po(po.id)
            count = await uow.audit_log.count_for_po(po.id)

        assert count == 2
        assert [e.action for e in entries] == [AuditAction.SENT, AuditAction.CREATED]
        assert entries[0].previous_status == S.DRAFT
        assert entries[0].notes == "placed by phone"
        assert entries[1].previous_status is None
