"""SQLite implementation of purchase order and audit log storage."""

from collections.abc import Iterable

import aiosqlite

from storeledger.config import get_logger
from storeledger.core.clock import utc_now
from storeledger.core.entities.enums import AuditAction, PurchaseOrderStatus
from storeledger.core.entities.purchase_order import (
    AuditLogEntry,
    PurchaseOrder,
    PurchaseOrderItem,
)
from storeledger.core.exceptions import InvalidQuantityError, PurchaseOrderItemNotFoundError
from storeledger.core.interfaces.purchase_order_store import (
    IAuditLogStore,
    IPurchaseOrderStore,
)
from storeledger.infrastructure.storage.sqlite.rows import from_db_time, to_db_time

logger = get_logger(__name__)

_MILESTONES = (
    "placed_at",
    "quotation_requested_at",
    "quotation_submitted_at",
    "quotation_approved_at",
    "quotation_rejected_at",
)


class SQLitePurchaseOrderStore(IPurchaseOrderStore):
    """Purchase orders and their line items on one unit-of-work connection."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def create(self, po: PurchaseOrder) -> PurchaseOrder:
        cursor = await self._conn.execute(
            """
            INSERT INTO purchase_orders (
                store_id, supplier_id, code, status,
                placed_at, quotation_requested_at, quotation_submitted_at,
                quotation_approved_at, quotation_rejected_at,
                subtotal, tax_total, total, notes, quotation_notes,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                po.store_id,
                po.supplier_id,
                po.code,
                po.status.value,
                *(to_db_time(getattr(po, name)) for name in _MILESTONES),
                po.subtotal,
                po.tax_total,
                po.total,
                po.notes,
                po.quotation_notes,
                to_db_time(po.created_at),
                to_db_time(po.updated_at),
            ),
        )
        po.id = cursor.lastrowid

        for item in po.items:
            cursor = await self._conn.execute(
                """
                INSERT INTO purchase_order_items (
                    po_id, product_id, qty, cost, quoted_cost, received_qty
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    po.id,
                    item.product_id,
                    item.qty,
                    item.cost,
                    item.quoted_cost,
                    item.received_qty,
                ),
            )
            item.id = cursor.lastrowid
            item.po_id = po.id

        logger.info(
            "purchase_order_inserted",
            po_id=po.id,
            code=po.code,
            item_count=len(po.items),
        )
        return po

    async def get(
        self,
        po_id: int,
        store_id: int | None = None,
        supplier_id: int | None = None,
    ) -> PurchaseOrder | None:
        query = "SELECT * FROM purchase_orders WHERE id = ?"
        params: list = [po_id]
        if store_id is not None:
            query += " AND store_id = ?"
            params.append(store_id)
        if supplier_id is not None:
            query += " AND supplier_id = ?"
            params.append(supplier_id)

        cursor = await self._conn.execute(query, params)
        row = await cursor.fetchone()
        if row is None:
            return None

        po = self._row_to_purchase_order(row)
        po.items = await self._get_items(po_id)
        return po

    async def update(self, po: PurchaseOrder) -> PurchaseOrder:
        po.updated_at = utc_now()
        await self._conn.execute(
            """
            UPDATE purchase_orders SET
                status = ?,
                placed_at = ?,
                quotation_requested_at = ?,
                quotation_submitted_at = ?,
                quotation_approved_at = ?,
                quotation_rejected_at = ?,
                subtotal = ?,
                tax_total = ?,
                total = ?,
                notes = ?,
                quotation_notes = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                po.status.value,
                *(to_db_time(getattr(po, name)) for name in _MILESTONES),
                po.subtotal,
                po.tax_total,
                po.total,
                po.notes,
                po.quotation_notes,
                to_db_time(po.updated_at),
                po.id,
            ),
        )
        return po

    async def update_item_quoted_cost(self, item_id: int, quoted_cost: int) -> None:
        cursor = await self._conn.execute(
            "UPDATE purchase_order_items SET quoted_cost = ? WHERE id = ?",
            (quoted_cost, item_id),
        )
        if cursor.rowcount == 0:
            raise PurchaseOrderItemNotFoundError(item_id)

    async def increment_received_qty(self, item_id: int, delta: int) -> int:
        cursor = await self._conn.execute(
            """
            UPDATE purchase_order_items
            SET received_qty = received_qty + ?
            WHERE id = ? AND received_qty + ? <= qty
            """,
            (delta, item_id, delta),
        )
        if cursor.rowcount == 0:
            cursor = await self._conn.execute(
                "SELECT qty, received_qty FROM purchase_order_items WHERE id = ?",
                (item_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                raise PurchaseOrderItemNotFoundError(item_id)
            raise InvalidQuantityError(
                item_id, delta, remaining=row["qty"] - row["received_qty"]
            )

        cursor = await self._conn.execute(
            "SELECT received_qty FROM purchase_order_items WHERE id = ?", (item_id,)
        )
        row = await cursor.fetchone()
        return row["received_qty"]

    async def code_exists(self, code: str) -> bool:
        cursor = await self._conn.execute(
            "SELECT 1 FROM purchase_orders WHERE code = ?", (code,)
        )
        return await cursor.fetchone() is not None

    async def count_for_store(
        self, store_id: int, status: PurchaseOrderStatus | None = None
    ) -> int:
        query = "SELECT COUNT(*) FROM purchase_orders WHERE store_id = ?"
        params: list = [store_id]
        if status is not None:
            query += " AND status = ?"
            params.append(status.value)
        cursor = await self._conn.execute(query, params)
        row = await cursor.fetchone()
        return row[0]

    async def list_for_store(
        self,
        store_id: int,
        status: PurchaseOrderStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[PurchaseOrder]:
        query = "SELECT * FROM purchase_orders WHERE store_id = ?"
        params: list = [store_id]
        if status is not None:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        return await self._list(query, params)

    async def count_for_supplier(
        self,
        supplier_id: int,
        statuses: Iterable[PurchaseOrderStatus] | None = None,
    ) -> int:
        query, params = self._supplier_filter(
            "SELECT COUNT(*) FROM purchase_orders", supplier_id, statuses
        )
        cursor = await self._conn.execute(query, params)
        row = await cursor.fetchone()
        return row[0]

    async def list_for_supplier(
        self,
        supplier_id: int,
        statuses: Iterable[PurchaseOrderStatus] | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[PurchaseOrder]:
        query, params = self._supplier_filter(
            "SELECT * FROM purchase_orders", supplier_id, statuses
        )
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        return await self._list(query, params)

    @staticmethod
    def _supplier_filter(
        select: str,
        supplier_id: int,
        statuses: Iterable[PurchaseOrderStatus] | None,
    ) -> tuple[str, list]:
        query = f"{select} WHERE supplier_id = ?"
        params: list = [supplier_id]
        if statuses is not None:
            values = sorted(s.value for s in statuses)
            if not values:
                return query + " AND 0", params
            query += f" AND status IN ({', '.join('?' * len(values))})"
            params.extend(values)
        return query, params

    async def _list(self, query: str, params: list) -> list[PurchaseOrder]:
        cursor = await self._conn.execute(query, params)
        rows = await cursor.fetchall()
        orders = [self._row_to_purchase_order(row) for row in rows]
        for po in orders:
            po.items = await self._get_items(po.id)
        return orders

    async def _get_items(self, po_id: int) -> list[PurchaseOrderItem]:
        cursor = await self._conn.execute(
            "SELECT * FROM purchase_order_items WHERE po_id = ? ORDER BY id",
            (po_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_item(row) for row in rows]

    @staticmethod
    def _row_to_purchase_order(row: aiosqlite.Row) -> PurchaseOrder:
        return PurchaseOrder(
            id=row["id"],
            store_id=row["store_id"],
            supplier_id=row["supplier_id"],
            code=row["code"],
            status=PurchaseOrderStatus(row["status"]),
            placed_at=from_db_time(row["placed_at"]),
            quotation_requested_at=from_db_time(row["quotation_requested_at"]),
            quotation_submitted_at=from_db_time(row["quotation_submitted_at"]),
            quotation_approved_at=from_db_time(row["quotation_approved_at"]),
            quotation_rejected_at=from_db_time(row["quotation_rejected_at"]),
            subtotal=row["subtotal"],
            tax_total=row["tax_total"],
            total=row["total"],
            notes=row["notes"],
            quotation_notes=row["quotation_notes"],
            created_at=from_db_time(row["created_at"]) or utc_now(),
            updated_at=from_db_time(row["updated_at"]) or utc_now(),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> PurchaseOrderItem:
        return PurchaseOrderItem(
            id=row["id"],
            po_id=row["po_id"],
            product_id=row["product_id"],
            qty=row["qty"],
            cost=row["cost"],
            quoted_cost=row["quoted_cost"],
            received_qty=row["received_qty"],
        )


class SQLiteAuditLogStore(IAuditLogStore):
    """Append-only purchase order history."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        cursor = await self._conn.execute(
            """
            INSERT INTO purchase_order_audit_logs (
                po_id, user_id, action, previous_status, new_status, notes, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.po_id,
                entry.user_id,
                entry.action.value,
                entry.previous_status.value if entry.previous_status else None,
                entry.new_status.value,
                entry.notes,
                to_db_time(entry.created_at),
            ),
        )
        entry.id = cursor.lastrowid
        return entry

    async def list_for_po(
        self, po_id: int, limit: int = 50, offset: int = 0
    ) -> list[AuditLogEntry]:
        cursor = await self._conn.execute(
            """
            SELECT * FROM purchase_order_audit_logs
            WHERE po_id = ?
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            (po_id, limit, offset),
        )
        rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def count_for_po(self, po_id: int) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM purchase_order_audit_logs WHERE po_id = ?", (po_id,)
        )
        row = await cursor.fetchone()
        return row[0]

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> AuditLogEntry:
        previous = row["previous_status"]
        return AuditLogEntry(
            id=row["id"],
            po_id=row["po_id"],
            user_id=row["user_id"],
            action=AuditAction(row["action"]),
            previous_status=PurchaseOrderStatus(previous) if previous else None,
            new_status=PurchaseOrderStatus(row["new_status"]),
            notes=row["notes"],
            created_at=from_db_time(row["created_at"]) or utc_now(),
        )
