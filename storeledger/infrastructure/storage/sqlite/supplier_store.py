"""SQLite implementation of supplier lookup."""

import aiosqlite

from storeledger.core.clock import utc_now
from storeledger.core.entities.supplier import Supplier
from storeledger.core.interfaces.supplier_store import ISupplierStore
from storeledger.infrastructure.storage.sqlite.rows import from_db_time


class SQLiteSupplierStore(ISupplierStore):
    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def get(self, supplier_id: int, store_id: int) -> Supplier | None:
        cursor = await self._conn.execute(
            "SELECT * FROM suppliers WHERE id = ? AND store_id = ?",
            (supplier_id, store_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_supplier(row)

    async def get_by_user(self, user_id: int) -> Supplier | None:
        cursor = await self._conn.execute(
            "SELECT * FROM suppliers WHERE user_id = ?", (user_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_supplier(row)

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        return Supplier(
            id=row["id"],
            store_id=row["store_id"],
            user_id=row["user_id"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"],
            lead_time_days=row["lead_time_days"],
            created_at=from_db_time(row["created_at"]) or utc_now(),
        )
