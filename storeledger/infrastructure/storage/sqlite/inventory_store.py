"""SQLite implementation of product, category and stock ledger storage."""

import aiosqlite

from storeledger.config import get_logger
from storeledger.core.clock import utc_now
from storeledger.core.entities.enums import LedgerRefType
from storeledger.core.entities.inventory import (
    Category,
    Product,
    StockLedgerEntry,
    StockReconciliationLine,
)
from storeledger.core.exceptions import ConcurrentModificationError
from storeledger.core.interfaces.inventory_store import (
    ICategoryStore,
    IProductStore,
    IStockLedgerStore,
)
from storeledger.core.services.slug import category_name_key
from storeledger.infrastructure.storage.sqlite.rows import from_db_time, to_db_time

logger = get_logger(__name__)


class SQLiteProductStore(IProductStore):
    """Store-scoped products with guarded stock/cost updates."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def get(self, product_id: int, store_id: int) -> Product | None:
        cursor = await self._conn.execute(
            "SELECT * FROM products WHERE id = ? AND store_id = ?",
            (product_id, store_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_product(row)

    async def get_by_sku(self, store_id: int, sku: str) -> Product | None:
        cursor = await self._conn.execute(
            "SELECT * FROM products WHERE store_id = ? AND sku = ?",
            (store_id, sku),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_product(row)

    async def create(self, product: Product) -> Product:
        now = utc_now()
        product.created_at = now
        product.updated_at = now
        cursor = await self._conn.execute(
            """
            INSERT INTO products (
                store_id, category_id, supplier_id, sku, title, description,
                selling_price, cost_price, stock, active, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                product.store_id,
                product.category_id,
                product.supplier_id,
                product.sku,
                product.title,
                product.description,
                product.selling_price,
                product.cost_price,
                product.stock,
                int(product.active),
                to_db_time(product.created_at),
                to_db_time(product.updated_at),
            ),
        )
        product.id = cursor.lastrowid
        logger.info("product_created", product_id=product.id, sku=product.sku)
        return product

    async def update_stock_and_cost(
        self,
        product_id: int,
        expected_stock: int,
        stock: int,
        cost_price: int | None,
    ) -> None:
        cursor = await self._conn.execute(
            """
            UPDATE products SET stock = ?, cost_price = ?, updated_at = ?
            WHERE id = ? AND stock = ?
            """,
            (stock, cost_price, to_db_time(utc_now()), product_id, expected_stock),
        )
        if cursor.rowcount == 0:
            logger.warning(
                "product_stock_guard_failed",
                product_id=product_id,
                expected_stock=expected_stock,
            )
            raise ConcurrentModificationError("Product", product_id)

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            store_id=row["store_id"],
            category_id=row["category_id"],
            supplier_id=row["supplier_id"],
            sku=row["sku"],
            title=row["title"],
            description=row["description"],
            selling_price=row["selling_price"],
            cost_price=row["cost_price"],
            stock=row["stock"],
            active=bool(row["active"]),
            created_at=from_db_time(row["created_at"]) or utc_now(),
            updated_at=from_db_time(row["updated_at"]) or utc_now(),
        )


class SQLiteCategoryStore(ICategoryStore):
    """Category lookup and creation for bulk intake."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def find_by_name(self, store_id: int, name: str) -> Category | None:
        cursor = await self._conn.execute(
            """
            SELECT * FROM categories
            WHERE store_id = ? AND name_key = ?
            ORDER BY id LIMIT 1
            """,
            (store_id, category_name_key(name)),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_category(row)

    async def slug_exists(self, store_id: int, slug: str) -> bool:
        cursor = await self._conn.execute(
            "SELECT 1 FROM categories WHERE store_id = ? AND slug = ?",
            (store_id, slug),
        )
        return await cursor.fetchone() is not None

    async def create(self, category: Category) -> Category:
        cursor = await self._conn.execute(
            """
            INSERT INTO categories (
                store_id, name, name_key, slug, description, active, sort_order, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                category.store_id,
                category.name,
                category_name_key(category.name),
                category.slug,
                category.description,
                int(category.active),
                category.sort_order,
                to_db_time(category.created_at),
            ),
        )
        category.id = cursor.lastrowid
        logger.info("category_created", category_id=category.id, slug=category.slug)
        return category

    @staticmethod
    def _row_to_category(row: aiosqlite.Row) -> Category:
        return Category(
            id=row["id"],
            store_id=row["store_id"],
            name=row["name"],
            slug=row["slug"],
            description=row["description"],
            active=bool(row["active"]),
            sort_order=row["sort_order"],
            created_at=from_db_time(row["created_at"]) or utc_now(),
        )


class SQLiteStockLedgerStore(IStockLedgerStore):
    """Append-only stock ledger."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def append(self, entry: StockLedgerEntry) -> StockLedgerEntry:
        cursor = await self._conn.execute(
            """
            INSERT INTO stock_ledger (
                store_id, product_id, ref_type, ref_id, delta, unit_cost, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.store_id,
                entry.product_id,
                entry.ref_type.value,
                entry.ref_id,
                entry.delta,
                entry.unit_cost,
                to_db_time(entry.created_at),
            ),
        )
        entry.id = cursor.lastrowid
        return entry

    async def list_entries(
        self,
        store_id: int,
        product_id: int | None = None,
        ref_type: LedgerRefType | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[StockLedgerEntry]:
        where, params = self._filter(store_id, product_id, ref_type)
        cursor = await self._conn.execute(
            f"""
            SELECT * FROM stock_ledger {where}
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            [*params, limit, offset],
        )
        rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def count_entries(
        self,
        store_id: int,
        product_id: int | None = None,
        ref_type: LedgerRefType | None = None,
    ) -> int:
        where, params = self._filter(store_id, product_id, ref_type)
        cursor = await self._conn.execute(f"SELECT COUNT(*) FROM stock_ledger {where}", params)
        row = await cursor.fetchone()
        return row[0]

    async def reconcile(self, store_id: int) -> list[StockReconciliationLine]:
        cursor = await self._conn.execute(
            """
            SELECT p.id, p.sku, p.title, p.stock,
                   COALESCE(SUM(l.delta), 0) AS ledger_total
            FROM products p
            LEFT JOIN stock_ledger l ON l.product_id = p.id
            WHERE p.store_id = ?
            GROUP BY p.id
            ORDER BY p.id
            """,
            (store_id,),
        )
        rows = await cursor.fetchall()
        return [
            StockReconciliationLine(
                product_id=row["id"],
                sku=row["sku"],
                title=row["title"],
                stock=row["stock"],
                ledger_total=row["ledger_total"],
            )
            for row in rows
        ]

    @staticmethod
    def _filter(
        store_id: int,
        product_id: int | None,
        ref_type: LedgerRefType | None,
    ) -> tuple[str, list]:
        clauses = ["store_id = ?"]
        params: list = [store_id]
        if product_id is not None:
            clauses.append("product_id = ?")
            params.append(product_id)
        if ref_type is not None:
            clauses.append("ref_type = ?")
            params.append(ref_type.value)
        return "WHERE " + " AND ".join(clauses), params

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> StockLedgerEntry:
        return StockLedgerEntry(
            id=row["id"],
            store_id=row["store_id"],
            product_id=row["product_id"],
            ref_type=LedgerRefType(row["ref_type"]),
            ref_id=row["ref_id"],
            delta=row["delta"],
            unit_cost=row["unit_cost"],
            created_at=from_db_time(row["created_at"]) or utc_now(),
        )
