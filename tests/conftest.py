"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from pathlib import Path

# Keep settings from creating ./data while the app module is imported
os.environ.setdefault("STORAGE_DATA_DIR", tempfile.mkdtemp(prefix="storeledger-tests-"))

import aiosqlite  # noqa: E402
import pytest  # noqa: E402

from storeledger.core.entities import Actor, UserRole  # noqa: E402
from storeledger.infrastructure.storage.sqlite import (  # noqa: E402
    ConnectionPool,
    SQLiteUnitOfWorkFactory,
)
from storeledger.infrastructure.storage.sqlite.migrations import initialize_database  # noqa: E402

OWNER_USER_ID = 1
SUPPLIER_USER_ID = 50
OTHER_OWNER_USER_ID = 2
OTHER_SUPPLIER_USER_ID = 60


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "storeledger.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with the full schema applied."""
    await initialize_database(temp_db_path, create_backup_before=False)
    return temp_db_path


@pytest.fixture
async def pool(migrated_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    pool = ConnectionPool(migrated_db, pool_size=3, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def uow_factory(pool: ConnectionPool) -> SQLiteUnitOfWorkFactory:
    return SQLiteUnitOfWorkFactory(pool)


class Seeder:
    """Inserts reference rows the core only reads (stores, suppliers, products)."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def _insert(self, sql: str, params: tuple) -> int:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(sql, params)
            return cursor.lastrowid

    async def store(self, owner_user_id: int, name: str = "Corner Store") -> int:
        return await self._insert(
            "INSERT INTO stores (owner_user_id, name) VALUES (?, ?)",
            (owner_user_id, name),
        )

    async def supplier(
        self, store_id: int, user_id: int | None = None, name: str = "Acme Wholesale"
    ) -> int:
        return await self._insert(
            "INSERT INTO suppliers (store_id, user_id, name) VALUES (?, ?, ?)",
            (store_id, user_id, name),
        )

    async def product(
        self,
        store_id: int,
        title: str,
        sku: str | None = None,
        stock: int = 0,
        cost_price: int | None = None,
        selling_price: int = 0,
    ) -> int:
        return await self._insert(
            """
            INSERT INTO products (store_id, sku, title, stock, cost_price, selling_price)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (store_id, sku, title, stock, cost_price, selling_price),
        )

    async def fetch_one(self, sql: str, params: tuple = ()) -> aiosqlite.Row | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(sql, params)
            return await cursor.fetchone()

    async def count(self, table: str) -> int:
        row = await self.fetch_one(f"SELECT COUNT(*) FROM {table}")
        return row[0]


@pytest.fixture
def seeder(pool: ConnectionPool) -> Seeder:
    return Seeder(pool)


@dataclass
class StoreWorld:
    """One store with its owner, a linked supplier and two products."""

    store_id: int
    supplier_id: int
    product_ids: list[int]
    owner: Actor
    supplier: Actor


async def _build_world(
    seeder: Seeder, owner_user_id: int, supplier_user_id: int, prefix: str
) -> StoreWorld:
    store_id = await seeder.store(owner_user_id, name=f"{prefix} Store")
    supplier_id = await seeder.supplier(store_id, user_id=supplier_user_id)
    product_ids = [
        await seeder.product(store_id, "Basmati Rice 5kg", sku=f"{prefix}-RICE"),
        await seeder.product(store_id, "Sunflower Oil 1L", sku=f"{prefix}-OIL"),
    ]
    return StoreWorld(
        store_id=store_id,
        supplier_id=supplier_id,
        product_ids=product_ids,
        owner=Actor(user_id=owner_user_id, role=UserRole.STORE_OWNER, store_id=store_id),
        supplier=Actor(user_id=supplier_user_id, role=UserRole.SUPPLIER),
    )


@pytest.fixture
async def world(seeder: Seeder) -> StoreWorld:
    return await _build_world(seeder, OWNER_USER_ID, SUPPLIER_USER_ID, "A")


@pytest.fixture
async def other_world(seeder: Seeder, world: StoreWorld) -> StoreWorld:
    """A second, unrelated store for cross-store scoping checks."""
    return await _build_world(seeder, OTHER_OWNER_USER_ID, OTHER_SUPPLIER_USER_ID, "B")


@pytest.fixture
def owner_actor() -> Actor:
    return Actor(user_id=OWNER_USER_ID, role=UserRole.STORE_OWNER, store_id=1)


@pytest.fixture
def supplier_actor() -> Actor:
    return Actor(user_id=SUPPLIER_USER_ID, role=UserRole.SUPPLIER)


@pytest.fixture
def customer_actor() -> Actor:
    return Actor(user_id=99, role=UserRole.CUSTOMER)
