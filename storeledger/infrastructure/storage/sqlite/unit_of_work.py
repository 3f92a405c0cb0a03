"""
SQLite unit of work.

Holds one pooled connection for the whole block and wraps it in an
explicit transaction. Write units start with BEGIN IMMEDIATE, which
takes SQLite's write lock up front: two receipts against the same
product serialize instead of both reading the same stock.
"""

from contextlib import AsyncExitStack
from types import TracebackType

import aiosqlite

from storeledger.config import get_logger
from storeledger.core.exceptions import DatabaseError
from storeledger.core.interfaces.unit_of_work import IUnitOfWork
from storeledger.infrastructure.storage.sqlite.connection import ConnectionPool
from storeledger.infrastructure.storage.sqlite.inventory_store import (
    SQLiteCategoryStore,
    SQLiteProductStore,
    SQLiteStockLedgerStore,
)
from storeledger.infrastructure.storage.sqlite.purchase_order_store import (
    SQLiteAuditLogStore,
    SQLitePurchaseOrderStore,
)
from storeledger.infrastructure.storage.sqlite.supplier_store import SQLiteSupplierStore

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """One SQLite transaction exposing every repository."""

    def __init__(self, pool: ConnectionPool, read_only: bool = False):
        self._pool = pool
        self._read_only = read_only
        self._stack: AsyncExitStack | None = None
        self._conn: aiosqlite.Connection | None = None
        self._active = False

    async def __aenter__(self) -> "SQLiteUnitOfWork":
        self._stack = AsyncExitStack()
        conn = await self._stack.enter_async_context(self._pool.acquire())
        try:
            await conn.execute("BEGIN" if self._read_only else "BEGIN IMMEDIATE")
        except aiosqlite.Error as e:
            await self._stack.aclose()
            raise DatabaseError("begin_transaction", str(e)) from e

        self._conn = conn
        self._active = True
        self.purchase_orders = SQLitePurchaseOrderStore(conn)
        self.audit_log = SQLiteAuditLogStore(conn)
        self.products = SQLiteProductStore(conn)
        self.categories = SQLiteCategoryStore(conn)
        self.suppliers = SQLiteSupplierStore(conn)
        self.stock_ledger = SQLiteStockLedgerStore(conn)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            self._conn = None
            if self._stack is not None:
                await self._stack.aclose()
                self._stack = None

    async def commit(self) -> None:
        if not self._active:
            return
        try:
            await self._conn.execute("COMMIT")
        except aiosqlite.Error as e:
            await self.rollback()
            raise DatabaseError("commit", str(e)) from e
        self._active = False

    async def rollback(self) -> None:
        if not self._active:
            return
        self._active = False
        await self._conn.execute("ROLLBACK")
        logger.debug("transaction_rolled_back")


class SQLiteUnitOfWorkFactory:
    """Callable producing units of work over one connection pool."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def __call__(self, read_only: bool = False) -> SQLiteUnitOfWork:
        return SQLiteUnitOfWork(self._pool, read_only=read_only)
