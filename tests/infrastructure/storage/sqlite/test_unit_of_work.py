"""Tests for SQLiteUnitOfWork transaction handling and append-only tables."""

import aiosqlite
import pytest

from storeledger.core.entities import LedgerRefType, StockLedgerEntry
from storeledger.core.exceptions import DatabaseError
from storeledger.infrastructure.storage.sqlite import ConnectionPool, SQLiteUnitOfWork


class Boom(Exception):
    pass


def ledger_entry(world, delta: int = 1) -> StockLedgerEntry:
    return StockLedgerEntry(
        store_id=world.store_id,
        product_id=world.product_ids[0],
        ref_type=LedgerRefType.ADJUSTMENT,
        ref_id=0,
        delta=delta,
    )


class TestSQLiteUnitOfWork:
    async def test_commit_on_clean_exit(self, uow_factory, seeder, world):
        async with uow_factory() as uow:
            await uow.stock_ledger.append(ledger_entry(world))

        assert await seeder.count("stock_ledger") == 1

    async def test_rollback_on_exception(self, uow_factory, seeder, world):
        with pytest.raises(Boom):
            async with uow_factory() as uow:
                await uow.stock_ledger.append(ledger_entry(world))
                await uow.products.update_stock_and_cost(
                    world.product_ids[0], expected_stock=0, stock=1, cost_price=10
                )
                raise Boom()

        assert await seeder.count("stock_ledger") == 0
        row = await seeder.fetch_one("SELECT stock FROM products WHERE id = ?", (world.product_ids[0],))
        assert row["stock"] == 0

    async def test_connection_returned_to_pool(self, pool, uow_factory, world):
        for _ in range(pool.pool_size + 2):
            with pytest.raises(Boom):
                async with uow_factory():
                    raise Boom()
            async with uow_factory(read_only=True):
                pass

        assert pool._pool.qsize() == pool.pool_size

    async def test_explicit_rollback_then_exit(self, uow_factory, seeder, world):
        async with uow_factory() as uow:
            await uow.stock_ledger.append(ledger_entry(world))
            await uow.rollback()

        assert await seeder.count("stock_ledger") == 0

    async def test_repositories_share_one_connection(self, uow_factory):
        async with uow_factory() as uow:
            assert uow.purchase_orders._conn is uow.stock_ledger._conn
            assert uow.products._conn is uow.audit_log._conn

    async def test_begin_failure_raises_database_error(self, migrated_db):
        pool = ConnectionPool(migrated_db, pool_size=1, busy_timeout=1000)
        await pool.initialize()
        try:
            async with pool.acquire() as conn:
                await conn.execute("BEGIN")
            # the only pooled connection now sits inside an open transaction
            with pytest.raises(DatabaseError):
                async with SQLiteUnitOfWork(pool):
                    pass
            assert pool._pool.qsize() == 1
        finally:
            await pool.close()


class TestAppendOnlyTables:
    async def test_ledger_rows_cannot_change(self, uow_factory, pool, world):
        async with uow_factory() as uow:
            entry = await uow.stock_ledger.append(ledger_entry(world, delta=4))

        async with pool.acquire() as conn:
            with pytest.raises(aiosqlite.IntegrityError, match="append-only"):
                await conn.execute("UPDATE stock_ledger SET delta = 40 WHERE id = ?", (entry.id,))
            with pytest.raises(aiosqlite.IntegrityError, match="append-only"):
                await conn.execute("DELETE FROM stock_ledger WHERE id = ?", (entry.id,))

    async def test_audit_rows_cannot_change(self, uow_factory, pool, seeder, world):
        async with pool.acquire() as conn:
            cursor = await conn.execute(
                "INSERT INTO purchase_orders (store_id, supplier_id, code) VALUES (?, ?, 'PO-T')",
                (world.store_id, world.supplier_id),
            )
            po_id = cursor.lastrowid
            await conn.execute(
                """
                INSERT INTO purchase_order_audit_logs (po_id, user_id, action, new_status)
                VALUES (?, 1, 'created', 'DRAFT')
                """,
                (po_id,),
            )
            with pytest.raises(aiosqlite.IntegrityError, match="append-only"):
                await conn.execute("UPDATE purchase_order_audit_logs SET notes = 'x'")
            with pytest.raises(aiosqlite.IntegrityError, match="append-only"):
                await conn.execute("DELETE FROM purchase_order_audit_logs")

        assert await seeder.count("purchase_order_audit_logs") == 1
