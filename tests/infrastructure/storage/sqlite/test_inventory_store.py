"""Tests for the SQLite product, category and stock ledger stores."""

import aiosqlite
import pytest

from storeledger.core.entities import Category, LedgerRefType, Product, StockLedgerEntry
from storeledger.core.exceptions import ConcurrentModificationError


def receipt(world, product_id: int, delta: int, unit_cost: int = 100, ref_id: int = 1):
    return StockLedgerEntry(
        store_id=world.store_id,
        product_id=product_id,
        ref_type=LedgerRefType.PO_RECEIPT,
        ref_id=ref_id,
        delta=delta,
        unit_cost=unit_cost,
    )


class TestSQLiteProductStore:
    async def test_get_is_store_scoped(self, uow_factory, world, other_world):
        product_id = world.product_ids[0]
        async with uow_factory(read_only=True) as uow:
            product = await uow.products.get(product_id, world.store_id)
            foreign = await uow.products.get(product_id, other_world.store_id)

        assert product.title == "Basmati Rice 5kg"
        assert product.stock == 0
        assert product.cost_price is None
        assert foreign is None

    async def test_create_and_get_by_sku(self, uow_factory, world):
        async with uow_factory() as uow:
            created = await uow.products.create(
                Product(store_id=world.store_id, sku="TEA-250", title="Tea 250g", selling_price=1800)
            )
        async with uow_factory(read_only=True) as uow:
            found = await uow.products.get_by_sku(world.store_id, "TEA-250")
            missing = await uow.products.get_by_sku(world.store_id, "NOPE")

        assert found.id == created.id
        assert found.selling_price == 1800
        assert missing is None

    async def test_guarded_update(self, uow_factory, world):
        product_id = world.product_ids[0]
        async with uow_factory() as uow:
            await uow.products.update_stock_and_cost(
                product_id, expected_stock=0, stock=10, cost_price=500
            )

        with pytest.raises(ConcurrentModificationError):
            async with uow_factory() as uow:
                await uow.products.update_stock_and_cost(
                    product_id, expected_stock=0, stock=20, cost_price=600
                )

        async with uow_factory(read_only=True) as uow:
            product = await uow.products.get(product_id, world.store_id)
        assert (product.stock, product.cost_price) == (10, 500)

    async def test_negative_stock_rejected_by_schema(self, uow_factory, world):
        with pytest.raises(aiosqlite.IntegrityError):
            async with uow_factory() as uow:
                await uow.products.update_stock_and_cost(
                    world.product_ids[0], expected_stock=0, stock=-1, cost_price=None
                )


class TestSQLiteCategoryStore:
    async def test_find_by_name_ignores_case(self, uow_factory, world):
        async with uow_factory() as uow:
            created = await uow.categories.create(
                Category(store_id=world.store_id, name="Dairy", slug="dairy")
            )
        async with uow_factory(read_only=True) as uow:
            found = await uow.categories.find_by_name(world.store_id, "dAIRY")
            assert await uow.categories.slug_exists(world.store_id, "dairy")
            assert not await uow.categories.slug_exists(world.store_id, "dairy-1")

        assert found.id == created.id

    async def test_find_by_name_folds_unicode_case(self, uow_factory, seeder, world):
        async with uow_factory() as uow:
            spices = await uow.categories.create(
                Category(store_id=world.store_id, name="Épices", slug="epices")
            )
            bakery = await uow.categories.create(
                Category(store_id=world.store_id, name="Bäckerei Straße", slug="baeckerei")
            )
        async with uow_factory(read_only=True) as uow:
            assert (await uow.categories.find_by_name(world.store_id, "épices")).id == spices.id
            assert (await uow.categories.find_by_name(world.store_id, "ÉPICES")).id == spices.id
            found = await uow.categories.find_by_name(world.store_id, "BÄCKEREI STRASSE")
            assert found.id == bakery.id

        row = await seeder.fetch_one("SELECT name_key FROM categories WHERE id = ?", (spices.id,))
        assert row["name_key"] == "épices"

    async def test_slug_unique_per_store(self, uow_factory, world, other_world):
        async with uow_factory() as uow:
            await uow.categories.create(Category(store_id=world.store_id, name="Dairy", slug="dairy"))
            await uow.categories.create(
                Category(store_id=other_world.store_id, name="Dairy", slug="dairy")
            )

        with pytest.raises(aiosqlite.IntegrityError):
            async with uow_factory() as uow:
                await uow.categories.create(
                    Category(store_id=world.store_id, name="DAIRY!", slug="dairy")
                )


class TestSQLiteStockLedgerStore:
    async def test_append_list_and_filter(self, uow_factory, world):
        rice, oil = world.product_ids
        async with uow_factory() as uow:
            await uow.stock_ledger.append(receipt(world, rice, 5))
            await uow.stock_ledger.append(receipt(world, oil, 2))
            await uow.stock_ledger.append(receipt(world, rice, 3))

        async with uow_factory(read_only=True) as uow:
            entries = await uow.stock_ledger.list_entries(world.store_id)
            rice_entries = await uow.stock_ledger.list_entries(world.store_id, product_id=rice)
            sales = await uow.stock_ledger.count_entries(
                world.store_id, ref_type=LedgerRefType.SALE
            )
            total = await uow.stock_ledger.count_entries(world.store_id)

        assert [e.delta for e in entries] == [3, 2, 5]
        assert [e.delta for e in rice_entries] == [3, 5]
        assert entries[0].ref_type == LedgerRefType.PO_RECEIPT
        assert (sales, total) == (0, 3)

    async def test_reconcile(self, uow_factory, seeder, world):
        rice, oil = world.product_ids
        drifted = await seeder.product(world.store_id, "Sugar 1kg", sku="A-SUGAR", stock=7)
        async with uow_factory() as uow:
            await uow.products.update_stock_and_cost(rice, expected_stock=0, stock=5, cost_price=100)
            await uow.stock_ledger.append(receipt(world, rice, 5))

        async with uow_factory(read_only=True) as uow:
            lines = await uow.stock_ledger.reconcile(world.store_id)

        by_id = {line.product_id: line for line in lines}
        assert set(by_id) == {rice, oil, drifted}
        assert by_id[rice].is_consistent
        assert by_id[oil].is_consistent
        assert by_id[drifted].ledger_total == 0
        assert by_id[drifted].difference == 7
