"""
Receiving engine: stock and weighted-average cost updates.

Every unit that enters stock goes through ReceivingEngine.receive,
which updates the product and appends the matching stock ledger entry
inside the caller's unit of work. A call is not idempotent: delivering
the same receipt twice adds the stock twice.
"""

from dataclasses import dataclass

from storeledger.config import get_logger
from storeledger.core.entities.enums import LedgerRefType
from storeledger.core.entities.inventory import Product, StockLedgerEntry
from storeledger.core.exceptions import InvalidQuantityError, ProductNotFoundError
from storeledger.core.interfaces.unit_of_work import IUnitOfWork
from storeledger.core.services.costing import moving_average_cost

logger = get_logger(__name__)


@dataclass
class ReceiptResult:
    """Product state after a receipt plus the ledger entry it produced."""

    product: Product
    entry: StockLedgerEntry
    previous_stock: int
    previous_cost_price: int | None


class ReceivingEngine:
    """Applies goods receipts to products and the stock ledger."""

    async def receive(
        self,
        uow: IUnitOfWork,
        store_id: int,
        product_id: int,
        po_id: int,
        quantity: int,
        unit_cost: int,
    ) -> ReceiptResult:
        """
        Receive units of a product against a purchase order.

        Args:
            uow: Open unit of work; the product row is read and written in it.
            store_id: Store owning the product.
            product_id: Product receiving stock.
            po_id: Purchase order the receipt belongs to (ledger ref_id).
            quantity: Units received, must be positive.
            unit_cost: Unit cost of this receipt in minor units.

        Raises:
            InvalidQuantityError: quantity is not positive.
            ProductNotFoundError: product is not in the store.
            ConcurrentModificationError: the product's stock changed under us.
        """
        if quantity <= 0:
            raise InvalidQuantityError(
                None, quantity, reason=f"receipt quantity must be positive, got {quantity}"
            )

        product = await uow.products.get(product_id, store_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        previous_stock = product.stock
        previous_cost = product.cost_price
        update = moving_average_cost(previous_stock, previous_cost, quantity, unit_cost)

        await uow.products.update_stock_and_cost(
            product_id,
            expected_stock=previous_stock,
            stock=update.stock,
            cost_price=update.cost_price,
        )
        product.stock = update.stock
        product.cost_price = update.cost_price

        entry = await uow.stock_ledger.append(
            StockLedgerEntry(
                store_id=store_id,
                product_id=product_id,
                ref_type=LedgerRefType.PO_RECEIPT,
                ref_id=po_id,
                delta=quantity,
                unit_cost=unit_cost,
            )
        )

        logger.info(
            "stock_received",
            product_id=product_id,
            po_id=po_id,
            quantity=quantity,
            unit_cost=unit_cost,
            new_stock=update.stock,
            new_cost_price=update.cost_price,
        )

        return ReceiptResult(
            product=product,
            entry=entry,
            previous_stock=previous_stock,
            previous_cost_price=previous_cost,
        )
