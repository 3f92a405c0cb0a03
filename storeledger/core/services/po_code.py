"""
Purchase order code generation.

Codes look like ``PO-2026-0042-381904``: year, the store's next
sequence number, and a random disambiguator. The sequence alone is not
unique under concurrent creation, so each candidate is checked and the
attempt count is bounded.
"""

import secrets
from collections.abc import Callable
from datetime import datetime

from storeledger.config import get_logger
from storeledger.core.clock import utc_now
from storeledger.core.exceptions import CodeGenerationExhaustedError
from storeledger.core.interfaces.purchase_order_store import IPurchaseOrderStore

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


def random_disambiguator() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def format_po_code(year: int, sequence: int, disambiguator: str) -> str:
    return f"PO-{year}-{sequence:04d}-{disambiguator}"


class PurchaseOrderCodeGenerator:
    """Produces a globally unique purchase order code."""

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        disambiguator: Callable[[], str] = random_disambiguator,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._max_attempts = max_attempts
        self._disambiguator = disambiguator
        self._clock = clock

    async def generate(self, store: IPurchaseOrderStore, store_id: int) -> str:
        """
        Generate an unused code for a new purchase order of the store.

        Raises:
            CodeGenerationExhaustedError: every attempt collided.
        """
        sequence = await store.count_for_store(store_id) + 1
        year = self._clock().year

        for attempt in range(1, self._max_attempts + 1):
            code = format_po_code(year, sequence, self._disambiguator())
            if not await store.code_exists(code):
                return code
            logger.warning("po_code_collision", code=code, attempt=attempt)

        logger.error("po_code_exhausted", store_id=store_id, attempts=self._max_attempts)
        raise CodeGenerationExhaustedError(self._max_attempts)
