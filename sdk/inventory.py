# sdk/inventory.py
import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from .cache import InventoryCache
from .client import SuperGainsClient
from .errors import ApiError
from .models import InventoryRecord

logger = logging.getLogger(__name__)


class InventoryService:
    """Cached per-product stock lookups.

    Lookups never raise: when the backend has no record, rate-limits us,
    or fails in any other way, a default record (100 units, active,
    ``is_default=True``) is returned instead. Default records are not
    cached, so the next lookup tries the backend again.
    """

    def __init__(self, client: SuperGainsClient, cache: Optional[InventoryCache] = None):
        self.client = client
        self.cache = cache if cache is not None else InventoryCache()

    def get_inventory(self, product_id: str) -> InventoryRecord:
        cached = self.cache.get(product_id)
        if cached is not None:
            return cached
        try:
            record = self.client.get_product_inventory(product_id)
        except (ApiError, ValidationError) as e:
            return self._fallback(product_id, e)
        self.cache.set(product_id, record)
        return record

    def refresh_inventory(self, product_id: str) -> InventoryRecord:
        self.cache.delete(product_id)
        return self.get_inventory(product_id)

    def clear_product_cache(self, product_id: str) -> None:
        self.cache.delete(product_id)

    def clear_cache(self) -> None:
        self.cache.clear()

    async def get_multiple_inventory(self, product_ids: Iterable[str]) -> Dict[str, InventoryRecord]:
        """Inventory for several products; only ids without a fresh entry hit the network.

        Stale ids are fetched concurrently. A failure for one id yields the
        default record for that id and does not affect the others.
        """
        ids = list(dict.fromkeys(product_ids))
        result: Dict[str, InventoryRecord] = {}
        stale: List[str] = []
        for pid in ids:
            cached = self.cache.get(pid)
            if cached is not None:
                result[pid] = cached
            else:
                stale.append(pid)

        if stale:
            async with self.client.async_session() as http:
                fetched = await asyncio.gather(
                    *(self.client.get_product_inventory_async(pid, http) for pid in stale),
                    return_exceptions=True,
                )
            for pid, outcome in zip(stale, fetched):
                if isinstance(outcome, InventoryRecord):
                    self.cache.set(pid, outcome)
                    result[pid] = outcome
                elif isinstance(outcome, Exception):
                    result[pid] = self._fallback(pid, outcome)
                else:
                    # BaseException (e.g. CancelledError) propagates
                    raise outcome

        return {pid: result[pid] for pid in ids}

    def _fallback(self, product_id: str, error: Exception) -> InventoryRecord:
        if isinstance(error, ApiError) and (error.is_not_found or error.is_rate_limited):
            logger.debug("no inventory for %s (%s), using default", product_id, error)
        else:
            logger.warning("inventory fetch failed for %s, using default: %s", product_id, error)
        return InventoryRecord.default(product_id)


# ---------------------------
# Stock helpers for display and add-to-cart guards
# ---------------------------
def can_add_to_cart(inventory: Optional[InventoryRecord], requested_quantity: int = 1) -> bool:
    if inventory is None:
        return False
    return inventory.status == "active" and inventory.available_stock >= requested_quantity


def get_stock_status(inventory: Optional[InventoryRecord]) -> str:
    if inventory is None:
        return "Unknown"
    if inventory.status != "active":
        return "Unavailable"
    if inventory.available_stock == 0:
        return "Out of stock"
    if inventory.needs_restock:
        return "Low stock"
    return "Available"


_STATUS_STYLES = {
    "Unknown": "dim",
    "Unavailable": "dim",
    "Out of stock": "bold red",
    "Low stock": "yellow",
    "Available": "green",
}


def get_stock_style(inventory: Optional[InventoryRecord]) -> str:
    return _STATUS_STYLES[get_stock_status(inventory)]


def get_stock_display_text(inventory: Optional[InventoryRecord]) -> str:
    if inventory is None:
        return "Stock unavailable"
    if inventory.status != "active":
        return "Product unavailable"
    return f"{inventory.available_stock} units available"
