import asyncio
from typing import Dict, Any, List

# This file holds all the in-memory data stores and concurrency locks.

USERS: Dict[str, Dict[str, Any]] = {}
TOKENS: Dict[str, str] = {}
PRODUCTS: Dict[str, Dict[str, Any]] = {}
INVENTORY: Dict[str, Dict[str, Any]] = {}
# user email -> product id -> {"quantity": int, "price_cents": int}
CARTS: Dict[str, Dict[str, Dict[str, int]]] = {}
_LOCKS: Dict[str, asyncio.Lock] = {}

def _get_lock(key: str) -> asyncio.Lock:
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]
