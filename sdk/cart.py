# sdk/cart.py
import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from pydantic import ValidationError

from .client import SuperGainsClient
from .errors import ApiError
from .models import CartItem, Product
from .storage import CART_KEY, LocalStorage

logger = logging.getLogger(__name__)

RATE_LIMIT_PAUSE = 2.0


class CartState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    LOADING = "loading"
    LOADED = "loaded"


class CartSync:
    """
    Holds the cart item list and keeps it in step with the backend cart.

    The backend is authoritative: every add/update/remove is a backend call
    followed by a full reload, with no optimistic local merge. Local
    storage is a fallback only. It is emptied whenever a load succeeds,
    written whenever the item list is set to something non-empty, and read
    back when a load fails for a reason other than 401/429.

    Failures never raise out of this class. They are turned into a short
    message on ``self.error`` and the mutating call returns False.
    """

    def __init__(self, client: SuperGainsClient, storage: Optional[LocalStorage] = None,
                 sleep: Callable[[float], None] = time.sleep, rate_limit_pause: float = RATE_LIMIT_PAUSE):
        self.client = client
        self.storage = storage if storage is not None else LocalStorage()
        self.sleep = sleep
        self.rate_limit_pause = rate_limit_pause
        self.items: List[CartItem] = []
        # authenticated clients stay LOADING until the first load_cart() finishes
        self.state = CartState.LOADING if client.is_authenticated else CartState.UNAUTHENTICATED
        self.error: Optional[str] = None

    # ---------------------------
    # Auth transitions
    # ---------------------------
    def on_auth_change(self, authenticated: bool):
        if authenticated:
            self.load_cart()
        else:
            self.items = []
            self.error = None
            self.storage.remove_item(CART_KEY)
            self.state = CartState.UNAUTHENTICATED

    def _expire_session(self):
        logger.info("session expired, clearing cart")
        self.items = []
        self.storage.remove_item(CART_KEY)
        self.client.set_token(None)
        self.error = "Your session has expired. Please log in again."
        self.state = CartState.UNAUTHENTICATED

    # ---------------------------
    # Loading
    # ---------------------------
    def load_cart(self) -> bool:
        if not self.client.is_authenticated:
            self.state = CartState.UNAUTHENTICATED
            return False

        self.state = CartState.LOADING
        self.error = None
        try:
            items = self.client.get_cart()
        except (ApiError, ValidationError) as e:
            return self._load_failed(e)

        self.storage.remove_item(CART_KEY)
        self._set_items(items)
        self.state = CartState.LOADED
        return True

    def _load_failed(self, e: Exception) -> bool:
        if isinstance(e, ApiError) and e.is_unauthorized:
            self._expire_session()
            return False

        self.error = "Could not load your cart."
        if isinstance(e, ApiError) and e.is_rate_limited:
            logger.warning("cart load rate limited, backing off %.1fs", self.rate_limit_pause)
            self.sleep(self.rate_limit_pause)
            self.state = CartState.LOADED
            return False

        logger.warning("cart load failed, falling back to local storage: %s", e)
        self.items = self._load_from_storage()
        self.state = CartState.LOADED
        return False

    def _load_from_storage(self) -> List[CartItem]:
        raw = self.storage.get_json(CART_KEY, default=[])
        items = []
        for entry in raw if isinstance(raw, list) else []:
            try:
                items.append(CartItem.model_validate(entry))
            except ValidationError:
                logger.warning("dropping malformed stored cart item: %r", entry)
        return items

    def _set_items(self, items: List[CartItem]):
        self.items = list(items)
        if self.items:
            self.storage.set_json(CART_KEY, [i.model_dump(by_alias=True) for i in self.items])

    # ---------------------------
    # Mutations
    # ---------------------------
    def add_to_cart(self, product: Product, quantity: int = 1) -> bool:
        return self._mutate("Could not add the product to your cart.",
                            self.client.add_to_cart, product.id, quantity)

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        if quantity <= 0:
            return self.remove_from_cart(product_id)
        return self._mutate("Could not update the quantity.",
                            self.client.update_cart_item, product_id, quantity)

    def remove_from_cart(self, product_id: str) -> bool:
        return self._mutate("Could not remove the product from your cart.",
                            self.client.remove_cart_item, product_id)

    def clear_cart(self) -> bool:
        # Takes the backend's (empty) answer as-is instead of reloading, so
        # local storage keeps whatever it held before the clear.
        if not self._require_auth():
            return False
        self.error = None
        try:
            items = self.client.clear_cart()
        except (ApiError, ValidationError) as e:
            return self._mutation_failed("Could not clear your cart.", e)
        self._set_items(items)
        return True

    def _mutate(self, failure_message: str, call, *args) -> bool:
        if not self._require_auth():
            return False
        self.error = None
        try:
            call(*args)
        except (ApiError, ValidationError) as e:
            return self._mutation_failed(failure_message, e)
        return self.load_cart()

    def _mutation_failed(self, failure_message: str, e: Exception) -> bool:
        if isinstance(e, ApiError) and e.is_unauthorized:
            self._expire_session()
            return False
        logger.warning("%s %s", failure_message, e)
        if isinstance(e, ApiError) and e.status_code is not None and e.status_code < 500 and e.message:
            self.error = f"{failure_message} ({e.message})"
        else:
            self.error = failure_message
        return False

    def _require_auth(self) -> bool:
        if self.client.is_authenticated:
            return True
        self.error = "Please log in to manage your cart."
        return False

    # ---------------------------
    # Derived values
    # ---------------------------
    def get_item(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def total_price(self) -> int:
        return sum(item.subtotal_cents for item in self.items)

    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def item_count(self) -> int:
        return len(self.items)
