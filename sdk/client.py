# sdk/client.py
import logging
import requests
import httpx
from typing import Optional, List, Any, Dict

from .errors import ApiError
from .models import Product, CartItem, InventoryRecord

logger = logging.getLogger(__name__)


def _error_message(r, body: Any) -> str:
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error") or body.get("message")
        if detail:
            return detail if isinstance(detail, str) else str(detail)
    text = getattr(r, "text", "") or ""
    return text or getattr(r, "reason_phrase", None) or getattr(r, "reason", None) or "request failed"


def _unwrap(r) -> Any:
    """Return the `data` of a success envelope, or raise ApiError."""
    try:
        body = r.json()
    except ValueError:
        body = None
    if r.status_code >= 400:
        raise ApiError(_error_message(r, body), r.status_code)
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _cart_items(data: Any) -> List[CartItem]:
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise ApiError("malformed cart response")
    return [CartItem.from_backend(line) for line in data["items"]]


class SuperGainsClient:
    """Blocking client for the storefront REST API.

    `session` is anything with a requests-style ``request(method, url, ...)``
    and a mutable ``headers`` mapping: a requests.Session by default, a
    fastapi TestClient in tests.
    """

    def __init__(self, base_url: str = "http://localhost:8085", token: Optional[str] = None,
                 timeout: float = 10, session=None, async_transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.async_transport = async_transport
        self.token: Optional[str] = None
        if token:
            self.set_token(token)

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "SuperGainsClient":
        return cls(base_url=settings.api_url, timeout=settings.timeout, **kwargs)

    # -----------------------
    # Auth
    # -----------------------
    def set_token(self, token: Optional[str]):
        self.token = token
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})
        else:
            self.session.headers.pop("Authorization", None)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def register(self, email: str, password: str, name: Optional[str] = None) -> Dict[str, Any]:
        data = self._request("POST", "/users/register", json={"email": email, "password": password, "name": name})
        self.set_token(data["accessToken"])
        return data["user"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/users/login", json={"email": email, "password": password})
        self.set_token(data["accessToken"])
        return data["user"]

    def logout(self):
        try:
            if self.token:
                self._request("POST", "/users/logout")
        except ApiError as e:
            # an already-expired token is as logged out as it gets
            if not e.is_unauthorized:
                raise
        finally:
            self.set_token(None)

    # -----------------------
    # Products
    # -----------------------
    def create_product(self, name: str, price_cents: int, stock: int = 0, **fields) -> Product:
        payload = {"name": name, "price_cents": price_cents, "stock": stock}
        payload.update(fields)
        return Product.model_validate(self._request("POST", "/products", json=payload))

    def list_products(self, category: Optional[str] = None) -> List[Product]:
        params = {}
        if category:
            params["category"] = category
        data = self._request("GET", "/products", params=params)
        return [Product.model_validate(p) for p in data]

    def get_product(self, product_id: str) -> Product:
        return Product.model_validate(self._request("GET", f"/products/{product_id}"))

    # -----------------------
    # Inventory
    # -----------------------
    def get_product_inventory(self, product_id: str) -> InventoryRecord:
        return InventoryRecord.model_validate(self._request("GET", f"/inventory/product/{product_id}"))

    def async_session(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        return httpx.AsyncClient(timeout=self.timeout, transport=self.async_transport, headers=headers)

    async def get_product_inventory_async(self, product_id: str, client: httpx.AsyncClient) -> InventoryRecord:
        try:
            r = await client.get(f"{self.base_url}/inventory/product/{product_id}")
        except httpx.HTTPError as e:
            raise ApiError(f"network error: {e}") from e
        return InventoryRecord.model_validate(_unwrap(r))

    # -----------------------
    # Cart
    # -----------------------
    def get_cart(self) -> List[CartItem]:
        return _cart_items(self._request("GET", "/cart"))

    def add_to_cart(self, product_id: str, quantity: int = 1) -> List[CartItem]:
        return _cart_items(self._request("POST", "/cart/add", json={"productId": product_id, "quantity": quantity}))

    def update_cart_item(self, product_id: str, quantity: int) -> List[CartItem]:
        return _cart_items(self._request("PUT", f"/cart/item/{product_id}", json={"quantity": quantity}))

    def remove_cart_item(self, product_id: str) -> List[CartItem]:
        return _cart_items(self._request("DELETE", f"/cart/item/{product_id}"))

    def clear_cart(self) -> List[CartItem]:
        return _cart_items(self._request("DELETE", "/cart/clear"))

    def reset(self):
        return self._request("POST", "/reset")

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except (requests.RequestException, httpx.HTTPError) as e:
            raise ApiError(f"network error: {e}") from e
        return _unwrap(r)
