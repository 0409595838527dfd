# sdk/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any

DEFAULT_STOCK = 100


class Product(BaseModel):
    id: str
    name: str
    brand: Optional[str] = None
    price_cents: int
    stock: int = 0
    description: Optional[str] = ""
    images: List[str] = []
    category: Optional[str] = "general"
    badge: Optional[str] = None

    @property
    def image(self) -> Optional[str]:
        return self.images[0] if self.images else None


class CartItem(BaseModel):
    """One cart line. price/name/image are snapshotted when the item is added."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    quantity: int = Field(ge=0)
    price_cents: int = 0
    name: str = ""
    image: Optional[str] = None

    @property
    def subtotal_cents(self) -> int:
        return self.price_cents * self.quantity

    @classmethod
    def from_backend(cls, line: Dict[str, Any]) -> "CartItem":
        # backend lines look like {"product": {...}, "quantity": n, "price_cents": p}
        product = line.get("product") or {}
        return cls(
            product_id=product.get("id") or line.get("productId"),
            quantity=line.get("quantity", 0),
            price_cents=line.get("price_cents", product.get("price_cents", 0)),
            name=product.get("name", ""),
            image=product.get("image"),
        )


class InventoryRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    available_stock: int = Field(default=0, ge=0, alias="availableStock")
    current_stock: Optional[int] = Field(default=None, alias="currentStock")
    status: str = "active"
    needs_restock: bool = Field(default=False, alias="needsRestock")
    is_default: bool = Field(default=False, alias="isDefault")

    @classmethod
    def default(cls, product_id: str) -> "InventoryRecord":
        """Synthetic record used when the backend has no usable stock data."""
        return cls(
            product_id=product_id,
            available_stock=DEFAULT_STOCK,
            current_stock=DEFAULT_STOCK,
            status="active",
            needs_restock=False,
            is_default=True,
        )
