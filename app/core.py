from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List

DEFAULT_MIN_STOCK = 5
DEFAULT_MAX_STOCK = 100

class ProductIn(BaseModel):
    name: str
    brand: Optional[str] = None
    price_cents: int
    stock: int = 0
    description: Optional[str] = ""
    images: List[str] = []
    category: Optional[str] = "general"
    badge: Optional[str] = None
    track_inventory: bool = True

class RegisterIn(BaseModel):
    email: str
    password: str
    name: Optional[str] = None

class LoginIn(BaseModel):
    email: str
    password: str

class AddToCartIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    quantity: int = 1

class UpdateCartItemIn(BaseModel):
    quantity: int

class InventoryStatusIn(BaseModel):
    status: str

def _make_product_dict(product_id: str, p: ProductIn) -> Dict[str, Any]:
    return {
        "id": product_id,
        "name": p.name,
        "brand": p.brand,
        "price_cents": p.price_cents,
        "stock": p.stock,
        "description": p.description,
        "images": list(p.images),
        "category": p.category,
        "badge": p.badge,
    }

def _make_inventory_dict(product_id: str, stock: int) -> Dict[str, Any]:
    return {
        "productId": product_id,
        "currentStock": stock,
        "reservedStock": 0,
        "availableStock": stock,
        "minStock": DEFAULT_MIN_STOCK,
        "maxStock": DEFAULT_MAX_STOCK,
        "status": "active" if stock > 0 else "out_of_stock",
        "needsRestock": stock <= DEFAULT_MIN_STOCK,
    }

def _public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {"email": user["email"], "name": user.get("name")}
