import hashlib
import uuid
from typing import Optional, Dict, Any, List
from fastapi import HTTPException

# Import from other modules
from .core import (
    ProductIn, RegisterIn, LoginIn, AddToCartIn, UpdateCartItemIn, InventoryStatusIn,
    _make_product_dict, _make_inventory_dict, _public_user
)
from .database import (
    USERS, TOKENS, PRODUCTS, INVENTORY, CARTS, _LOCKS, _get_lock
)

# This file contains the core logic for all API endpoints.

def _ok(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}

def _hash_password(email: str, password: str) -> str:
    return hashlib.sha256(f"{email}:{password}".encode("utf-8")).hexdigest()

def _current_user(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="authentication required")
    email = TOKENS.get(authorization[len("Bearer "):])
    if email is None:
        raise HTTPException(status_code=401, detail="session expired")
    return email

def _available_stock(product_id: str) -> int:
    inv = INVENTORY.get(product_id)
    if inv is not None:
        return inv["availableStock"] if inv["status"] == "active" else 0
    return PRODUCTS[product_id]["stock"]

# User endpoints
async def register_logic(payload: RegisterIn):
    email = payload.email.strip().lower()
    if email in USERS:
        raise HTTPException(status_code=409, detail="email already registered")
    USERS[email] = {
        "email": email,
        "name": payload.name,
        "password_hash": _hash_password(email, payload.password),
    }
    token = uuid.uuid4().hex
    TOKENS[token] = email
    return _ok({"user": _public_user(USERS[email]), "accessToken": token})

async def login_logic(payload: LoginIn):
    email = payload.email.strip().lower()
    user = USERS.get(email)
    if not user or user["password_hash"] != _hash_password(email, payload.password):
        raise HTTPException(status_code=401, detail="invalid credentials")
    token = uuid.uuid4().hex
    TOKENS[token] = email
    return _ok({"user": _public_user(user), "accessToken": token})

async def logout_logic(authorization: Optional[str]):
    _current_user(authorization)
    TOKENS.pop(authorization[len("Bearer "):], None)
    return _ok(None)

# Product endpoints
async def create_product_logic(payload: ProductIn):
    if payload.price_cents < 0:
        raise HTTPException(status_code=400, detail="price must be >= 0")
    if payload.stock < 0:
        raise HTTPException(status_code=400, detail="stock must be >= 0")
    pid = uuid.uuid4().hex
    PRODUCTS[pid] = _make_product_dict(pid, payload)
    if payload.track_inventory:
        INVENTORY[pid] = _make_inventory_dict(pid, payload.stock)
    return _ok(PRODUCTS[pid])

async def list_products_logic(category: Optional[str] = None):
    out = []
    for p in PRODUCTS.values():
        if category and p["category"] != category:
            continue
        out.append(p)
    return _ok(out)

async def get_product_logic(product_id: str):
    p = PRODUCTS.get(product_id)
    if not p:
        raise HTTPException(status_code=404, detail="product not found")
    return _ok(p)

# Inventory endpoints
async def get_product_inventory_logic(product_id: str):
    inv = INVENTORY.get(product_id)
    if not inv:
        raise HTTPException(status_code=404, detail="inventory record not found")
    return _ok(inv)

async def set_inventory_status_logic(product_id: str, payload: InventoryStatusIn):
    inv = INVENTORY.get(product_id)
    if not inv:
        raise HTTPException(status_code=404, detail="inventory record not found")
    if payload.status not in ("active", "inactive", "discontinued", "out_of_stock"):
        raise HTTPException(status_code=400, detail=f"invalid status: {payload.status}")
    inv["status"] = payload.status
    return _ok(inv)

# Cart endpoints
def _cart_view(email: str) -> Dict[str, Any]:
    cart = CARTS.get(email, {})
    items = []
    total = 0
    for pid, line in cart.items():
        prod = PRODUCTS.get(pid)
        if not prod:
            continue
        total += line["price_cents"] * line["quantity"]
        items.append({
            "product": {
                "id": prod["id"],
                "name": prod["name"],
                "brand": prod["brand"],
                "price_cents": prod["price_cents"],
                "image": prod["images"][0] if prod["images"] else None,
            },
            "quantity": line["quantity"],
            "price_cents": line["price_cents"],
        })
    return _ok({"items": items, "total_cents": total})

async def view_cart_logic(authorization: Optional[str]):
    email = _current_user(authorization)
    return _cart_view(email)

async def cart_add_logic(payload: AddToCartIn, authorization: Optional[str]):
    email = _current_user(authorization)
    if payload.quantity <= 0:
        raise HTTPException(status_code=400, detail="quantity must be > 0")
    prod = PRODUCTS.get(payload.product_id)
    if not prod:
        raise HTTPException(status_code=404, detail="product not found")

    lock = _get_lock(f"cart:{email}")
    async with lock:
        cart = CARTS.setdefault(email, {})
        line = cart.get(payload.product_id)
        wanted = payload.quantity + (line["quantity"] if line else 0)
        if wanted > _available_stock(payload.product_id):
            raise HTTPException(status_code=400, detail="insufficient stock")
        if line:
            line["quantity"] = wanted
        else:
            cart[payload.product_id] = {"quantity": wanted, "price_cents": prod["price_cents"]}
        return _cart_view(email)

async def cart_update_logic(product_id: str, payload: UpdateCartItemIn, authorization: Optional[str]):
    email = _current_user(authorization)
    if payload.quantity < 0:
        raise HTTPException(status_code=400, detail="quantity cannot be negative")

    lock = _get_lock(f"cart:{email}")
    async with lock:
        cart = CARTS.setdefault(email, {})
        if product_id not in cart:
            raise HTTPException(status_code=404, detail="cart item not found")
        if payload.quantity == 0:
            del cart[product_id]
        else:
            if payload.quantity > _available_stock(product_id):
                raise HTTPException(status_code=400, detail="insufficient stock")
            cart[product_id]["quantity"] = payload.quantity
        return _cart_view(email)

async def cart_remove_logic(product_id: str, authorization: Optional[str]):
    email = _current_user(authorization)
    lock = _get_lock(f"cart:{email}")
    async with lock:
        CARTS.setdefault(email, {}).pop(product_id, None)
        return _cart_view(email)

async def cart_clear_logic(authorization: Optional[str]):
    email = _current_user(authorization)
    lock = _get_lock(f"cart:{email}")
    async with lock:
        CARTS[email] = {}
        return _cart_view(email)

# Utility: reset (for tests/demo)
async def reset_all_logic():
    USERS.clear()
    TOKENS.clear()
    PRODUCTS.clear()
    INVENTORY.clear()
    CARTS.clear()
    _LOCKS.clear()
    return _ok({"status": "reset"})
