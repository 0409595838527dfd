# app/main.py
from fastapi import FastAPI, Header
from typing import Optional

from .core import (
    ProductIn, RegisterIn, LoginIn, AddToCartIn, UpdateCartItemIn, InventoryStatusIn
)
from . import logic

app = FastAPI(title="supergains (in-memory reference backend)")

from fastapi.middleware.cors import CORSMiddleware

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # or restrict to the storefront origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Users
# ---------------------------
@app.post("/users/register", status_code=201)
async def register(payload: RegisterIn):
    return await logic.register_logic(payload)

@app.post("/users/login")
async def login(payload: LoginIn):
    return await logic.login_logic(payload)

@app.post("/users/logout")
async def logout(authorization: Optional[str] = Header(None)):
    return await logic.logout_logic(authorization)

# ---------------------------
# Product endpoints
# ---------------------------
@app.post("/products", status_code=201)
async def create_product(payload: ProductIn):
    return await logic.create_product_logic(payload)

@app.get("/products")
async def list_products(category: Optional[str] = None):
    return await logic.list_products_logic(category)

@app.get("/products/{product_id}")
async def get_product(product_id: str):
    return await logic.get_product_logic(product_id)

# ---------------------------
# Inventory endpoints
# ---------------------------
@app.get("/inventory/product/{product_id}")
async def get_product_inventory(product_id: str):
    return await logic.get_product_inventory_logic(product_id)

@app.put("/inventory/product/{product_id}/status")
async def set_inventory_status(product_id: str, payload: InventoryStatusIn):
    return await logic.set_inventory_status_logic(product_id, payload)

# ---------------------------
# Cart endpoints (bearer auth)
# ---------------------------
@app.get("/cart")
async def view_cart(authorization: Optional[str] = Header(None)):
    return await logic.view_cart_logic(authorization)

@app.post("/cart/add")
async def cart_add(payload: AddToCartIn, authorization: Optional[str] = Header(None)):
    return await logic.cart_add_logic(payload, authorization)

@app.put("/cart/item/{product_id}")
async def cart_update(product_id: str, payload: UpdateCartItemIn, authorization: Optional[str] = Header(None)):
    return await logic.cart_update_logic(product_id, payload, authorization)

@app.delete("/cart/item/{product_id}")
async def cart_remove(product_id: str, authorization: Optional[str] = Header(None)):
    return await logic.cart_remove_logic(product_id, authorization)

@app.delete("/cart/clear")
async def cart_clear(authorization: Optional[str] = Header(None)):
    return await logic.cart_clear_logic(authorization)

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    return await logic.reset_all_logic()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8085)
