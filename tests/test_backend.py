# tests/test_backend.py
from conftest import make_product, register


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_cart_requires_token(backend):
    assert backend.get("/cart").status_code == 401
    r = backend.get("/cart", headers=auth("not-a-token"))
    assert r.status_code == 401
    assert r.json()["detail"] == "session expired"


def test_login_and_bad_credentials(backend):
    register(backend, "bob@example.com", "hunter2")
    r = backend.post("/users/login", json={"email": "bob@example.com", "password": "hunter2"})
    assert r.status_code == 200
    assert r.json()["data"]["accessToken"]
    r = backend.post("/users/login", json={"email": "bob@example.com", "password": "wrong"})
    assert r.status_code == 401
    r = backend.post("/users/register", json={"email": "bob@example.com", "password": "x"})
    assert r.status_code == 409


def test_add_update_remove_clear(backend):
    token = register(backend)
    p = make_product(backend, stock=5, images=["whey.png"])

    r = backend.post("/cart/add", json={"productId": p["id"], "quantity": 2}, headers=auth(token))
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["total_cents"] == 2 * 4999
    assert data["items"][0]["product"]["image"] == "whey.png"

    # adding again accumulates
    backend.post("/cart/add", json={"productId": p["id"], "quantity": 1}, headers=auth(token))
    items = backend.get("/cart", headers=auth(token)).json()["data"]["items"]
    assert items[0]["quantity"] == 3

    r = backend.put(f"/cart/item/{p['id']}", json={"quantity": 4}, headers=auth(token))
    assert r.json()["data"]["items"][0]["quantity"] == 4

    r = backend.put(f"/cart/item/{p['id']}", json={"quantity": 0}, headers=auth(token))
    assert r.json()["data"]["items"] == []

    backend.post("/cart/add", json={"productId": p["id"]}, headers=auth(token))
    r = backend.delete(f"/cart/item/{p['id']}", headers=auth(token))
    assert r.json()["data"] == {"items": [], "total_cents": 0}

    backend.post("/cart/add", json={"productId": p["id"]}, headers=auth(token))
    r = backend.delete("/cart/clear", headers=auth(token))
    assert r.status_code == 200
    assert r.json()["data"]["items"] == []


def test_cart_validation(backend):
    token = register(backend)
    p = make_product(backend, stock=2)

    r = backend.post("/cart/add", json={"productId": p["id"], "quantity": 0}, headers=auth(token))
    assert r.status_code == 400
    r = backend.post("/cart/add", json={"productId": "missing", "quantity": 1}, headers=auth(token))
    assert r.status_code == 404
    r = backend.post("/cart/add", json={"productId": p["id"], "quantity": 3}, headers=auth(token))
    assert r.status_code == 400
    assert r.json()["detail"] == "insufficient stock"
    r = backend.put(f"/cart/item/{p['id']}", json={"quantity": 1}, headers=auth(token))
    assert r.status_code == 404
    r = backend.put(f"/cart/item/{p['id']}", json={"quantity": -1}, headers=auth(token))
    assert r.status_code == 400


def test_price_is_snapshotted_at_add_time(backend):
    from app.database import PRODUCTS

    token = register(backend)
    p = make_product(backend, price_cents=1000)
    backend.post("/cart/add", json={"productId": p["id"]}, headers=auth(token))
    PRODUCTS[p["id"]]["price_cents"] = 2000
    data = backend.get("/cart", headers=auth(token)).json()["data"]
    assert data["items"][0]["price_cents"] == 1000
    assert data["total_cents"] == 1000


def test_inventory_endpoint(backend):
    tracked = make_product(backend, stock=3)
    untracked = make_product(backend, name="Shaker", track_inventory=False)

    inv = backend.get(f"/inventory/product/{tracked['id']}").json()["data"]
    assert inv["availableStock"] == 3
    assert inv["status"] == "active"
    assert inv["needsRestock"] is True

    assert backend.get(f"/inventory/product/{untracked['id']}").status_code == 404

    r = backend.put(f"/inventory/product/{tracked['id']}/status", json={"status": "discontinued"})
    assert r.json()["data"]["status"] == "discontinued"
    r = backend.put(f"/inventory/product/{tracked['id']}/status", json={"status": "bogus"})
    assert r.status_code == 400


def test_out_of_stock_product_cannot_be_added(backend):
    token = register(backend)
    p = make_product(backend, stock=0)
    inv = backend.get(f"/inventory/product/{p['id']}").json()["data"]
    assert inv["status"] == "out_of_stock"
    r = backend.post("/cart/add", json={"productId": p["id"]}, headers=auth(token))
    assert r.status_code == 400


def test_products_listing_and_lookup(backend):
    make_product(backend, name="Whey", category="protein")
    make_product(backend, name="Creatine", category="supplements")
    all_products = backend.get("/products").json()["data"]
    assert len(all_products) == 2
    protein = backend.get("/products", params={"category": "protein"}).json()["data"]
    assert [p["name"] for p in protein] == ["Whey"]
    assert backend.get("/products/nope").status_code == 404


def test_reset_uses_success_envelope(backend):
    register(backend)
    make_product(backend)
    r = backend.post("/reset")
    assert r.status_code == 200
    assert r.json() == {"success": True, "data": {"status": "reset"}}
    assert backend.get("/products").json()["data"] == []
