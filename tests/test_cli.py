# tests/test_cli.py
import pytest
from rich.console import Console

import cli
from sdk.cart import CartSync
from sdk.models import CartItem, InventoryRecord, Product


@pytest.fixture
def out(monkeypatch):
    console = Console(record=True, width=140, color_system=None)
    monkeypatch.setattr(cli, "console", console)
    return console


def test_show_products_with_stock(out):
    products = [
        Product(id="p1", name="Whey", brand="Optimum", price_cents=4999, badge="New"),
        Product(id="p2", name="Shaker", price_cents=899),
    ]
    inventories = {
        "p1": InventoryRecord(product_id="p1", available_stock=2, needs_restock=True),
        "p2": InventoryRecord(product_id="p2", available_stock=0),
    }
    cli.show_products(products, inventories)
    text = out.export_text()
    assert "Whey [New]" in text
    assert "$49.99" in text
    assert "Low stock" in text
    assert "Out of stock" in text


def test_show_cart(out, api):
    cart = CartSync(api)
    cart.items = [CartItem(product_id="p1", quantity=3, price_cents=1000, name="Bar")]
    cli.show_cart(cart)
    text = out.export_text()
    assert "Bar" in text
    assert "$30.00" in text
    assert "3 item(s)" in text


def test_show_empty_cart_with_error(out, api):
    cart = CartSync(api)
    cart.error = "Could not load your cart."
    cli.show_cart(cart)
    text = out.export_text()
    assert "Could not load your cart." in text
    assert "Your cart is empty" in text


def test_default_stock_is_flagged(out):
    p = Product(id="p1", name="Whey", price_cents=4999)
    cli.show_product_detail(p, InventoryRecord.default("p1"))
    text = out.export_text()
    assert "100 units available" in text
    assert "stock not confirmed" in text


def test_try_api_reports_errors(out):
    def boom():
        raise RuntimeError("backend unreachable")

    assert cli.try_api(boom) is None
    assert cli.status_message == "Error: backend unreachable"
    assert cli.try_api(lambda: 42, success_msg="done") == 42
    assert cli.status_message == "done"
