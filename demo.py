#!/usr/bin/env python
import asyncio
import logging

from rich import print
from rich.logging import RichHandler

from sdk.cart import CartSync
from sdk.client import SuperGainsClient
from sdk.config import Settings
from sdk.inventory import InventoryService, can_add_to_cart, get_stock_display_text
from sdk.money import format_price
from sdk.storage import LocalStorage


def main():
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level.upper(), format="%(message)s", handlers=[RichHandler()])
    c = SuperGainsClient.from_settings(settings)

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting store...")
    c.reset()

    # -----------------------------
    # Seed the catalog
    # -----------------------------
    print("\nCreating products...")
    whey = c.create_product("Whey Protein 2lb", 4999, 12, brand="Optimum", category="protein", badge="Best seller")
    creatine = c.create_product("Creatine 300g", 2499, 3, brand="MuscleTech", category="supplements")
    shaker = c.create_product("Shaker Bottle", 899, 0, category="accessories", track_inventory=False)
    for p in (whey, creatine, shaker):
        print(f"  {p.id}  {p.name:<20} {format_price(p.price_cents)}")

    # -----------------------------
    # Inventory (batch, cached)
    # -----------------------------
    inventory = InventoryService(c)
    print("\nFetching inventory for the catalog...")
    stock = asyncio.run(inventory.get_multiple_inventory([whey.id, creatine.id, shaker.id]))
    for pid, inv in stock.items():
        flag = " (default)" if inv.is_default else ""
        print(f"  {pid}: {get_stock_display_text(inv)}{flag}")

    # -----------------------------
    # Log in and sync the cart
    # -----------------------------
    email = "alice@example.com"
    print(f"\nRegistering {email}...")
    c.register(email, "s3cret", name="Alice")
    cart = CartSync(c, LocalStorage())
    cart.on_auth_change(True)

    print("\nAdding to cart...")
    if can_add_to_cart(inventory.get_inventory(whey.id), 2):
        cart.add_to_cart(whey, 2)
    cart.add_to_cart(creatine, 1)
    for item in cart.items:
        print(f"  {item.quantity} x {item.name}  {format_price(item.subtotal_cents)}")
    print(f"  total: {format_price(cart.total_price())}")

    print("\nTrying to add more creatine than is in stock...")
    if not cart.add_to_cart(creatine, 10):
        print(f"  [red]{cart.error}[/red]")

    print("\nChanging whey quantity to 0 (removes it)...")
    cart.update_quantity(whey.id, 0)
    print(f"  items in cart: {cart.total_items()}")

    print("\nClearing the cart...")
    cart.clear_cart()
    print(f"  items in cart: {cart.total_items()}")

    print("\nLogging out...")
    c.logout()
    cart.on_auth_change(False)
    print(f"  cart state: {cart.state.value}")


if __name__ == "__main__":
    main()
