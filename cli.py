# cli.py - interactive SuperGains storefront
import asyncio
import logging
import sys
from datetime import datetime
from typing import List, Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.logging import RichHandler
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.cache import InventoryCache
from sdk.cart import CartSync
from sdk.client import SuperGainsClient
from sdk.config import Settings
from sdk.inventory import (
    InventoryService, can_add_to_cart, get_stock_status, get_stock_style, get_stock_display_text
)
from sdk.models import Product, InventoryRecord
from sdk.money import format_price
from sdk.storage import LocalStorage

console = Console()
settings = Settings.from_env()
c = SuperGainsClient.from_settings(settings)
inventory = InventoryService(c, InventoryCache(ttl_ms=settings.inventory_ttl_ms))
cart = CartSync(c, LocalStorage(settings.storage_path), rate_limit_pause=settings.rate_limit_pause)


# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Product] = []
current_user: Optional[Dict] = None

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def configure_logging(level: str = "WARNING"):
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Product], inventories: Optional[Dict[str, InventoryRecord]] = None):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    inventories = inventories or {}
    table = Table(
        title="💪 SuperGains Catalog",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=12)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Brand", width=14)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", width=16)
    table.add_column("Category", width=12)

    for p in products:
        inv = inventories.get(p.id)
        stock_cell = Text(get_stock_status(inv), style=get_stock_style(inv)) if p.id in inventories else Text("-")
        name = f"{p.name} [{p.badge}]" if p.badge else p.name
        table.add_row(
            p.id,
            Text(name),
            Text(p.brand or "-"),
            format_price(p.price_cents),
            stock_cell,
            p.category or "-"
        )
    console.print(table)


def show_product_detail(p: Product, inv: InventoryRecord):
    body = Text()
    body.append(f"{p.name}\n", style="bold")
    if p.brand:
        body.append(f"by {p.brand}\n", style="dim")
    body.append(f"{format_price(p.price_cents)}\n", style="bold green")
    if p.description:
        body.append(f"\n{p.description}\n")
    body.append("\n")
    body.append(get_stock_display_text(inv), style=get_stock_style(inv))
    if inv.is_default:
        body.append("  (stock not confirmed)", style="dim italic")
    console.print(Panel(body, title=f"🏷️ {p.id}", border_style="cyan"))


def show_cart(cart_sync: CartSync):
    title = Text()
    title.append("🛒 Shopping Cart", style="bold")
    title.append(f" - Total: {format_price(cart_sync.total_price())}", style="bold green")

    if cart_sync.error:
        console.print(f"[red]{cart_sync.error}[/red]")

    if not cart_sync.items:
        console.print(Panel("Your cart is empty 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("Product", style="bold", width=30)
    table.add_column("Qty", justify="right", width=8)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Subtotal", justify="right", width=12)

    for it in cart_sync.items:
        table.add_row(
            Text(it.name or f"Product {it.product_id[:8]}"),
            str(it.quantity),
            format_price(it.price_cents),
            format_price(it.subtotal_cents)
        )

    console.print(Panel(table, title=title, border_style="blue"))
    console.print(f"[dim]{cart_sync.total_items()} item(s)[/dim]")


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs). Shows a spinner while calling.
    Catches exceptions and updates status_message.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


def report_cart_result(ok: bool, success_msg: str):
    global status_message
    if ok:
        status_message = success_msg
        console.print(show_status(success_msg, True))
    else:
        status_message = f"Error: {cart.error}"
        console.print(show_status(status_message, False))


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer():
    global product_cache
    if not product_cache:
        product_cache = try_api(c.list_products) or []
    return WordCompleter([p.id for p in product_cache], meta_dict={p.id: p.name for p in product_cache},
                         ignore_case=True)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    who = current_user["email"] if current_user else "guest"
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "💪 SuperGains",
        f"[bold blue]Storefront[/bold blue] [dim]({who})[/dim]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


# ---------------------------
# Actions
# ---------------------------
def list_products_with_stock():
    global product_cache
    products = try_api(c.list_products, success_msg="Products loaded")
    if products is None:
        return
    product_cache = products
    inventories = asyncio.run(inventory.get_multiple_inventory([p.id for p in products]))
    show_products(products, inventories)


def log_in():
    global current_user
    email = Prompt.ask("Email")
    password = Prompt.ask("Password", password=True)
    user = try_api(c.login, email, password, success_msg=f"Welcome back, {email}")
    if user is not None:
        current_user = user
        cart.on_auth_change(True)
        show_cart(cart)


def add_product_to_cart():
    pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
    product = try_api(c.get_product, pid)
    if product is None:
        return
    qty = IntPrompt.ask("Enter quantity", default=1)
    inv = inventory.get_inventory(pid)
    if not can_add_to_cart(inv, qty):
        console.print(show_status(f"Cannot add {qty}: {get_stock_display_text(inv)}", False))
        return
    report_cart_result(cart.add_to_cart(product, qty), f"Added {qty} x {product.name}")
    show_cart(cart)


def menu():
    global status_message, product_cache, current_user

    console.clear()
    console.print(create_header())

    # Preload products for autocomplete
    product_cache = try_api(c.list_products) or []

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "6", "🔢 Change quantity"),
            ("2", "ℹ️ Product details", "7", "➖ Remove from cart"),
            ("3", "🔑 Log in", "8", "🧹 Clear cart"),
            ("4", "🛒 View cart", "9", "🔄 Refresh stock"),
            ("5", "➕ Add to cart", "10", "🚪 Log out"),
            ("", "", "q", "👋 Quit")
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 11)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            list_products_with_stock()

        elif choice == "2":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
            product = try_api(c.get_product, pid)
            if product is not None:
                show_product_detail(product, inventory.get_inventory(pid))

        elif choice == "3":
            log_in()

        elif choice == "4":
            cart.load_cart()
            show_cart(cart)

        elif choice == "5":
            add_product_to_cart()

        elif choice == "6":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
            qty = IntPrompt.ask("New quantity (0 removes)", default=1)
            report_cart_result(cart.update_quantity(pid, qty), f"Quantity set to {qty}")
            show_cart(cart)

        elif choice == "7":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
            report_cart_result(cart.remove_from_cart(pid), f"Product {pid} removed from cart")
            show_cart(cart)

        elif choice == "8":
            if Confirm.ask("[red]Remove everything from your cart?[/red]"):
                report_cart_result(cart.clear_cart(), "Cart cleared")
                show_cart(cart)

        elif choice == "9":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
            inv = inventory.refresh_inventory(pid)
            console.print(Text(get_stock_display_text(inv), style=get_stock_style(inv)))

        elif choice == "10":
            try_api(c.logout, success_msg="Logged out")
            current_user = None
            cart.on_auth_change(False)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thanks for shopping at SuperGains! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    configure_logging(settings.log_level)
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
