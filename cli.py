# cli.py - interactive products admin panel
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.panel import ModalState, ProductsPanel
from sdk.pyadmin import ProductsClient

console = Console()

PLACEHOLDER_IMAGE = "https://cdn.shopify.com/s/files/1/0533/2089/files/placeholder-images-image_large.png"
STATUS_OPTIONS = ["ACTIVE", "DRAFT", "ARCHIVED"]

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def _price(product: Dict[str, Any]) -> str:
    variant = product.get("variant") or {}
    price = variant.get("price")
    return f"₹{price}" if price else "N/A"


def _image(product: Dict[str, Any]) -> str:
    image = product.get("image") or {}
    return image.get("url") or PLACEHOLDER_IMAGE


def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found.[/italic yellow]")
        return

    table = Table(
        title="📦 Shopify Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("#", justify="right", width=4)
    table.add_column("Title", style="bold", width=26)
    table.add_column("Status", width=10)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Handle", style="dim", width=24)
    table.add_column("Image", style="dim", overflow="fold", width=30)

    for i, p in enumerate(products, start=1):
        status = p.get("status", "N/A")
        status_style = "green" if status == "ACTIVE" else "bright_black"
        table.add_row(
            str(i),
            p.get("title", "N/A"),
            f"[{status_style}]{status}[/{status_style}]",
            _price(p),
            p.get("handle") or "-",
            _image(p),
        )
    console.print(table)


def show_footer(panel: ProductsPanel):
    if panel.has_next_page:
        console.print("[cyan]More products available - choose 'Load more'.[/cyan]")
    else:
        console.print("[bright_black]All products loaded ✅[/bright_black]")


def show_status(panel: ProductsPanel):
    if panel.notice:
        console.print(Panel.fit(f"[green]{panel.notice}[/green]", title="Status"))
        panel.dismiss_notice()
    if panel.last_error:
        console.print(Panel.fit(f"[red]{panel.last_error}[/red]", title="Error"))


def create_header(base_url: str):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Products Admin",
        f"[bold blue]{base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Calls with a spinner
# ---------------------------
def with_spinner(description: str, fn, *args, **kwargs):
    """Run a panel action under a spinner; unexpected errors end up in the status line."""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description=description, total=None)
            return fn(*args, **kwargs)
    except Exception as e:
        console.print(Panel.fit(f"[red]Unexpected error: {e}[/red]", title="Error"))
        return None


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def pick_product(panel: ProductsPanel) -> Optional[Dict[str, Any]]:
    if not panel.products:
        console.print("[italic yellow]No products loaded.[/italic yellow]")
        return None
    titles = [p.get("title", "") for p in panel.products]
    raw = prompt_with_autocomplete(
        "Product (# or title)",
        completer=WordCompleter(titles, ignore_case=True, sentence=True)
    ).strip()
    if raw.isdigit() and 1 <= int(raw) <= len(panel.products):
        return panel.products[int(raw) - 1]
    for p in panel.products:
        if p.get("title", "").lower() == raw.lower():
            return p
    console.print(f"[red]No product matches '{raw}'.[/red]")
    return None


def parse_tags(raw: str) -> List[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


# ---------------------------
# Modals
# ---------------------------
def update_modal(panel: ProductsPanel):
    product = pick_product(panel)
    if product is None or not panel.open_editor(product):
        return

    console.print(Panel.fit(f"Product ID: [dim]{panel.form['id']}[/dim]", title=f"Update: {product.get('title')}"))
    while panel.modal is ModalState.EDITING:
        panel.edit("title", Prompt.ask("Product Title", default=panel.form["title"]))
        panel.edit("status", Prompt.ask("Status", choices=STATUS_OPTIONS, default=panel.form["status"]))
        raw_tags = Prompt.ask("Tags (comma separated, blank to keep)", default="")
        if raw_tags.strip():
            panel.edit("tags", parse_tags(raw_tags))

        if not Confirm.ask("Save changes?", default=True):
            panel.cancel()
            return
        if with_spinner("Saving...", panel.save):
            return
        show_status(panel)
        if not Confirm.ask("Try again?", default=True):
            panel.cancel()


def delete_modal(panel: ProductsPanel):
    product = pick_product(panel)
    if product is None or not panel.open_delete(product):
        return

    console.print(Panel.fit(
        f"Product ID: [dim]{product['id']}[/dim]\n"
        f"Are you sure you want to delete [bold]{product.get('title')}[/bold]?",
        title="Delete Product",
        border_style="red"
    ))
    if Confirm.ask("[red]Delete product?[/red]", default=False):
        with_spinner("Deleting...", panel.confirm_delete)
    else:
        panel.cancel()


# ---------------------------
# Main menu
# ---------------------------
def menu(panel: ProductsPanel, base_url: str):
    console.clear()
    console.print(create_header(base_url))

    with_spinner("Loading products...", panel.load_first_page)
    show_products(panel.products)
    show_footer(panel)

    while True:
        show_status(panel)

        options = ["1", "2", "3", "4", "5", "q"]
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_row("1", "📦 Show products")
        menu_table.add_row("2", "⏬ Load more products")
        menu_table.add_row("3", "✏️ Update product")
        menu_table.add_row("4", "🗑️ Delete product")
        menu_table.add_row("5", "🔄 Reload from first page")
        menu_table.add_row("q", "👋 Quit")
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(options + ["quit", "exit"])
        ).strip()
        panel.last_error = None

        if choice == "1":
            show_products(panel.products)
            show_footer(panel)

        elif choice == "2":
            if not panel.has_next_page:
                console.print("[bright_black]All products loaded ✅[/bright_black]")
            elif with_spinner("Loading more products...", panel.load_more):
                show_products(panel.products)
                show_footer(panel)

        elif choice == "3":
            update_modal(panel)

        elif choice == "4":
            delete_modal(panel)

        elif choice == "5":
            if with_spinner("Loading products...", panel.load_first_page):
                show_products(panel.products)
                show_footer(panel)

        elif choice.lower() in ("q", "quit", "exit"):
            console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
            sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    base_url = os.environ.get("ADMIN_PANEL_URL", "http://127.0.0.1:8085")
    try:
        menu(ProductsPanel(ProductsClient(base_url=base_url)), base_url)
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
