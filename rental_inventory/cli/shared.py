"""Shared CLI helpers: console, logger, item table rendering, error reporting."""

from typing import Iterable, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from rental_inventory.errors import InventoryError
from rental_inventory.models.inventory import InventoryItemRecord
from rental_inventory.utils.logger import get_logger

console = Console()
logger = get_logger("rental_inventory.cli")


def items_table(items: Iterable[InventoryItemRecord], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Status")
    table.add_column("Qty", justify="right")
    table.add_column("Images", justify="right")
    table.add_column("Facility")
    table.add_column("Deleted", justify="center")
    for item in items:
        facility = item.associated_facility.name if item.associated_facility else ""
        table.add_row(
            item.id,
            item.name,
            item.status.value,
            str(item.quantity),
            str(len(item.images)),
            facility,
            "yes" if item.is_deleted else "",
        )
    return table


def fail(command: str, error: InventoryError) -> NoReturn:
    """Print a repository error in red and exit with status 1."""
    console.print(f"[red]{error}[/red]")
    logger.error(f"{command}.fail", error=str(error), kind=type(error).__name__)
    raise typer.Exit(1)
