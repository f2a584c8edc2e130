"""Inventory commands: list items, show low stock, soft delete and restore."""

import typer

from rental_inventory.db.repositories import inventory_repo
from rental_inventory.errors import InventoryError
from rental_inventory.utils.logger import bind_context, clear_context

from .shared import console, fail, items_table, logger


def list_items(
    show_deleted: bool = typer.Option(False, "--show-deleted", "-d", help="Include soft-deleted items"),
) -> None:
    """List inventory items."""
    log = logger.bind(command="list-items", show_deleted=show_deleted)
    try:
        items = inventory_repo.list_items(show_deleted)
    except InventoryError as e:
        fail("list_items", e)
    console.print(items_table(items, title="Inventory items"))
    log.info("list_items.complete", count=len(items))


def low_stock(
    show_deleted: bool = typer.Option(False, "--show-deleted", "-d", help="Include soft-deleted items"),
) -> None:
    """List items with quantity below the low-stock threshold."""
    log = logger.bind(command="low-stock", show_deleted=show_deleted)
    try:
        items = inventory_repo.list_low_stock(show_deleted)
    except InventoryError as e:
        fail("low_stock", e)
    if not items:
        console.print("[green]No low stock items.[/green]")
    else:
        console.print(items_table(items, title="Low stock items"))
    log.info("low_stock.complete", count=len(items))


def delete_item(item_id: str = typer.Argument(..., help="Inventory item id")) -> None:
    """Soft-delete an inventory item."""
    bind_context(command="delete-item", item_id=item_id)
    try:
        record = inventory_repo.soft_delete_item(item_id)
        console.print(f"[green]Deleted {record.name} ({record.id})[/green]")
    except InventoryError as e:
        fail("delete_item", e)
    finally:
        clear_context()


def restore_item(item_id: str = typer.Argument(..., help="Inventory item id")) -> None:
    """Restore a soft-deleted inventory item."""
    bind_context(command="restore-item", item_id=item_id)
    try:
        record = inventory_repo.restore_item(item_id)
        console.print(f"[green]Restored {record.name} ({record.id})[/green]")
    except InventoryError as e:
        fail("restore_item", e)
    finally:
        clear_context()
