"""CLI commands: one module per concern (serve, inventory maintenance, seed)."""

from typer import Typer

from rental_inventory.cli import inventory_commands, seed_mode, serve_mode

app = Typer(help="Rental inventory service")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_mode.serve)
    app.command(name="list-items")(inventory_commands.list_items)
    app.command(name="low-stock")(inventory_commands.low_stock)
    app.command(name="delete-item")(inventory_commands.delete_item)
    app.command(name="restore-item")(inventory_commands.restore_item)
    app.command()(seed_mode.seed)


register_commands()
