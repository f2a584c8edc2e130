"""Seed mode: load demo facilities and inventory items."""

from rental_inventory.db.seed_data import seed_demo_data
from rental_inventory.errors import InventoryError

from .shared import console, fail, items_table, logger


def seed() -> None:
    """Insert a small demo data set (facilities and inventory items)."""
    log = logger.bind(command="seed")
    log.info("seed.start")
    try:
        items = seed_demo_data()
    except InventoryError as e:
        fail("seed", e)
    console.print(items_table(items, title="Seeded inventory items"))
    log.info("seed.complete", items=len(items))
