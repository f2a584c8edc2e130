"""Re-export all ORM models so Base.metadata has all tables."""

from rental_inventory.db.models.facility import Facility
from rental_inventory.db.models.inventory import InventoryItem

__all__ = [
    "Facility",
    "InventoryItem",
]
