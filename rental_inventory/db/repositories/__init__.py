"""DB repositories: sync functions over the record store returning pydantic records."""

from rental_inventory.db.repositories.facility_repo import (
    create_facility,
    get_facility,
)
from rental_inventory.db.repositories.inventory_repo import (
    append_maintenance_entry,
    count_items,
    count_items_by_status,
    create_item,
    get_item,
    list_items,
    list_items_by_status,
    list_low_stock,
    merge_images,
    restore_item,
    soft_delete_item,
    stock_summary,
    update_item,
)

__all__ = [
    "create_facility",
    "get_facility",
    "create_item",
    "list_items",
    "count_items",
    "get_item",
    "update_item",
    "soft_delete_item",
    "restore_item",
    "list_items_by_status",
    "append_maintenance_entry",
    "list_low_stock",
    "merge_images",
    "count_items_by_status",
    "stock_summary",
]
