"""Pydantic models for the rental inventory service."""

from rental_inventory.models.envelope import ApiResponse, Pagination
from rental_inventory.models.facility import Capacity, FacilityCreate, FacilityRecord
from rental_inventory.models.inventory import (
    Alerts,
    HistoryEntry,
    ImageDescriptor,
    InventoryItemCreate,
    InventoryItemPatch,
    InventoryItemRecord,
    ItemStatus,
    MaintenanceEntry,
    MaintenanceType,
    PricingEntry,
    PricingUnit,
    PurchaseInfo,
)

__all__ = [
    "ApiResponse",
    "Pagination",
    "Capacity",
    "FacilityCreate",
    "FacilityRecord",
    "Alerts",
    "HistoryEntry",
    "ImageDescriptor",
    "InventoryItemCreate",
    "InventoryItemPatch",
    "InventoryItemRecord",
    "ItemStatus",
    "MaintenanceEntry",
    "MaintenanceType",
    "PricingEntry",
    "PricingUnit",
    "PurchaseInfo",
]
