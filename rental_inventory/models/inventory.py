"""Inventory item shapes: create/patch inputs, nested descriptors and the stored record."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from rental_inventory.models.facility import FacilityRecord
from rental_inventory.utils.identifiers import new_id

# Allowed value types for the free-form specifications map.
SpecificationValue = Union[bool, int, float, str, None]


class ItemStatus(str, Enum):
    """Closed set of item statuses. Any status may replace any other on update."""

    IN_STOCK = "in_stock"
    RENTED = "rented"
    UNAVAILABLE = "unavailable"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"


class PricingUnit(str, Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class MaintenanceType(str, Enum):
    CLEANING = "cleaning"
    REPAIR = "repair"
    INSPECTION = "inspection"
    CALIBRATION = "calibration"


class ImageDescriptor(BaseModel):
    """Metadata for one stored image file. id is generated when the caller omits it."""

    id: str = Field(default_factory=new_id)
    path: str = Field(..., min_length=1)
    original_name: str = Field(..., alias="originalName")
    mimetype: str
    size: int = Field(..., ge=0)

    model_config = {"populate_by_name": True, "extra": "ignore"}


def duplicate_image_ids(images: list[ImageDescriptor]) -> list[str]:
    """Ids that appear more than once in images, in first-seen order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for image in images:
        if image.id in seen and image.id not in duplicates:
            duplicates.append(image.id)
        seen.add(image.id)
    return duplicates


def _require_unique_image_ids(images: Optional[list[ImageDescriptor]]) -> Optional[list[ImageDescriptor]]:
    if images:
        duplicates = duplicate_image_ids(images)
        if duplicates:
            raise ValueError(f"image ids must be unique within an item: {', '.join(duplicates)}")
    return images


class PurchaseInfo(BaseModel):
    purchase_date: Optional[date] = Field(None, alias="purchaseDate")
    purchase_price: Optional[float] = Field(None, alias="purchasePrice", ge=0)
    supplier: Optional[str] = None
    warranty_expiry: Optional[date] = Field(None, alias="warrantyExpiry")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class PricingEntry(BaseModel):
    unit: PricingUnit
    amount: float = Field(..., ge=0)
    is_default: bool = Field(False, alias="isDefault")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class HistoryEntry(BaseModel):
    """Stock change record; user is the acting user's id."""

    date: datetime
    change: int
    reason: str
    user: str
    notes: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


class MaintenanceEntry(BaseModel):
    """One maintenance schedule entry. Entries are only ever appended."""

    scheduled_date: datetime = Field(..., alias="scheduledDate")
    type: MaintenanceType
    completed: bool = False
    completed_date: Optional[datetime] = Field(None, alias="completedDate")
    cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    performed_by: Optional[str] = Field(None, alias="performedBy")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class Alerts(BaseModel):
    low_stock: bool = Field(False, alias="lowStock")
    maintenance_due: bool = Field(False, alias="maintenanceDue")
    warranty_expiring: bool = Field(False, alias="warrantyExpiring")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class InventoryItemCreate(BaseModel):
    """Fields accepted when creating an item."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    sku: Optional[str] = None
    quantity: int = Field(..., ge=0)
    status: ItemStatus = ItemStatus.IN_STOCK
    category: str = "general"
    images: list[ImageDescriptor] = Field(default_factory=list)
    associated_facility_id: Optional[str] = Field(None, alias="associatedFacility")
    purchase_info: PurchaseInfo = Field(default_factory=PurchaseInfo, alias="purchaseInfo")
    pricing: list[PricingEntry] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)
    maintenance_schedule: list[MaintenanceEntry] = Field(default_factory=list, alias="maintenanceSchedule")
    current_bookings: list[str] = Field(default_factory=list, alias="currentBookings")
    specifications: dict[str, SpecificationValue] = Field(default_factory=dict)
    alerts: Alerts = Field(default_factory=Alerts)
    is_taxable: bool = Field(False, alias="isTaxable")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("images")
    @classmethod
    def _unique_image_ids(cls, v: Optional[list[ImageDescriptor]]) -> Optional[list[ImageDescriptor]]:
        return _require_unique_image_ids(v)


# Columns that cannot be cleared through a patch.
_NON_NULLABLE_PATCH_FIELDS = (
    "name",
    "quantity",
    "status",
    "category",
    "images",
    "purchase_info",
    "pricing",
    "history",
    "maintenance_schedule",
    "current_bookings",
    "specifications",
    "alerts",
    "is_taxable",
)


class InventoryItemPatch(BaseModel):
    """Partial update. Only fields the caller actually sent are written.

    isDeleted is not patchable; use soft delete / restore.
    """

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    sku: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    status: Optional[ItemStatus] = None
    category: Optional[str] = None
    images: Optional[list[ImageDescriptor]] = None
    associated_facility_id: Optional[str] = Field(None, alias="associatedFacility")
    purchase_info: Optional[PurchaseInfo] = Field(None, alias="purchaseInfo")
    pricing: Optional[list[PricingEntry]] = None
    history: Optional[list[HistoryEntry]] = None
    maintenance_schedule: Optional[list[MaintenanceEntry]] = Field(None, alias="maintenanceSchedule")
    current_bookings: Optional[list[str]] = Field(None, alias="currentBookings")
    specifications: Optional[dict[str, SpecificationValue]] = None
    alerts: Optional[Alerts] = None
    is_taxable: Optional[bool] = Field(None, alias="isTaxable")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator(*_NON_NULLABLE_PATCH_FIELDS)
    @classmethod
    def _reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("field cannot be set to null")
        return v

    @field_validator("images")
    @classmethod
    def _unique_image_ids(cls, v: Optional[list[ImageDescriptor]]) -> Optional[list[ImageDescriptor]]:
        return _require_unique_image_ids(v)

    def changes(self) -> dict[str, Any]:
        """Return the explicitly set fields in JSON-compatible form, keyed by column name.

        Only top-level fields are filtered; nested models keep their defaults
        (e.g. generated image ids).
        """
        dumped = self.model_dump(mode="json")
        return {name: value for name, value in dumped.items() if name in self.model_fields_set}


class InventoryItemRecord(BaseModel):
    """Stored inventory item with associatedFacility resolved to the facility's data."""

    id: str
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    quantity: int
    status: ItemStatus
    category: str
    images: list[ImageDescriptor] = Field(default_factory=list)
    associated_facility_id: Optional[str] = Field(None, exclude=True)
    associated_facility: Optional[FacilityRecord] = Field(None, alias="associatedFacility")
    purchase_info: PurchaseInfo = Field(default_factory=PurchaseInfo, alias="purchaseInfo")
    pricing: list[PricingEntry] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)
    maintenance_schedule: list[MaintenanceEntry] = Field(default_factory=list, alias="maintenanceSchedule")
    current_bookings: list[str] = Field(default_factory=list, alias="currentBookings")
    specifications: dict[str, SpecificationValue] = Field(default_factory=dict)
    alerts: Alerts = Field(default_factory=Alerts)
    is_taxable: bool = Field(False, alias="isTaxable")
    is_deleted: bool = Field(False, alias="isDeleted")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = {"populate_by_name": True}
