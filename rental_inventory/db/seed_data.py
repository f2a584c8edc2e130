"""Demo data for local runs: a couple of facilities and the items kept in them."""

from datetime import date

from rental_inventory.db.repositories.facility_repo import create_facility
from rental_inventory.db.repositories.inventory_repo import create_item
from rental_inventory.models.facility import Capacity, FacilityCreate
from rental_inventory.models.inventory import (
    InventoryItemCreate,
    InventoryItemRecord,
    ItemStatus,
    PricingEntry,
    PricingUnit,
    PurchaseInfo,
)
from rental_inventory.utils.logger import get_logger

logger = get_logger("rental_inventory.db.seed_data")

DEMO_FACILITIES = [
    FacilityCreate(
        name="Main Hall",
        description="Ground floor event hall",
        capacity=Capacity(maximum=300, recommended=250),
        amenities=["stage", "sound system", "air conditioning"],
        address="1 Market Street",
        is_taxable=True,
    ),
    FacilityCreate(
        name="Meeting Room A",
        capacity=Capacity(maximum=20, recommended=12),
        amenities=["projector", "whiteboard"],
        address="1 Market Street, 2nd floor",
    ),
]


def _demo_items(hall_id: str, room_id: str) -> list[InventoryItemCreate]:
    return [
        InventoryItemCreate(
            name="Folding chair",
            sku="CHR-001",
            quantity=180,
            category="furniture",
            associated_facility_id=hall_id,
            pricing=[PricingEntry(unit=PricingUnit.DAY, amount=1.5, is_default=True)],
            purchase_info=PurchaseInfo(purchase_date=date(2024, 3, 1), purchase_price=12.0, supplier="Seatco"),
        ),
        InventoryItemCreate(
            name="Projector",
            sku="AV-010",
            quantity=2,
            category="audio-visual",
            associated_facility_id=room_id,
            pricing=[
                PricingEntry(unit=PricingUnit.HOUR, amount=10, is_default=True),
                PricingEntry(unit=PricingUnit.DAY, amount=60),
            ],
            specifications={"lumens": 3600, "resolution": "1920x1080", "hdmi": True},
            is_taxable=True,
        ),
        InventoryItemCreate(
            name="Tent",
            sku="OUT-003",
            quantity=3,
            category="outdoor",
            pricing=[PricingEntry(unit=PricingUnit.WEEK, amount=150, is_default=True)],
        ),
        InventoryItemCreate(
            name="PA speaker",
            sku="AV-022",
            quantity=4,
            status=ItemStatus.MAINTENANCE,
            category="audio-visual",
            associated_facility_id=hall_id,
        ),
    ]


def seed_demo_data() -> list[InventoryItemRecord]:
    """Create the demo facilities and items. Each call inserts a fresh copy."""
    hall, room = (create_facility(f) for f in DEMO_FACILITIES)
    items = [create_item(item) for item in _demo_items(hall.id, room.id)]
    logger.info("seed_data.complete", facilities=2, items=len(items))
    return items
