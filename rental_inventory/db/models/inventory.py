"""ORM model for inventory items.

Nested collections (images, pricing, history, maintenance schedule...) are
stored as JSON documents on the row, in the JSON-compatible shape produced by
the pydantic models in rental_inventory.models.inventory.
"""

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rental_inventory.db.base import Base, TimestampMixin
from rental_inventory.utils.identifiers import new_id


class InventoryItem(Base, TimestampMixin):
    """Inventory item row. Soft-deleted rows keep every field; only is_deleted flips."""

    __tablename__ = "inventory_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sku: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(128), nullable=False)
    # Weak reference: no foreign key, a dangling id resolves to no facility.
    associated_facility_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    images: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=lambda: [])
    purchase_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=lambda: {})
    pricing: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=lambda: [])
    history: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=lambda: [])
    maintenance_schedule: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=lambda: [])
    current_bookings: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=lambda: [])
    specifications: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=lambda: {})
    alerts: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=lambda: {})

    is_taxable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
