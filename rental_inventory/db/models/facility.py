"""ORM model for facilities (rooms, halls) that inventory items may point at."""

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rental_inventory.db.base import Base, TimestampMixin
from rental_inventory.utils.identifiers import new_id


class Facility(Base, TimestampMixin):
    """Rentable facility."""

    __tablename__ = "facilities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    capacity_maximum: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    capacity_recommended: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    amenities: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=lambda: [])
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_taxable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
