"""Facility shapes: create input and stored record."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Capacity(BaseModel):
    maximum: int = Field(0, ge=0)
    recommended: int = Field(0, ge=0)


class FacilityCreate(BaseModel):
    """Fields accepted when creating a facility."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    capacity: Capacity = Field(default_factory=Capacity)
    amenities: list[str] = Field(default_factory=list)
    address: Optional[str] = None
    is_active: bool = Field(True, alias="isActive")
    is_taxable: bool = Field(False, alias="isTaxable")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class FacilityRecord(FacilityCreate):
    """Stored facility, as attached to inventory items on read."""

    id: str
    is_deleted: bool = Field(False, alias="isDeleted")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
