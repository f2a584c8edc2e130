"""Facility API routes: just enough to create facilities and look them up."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from rental_inventory.db.repositories import facility_repo
from rental_inventory.models.facility import FacilityCreate

from .responses import success

router = APIRouter(prefix="/api/facilities", tags=["facilities"])


@router.post("")
def create_facility(body: FacilityCreate) -> JSONResponse:
    record = facility_repo.create_facility(body)
    return success("Facility created", record, status_code=status.HTTP_201_CREATED)


@router.get("/{facility_id}")
def get_facility(facility_id: str) -> JSONResponse:
    return success("Facility fetched", facility_repo.get_facility(facility_id))
