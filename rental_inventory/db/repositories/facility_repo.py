"""Facility repository: create/get facilities and resolve weak references from inventory items."""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rental_inventory.db import get_session
from rental_inventory.db.models.facility import Facility
from rental_inventory.errors import InvalidIdentifier, NotFound, OperationFailed
from rental_inventory.models.facility import Capacity, FacilityCreate, FacilityRecord
from rental_inventory.utils.identifiers import is_valid_id, normalize_id
from rental_inventory.utils.logger import get_logger

logger = get_logger("rental_inventory.db.facility_repo")


def to_record(row: Facility) -> FacilityRecord:
    return FacilityRecord(
        id=row.id,
        name=row.name,
        description=row.description,
        capacity=Capacity(maximum=row.capacity_maximum, recommended=row.capacity_recommended),
        amenities=list(row.amenities or []),
        address=row.address,
        is_active=row.is_active,
        is_taxable=row.is_taxable,
        is_deleted=row.is_deleted,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def create_facility(data: FacilityCreate) -> FacilityRecord:
    """Insert a facility and return it."""
    try:
        with get_session() as session:
            row = Facility(
                name=data.name,
                description=data.description,
                capacity_maximum=data.capacity.maximum,
                capacity_recommended=data.capacity.recommended,
                amenities=list(data.amenities),
                address=data.address,
                is_active=data.is_active,
                is_taxable=data.is_taxable,
            )
            session.add(row)
            session.flush()
            record = to_record(row)
    except SQLAlchemyError as e:
        logger.error("facility.create.failed", error=str(e))
        raise OperationFailed("creating facility", str(e)) from e
    logger.info("facility.create", facility_id=record.id, name=record.name)
    return record


def get_facility(facility_id: str, include_deleted: bool = False) -> FacilityRecord:
    """Return one facility; soft-deleted facilities only when include_deleted is set."""
    if not is_valid_id(facility_id):
        raise InvalidIdentifier(facility_id)
    key = normalize_id(facility_id)
    try:
        with get_session() as session:
            q = select(Facility).where(Facility.id == key)
            if not include_deleted:
                q = q.where(Facility.is_deleted.is_(False))
            row = session.scalars(q).first()
            if row is None:
                raise NotFound("Facility", key, include_deleted)
            return to_record(row)
    except SQLAlchemyError as e:
        logger.error("facility.get.failed", facility_id=key, error=str(e))
        raise OperationFailed("fetching facility", str(e)) from e


def resolve_facilities(session: Session, facility_ids: Iterable[Optional[str]]) -> dict[str, FacilityRecord]:
    """Load the referenced facilities in one query, keyed by id. Missing ids are simply absent."""
    wanted = {fid for fid in facility_ids if fid}
    if not wanted:
        return {}
    rows = session.scalars(select(Facility).where(Facility.id.in_(wanted))).all()
    return {row.id: to_record(row) for row in rows}
