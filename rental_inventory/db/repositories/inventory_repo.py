"""Inventory repository: lifecycle of inventory items (create, query, update, soft delete, restore).

Every read and write goes through the same visibility predicate: soft-deleted
rows are invisible unless the caller passes include_deleted=True. Item ids are
validated before any store access; store errors surface as OperationFailed.

Mutations run read-modify-write inside a single transaction. The row is
selected FOR UPDATE and, within this process, writers to the same id are
serialized by a striped lock, so concurrent image merges and maintenance
appends on one record do not lose updates.
"""

import threading
from contextlib import contextmanager
from typing import Any, Generator, Iterable, Mapping, Optional, Sequence, Union

from pydantic import ValidationError
from sqlalchemy import func, select, true
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rental_inventory.config import LOW_STOCK_THRESHOLD
from rental_inventory.db import get_session
from rental_inventory.db.models.inventory import InventoryItem
from rental_inventory.db.repositories.facility_repo import resolve_facilities
from rental_inventory.errors import DuplicateImageId, InvalidIdentifier, NotFound, OperationFailed
from rental_inventory.models.inventory import (
    ImageDescriptor,
    InventoryItemCreate,
    InventoryItemPatch,
    InventoryItemRecord,
    ItemStatus,
    MaintenanceEntry,
    duplicate_image_ids,
)
from rental_inventory.utils.identifiers import is_valid_id, normalize_id
from rental_inventory.utils.logger import get_logger

logger = get_logger("rental_inventory.db.inventory_repo")

ENTITY = "Inventory item"

_LOCK_STRIPES = tuple(threading.Lock() for _ in range(64))

ImageInput = Union[ImageDescriptor, Mapping[str, Any]]


def _record_lock(item_id: str) -> threading.Lock:
    return _LOCK_STRIPES[hash(item_id) % len(_LOCK_STRIPES)]


def _visibility(include_deleted: bool, deleted_only: bool = False):
    """The single soft-delete predicate applied to every query.

    deleted_only selects just the soft-deleted rows (restore, deleted counts)
    and takes precedence over include_deleted.
    """
    if deleted_only:
        return InventoryItem.is_deleted.is_(True)
    if include_deleted:
        return true()
    return InventoryItem.is_deleted.is_(False)


def _require_id(item_id: Any) -> str:
    if not is_valid_id(item_id):
        raise InvalidIdentifier(item_id)
    return normalize_id(item_id)


def _facility_ref(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not is_valid_id(value):
        raise InvalidIdentifier(value)
    return normalize_id(value)


@contextmanager
def _store(operation: str, **log_fields: Any) -> Generator[Session, None, None]:
    """Open a session; translate any store failure into OperationFailed.

    Caller input is validated before the session opens, so a ValidationError
    raised inside means a stored row could not be read back as a record.
    """
    try:
        with get_session() as session:
            yield session
    except SQLAlchemyError as e:
        logger.error("inventory.store_error", operation=operation, error=str(e), **log_fields)
        raise OperationFailed(operation, str(e)) from e
    except ValidationError as e:
        logger.error("inventory.corrupt_row", operation=operation, error=str(e), **log_fields)
        raise OperationFailed(operation, f"stored record is malformed: {e}") from e


def _to_record(row: InventoryItem, facilities: Mapping[str, Any]) -> InventoryItemRecord:
    return InventoryItemRecord(
        id=row.id,
        name=row.name,
        description=row.description,
        sku=row.sku,
        quantity=row.quantity,
        status=row.status,
        category=row.category,
        images=row.images or [],
        associated_facility_id=row.associated_facility_id,
        associated_facility=facilities.get(row.associated_facility_id) if row.associated_facility_id else None,
        purchase_info=row.purchase_info or {},
        pricing=row.pricing or [],
        history=row.history or [],
        maintenance_schedule=row.maintenance_schedule or [],
        current_bookings=row.current_bookings or [],
        specifications=row.specifications or {},
        alerts=row.alerts or {},
        is_taxable=row.is_taxable,
        is_deleted=row.is_deleted,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _populate(session: Session, rows: Sequence[InventoryItem]) -> list[InventoryItemRecord]:
    """Attach the referenced facility (if it still exists) to each row."""
    facilities = resolve_facilities(session, (row.associated_facility_id for row in rows))
    return [_to_record(row, facilities) for row in rows]


def _select_one(
    session: Session,
    item_id: str,
    include_deleted: bool,
    for_update: bool = False,
    deleted_only: bool = False,
) -> Optional[InventoryItem]:
    q = select(InventoryItem).where(InventoryItem.id == item_id).where(_visibility(include_deleted, deleted_only))
    if for_update:
        q = q.with_for_update()
    return session.scalars(q).first()


def _select_many(*criteria: Any, include_deleted: bool = False):
    q = select(InventoryItem).where(_visibility(include_deleted))
    for criterion in criteria:
        q = q.where(criterion)
    return q.order_by(InventoryItem.created_at, InventoryItem.id)


def merge_images(
    current: Sequence[ImageDescriptor],
    new_images: Sequence[ImageDescriptor] = (),
    remove_image_ids: Iterable[str] = (),
    replace_all: bool = False,
) -> list[ImageDescriptor]:
    """Compute an item's image list after an update.

    Removal runs first. With replace_all and at least one new image, the
    result is exactly new_images; otherwise new images are appended after the
    surviving ones. replace_all without new images only removes.
    """
    remove = {str(image_id) for image_id in remove_image_ids}
    merged = list(current)
    if remove:
        merged = [image for image in merged if image.id not in remove]
    if new_images:
        if replace_all:
            merged = list(new_images)
        else:
            merged = merged + list(new_images)
    return merged


def create_item(data: Union[InventoryItemCreate, Mapping[str, Any]]) -> InventoryItemRecord:
    """Insert a new item from caller-supplied fields and return it."""
    if not isinstance(data, InventoryItemCreate):
        data = InventoryItemCreate.model_validate(data)
    payload = data.model_dump(mode="json")
    payload["associated_facility_id"] = _facility_ref(data.associated_facility_id)
    with _store("creating inventory item") as session:
        row = InventoryItem(**payload)
        session.add(row)
        session.flush()
        record = _populate(session, [row])[0]
    logger.info("inventory.create", item_id=record.id, name=record.name, quantity=record.quantity)
    return record


def list_items(
    include_deleted: bool = False,
    *,
    offset: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[InventoryItemRecord]:
    """All visible items (oldest first), with associatedFacility resolved."""
    with _store("fetching inventory items") as session:
        q = _select_many(include_deleted=include_deleted)
        if offset:
            q = q.offset(offset)
        if limit is not None:
            q = q.limit(limit)
        rows = list(session.scalars(q).all())
        return _populate(session, rows)


def count_items(include_deleted: bool = False) -> int:
    with _store("counting inventory items") as session:
        q = select(func.count(InventoryItem.id)).where(_visibility(include_deleted))
        return int(session.scalar(q) or 0)


def get_item(item_id: str, include_deleted: bool = False) -> InventoryItemRecord:
    """One item by id, or NotFound if absent or hidden by the soft-delete filter."""
    key = _require_id(item_id)
    with _store("fetching inventory item", item_id=key) as session:
        row = _select_one(session, key, include_deleted)
        if row is None:
            raise NotFound(ENTITY, key, include_deleted)
        return _populate(session, [row])[0]


def update_item(
    item_id: str,
    patch: Union[InventoryItemPatch, Mapping[str, Any]],
    new_images: Sequence[ImageInput] = (),
    remove_image_ids: Sequence[str] = (),
    replace_all: bool = False,
    include_deleted: bool = False,
) -> InventoryItemRecord:
    """Apply a partial update, merging images when any image argument is given.

    The merged image list replaces any images value in the patch. Patch and
    images are written in one transaction. DuplicateImageId if the merged list
    would repeat an image id; nothing is written then.
    """
    key = _require_id(item_id)
    if not isinstance(patch, InventoryItemPatch):
        patch = InventoryItemPatch.model_validate(patch)
    changes = patch.changes()
    if "associated_facility_id" in changes:
        changes["associated_facility_id"] = _facility_ref(changes["associated_facility_id"])
    additions = [img if isinstance(img, ImageDescriptor) else ImageDescriptor.model_validate(img) for img in new_images]
    removals = [str(image_id) for image_id in remove_image_ids]
    merge_requested = bool(additions or removals or replace_all)

    with _record_lock(key), _store("updating inventory item", item_id=key) as session:
        row = _select_one(session, key, include_deleted, for_update=True)
        if row is None:
            raise NotFound(ENTITY, key, include_deleted)
        if merge_requested:
            current = [ImageDescriptor.model_validate(image) for image in row.images or []]
            merged = merge_images(current, additions, removals, replace_all)
            duplicates = duplicate_image_ids(merged)
            if duplicates:
                raise DuplicateImageId(key, duplicates)
            changes["images"] = [image.model_dump(mode="json") for image in merged]
            logger.debug(
                "inventory.update.images_merged",
                item_id=key,
                before=len(current),
                added=len(additions),
                removed=len(removals),
                replace_all=replace_all,
                after=len(merged),
            )
        for field, value in changes.items():
            setattr(row, field, value)
        session.flush()
        record = _populate(session, [row])[0]
    logger.info("inventory.update", item_id=key, fields=sorted(changes))
    return record


def soft_delete_item(item_id: str) -> InventoryItemRecord:
    """Flag a visible item as deleted. NotFound if absent or already deleted."""
    key = _require_id(item_id)
    with _record_lock(key), _store("deleting inventory item", item_id=key) as session:
        row = _select_one(session, key, include_deleted=False, for_update=True)
        if row is None:
            raise NotFound(ENTITY, key)
        row.is_deleted = True
        session.flush()
        record = _populate(session, [row])[0]
    logger.info("inventory.soft_delete", item_id=key)
    return record


def restore_item(item_id: str) -> InventoryItemRecord:
    """Clear the deleted flag of a soft-deleted item. NotFound if absent or not deleted."""
    key = _require_id(item_id)
    with _record_lock(key), _store("restoring inventory item", item_id=key) as session:
        row = _select_one(session, key, include_deleted=True, for_update=True, deleted_only=True)
        if row is None:
            raise NotFound(ENTITY, key, include_deleted=True)
        row.is_deleted = False
        session.flush()
        record = _populate(session, [row])[0]
    logger.info("inventory.restore", item_id=key)
    return record


def list_items_by_status(status: Union[ItemStatus, str], include_deleted: bool = False) -> list[InventoryItemRecord]:
    """Items whose status equals status exactly. Unknown statuses match nothing."""
    value = status.value if isinstance(status, ItemStatus) else str(status)
    with _store("fetching inventory items by status", status=value) as session:
        q = _select_many(InventoryItem.status == value, include_deleted=include_deleted)
        rows = list(session.scalars(q).all())
        return _populate(session, rows)


def append_maintenance_entry(
    item_id: str,
    entry: Union[MaintenanceEntry, Mapping[str, Any]],
    include_deleted: bool = False,
) -> InventoryItemRecord:
    """Append one entry to the maintenance schedule. No dedup or date-order checks."""
    key = _require_id(item_id)
    if not isinstance(entry, MaintenanceEntry):
        entry = MaintenanceEntry.model_validate(entry)
    with _record_lock(key), _store("adding maintenance schedule", item_id=key) as session:
        row = _select_one(session, key, include_deleted, for_update=True)
        if row is None:
            raise NotFound(ENTITY, key, include_deleted)
        row.maintenance_schedule = [*(row.maintenance_schedule or []), entry.model_dump(mode="json")]
        session.flush()
        record = _populate(session, [row])[0]
    logger.info(
        "inventory.maintenance_appended",
        item_id=key,
        type=entry.type.value,
        entries=len(record.maintenance_schedule),
    )
    return record


def list_low_stock(include_deleted: bool = False) -> list[InventoryItemRecord]:
    """Items with quantity below LOW_STOCK_THRESHOLD."""
    with _store("fetching low stock items") as session:
        q = _select_many(InventoryItem.quantity < LOW_STOCK_THRESHOLD, include_deleted=include_deleted)
        rows = list(session.scalars(q).all())
        return _populate(session, rows)


def count_items_by_status(include_deleted: bool = False) -> dict[str, int]:
    """Item count per status; every status is present, zero when unused."""
    with _store("counting inventory items by status") as session:
        q = (
            select(InventoryItem.status, func.count(InventoryItem.id))
            .where(_visibility(include_deleted))
            .group_by(InventoryItem.status)
        )
        rows = list(session.execute(q).all())
    counts = {status.value: 0 for status in ItemStatus}
    for status, count in rows:
        counts[status] = count
    return counts


def stock_summary(include_deleted: bool = False) -> dict[str, int]:
    """Totals for visible items plus the number of soft-deleted ones."""
    with _store("summarizing inventory") as session:
        visible = _visibility(include_deleted)
        total_items = session.scalar(select(func.count(InventoryItem.id)).where(visible))
        total_quantity = session.scalar(select(func.coalesce(func.sum(InventoryItem.quantity), 0)).where(visible))
        low_stock_items = session.scalar(
            select(func.count(InventoryItem.id))
            .where(visible)
            .where(InventoryItem.quantity < LOW_STOCK_THRESHOLD)
        )
        deleted_items = session.scalar(
            select(func.count(InventoryItem.id)).where(_visibility(include_deleted, deleted_only=True))
        )
    return {
        "total_items": int(total_items or 0),
        "total_quantity": int(total_quantity or 0),
        "low_stock_items": int(low_stock_items or 0),
        "deleted_items": int(deleted_items or 0),
    }
