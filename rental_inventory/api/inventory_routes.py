"""Inventory API routes: CRUD, soft delete/restore, status and low-stock views, maintenance."""

from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse
from pydantic import Field, field_validator

from rental_inventory.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from rental_inventory.db.repositories import inventory_repo
from rental_inventory.models.envelope import Pagination
from rental_inventory.models.inventory import (
    ImageDescriptor,
    InventoryItemCreate,
    InventoryItemPatch,
    ItemStatus,
    MaintenanceEntry,
    duplicate_image_ids,
)

from .responses import success

router = APIRouter(prefix="/api/inventory", tags=["inventory"])

# Listing soft-deleted items is meant for staff/admin callers; access control lives in front of this API.
ShowDeleted = Annotated[bool, Query(alias="showDeleted", description="Include soft-deleted items")]


class InventoryItemUpdateRequest(InventoryItemPatch):
    """Patch fields plus the image operations applied by the merge policy."""

    new_images: list[ImageDescriptor] = Field(default_factory=list, alias="newImages")
    remove_image_ids: list[str] = Field(default_factory=list, alias="removeImageIds")
    replace_all_images: bool = Field(False, alias="replaceAllImages")

    @field_validator("new_images")
    @classmethod
    def _unique_new_image_ids(cls, v: list[ImageDescriptor]) -> list[ImageDescriptor]:
        duplicates = duplicate_image_ids(v)
        if duplicates:
            raise ValueError(f"newImages repeats image id(s): {', '.join(duplicates)}")
        return v

    def to_patch(self) -> InventoryItemPatch:
        patch_fields = self.model_fields_set & set(InventoryItemPatch.model_fields)
        return InventoryItemPatch.model_validate(self.model_dump(include=patch_fields))


@router.post("")
def create_inventory_item(body: InventoryItemCreate) -> JSONResponse:
    record = inventory_repo.create_item(body)
    return success("Inventory item created", record, status_code=status.HTTP_201_CREATED)


@router.get("")
def list_inventory_items(
    show_deleted: ShowDeleted = False,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> JSONResponse:
    total = inventory_repo.count_items(show_deleted)
    items = inventory_repo.list_items(show_deleted, offset=(page - 1) * limit, limit=limit)
    return success(
        "Inventory items fetched",
        items,
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/low-stock")
def list_low_stock_items(show_deleted: ShowDeleted = False) -> JSONResponse:
    items = inventory_repo.list_low_stock(show_deleted)
    return success("Low stock items fetched", items)


@router.get("/status/{item_status}")
def list_items_by_status(item_status: ItemStatus, show_deleted: ShowDeleted = False) -> JSONResponse:
    items = inventory_repo.list_items_by_status(item_status, show_deleted)
    return success(f"Inventory items with status {item_status.value} fetched", items)


@router.get("/{item_id}")
def get_inventory_item(item_id: str, show_deleted: ShowDeleted = False) -> JSONResponse:
    record = inventory_repo.get_item(item_id, show_deleted)
    return success("Inventory item fetched", record)


@router.put("/{item_id}")
def update_inventory_item(
    item_id: str,
    body: InventoryItemUpdateRequest,
    show_deleted: ShowDeleted = False,
) -> JSONResponse:
    record = inventory_repo.update_item(
        item_id,
        body.to_patch(),
        new_images=body.new_images,
        remove_image_ids=body.remove_image_ids,
        replace_all=body.replace_all_images,
        include_deleted=show_deleted,
    )
    return success("Inventory item updated", record)


@router.delete("/{item_id}")
def delete_inventory_item(item_id: str) -> JSONResponse:
    record = inventory_repo.soft_delete_item(item_id)
    return success("Inventory item deleted", record)


@router.patch("/{item_id}/restore")
def restore_inventory_item(item_id: str) -> JSONResponse:
    record = inventory_repo.restore_item(item_id)
    return success("Inventory item restored", record)


@router.post("/{item_id}/maintenance")
def add_maintenance_schedule(
    item_id: str,
    body: MaintenanceEntry,
    show_deleted: ShowDeleted = False,
) -> JSONResponse:
    record = inventory_repo.append_maintenance_entry(item_id, body, show_deleted)
    return success("Maintenance schedule added", record)
