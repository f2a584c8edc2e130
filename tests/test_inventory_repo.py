"""Tests for the inventory repository: visibility rules, soft delete/restore, updates, derived views."""

import os
import sys
import tempfile
import unittest
import uuid
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

# Use a file DB so sessions from worker threads see the same data (in-memory is per-connection).
_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from rental_inventory.db import get_session, init_db
from rental_inventory.db.models.inventory import InventoryItem
from rental_inventory.db.repositories.facility_repo import create_facility
from rental_inventory.db.repositories.inventory_repo import (
    append_maintenance_entry,
    count_items,
    count_items_by_status,
    create_item,
    get_item,
    list_items,
    list_items_by_status,
    list_low_stock,
    restore_item,
    soft_delete_item,
    stock_summary,
    update_item,
)
from rental_inventory.errors import DuplicateImageId, InvalidIdentifier, NotFound, OperationFailed
from rental_inventory.models.facility import FacilityCreate
from rental_inventory.models.inventory import (
    ImageDescriptor,
    InventoryItemCreate,
    ItemStatus,
    MaintenanceEntry,
    MaintenanceType,
)

MALFORMED_IDS = ["", "not-an-id", "12345", "64b7f0c2e4b0a1a2b3c4d5e6", "zzzzzzzz-zzzz-zzzz-zzzz-zzzzzzzzzzzz", None]


def _image(image_id: str) -> dict:
    return {
        "id": image_id,
        "path": f"uploads/{image_id}.png",
        "originalName": f"{image_id}.png",
        "mimetype": "image/png",
        "size": 2048,
    }


def _ids(record) -> list[str]:
    return [image.id for image in record.images]


def _new_item(**overrides):
    data = {"name": "Projector", "quantity": 10, "status": "in_stock", "category": "audio-visual"}
    data.update(overrides)
    return create_item(data)


@contextmanager
def _broken_session():
    raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))
    yield


class TestInventoryLifecycle(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_create_and_get(self):
        created = _new_item(name="Chair", sku="CHR-1", specifications={"color": "black", "stackable": True})
        self.assertTrue(uuid.UUID(created.id))
        self.assertFalse(created.is_deleted)
        self.assertEqual(created.category, "audio-visual")

        fetched = get_item(created.id)
        self.assertEqual(fetched.name, "Chair")
        self.assertEqual(fetched.sku, "CHR-1")
        self.assertEqual(fetched.status, ItemStatus.IN_STOCK)
        self.assertEqual(fetched.specifications, {"color": "black", "stackable": True})
        self.assertEqual(get_item(created.id.upper()).id, created.id)

    def test_get_unknown_id_is_not_found(self):
        with self.assertRaises(NotFound):
            get_item(str(uuid.uuid4()))

    def test_malformed_ids_fail_before_store_access(self):
        with patch("rental_inventory.db.repositories.inventory_repo.get_session") as session_factory:
            for bad in MALFORMED_IDS:
                with self.subTest(bad=bad):
                    with self.assertRaises(InvalidIdentifier):
                        get_item(bad)
                    with self.assertRaises(InvalidIdentifier):
                        get_item(bad, include_deleted=True)
                    with self.assertRaises(InvalidIdentifier):
                        update_item(bad, {"quantity": 1}, new_images=[_image("x")])
                    with self.assertRaises(InvalidIdentifier):
                        soft_delete_item(bad)
                    with self.assertRaises(InvalidIdentifier):
                        restore_item(bad)
                    with self.assertRaises(InvalidIdentifier):
                        append_maintenance_entry(
                            bad, {"scheduledDate": "2025-01-01T09:00:00Z", "type": "cleaning"}
                        )
            session_factory.assert_not_called()

    def test_invalid_identifier_is_a_value_error(self):
        with self.assertRaises(ValueError):
            get_item("bogus")

    def test_soft_deleted_item_hidden_from_default_reads(self):
        item = _new_item(name="Old tent", quantity=2, status="retired")
        soft_delete_item(item.id)

        self.assertNotIn(item.id, [r.id for r in list_items()])
        self.assertNotIn(item.id, [r.id for r in list_items_by_status(ItemStatus.RETIRED)])
        self.assertNotIn(item.id, [r.id for r in list_low_stock()])
        with self.assertRaises(NotFound):
            get_item(item.id)

        self.assertIn(item.id, [r.id for r in list_items(include_deleted=True)])
        self.assertIn(item.id, [r.id for r in list_items_by_status("retired", include_deleted=True)])
        self.assertIn(item.id, [r.id for r in list_low_stock(include_deleted=True)])
        self.assertTrue(get_item(item.id, include_deleted=True).is_deleted)

    def test_soft_deleted_item_rejects_default_writes(self):
        item = _new_item()
        soft_delete_item(item.id)
        with self.assertRaises(NotFound):
            update_item(item.id, {"quantity": 3})
        with self.assertRaises(NotFound):
            append_maintenance_entry(item.id, {"scheduledDate": "2025-01-01T09:00:00Z", "type": "repair"})

        updated = update_item(item.id, {"quantity": 3}, include_deleted=True)
        self.assertEqual(updated.quantity, 3)
        self.assertTrue(updated.is_deleted)

    def test_delete_then_restore_keeps_fields(self):
        item = _new_item(
            name="Speaker",
            images=[_image("img-a")],
            maintenanceSchedule=[{"scheduledDate": "2025-02-01T10:00:00Z", "type": "inspection"}],
            history=[{"date": "2025-01-01T00:00:00Z", "change": 10, "reason": "purchase", "user": "staff-1"}],
        )
        before = get_item(item.id)
        deleted = soft_delete_item(item.id)
        self.assertTrue(deleted.is_deleted)
        restored = restore_item(item.id)
        self.assertFalse(restored.is_deleted)

        after = get_item(item.id)
        unchanged = {"updated_at", "is_deleted"}
        self.assertEqual(after.model_dump(exclude=unchanged), before.model_dump(exclude=unchanged))

    def test_double_delete_and_restore_of_visible_item_are_not_found(self):
        item = _new_item()
        with self.assertRaises(NotFound):
            restore_item(item.id)
        soft_delete_item(item.id)
        with self.assertRaises(NotFound):
            soft_delete_item(item.id)
        restore_item(item.id)
        with self.assertRaises(NotFound):
            restore_item(item.id)

    def test_update_merges_images(self):
        item = _new_item(images=[_image("A"), _image("B")])

        updated = update_item(item.id, {}, new_images=[_image("C")], remove_image_ids=["A"])
        self.assertEqual(_ids(updated), ["B", "C"])
        self.assertEqual(_ids(get_item(item.id)), ["B", "C"])

        replaced = update_item(item.id, {}, new_images=[_image("D")], remove_image_ids=["B"], replace_all=True)
        self.assertEqual(_ids(replaced), ["D"])

    def test_update_without_image_args_applies_patch_as_is(self):
        item = _new_item(images=[_image("A")])

        updated = update_item(item.id, {"quantity": 7, "status": "rented"})
        self.assertEqual(updated.quantity, 7)
        self.assertEqual(updated.status, ItemStatus.RENTED)
        self.assertEqual(_ids(updated), ["A"])

        direct = update_item(item.id, {"images": [_image("Z")]})
        self.assertEqual(_ids(direct), ["Z"])

    def test_merged_images_override_patch_images(self):
        item = _new_item(images=[_image("A")])
        updated = update_item(item.id, {"images": [_image("ignored")]}, new_images=[_image("B")])
        self.assertEqual(_ids(updated), ["A", "B"])

    def test_new_images_get_generated_ids(self):
        item = _new_item()
        image = {"path": "uploads/x.jpg", "originalName": "x.jpg", "mimetype": "image/jpeg", "size": 10}
        updated = update_item(item.id, {}, new_images=[image, dict(image)])
        ids = _ids(updated)
        self.assertEqual(len(ids), 2)
        self.assertNotEqual(ids[0], ids[1])
        self.assertEqual(_ids(get_item(item.id)), ids)

        patched = update_item(item.id, {"images": [image]})
        self.assertTrue(patched.images[0].id)

    def test_appending_an_existing_image_id_is_rejected(self):
        item = _new_item(images=[_image("A")])
        with self.assertRaises(DuplicateImageId) as ctx:
            update_item(item.id, {"quantity": 2}, new_images=[_image("A")])
        self.assertEqual(ctx.exception.image_ids, ["A"])
        self.assertIsInstance(ctx.exception, ValueError)

        stored = get_item(item.id)
        self.assertEqual(_ids(stored), ["A"])
        self.assertEqual(stored.quantity, 10)

        with self.assertRaises(DuplicateImageId):
            update_item(item.id, {}, new_images=[_image("B"), _image("B")])
        self.assertEqual(_ids(get_item(item.id)), ["A"])

    def test_removed_or_replaced_image_id_can_be_reused(self):
        item = _new_item(images=[_image("A"), _image("B")])
        readded = update_item(item.id, {}, new_images=[_image("A")], remove_image_ids=["A"])
        self.assertEqual(_ids(readded), ["B", "A"])
        replaced = update_item(item.id, {}, new_images=[_image("B")], replace_all=True)
        self.assertEqual(_ids(replaced), ["B"])

    def test_create_rejects_duplicate_image_ids(self):
        before = count_items(include_deleted=True)
        with self.assertRaises(ValidationError):
            _new_item(images=[_image("A"), _image("A")])
        self.assertEqual(count_items(include_deleted=True), before)

    def test_patch_images_with_duplicate_ids_rejected(self):
        item = _new_item(images=[_image("A")])
        with self.assertRaises(ValidationError):
            update_item(item.id, {"images": [_image("Z"), _image("Z")]})
        self.assertEqual(_ids(get_item(item.id)), ["A"])

    def test_empty_update_returns_stored_record_unchanged(self):
        item = _new_item(images=[_image("A")])
        before = get_item(item.id)
        unchanged = update_item(item.id, {})
        self.assertEqual(unchanged.model_dump(), before.model_dump())
        self.assertEqual(get_item(item.id).updated_at, before.updated_at)

    def test_patch_rejects_null_for_required_fields(self):
        item = _new_item()
        with self.assertRaises(ValueError):
            update_item(item.id, {"quantity": None})
        self.assertEqual(get_item(item.id).quantity, 10)

    def test_list_by_status_exact_match(self):
        item = _new_item(status="maintenance")
        self.assertIn(item.id, [r.id for r in list_items_by_status(ItemStatus.MAINTENANCE)])
        self.assertNotIn(item.id, [r.id for r in list_items_by_status(ItemStatus.IN_STOCK)])
        self.assertEqual(list_items_by_status("no-such-status"), [])

    def test_low_stock_boundary(self):
        four = _new_item(name="Four", quantity=4)
        five = _new_item(name="Five", quantity=5)
        zero = _new_item(name="Zero", quantity=0)
        low_ids = [r.id for r in list_low_stock()]
        self.assertIn(four.id, low_ids)
        self.assertIn(zero.id, low_ids)
        self.assertNotIn(five.id, low_ids)
        for record in list_low_stock():
            self.assertLess(record.quantity, 5)
            self.assertFalse(record.is_deleted)

    def test_append_maintenance_entry(self):
        first = {"scheduledDate": "2025-03-01T09:00:00Z", "type": "cleaning", "notes": "deep clean"}
        item = _new_item(maintenanceSchedule=[first])
        entry = MaintenanceEntry(
            scheduled_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            type=MaintenanceType.REPAIR,
            cost=40.0,
        )

        updated = append_maintenance_entry(item.id, entry)
        self.assertEqual(len(updated.maintenance_schedule), 2)
        self.assertEqual(updated.maintenance_schedule[0].notes, "deep clean")
        self.assertEqual(updated.maintenance_schedule[0].type, MaintenanceType.CLEANING)
        self.assertEqual(updated.maintenance_schedule[1].type, MaintenanceType.REPAIR)

        again = append_maintenance_entry(item.id, entry)
        self.assertEqual(len(again.maintenance_schedule), 3)

    def test_associated_facility_is_resolved(self):
        facility = create_facility(FacilityCreate(name="Main Hall", amenities=["stage"]))
        item = _new_item(associatedFacility=facility.id)
        self.assertEqual(item.associated_facility.name, "Main Hall")
        self.assertEqual(get_item(item.id).associated_facility.id, facility.id)
        listed = {r.id: r for r in list_items()}
        self.assertEqual(listed[item.id].associated_facility.amenities, ["stage"])

    def test_dangling_facility_reference_resolves_to_none(self):
        item = _new_item(associatedFacility=str(uuid.uuid4()))
        self.assertIsNone(get_item(item.id).associated_facility)

    def test_malformed_facility_reference_rejected(self):
        with self.assertRaises(InvalidIdentifier):
            create_item(InventoryItemCreate(name="Lamp", quantity=1, associated_facility_id="hall-1"))

    def test_store_failure_surfaces_as_operation_failed(self):
        item = _new_item()
        with patch("rental_inventory.db.repositories.inventory_repo.get_session", _broken_session):
            with self.assertRaises(OperationFailed) as ctx:
                get_item(item.id)
            self.assertIn("disk I/O error", str(ctx.exception))
            with self.assertRaises(OperationFailed):
                list_items()
            with self.assertRaises(OperationFailed):
                update_item(item.id, {"quantity": 1})

    def test_malformed_stored_row_surfaces_as_operation_failed(self):
        item = _new_item()
        with get_session() as session:
            row = session.get(InventoryItem, item.id)
            row.images = [{"id": "broken"}]
        try:
            with self.assertRaises(OperationFailed) as ctx:
                get_item(item.id)
            self.assertEqual(ctx.exception.operation, "fetching inventory item")
            self.assertIn("malformed", ctx.exception.message)
            with self.assertRaises(OperationFailed):
                update_item(item.id, {}, new_images=[_image("N")])
        finally:
            with get_session() as session:
                session.get(InventoryItem, item.id).images = []

    def test_concurrent_image_appends_are_not_lost(self):
        item = _new_item()

        def add(n: int):
            update_item(item.id, {}, new_images=[_image(f"c{n}")])

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(add, range(16)))
        self.assertEqual(sorted(_ids(get_item(item.id))), sorted(f"c{n}" for n in range(16)))

    def test_counts_and_summary(self):
        item = _new_item(quantity=1, status="unavailable")
        gone = _new_item(quantity=1)
        soft_delete_item(gone.id)

        counts = count_items_by_status()
        self.assertEqual(set(counts), {s.value for s in ItemStatus})
        self.assertGreaterEqual(counts["unavailable"], 1)
        self.assertEqual(sum(counts.values()), count_items())
        self.assertGreater(count_items(include_deleted=True), count_items())

        summary = stock_summary()
        self.assertGreaterEqual(summary["deleted_items"], 1)
        self.assertEqual(summary["deleted_items"], count_items(include_deleted=True) - count_items())
        self.assertEqual(stock_summary(include_deleted=True)["deleted_items"], summary["deleted_items"])
        self.assertGreaterEqual(summary["low_stock_items"], 1)
        self.assertEqual(summary["total_items"], count_items())
        self.assertIn(item.id, [r.id for r in list_items()])

    def test_list_items_paging(self):
        for n in range(3):
            _new_item(name=f"Paged {n}")
        total = count_items()
        page = list_items(offset=0, limit=2)
        self.assertEqual(len(page), 2)
        rest = list_items(offset=2, limit=total)
        self.assertEqual(len(page) + len(rest), total)
        self.assertFalse({r.id for r in page} & {r.id for r in rest})


class TestTentScenario(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_tent_lifecycle(self):
        tent = create_item({"name": "Tent", "quantity": 3, "status": "in_stock", "images": []})
        self.assertIn(tent.id, [r.id for r in list_low_stock()])

        updated = update_item(tent.id, {}, [ImageDescriptor(id="img1", path="uploads/tent.jpg", original_name="tent.jpg", mimetype="image/jpeg", size=500)])
        self.assertEqual(_ids(updated), ["img1"])

        soft_delete_item(tent.id)
        with self.assertRaises(NotFound):
            get_item(tent.id)
        hidden = get_item(tent.id, include_deleted=True)
        self.assertTrue(hidden.is_deleted)
        self.assertEqual(_ids(hidden), ["img1"])
