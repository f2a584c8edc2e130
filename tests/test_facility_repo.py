"""Tests for the facility repository."""

import os
import sys
import tempfile
import unittest
import uuid
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rental_inventory.db import get_session, init_db
from rental_inventory.db.repositories.facility_repo import create_facility, get_facility, resolve_facilities
from rental_inventory.errors import InvalidIdentifier, NotFound
from rental_inventory.models.facility import Capacity, FacilityCreate


class TestFacilityRepo(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_create_and_get(self):
        created = create_facility(
            FacilityCreate(
                name="Meeting Room A",
                capacity=Capacity(maximum=20, recommended=12),
                amenities=["projector"],
            )
        )
        self.assertFalse(created.is_deleted)
        self.assertTrue(created.is_active)

        fetched = get_facility(created.id)
        self.assertEqual(fetched.name, "Meeting Room A")
        self.assertEqual(fetched.capacity.maximum, 20)
        self.assertEqual(fetched.capacity.recommended, 12)
        self.assertEqual(fetched.amenities, ["projector"])

    def test_get_errors(self):
        with self.assertRaises(InvalidIdentifier):
            get_facility("room-1")
        with self.assertRaises(NotFound):
            get_facility(str(uuid.uuid4()))

    def test_resolve_facilities_skips_missing_ids(self):
        hall = create_facility(FacilityCreate(name="Hall"))
        missing = str(uuid.uuid4())
        with get_session() as session:
            resolved = resolve_facilities(session, [hall.id, missing, None, hall.id])
        self.assertEqual(list(resolved), [hall.id])
        self.assertEqual(resolved[hall.id].name, "Hall")

    def test_resolve_nothing(self):
        with get_session() as session:
            self.assertEqual(resolve_facilities(session, [None, ""]), {})
