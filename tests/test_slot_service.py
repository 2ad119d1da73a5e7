# tests/test_slot_service.py
"""Slot CRUD: bulk numbering, uniqueness, delete guard, listing filters."""

import pytest
from app.exceptions import BadRequestException, NotFoundException
from app.models.enums import Location, SlotStatus, VehicleSize, VehicleType
from app.models.parking_slot import ParkingSlot
from app.schemas.parking_slot import BulkSlotCreate, SlotCreate, SlotUpdate
from app.services import slot_service


def bulk(count=5, start=101, prefix="A-"):
    return BulkSlotCreate(count=count, start_number=start, prefix=prefix,
                          vehicle_type=VehicleType.CAR, size=VehicleSize.MEDIUM, location=Location.NORTH)


class TestBulkCreate:
    def test_creates_sequential_available_slots(self, db):
        result = slot_service.create_bulk_slots(db, bulk())
        assert result == {"count": 5, "message": "Successfully created 5 parking slots"}

        slots = db.query(ParkingSlot).order_by(ParkingSlot.id).all()
        assert [s.slot_number for s in slots] == ["A-101", "A-102", "A-103", "A-104", "A-105"]
        assert all(s.status == SlotStatus.AVAILABLE for s in slots)

    def test_repeat_batch_lists_every_clash_and_creates_nothing(self, db):
        slot_service.create_bulk_slots(db, bulk())
        with pytest.raises(BadRequestException) as exc:
            slot_service.create_bulk_slots(db, bulk())
        assert exc.value.errors == ["A-101", "A-102", "A-103", "A-104", "A-105"]
        assert "A-101, A-102, A-103, A-104, A-105" in exc.value.message
        assert db.query(ParkingSlot).count() == 5

    def test_partial_overlap_fails_whole_batch(self, db, make_slot):
        make_slot("A-103")
        with pytest.raises(BadRequestException) as exc:
            slot_service.create_bulk_slots(db, bulk())
        assert exc.value.errors == ["A-103"]
        assert db.query(ParkingSlot).count() == 1


class TestSlotCrud:
    def test_duplicate_slot_number_rejected(self, db, make_slot):
        make_slot("B-1")
        data = SlotCreate(slot_number="B-1", vehicle_type=VehicleType.CAR,
                          size=VehicleSize.SMALL, location=Location.EAST)
        with pytest.raises(BadRequestException):
            slot_service.create_slot(db, data)

    def test_update_checks_uniqueness_against_other_slots(self, db, make_slot):
        make_slot("B-1")
        b2 = make_slot("B-2")
        clash = SlotUpdate(slot_number="B-1", vehicle_type=VehicleType.CAR,
                           size=VehicleSize.MEDIUM, location=Location.NORTH)
        with pytest.raises(BadRequestException):
            slot_service.update_slot(db, b2.id, clash)

        same = SlotUpdate(slot_number="B-2", vehicle_type=VehicleType.VAN,
                          size=VehicleSize.LARGE, location=Location.WEST)
        updated = slot_service.update_slot(db, b2.id, same)
        assert updated.vehicle_type == VehicleType.VAN
        assert updated.status == SlotStatus.AVAILABLE

    def test_occupied_slot_keeps_its_type_and_size(self, db, make_slot):
        slot = make_slot("C-9", status=SlotStatus.UNAVAILABLE)
        resized = SlotUpdate(slot_number="C-9", vehicle_type=VehicleType.VAN,
                             size=VehicleSize.SMALL, location=Location.NORTH)
        with pytest.raises(BadRequestException) as exc:
            slot_service.update_slot(db, slot.id, resized)
        assert "occupied" in exc.value.message

        moved = SlotUpdate(slot_number="C-10", vehicle_type=VehicleType.CAR,
                           size=VehicleSize.MEDIUM, location=Location.EAST)
        updated = slot_service.update_slot(db, slot.id, moved)
        assert updated.slot_number == "C-10"
        assert updated.location == Location.EAST

    def test_cannot_delete_occupied_slot(self, db, make_slot):
        slot = make_slot("C-1", status=SlotStatus.UNAVAILABLE)
        with pytest.raises(BadRequestException):
            slot_service.delete_slot(db, slot.id)

    def test_delete_free_slot(self, db, make_slot):
        slot = make_slot("C-2")
        assert slot_service.delete_slot(db, slot.id) == "C-2"
        with pytest.raises(NotFoundException):
            slot_service.get_slot(db, slot.id)


class TestListSlots:
    def test_filters(self, db, make_slot):
        make_slot("N-1", location=Location.NORTH)
        make_slot("S-1", location=Location.SOUTH, status=SlotStatus.UNAVAILABLE)
        make_slot("S-2", location=Location.SOUTH)

        assert slot_service.list_slots(db, 1, 10)["total"] == 3
        available = slot_service.list_slots(db, 1, 10, only_available=True)
        assert {s.slot_number for s in available["data"]} == {"N-1", "S-2"}

        by_location_name = slot_service.list_slots(db, 1, 10, search="sou")
        assert {s.slot_number for s in by_location_name["data"]} == {"S-1", "S-2"}

        by_number = slot_service.list_slots(db, 1, 10, search="n-1")
        assert [s.slot_number for s in by_number["data"]] == ["N-1"]

        assert slot_service.list_slots(db, 1, 10, location=Location.NORTH)["total"] == 1

    def test_pagination(self, db):
        slot_service.create_bulk_slots(db, bulk(count=5, start=1, prefix="P"))
        page = slot_service.list_slots(db, 2, 2)
        assert page["total"] == 5
        assert page["total_pages"] == 3
        assert [s.slot_number for s in page["data"]] == ["P3", "P4"]
