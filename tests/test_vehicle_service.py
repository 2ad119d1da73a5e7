# tests/test_vehicle_service.py
import pytest
from app.exceptions import BadRequestException, NotFoundException
from app.models.enums import RequestStatus, SlotStatus, VehicleSize, VehicleType
from app.models.slot_request import SlotRequest
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate
from app.services import vehicle_service


def vehicle_body(plate="RAB123A", **overrides):
    data = {"plate_number": plate, "vehicle_type": VehicleType.CAR, "size": VehicleSize.MEDIUM}
    data.update(overrides)
    return VehicleCreate(**data)


def test_create_and_lookup_by_plate(db, make_user):
    owner = make_user()
    vehicle = vehicle_service.create_vehicle(db, owner.id, vehicle_body(attributes={"color": "blue"}))
    assert vehicle.user_id == owner.id
    assert vehicle.attributes == {"color": "blue"}
    assert vehicle_service.lookup_vehicle_by_plate(db, "RAB123A").id == vehicle.id
    assert vehicle_service.lookup_vehicle_by_plate(db, "UNKNOWN") is None


def test_plate_numbers_are_globally_unique(db, make_user, make_vehicle):
    make_vehicle(make_user())
    other = make_user(email="other@example.com")
    with pytest.raises(BadRequestException) as exc:
        vehicle_service.create_vehicle(db, other.id, vehicle_body())
    assert exc.value.message == vehicle_service.DUPLICATE_PLATE


def test_other_users_vehicle_is_not_found(db, make_user, make_vehicle):
    vehicle = make_vehicle(make_user())
    stranger = make_user(email="stranger@example.com")
    with pytest.raises(NotFoundException):
        vehicle_service.get_owned_vehicle(db, stranger.id, vehicle.id)
    with pytest.raises(NotFoundException):
        vehicle_service.update_vehicle(db, stranger.id, vehicle.id, vehicle_body("NEW1"))
    with pytest.raises(NotFoundException):
        vehicle_service.delete_vehicle(db, stranger.id, vehicle.id)


def test_update_keeps_own_plate_but_rejects_taken_one(db, make_user, make_vehicle):
    owner = make_user()
    car = make_vehicle(owner)
    make_vehicle(owner, plate="TAKEN1")

    same = vehicle_service.update_vehicle(db, owner.id, car.id, vehicle_body("RAB123A", size=VehicleSize.LARGE))
    assert same.size == VehicleSize.LARGE

    with pytest.raises(BadRequestException):
        vehicle_service.update_vehicle(db, owner.id, car.id, vehicle_body("TAKEN1"))


def test_list_is_scoped_to_owner_and_searchable(db, make_user, make_vehicle):
    owner = make_user()
    make_vehicle(owner, plate="RAB123A")
    make_vehicle(owner, plate="RCD777B")
    make_vehicle(make_user(email="other@example.com"), plate="RAB999Z")

    assert vehicle_service.list_vehicles(db, owner.id, 1, 10)["total"] == 2
    found = vehicle_service.list_vehicles(db, owner.id, 1, 10, search="rab")
    assert [v.plate_number for v in found["data"]] == ["RAB123A"]


def test_delete_blocked_while_request_is_pending(db, make_user, make_vehicle):
    owner = make_user()
    car = make_vehicle(owner)
    db.add(SlotRequest(user_id=owner.id, vehicle_id=car.id, status=RequestStatus.PENDING))
    db.commit()

    with pytest.raises(BadRequestException) as exc:
        vehicle_service.delete_vehicle(db, owner.id, car.id)
    assert "active slot requests" in exc.value.message
    assert db.query(Vehicle).count() == 1


def test_delete_removes_rejected_history(db, make_user, make_vehicle):
    owner = make_user()
    car = make_vehicle(owner)
    db.add(SlotRequest(user_id=owner.id, vehicle_id=car.id, status=RequestStatus.REJECTED))
    db.commit()

    assert vehicle_service.delete_vehicle(db, owner.id, car.id) == "RAB123A"
    assert db.query(Vehicle).count() == 0
    assert db.query(SlotRequest).count() == 0


def test_type_and_size_locked_while_holding_a_slot(db, make_user, make_vehicle, make_slot):
    owner = make_user()
    car = make_vehicle(owner)
    slot = make_slot("A-1", status=SlotStatus.UNAVAILABLE)
    db.add(SlotRequest(user_id=owner.id, vehicle_id=car.id, slot_id=slot.id, status=RequestStatus.APPROVED))
    db.commit()

    with pytest.raises(BadRequestException) as exc:
        vehicle_service.update_vehicle(db, owner.id, car.id, vehicle_body(vehicle_type=VehicleType.TRUCK,
                                                                          size=VehicleSize.LARGE))
    assert exc.value.message == vehicle_service.BOUND_VEHICLE

    # Cosmetic edits stay allowed
    renamed = vehicle_service.update_vehicle(db, owner.id, car.id, vehicle_body("RAB124A", attributes={"color": "red"}))
    assert renamed.plate_number == "RAB124A"
    assert renamed.vehicle_type == VehicleType.CAR


def test_type_change_allowed_while_only_pending(db, make_user, make_vehicle):
    owner = make_user()
    car = make_vehicle(owner)
    db.add(SlotRequest(user_id=owner.id, vehicle_id=car.id, status=RequestStatus.PENDING))
    db.commit()
    updated = vehicle_service.update_vehicle(db, owner.id, car.id, vehicle_body(size=VehicleSize.SMALL))
    assert updated.size == VehicleSize.SMALL
