# tests/conftest.py
"""Shared fixtures: in-memory SQLite database, seeded users/vehicles/slots, API client."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret-key-with-enough-length-for-hs256"

import pytest
from app.database import Base, SessionLocal, create_tables, engine
from app.models.enums import Location, Role, SlotStatus, VehicleSize, VehicleType
from app.models.parking_slot import ParkingSlot
from app.models.user import User
from app.models.vehicle import Vehicle
from app.utils.passwords import hash_password
from app.utils.tokens import generate_token


@pytest.fixture
def db():
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db):
    def _make(email="driver@example.com", role=Role.USER, password="secret123", name="Driver"):
        user = User(email=email, name=name, password=hash_password(password), role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_vehicle(db):
    def _make(user, plate="RAB123A", vehicle_type=VehicleType.CAR, size=VehicleSize.MEDIUM):
        vehicle = Vehicle(plate_number=plate, vehicle_type=vehicle_type, size=size, user_id=user.id)
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle
    return _make


@pytest.fixture
def make_slot(db):
    def _make(number="A-1", vehicle_type=VehicleType.CAR, size=VehicleSize.MEDIUM,
              location=Location.NORTH, status=SlotStatus.AVAILABLE):
        slot = ParkingSlot(slot_number=number, vehicle_type=vehicle_type, size=size,
                           location=location, status=status)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot
    return _make


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from app.main import app
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {generate_token(user.id, user.role)}"}
    return _headers
