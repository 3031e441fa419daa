"""Shared fixtures: in-memory SQLite session, API test client, and row factories."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("API_KEY", None)
os.environ.pop("DEFAULT_ADMIN_ID", None)
os.environ["LOG_DIR"] = ""

import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.models.vehicle import Vehicle
from app.models.vehicle_request import VehicleRequest
from app.services.user_service import get_password_hash

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# One hash for every fixture user keeps bcrypt out of the hot path
PASSWORD = "secret123"
_PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def future(days: int, hour: int = 9) -> datetime:
    """A naive UTC datetime `days` from today at a fixed hour."""
    base = datetime.utcnow().replace(hour=hour, minute=0, second=0, microsecond=0)
    return base + timedelta(days=days)


def make_user(db, email="emp@corp.com", role="employee", name="Employee", department="Ops"):
    user = User(email=email, password_hash=_PASSWORD_HASH, name=name, role=role,
                department=department, created_at=datetime.utcnow())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_vehicle(db, plate="FLT-001", name="Pool Car"):
    vehicle = Vehicle(name=name, make="Toyota", model="Corolla", year=2022,
                      plate_number=plate, color="White", seats=5, created_at=datetime.utcnow())
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle


def make_request(db, vehicle, user, start, end, status="pending"):
    request = VehicleRequest(vehicle_id=vehicle.id, user_id=user.id, start_date=start,
                             end_date=end, status=status, created_at=datetime.utcnow())
    db.add(request)
    db.commit()
    db.refresh(request)
    return request
