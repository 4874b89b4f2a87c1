"""Shared fixtures: an in-memory SQLite store and a TestClient bound to it."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["JOBS_API_KEY"] = ""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from saknak.database.init import Base, get_db
from saknak.database.models import BookingRequest, Property, User
from saknak.database.models.booking_request_model import pending_slot_key
from saknak.enums.booking_status import BookingStatus
from saknak.enums.payment_status import PaymentStatus
from saknak.main import app
from saknak.utils.dependencies import create_access_token

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ── Factories ──────────────────────────────────────────────────────


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(user_type="student", complete_profile=True, **kwargs):
        counter["n"] += 1
        fields = dict(
            name=f"User {counter['n']}",
            email=f"user{counter['n']}@example.com",
            hashed_password="not-a-real-hash",
            user_type=user_type,
            is_active=True,
        )
        if user_type == "student" and complete_profile:
            fields.update(
                civil_id_url="https://files.example.com/civil-id.png",
                city="Cairo",
                area="Nasr City",
                college="Engineering",
                level="3",
            )
        fields.update(kwargs)
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def owner(make_user):
    return make_user(user_type="owner")


@pytest.fixture
def student(make_user):
    return make_user(user_type="student")


@pytest.fixture
def make_property(db):
    def _make(owner, **kwargs):
        fields = dict(
            title="Sunny room near campus",
            address="12 University St",
            rental_type="room",
            price=2500.0,
            status="available",
        )
        fields.update(kwargs)
        property_obj = Property(owner_id=owner.id, **fields)
        db.add(property_obj)
        db.commit()
        db.refresh(property_obj)
        return property_obj

    return _make


@pytest.fixture
def listing(make_property, owner):
    return make_property(owner)


@pytest.fixture
def make_booking(db):
    """Insert a booking row directly, bypassing the service rules."""

    def _make(student, property_obj, created_at=NOW, **kwargs):
        status = kwargs.pop("status", BookingStatus.PENDING.value)
        fields = dict(
            property_id=property_obj.id,
            student_id=student.id,
            owner_id=property_obj.owner_id,
            status=status,
            pending_slot=(
                pending_slot_key(student.id, property_obj.id)
                if status == BookingStatus.PENDING.value
                else None
            ),
            deposit_amount=round(property_obj.price * 0.2, 2),
            vodafone_number="01000000000",
            expires_at=created_at + timedelta(hours=1),
            payment_status=PaymentStatus.NONE.value,
            created_at=created_at,
        )
        fields.update(kwargs)
        booking = BookingRequest(**fields)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _headers
