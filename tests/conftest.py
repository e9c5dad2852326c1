import os
from datetime import datetime, timezone

os.environ["DATABASE_URL"] = "sqlite:///./test_booth_booking.db"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from src.domain.enums import BoothStatus, UserRole, UserStatus
from src.infrastructure.db.models import Base, Booth, Event, User
from src.infrastructure.db.session import SessionLocal, engine
from src.infrastructure.security import create_access_token, hash_password
from src.main import app

TEST_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def _reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def _make_user(db, email: str, role: UserRole, **fields) -> User:
    user = User(
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        status=fields.pop("status", UserStatus.ACTIVE),
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_user(db):
    def factory(email: str, role: UserRole = UserRole.EXHIBITOR, **fields) -> User:
        return _make_user(db, email, role, **fields)

    return factory


@pytest.fixture
def exhibitor(make_user):
    return make_user(
        "exhibitor@example.com",
        first_name="Erin",
        last_name="Exhibitor",
        company_name="Acme Displays",
        phone="555-0100",
        industry="Technology",
    )


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", UserRole.ADMIN, first_name="Alex", last_name="Admin")


def headers_for(user: User) -> dict:
    token = create_access_token(user.id, user.email, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return headers_for


@pytest.fixture
def exhibitor_headers(exhibitor):
    return headers_for(exhibitor)


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
def event(db):
    item = Event(
        name="Tech Expo",
        start_date=datetime(2026, 11, 10, 9, 0, tzinfo=timezone.utc),
        end_date=datetime(2026, 11, 12, 18, 0, tzinfo=timezone.utc),
        venue="Convention Center",
        location="Berlin",
        booth_price=2500,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@pytest.fixture
def make_booth(db):
    def factory(booth_number: str, **fields) -> Booth:
        fields.setdefault("price", 2500)
        fields.setdefault("status", BoothStatus.AVAILABLE)
        booth = Booth(booth_number=booth_number, **fields)
        db.add(booth)
        db.commit()
        db.refresh(booth)
        return booth

    return factory


@pytest.fixture
def booth(make_booth, event):
    return make_booth(
        "A-101",
        event=event.name,
        event_id=event.id,
        location="Hall A",
        size="3x3",
        date="2026-11-10",
    )
