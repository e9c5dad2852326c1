import os
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from src.domain.enums import BoothStatus, EventStatus, UserRole, UserStatus
from src.infrastructure.db.models import Base, Booth, Event, User
from src.infrastructure.db.session import engine, get_db_session
from src.infrastructure.security import hash_password


def _dt(days_from_now: int, hour: int, minute: int = 0) -> datetime:
    target = datetime.now(timezone.utc) + timedelta(days=days_from_now)
    return target.replace(hour=hour, minute=minute, second=0, microsecond=0)


def seed_users(db) -> None:
    user_defs = [
        {
            "first_name": "Ada",
            "last_name": "Admin",
            "email": os.getenv("SEED_ADMIN_EMAIL", "admin@boothbooking.local"),
            "password": os.getenv("SEED_ADMIN_PASSWORD", "admin12345"),
            "company_name": "Booth Booking HQ",
            "role": UserRole.ADMIN,
        },
        {
            "first_name": "Eli",
            "last_name": "Exhibitor",
            "email": "exhibitor@boothbooking.local",
            "password": "exhibitor123",
            "company_name": "Acme Displays",
            "industry": "Technology",
            "company_size": "11-50",
            "phone": "+1 555 0100",
            "role": UserRole.EXHIBITOR,
        },
    ]

    for item in user_defs:
        existing = db.execute(
            select(User).where(User.email == item["email"])
        ).scalar_one_or_none()
        if existing:
            existing.role = item["role"]
            existing.status = UserStatus.ACTIVE
            continue

        password = item.pop("password")
        db.add(User(password_hash=hash_password(password), status=UserStatus.ACTIVE, **item))


def seed_events(db) -> dict[str, Event]:
    event_defs = [
        {
            "name": "Tech Expo 2026",
            "category": "Technology",
            "start_date": _dt(days_from_now=30, hour=9),
            "end_date": _dt(days_from_now=32, hour=18),
            "venue": "Convention Center",
            "location": "San Francisco",
            "description": "Annual showcase of hardware and software vendors.",
            "status": EventStatus.UPCOMING,
            "max_booths": 40,
            "booth_price": 2500,
            "booth_sizes": ["3x3", "3x6", "6x6"],
            "registration_open": True,
        },
        {
            "name": "Food & Beverage Fair",
            "category": "Food",
            "start_date": _dt(days_from_now=60, hour=10),
            "end_date": _dt(days_from_now=61, hour=17),
            "venue": "Exhibition Hall",
            "location": "Chicago",
            "description": "Regional producers, distributors and caterers.",
            "status": EventStatus.UPCOMING,
            "max_booths": 25,
            "booth_price": 1200,
            "booth_sizes": ["3x3", "3x6"],
            "registration_open": True,
        },
    ]

    events = {}
    for item in event_defs:
        existing = db.execute(
            select(Event).where(Event.name == item["name"])
        ).scalar_one_or_none()
        if existing:
            for key, value in item.items():
                setattr(existing, key, value)
            event = existing
        else:
            event = Event(**item)
            db.add(event)
            db.flush()
        events[event.name] = event
    return events


def seed_booths(db, events: dict[str, Event]) -> None:
    booth_defs = [
        ("Tech Expo 2026", "Hall A", "A-101", "3x3", 2500),
        ("Tech Expo 2026", "Hall A", "A-102", "3x3", 2500),
        ("Tech Expo 2026", "Hall A", "A-103", "3x6", 4200),
        ("Tech Expo 2026", "Hall B", "B-201", "6x6", 7800),
        ("Tech Expo 2026", "Hall B", "B-202", "3x6", 4200),
        ("Food & Beverage Fair", "Hall C", "C-301", "3x3", 1200),
        ("Food & Beverage Fair", "Hall C", "C-302", "3x6", 1900),
    ]

    for event_name, hall, number, size, price in booth_defs:
        event = events[event_name]
        existing = db.execute(
            select(Booth)
            .where(Booth.booth_number == number)
            .where(Booth.event_id == event.id)
        ).scalar_one_or_none()
        if existing:
            existing.price = price
            existing.size = size
            existing.location = hall
            continue

        db.add(
            Booth(
                booth_number=number,
                event=event.name,
                event_id=event.id,
                date=event.start_date.strftime("%Y-%m-%d"),
                location=hall,
                size=size,
                size_label=f"{size} m",
                price=price,
                status=BoothStatus.AVAILABLE,
                features=["Power outlet", "Wi-Fi"],
            )
        )


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with get_db_session() as db:
        seed_users(db)
        events = seed_events(db)
        seed_booths(db, events)
    print("Seed complete: admin and exhibitor accounts, 2 events, 7 booths.")


if __name__ == "__main__":
    main()
