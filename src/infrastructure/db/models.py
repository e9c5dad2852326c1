# src/infrastructure/db/models.py

from sqlalchemy import (
    JSON,
    Boolean,
    String,
    Integer,
    Float,
    DateTime,
    Enum,
    Text,
    Index,
    UniqueConstraint,
    CheckConstraint,
    ForeignKey,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, timezone
from uuid import uuid4

from src.infrastructure.db.session import Base
from src.domain.enums import BoothStatus, EventStatus, UserRole, UserStatus
from src.domain.state_machine import ACTIVE_BOOKING_STATUSES, BookingStatus


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid4())


def _enum(enum_cls, name: str) -> Enum:
    # Persist the lowercase values the API speaks, not the member names.
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


_ACTIVE_STATUS_SQL = "status IN ({})".format(
    ", ".join(f"'{status.value}'" for status in ACTIVE_BOOKING_STATUSES)
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))
    company_name: Mapped[str | None] = mapped_column(String(255))
    industry: Mapped[str | None] = mapped_column(String(100))
    company_size: Mapped[str | None] = mapped_column(String(50))
    company_address: Mapped[str | None] = mapped_column(String(255))
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        _enum(UserRole, "user_role"),
        nullable=False,
        default=UserRole.EXHIBITOR,
    )
    status: Mapped[UserStatus] = mapped_column(
        _enum(UserStatus, "user_status"),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    registration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    bookings: Mapped[list["Booking"]] = relationship(back_populates="user")

    __table_args__ = (
        UniqueConstraint("email", name="uq_user_email"),
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Event(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100))
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255))
    venue: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[EventStatus] = mapped_column(
        _enum(EventStatus, "event_status"),
        nullable=False,
        default=EventStatus.UPCOMING,
    )
    capacity: Mapped[int | None] = mapped_column(Integer)
    max_booths: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    booth_price: Mapped[float | None] = mapped_column(Float)
    booth_sizes: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    price_tiers: Mapped[str | None] = mapped_column(Text)
    registration_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    image_url: Mapped[str | None] = mapped_column(String(1024))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    booths: Mapped[list["Booth"]] = relationship(back_populates="event_ref")

    __table_args__ = (
        CheckConstraint("max_booths >= 0", name="ck_event_max_booths_nonnegative"),
        CheckConstraint("end_date >= start_date", name="ck_event_date_range"),
    )


class Booth(Base):
    __tablename__ = "booths"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    booth_number: Mapped[str] = mapped_column(String(64), nullable=False)
    event: Mapped[str | None] = mapped_column(String(255))
    event_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("events.id", ondelete="SET NULL"),
    )
    date: Mapped[str | None] = mapped_column(String(64))
    location: Mapped[str | None] = mapped_column(String(255))
    size: Mapped[str | None] = mapped_column(String(64))
    size_label: Mapped[str | None] = mapped_column(String(128))
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    note: Mapped[str | None] = mapped_column(Text)
    status: Mapped[BoothStatus] = mapped_column(
        _enum(BoothStatus, "booth_status"),
        nullable=False,
        default=BoothStatus.AVAILABLE,
    )
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text)
    exhibitor_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
    )
    position_x: Mapped[float | None] = mapped_column(Float)
    position_y: Mapped[float | None] = mapped_column(Float)

    exhibitor: Mapped[User | None] = relationship()
    event_ref: Mapped[Event | None] = relationship(back_populates="booths")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_booth_price_nonnegative"),
    )

    @property
    def has_position(self) -> bool:
        return self.position_x is not None and self.position_y is not None


class Booking(Base):
    """
    Booking table reflecting domain state.
    Domain controls transitions; the partial unique index keeps a booth
    from being held by two live bookings.
    """

    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    booth_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("booths.id", ondelete="SET NULL"),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
    )
    company_name: Mapped[str | None] = mapped_column(String(255))
    contact_person: Mapped[str | None] = mapped_column(String(255))
    contact_email: Mapped[str | None] = mapped_column(String(255))
    contact_phone: Mapped[str | None] = mapped_column(String(50))
    special_requests: Mapped[str] = mapped_column(Text, nullable=False, default="")
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        _enum(BookingStatus, "booking_status"),
        nullable=False,
        default=BookingStatus.PENDING,
    )
    booking_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )
    event_name: Mapped[str | None] = mapped_column(String(255))
    booth_number: Mapped[str | None] = mapped_column(String(64))
    event_date: Mapped[str | None] = mapped_column(String(64))
    venue: Mapped[str | None] = mapped_column(String(255))
    location: Mapped[str | None] = mapped_column(String(255))
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    booth: Mapped[Booth | None] = relationship()
    user: Mapped[User] = relationship(back_populates="bookings")

    __table_args__ = (
        CheckConstraint("total_price > 0", name="ck_booking_total_price_positive"),
        Index(
            "uq_booking_active_booth",
            "booth_id",
            unique=True,
            postgresql_where=text(_ACTIVE_STATUS_SQL),
            sqlite_where=text(_ACTIVE_STATUS_SQL),
        ),
    )


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    transaction_id: Mapped[str] = mapped_column(String(32), nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="USD")
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="completed")
    booking_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    __table_args__ = (
        UniqueConstraint("transaction_id", name="uq_payment_transaction_id"),
        CheckConstraint("amount > 0", name="ck_payment_amount_positive"),
    )


class ActivityEvent(Base):
    __tablename__ = "activity_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    aggregate_type: Mapped[str] = mapped_column(String(64), nullable=False)
    aggregate_id: Mapped[str] = mapped_column(String(36), nullable=False)
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    dedupe_key: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    __table_args__ = (
        UniqueConstraint("dedupe_key", name="uq_activity_dedupe_key"),
    )
