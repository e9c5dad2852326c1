# src/infrastructure/repositories/booking_repository.py

from datetime import datetime

from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func, select

from src.infrastructure.db.models import Booking
from src.domain.state_machine import ACTIVE_BOOKING_STATUSES, BookingStatus


_SORT_OPTIONS = {
    "newest": Booking.booking_date.desc(),
    "oldest": Booking.booking_date.asc(),
    "highestPrice": Booking.total_price.desc(),
    "lowestPrice": Booking.total_price.asc(),
}


class BookingRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(
        self,
        booking_id: str,
        for_update: bool = False,
    ) -> Booking | None:

        stmt = (
            select(Booking)
            .where(Booking.id == booking_id)
            .options(selectinload(Booking.booth), selectinload(Booking.user))
        )
        if for_update:
            stmt = stmt.with_for_update(of=Booking).execution_options(
                populate_existing=True
            )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_active_for_booth(self, booth_id: str) -> Booking | None:
        stmt = select(Booking).where(
            Booking.booth_id == booth_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        )
        return self.db.execute(stmt).scalars().first()

    def list_bookings(
        self,
        user_id: str | None = None,
        status: BookingStatus | None = None,
        event_name: str | None = None,
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        stmt = select(Booking).options(
            selectinload(Booking.booth),
            selectinload(Booking.user),
        )

        if user_id:
            stmt = stmt.where(Booking.user_id == user_id)
        if status:
            stmt = stmt.where(Booking.status == status)
        if event_name:
            stmt = stmt.where(Booking.event_name == event_name)

        stmt = stmt.order_by(_SORT_OPTIONS.get(sort or "newest", _SORT_OPTIONS["newest"]))
        if limit:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def list_for_users(self, user_ids: list[str]) -> list[Booking]:
        if not user_ids:
            return []
        stmt = (
            select(Booking)
            .where(Booking.user_id.in_(user_ids))
            .order_by(Booking.booking_date.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_in_statuses_since(
        self,
        statuses: tuple[BookingStatus, ...],
        since: datetime,
    ) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.status.in_(statuses))
            .where(Booking.booking_date >= since)
            .order_by(Booking.booking_date)
        )
        return list(self.db.execute(stmt).scalars().all())

    def create_booking(self, **fields) -> Booking:
        booking = Booking(status=BookingStatus.PENDING, **fields)
        self.db.add(booking)
        return booking

    def update_status(
        self,
        booking: Booking,
        new_status: BookingStatus,
    ) -> None:

        booking.status = new_status

    def delete(self, booking: Booking) -> None:
        self.db.delete(booking)

    def count(self, status: BookingStatus | None = None) -> int:
        stmt = select(func.count(Booking.id))
        if status:
            stmt = stmt.where(Booking.status == status)
        return self.db.execute(stmt).scalar_one()

    def total_price_in_statuses(self, statuses: tuple[BookingStatus, ...]) -> float:
        stmt = select(func.coalesce(func.sum(Booking.total_price), 0)).where(
            Booking.status.in_(statuses)
        )
        return float(self.db.execute(stmt).scalar_one())

    def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count(Booking.id)).where(Booking.user_id == user_id)
        return self.db.execute(stmt).scalar_one()
