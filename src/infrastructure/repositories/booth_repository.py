# src/infrastructure/repositories/booth_repository.py

from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func, select, update

from src.domain.enums import BoothStatus
from src.domain.exceptions import NotFoundError
from src.infrastructure.db.models import Booking, Booth


class BoothRepository:

    def __init__(self, db: Session):
        self.db = db

    def lock_booth(self, booth_id: str) -> Booth:
        """
        SELECT ... FOR UPDATE
        Serialises concurrent reservations of the same booth.
        """

        stmt = (
            select(Booth)
            .where(Booth.id == booth_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

        booth = self.db.execute(stmt).scalar_one_or_none()

        if not booth:
            raise NotFoundError("Booth not found")

        return booth

    def get_by_id(self, booth_id: str) -> Booth | None:
        stmt = (
            select(Booth)
            .where(Booth.id == booth_id)
            .options(selectinload(Booth.exhibitor))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_identifier(self, identifier: str) -> Booth | None:
        """Looks a booth up by primary key first, then by booth number."""
        booth = self.get_by_id(identifier)
        if booth:
            return booth

        stmt = (
            select(Booth)
            .where(Booth.booth_number == identifier)
            .options(selectinload(Booth.exhibitor))
            .order_by(Booth.event, Booth.id)
        )
        return self.db.execute(stmt).scalars().first()

    def list_booths(
        self,
        status: BoothStatus | None = None,
        event_id: str | None = None,
        event: str | None = None,
        location: str | None = None,
        size: str | None = None,
        max_price: float | None = None,
    ) -> list[Booth]:
        stmt = select(Booth).options(selectinload(Booth.exhibitor))

        if status:
            stmt = stmt.where(Booth.status == status)
        if event_id:
            stmt = stmt.where(Booth.event_id == event_id)
        elif event:
            stmt = stmt.where(Booth.event == event)
        if location:
            stmt = stmt.where(Booth.location == location)
        if size:
            stmt = stmt.where(Booth.size == size)
        if max_price is not None:
            stmt = stmt.where(Booth.price <= max_price)

        stmt = stmt.order_by(Booth.location, Booth.event, Booth.booth_number)
        return list(self.db.execute(stmt).scalars().all())

    def count_by_status(self) -> dict[BoothStatus, int]:
        stmt = select(Booth.status, func.count(Booth.id)).group_by(Booth.status)
        counts = {status: 0 for status in BoothStatus}
        for status, count in self.db.execute(stmt).all():
            counts[status] = count
        return counts

    def create(self, **fields) -> Booth:
        booth = Booth(**fields)
        self.db.add(booth)
        return booth

    def reserve(self, booth: Booth, exhibitor_id: str) -> None:
        booth.status = BoothStatus.BOOKED
        booth.exhibitor_id = exhibitor_id
        self.db.expire(booth, ["exhibitor"])

    def release(self, booth: Booth) -> None:
        booth.status = BoothStatus.AVAILABLE
        booth.exhibitor = None
        booth.exhibitor_id = None

    def detach_event(self, event_id: str) -> None:
        self.db.execute(
            update(Booth).where(Booth.event_id == event_id).values(event_id=None)
        )

    def delete(self, booth: Booth) -> None:
        # Bookings keep their snapshot of the booth number and event.
        self.db.execute(
            update(Booking).where(Booking.booth_id == booth.id).values(booth_id=None)
        )
        self.db.delete(booth)
