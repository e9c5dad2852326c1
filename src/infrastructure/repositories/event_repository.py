# src/infrastructure/repositories/event_repository.py

from datetime import datetime

from sqlalchemy.orm import Session
from sqlalchemy import or_, select

from src.domain.enums import EventStatus
from src.domain.exceptions import ValidationError
from src.infrastructure.db.models import Event


SORTABLE_FIELDS = {
    "name": Event.name,
    "start_date": Event.start_date,
    "end_date": Event.end_date,
    "created_at": Event.created_at,
    "booth_price": Event.booth_price,
    "status": Event.status,
}


class EventRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, event_id: str) -> Event | None:
        return self.db.get(Event, event_id)

    def list_events(
        self,
        q: str | None = None,
        status: EventStatus | None = None,
        starts_from: datetime | None = None,
        ends_by: datetime | None = None,
        sort: str | None = None,
    ) -> list[Event]:
        stmt = select(Event)

        if status:
            stmt = stmt.where(Event.status == status)
        if starts_from:
            stmt = stmt.where(Event.start_date >= starts_from)
        if ends_by:
            stmt = stmt.where(Event.end_date <= ends_by)
        if q and q.strip():
            pattern = f"%{q.strip()}%"
            stmt = stmt.where(
                or_(
                    Event.name.ilike(pattern),
                    Event.description.ilike(pattern),
                    Event.venue.ilike(pattern),
                )
            )

        return list(self.db.execute(stmt.order_by(_order_by(sort))).scalars().all())

    def create(self, **fields) -> Event:
        event = Event(**fields)
        self.db.add(event)
        return event

    def delete(self, event: Event) -> None:
        self.db.delete(event)


def _order_by(sort: str | None):
    """Parses ``field:dir`` into an ORDER BY clause."""
    if not sort:
        return Event.start_date.asc()

    field, _, direction = sort.partition(":")
    column = SORTABLE_FIELDS.get(field)
    if column is None:
        raise ValidationError(f"Cannot sort events by '{field}'")
    return column.desc() if direction == "desc" else column.asc()
