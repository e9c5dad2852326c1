import logging
from datetime import datetime, time, timezone

from sqlalchemy.orm import Session

from src.domain.enums import EventStatus
from src.domain.exceptions import NotFoundError, ValidationError
from src.infrastructure.db.models import Event
from src.infrastructure.repositories.activity_repository import ActivityRepository
from src.infrastructure.repositories.booth_repository import BoothRepository
from src.infrastructure.repositories.event_repository import EventRepository

logger = logging.getLogger(__name__)

_COPIED_FIELDS = (
    "category",
    "description",
    "venue",
    "capacity",
    "booth_price",
    "price_tiers",
    "image_url",
)


def parse_start(date_value: str, time_value: str | None = None) -> datetime:
    try:
        day = datetime.strptime(date_value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD.") from exc

    clock = time()
    if time_value:
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                clock = datetime.strptime(time_value, fmt).time()
                break
            except ValueError:
                continue
        else:
            raise ValidationError("Invalid time format. Use HH:MM.")

    return datetime.combine(day, clock, tzinfo=timezone.utc)


def parse_end(date_value: str) -> datetime:
    try:
        day = datetime.strptime(date_value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError("Invalid end date format. Use YYYY-MM-DD.") from exc
    return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)


def parse_filter_date(value: str | None, name: str) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid '{name}' date") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _max_booths(value) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class EventService:

    def __init__(self, db: Session):
        self.db = db
        self.event_repository = EventRepository(db)
        self.booth_repository = BoothRepository(db)
        self.activity_repository = ActivityRepository(db)

    def list_events(
        self,
        q: str | None = None,
        status: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
        sort: str | None = None,
    ) -> list[Event]:
        status_filter = None
        if status and status != "all":
            try:
                status_filter = EventStatus(status)
            except ValueError as exc:
                raise ValidationError(f"Unknown event status '{status}'") from exc

        return self.event_repository.list_events(
            q=q,
            status=status_filter,
            starts_from=parse_filter_date(date_from, "from"),
            ends_by=parse_filter_date(date_to, "to"),
            sort=sort,
        )

    def get_event(self, event_id: str) -> Event:
        event = self.event_repository.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def create_event(self, request) -> Event:
        if not request.title or not request.date:
            raise ValidationError("Title and date are required")

        start = parse_start(request.date, request.time)
        end = parse_end(request.end_date) if request.end_date else start
        if end < start:
            raise ValidationError("End date cannot be before the start date")

        fields = {name: getattr(request, name) for name in _COPIED_FIELDS}
        fields["registration_open"] = bool(request.registration_open)
        event = self.event_repository.create(
            name=request.title,
            start_date=start,
            end_date=end,
            location=request.city or request.address or "",
            max_booths=_max_booths(request.total_booths),
            booth_sizes=request.booth_sizes or [],
            status=request.status or EventStatus.DRAFT,
            **fields,
        )
        self.db.flush()

        self.activity_repository.add_event(
            aggregate_type="event",
            aggregate_id=event.id,
            event_type="EVENT_CREATED",
            title="Event Created",
            description=f"{event.name} - {event.location or 'Location TBD'}",
            payload={"event_id": event.id, "status": event.status.value},
            dedupe_key=f"event:{event.id}:created",
        )
        logger.info("Event created. event_id=%s name=%s", event.id, event.name)
        return event

    def update_event(self, event_id: str, request) -> Event:
        event = self.get_event(event_id)
        provided = request.model_fields_set

        if "title" in provided:
            if not request.title:
                raise ValidationError("Title cannot be empty")
            event.name = request.title

        if request.date:
            event.start_date = parse_start(request.date, request.time)
            if not request.end_date:
                event.end_date = event.start_date
        if request.end_date:
            event.end_date = parse_end(request.end_date)
        if _as_utc(event.end_date) < _as_utc(event.start_date):
            raise ValidationError("End date cannot be before the start date")

        if request.city or request.address:
            event.location = request.city or request.address
        if "total_booths" in provided:
            event.max_booths = _max_booths(request.total_booths)
        if "booth_sizes" in provided:
            event.booth_sizes = request.booth_sizes or []
        if "status" in provided and request.status is not None:
            event.status = request.status

        if "registration_open" in provided and request.registration_open is not None:
            event.registration_open = request.registration_open

        for name in _COPIED_FIELDS:
            if name in provided:
                setattr(event, name, getattr(request, name))

        self.db.flush()
        logger.info("Event updated. event_id=%s", event.id)
        return event

    def delete_event(self, event_id: str) -> None:
        event = self.get_event(event_id)
        self.booth_repository.detach_event(event.id)
        self.event_repository.delete(event)
        self.db.flush()
        logger.info("Event deleted. event_id=%s", event_id)
