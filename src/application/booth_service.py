import logging

from sqlalchemy.orm import Session

from src.application import floor_plan
from src.domain.enums import BoothStatus
from src.domain.exceptions import ConflictError, NotFoundError, ValidationError
from src.infrastructure.db.models import Booth
from src.infrastructure.repositories.booking_repository import BookingRepository
from src.infrastructure.repositories.booth_repository import BoothRepository
from src.infrastructure.repositories.event_repository import EventRepository

logger = logging.getLogger(__name__)

_PLAIN_FIELDS = (
    "booth_number",
    "event",
    "date",
    "location",
    "size",
    "size_label",
    "price",
    "note",
    "features",
    "description",
)


def _filter_value(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == "all":
        return None
    return value


def parse_booth_status(value: str | None) -> BoothStatus | None:
    value = _filter_value(value)
    if value is None:
        return None
    try:
        return BoothStatus(value.lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown booth status '{value}'") from exc


def parse_max_price(value: str | None) -> float | None:
    value = _filter_value(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class BoothService:

    def __init__(self, db: Session):
        self.db = db
        self.booth_repository = BoothRepository(db)
        self.booking_repository = BookingRepository(db)
        self.event_repository = EventRepository(db)

    def list_booths(
        self,
        status: str | None = None,
        event_id: str | None = None,
        event: str | None = None,
        location: str | None = None,
        size: str | None = None,
        max_price: str | None = None,
    ) -> list[Booth]:
        return self.booth_repository.list_booths(
            status=parse_booth_status(status),
            event_id=_filter_value(event_id),
            event=_filter_value(event),
            location=_filter_value(location),
            size=_filter_value(size),
            max_price=parse_max_price(max_price),
        )

    def get_booth(self, identifier: str) -> Booth:
        booth = self.booth_repository.get_by_identifier(identifier)
        if not booth:
            raise NotFoundError("Booth not found")
        return booth

    def stats(self) -> dict[str, int]:
        counts = self.booth_repository.count_by_status()
        return {
            "total_booths": sum(counts.values()),
            "booked_booths": counts[BoothStatus.BOOKED],
            "available_booths": counts[BoothStatus.AVAILABLE],
            "maintenance_booths": counts[BoothStatus.MAINTENANCE],
        }

    def create_booth(self, request) -> Booth:
        fields = {name: getattr(request, name) for name in _PLAIN_FIELDS}
        fields["status"] = request.status
        fields["event_id"] = None

        if request.event_id:
            event = self._get_event(request.event_id)
            fields["event_id"] = event.id
            fields["event"] = request.event or event.name
        if request.coordinates:
            fields["position_x"] = request.coordinates.x
            fields["position_y"] = request.coordinates.y

        booth = self.booth_repository.create(**fields)
        self.db.flush()

        logger.info("Booth created. booth_id=%s number=%s", booth.id, booth.booth_number)
        return booth

    def update_booth(self, identifier: str, request) -> Booth:
        booth = self.get_booth(identifier)
        booth = self.booth_repository.lock_booth(booth.id)
        provided = request.model_fields_set

        for name in _PLAIN_FIELDS:
            if name in provided and getattr(request, name) is not None:
                setattr(booth, name, getattr(request, name))

        if "event_id" in provided:
            if request.event_id:
                event = self._get_event(request.event_id)
                booth.event_id = event.id
                if "event" not in provided:
                    booth.event = event.name
            else:
                booth.event_id = None

        if request.coordinates is not None:
            booth.position_x = request.coordinates.x
            booth.position_y = request.coordinates.y

        if request.status is not None and request.status != booth.status:
            if booth.status == BoothStatus.BOOKED and self.booking_repository.get_active_for_booth(booth.id):
                raise ConflictError("Booth has an active booking; cancel it first")
            booth.status = request.status
            if request.status != BoothStatus.BOOKED:
                booth.exhibitor = None
                booth.exhibitor_id = None

        self.db.flush()
        return booth

    def delete_booth(self, identifier: str) -> None:
        booth = self.get_booth(identifier)
        if self.booking_repository.get_active_for_booth(booth.id):
            logger.warning("Refused to delete booth with active booking. booth_id=%s", booth.id)
            raise ConflictError("Cannot delete a booth with an active booking")

        self.booth_repository.delete(booth)
        self.db.flush()
        logger.info("Booth deleted. booth_id=%s", booth.id)

    def list_for_admin(
        self,
        event: str | None = None,
        hall: str | None = None,
        status: str | None = None,
    ) -> list[Booth]:
        return self.booth_repository.list_booths(
            status=parse_booth_status(status),
            event=_filter_value(event),
            location=_filter_value(hall),
        )

    def auto_layout(
        self,
        event_id: str | None = None,
        location: str | None = None,
    ) -> tuple[int, list[Booth]]:
        booths = self.booth_repository.list_booths(
            event_id=_filter_value(event_id),
            location=_filter_value(location),
        )
        by_id = {booth.id: booth for booth in booths}

        placements = floor_plan.auto_layout(booths)
        for placement in placements:
            booth = by_id[placement.booth_id]
            booth.position_x = placement.x
            booth.position_y = placement.y
        self.db.flush()

        logger.info("Auto-layout placed %s of %s booths", len(placements), len(booths))
        return len(placements), booths

    def floor_plan(
        self,
        event_id: str | None = None,
        event: str | None = None,
        location: str | None = None,
    ) -> list[tuple]:
        booths = self.booth_repository.list_booths(
            event_id=_filter_value(event_id),
            event=_filter_value(event),
            location=_filter_value(location),
        )
        return floor_plan.plan_positions(booths)

    def _get_event(self, event_id: str):
        event = self.event_repository.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event
