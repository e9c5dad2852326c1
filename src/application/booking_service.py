import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.domain.enums import BoothStatus, UserRole
from src.domain.exceptions import (
    BoothUnavailableError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from src.domain.state_machine import BookingStateMachine, BookingStatus
from src.infrastructure.db.models import Booking, Booth, User
from src.infrastructure.repositories.activity_repository import ActivityRepository
from src.infrastructure.repositories.booking_repository import BookingRepository
from src.infrastructure.repositories.booth_repository import BoothRepository

logger = logging.getLogger(__name__)

_CONTACT_FIELDS = (
    "company_name",
    "contact_person",
    "contact_email",
    "contact_phone",
    "special_requests",
)


def _filter_value(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == "all":
        return None
    return value


def parse_booking_status(value: str | None) -> BookingStatus | None:
    value = _filter_value(value)
    if value is None:
        return None
    try:
        return BookingStatus(value.lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown booking status '{value}'") from exc


_STATUS_TITLES = {
    BookingStatus.PENDING: "Booking Moved To Pending",
    BookingStatus.CONFIRMED: "Booking Approved",
    BookingStatus.BOOKED: "Booking Marked As Booked",
    BookingStatus.CANCELLED: "Booking Cancelled",
}


class BookingService:
    """Application service coordinating booking workflow.

    Every booking write and the matching booth update happen on the same
    session, so they commit or roll back together.
    """

    def __init__(self, db: Session):
        self.db = db
        self.booking_repository = BookingRepository(db)
        self.booth_repository = BoothRepository(db)
        self.activity_repository = ActivityRepository(db)

    def create_booking(self, user: User, request) -> Booking:
        if not request.booth_id:
            raise ValidationError("Booth ID is required")
        if not request.total_price or request.total_price <= 0:
            raise ValidationError("Valid total price is required")

        found = self.booth_repository.get_by_identifier(request.booth_id)
        if not found:
            raise NotFoundError("Booth not found")
        booth = self.booth_repository.lock_booth(found.id)

        self._ensure_bookable(booth)

        booking = self.booking_repository.create_booking(
            booth_id=booth.id,
            user_id=user.id,
            company_name=request.company_name or user.company_name or "N/A",
            contact_person=request.contact_person or user.full_name or "N/A",
            contact_email=request.contact_email or user.email,
            contact_phone=request.contact_phone or user.phone or "N/A",
            special_requests=request.special_requests or "",
            total_price=request.total_price,
            event_name=request.event_name or booth.event or "N/A",
            booth_number=request.booth_number or booth.booth_number,
            event_date=request.event_date or booth.date or "Date TBD",
            venue=request.venue or booth.location or "Venue TBD",
            location=request.location or booth.location or "Location TBD",
        )

        self._transition(booking, BookingStatus.CONFIRMED)
        self.booth_repository.reserve(booth, user.id)

        try:
            self.db.flush()
        except IntegrityError as exc:
            # Lost the race against another booking of the same booth.
            self.db.rollback()
            logger.warning(
                "Concurrent booking rejected. booth_id=%s user_id=%s",
                booth.id,
                user.id,
            )
            raise BoothUnavailableError("This booth is already booked") from exc

        self._record(
            booking,
            "BOOKING_CREATED",
            "New Booking Request",
            dedupe_suffix="created",
        )
        logger.info(
            "Booking created. booking_id=%s booth_id=%s user_id=%s",
            booking.id,
            booth.id,
            user.id,
        )
        return booking

    def get_booking(self, booking_id: str, user: User) -> Booking:
        booking = self._get_or_404(booking_id)
        self._ensure_owner_or_admin(booking, user)
        return booking

    def list_for_user(
        self,
        user: User,
        status: str | None = None,
        event_name: str | None = None,
        sort: str | None = None,
    ) -> list[Booking]:
        return self.booking_repository.list_bookings(
            user_id=user.id,
            status=parse_booking_status(status),
            event_name=_filter_value(event_name),
            sort=sort,
        )

    def list_all(
        self,
        status: str | None = None,
        event_name: str | None = None,
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        return self.booking_repository.list_bookings(
            status=parse_booking_status(status),
            event_name=_filter_value(event_name),
            sort=sort,
            limit=limit,
        )

    def update_details(self, booking_id: str, user: User, request) -> Booking:
        booking = self._get_or_404(booking_id)
        self._ensure_owner_or_admin(booking, user)

        for field in _CONTACT_FIELDS:
            if field in request.model_fields_set:
                setattr(booking, field, getattr(request, field) or "")

        self.db.flush()
        return booking

    def cancel_booking(self, booking_id: str, user: User) -> Booking:
        booking = self._get_or_404(booking_id, for_update=True)
        if booking.user_id != user.id:
            raise PermissionDeniedError("Can only cancel your own bookings")

        self._transition(booking, BookingStatus.CANCELLED)
        self._release_booth(booking)
        self._record(booking, "BOOKING_CANCELLED", "Booking Cancelled", dedupe_suffix="cancelled")
        self.db.flush()

        logger.info("Booking cancelled by exhibitor. booking_id=%s", booking.id)
        return booking

    def update_status(self, booking_id: str, new_status: BookingStatus) -> Booking:
        booking = self._get_or_404(booking_id, for_update=True)
        if booking.status == new_status:
            return booking

        previous = booking.status
        self._transition(booking, new_status)

        if new_status == BookingStatus.CANCELLED:
            self._release_booth(booking)
        elif new_status in (BookingStatus.CONFIRMED, BookingStatus.BOOKED) and booking.booth_id:
            booth = self.booth_repository.lock_booth(booking.booth_id)
            self.booth_repository.reserve(booth, booking.user_id)

        self._record(
            booking,
            "BOOKING_STATUS_CHANGED",
            _STATUS_TITLES[new_status],
            dedupe_suffix=(
                f"status:{previous.value}:{new_status.value}:"
                f"{datetime.now(timezone.utc).isoformat()}"
            ),
        )
        self.db.flush()

        logger.info(
            "Booking status changed. booking_id=%s %s -> %s",
            booking.id,
            previous.value,
            new_status.value,
        )
        return booking

    def delete_booking(self, booking_id: str, user: User) -> None:
        booking = self._get_or_404(booking_id, for_update=True)
        self._ensure_owner_or_admin(booking, user)

        if BookingStateMachine.is_active(booking.status):
            self._release_booth(booking)

        self._record(booking, "BOOKING_DELETED", "Booking Deleted", dedupe_suffix="deleted")
        self.booking_repository.delete(booking)
        self.db.flush()

        logger.info("Booking deleted. booking_id=%s by user_id=%s", booking_id, user.id)

    def _ensure_bookable(self, booth: Booth) -> None:
        if booth.status == BoothStatus.BOOKED:
            raise BoothUnavailableError("This booth is already booked")
        if booth.status == BoothStatus.MAINTENANCE:
            raise BoothUnavailableError("This booth is under maintenance")
        if self.booking_repository.get_active_for_booth(booth.id):
            raise BoothUnavailableError("This booth is already booked")

    def _release_booth(self, booking: Booking) -> None:
        if not booking.booth_id:
            return
        booth = self.booth_repository.lock_booth(booking.booth_id)
        self.booth_repository.release(booth)

    def _get_or_404(self, booking_id: str, for_update: bool = False) -> Booking:
        booking = self.booking_repository.get_by_id(booking_id, for_update=for_update)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    @staticmethod
    def _ensure_owner_or_admin(booking: Booking, user: User) -> None:
        if booking.user_id != user.id and user.role != UserRole.ADMIN:
            raise PermissionDeniedError("Not allowed to access this booking")

    def _transition(self, booking: Booking, to_status: BookingStatus) -> None:
        BookingStateMachine.validate_transition(booking.status, to_status)
        self.booking_repository.update_status(booking, to_status)
        if to_status == BookingStatus.CONFIRMED:
            booking.confirmed_at = datetime.now(timezone.utc)

    def _record(
        self,
        booking: Booking,
        event_type: str,
        title: str,
        dedupe_suffix: str,
    ) -> None:
        self.activity_repository.add_event(
            aggregate_type="booking",
            aggregate_id=booking.id,
            event_type=event_type,
            title=title,
            description=(
                f"{booking.company_name or 'An exhibitor'} - "
                f"Booth {booking.booth_number or '-'} - "
                f"{booking.event_name or 'Event'}"
            ),
            payload={
                "booking_id": booking.id,
                "booth_id": booking.booth_id,
                "user_id": booking.user_id,
                "status": booking.status.value,
                "total_price": booking.total_price,
            },
            dedupe_key=f"booking:{booking.id}:{dedupe_suffix}",
        )
