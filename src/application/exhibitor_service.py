import logging
from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from src.application.auth_service import AuthService
from src.domain.enums import UserRole, UserStatus
from src.domain.exceptions import ConflictError, NotFoundError, ValidationError
from src.domain.state_machine import REVENUE_BOOKING_STATUSES, BookingStatus
from src.infrastructure.db.models import Booking, User
from src.infrastructure.repositories.booking_repository import BookingRepository
from src.infrastructure.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

LOYALTY_THRESHOLD = 50000
RECENT_BOOKINGS = 2

_SORT_KEYS = {
    "name": (lambda item: (item[0].first_name or "").lower(), False),
    "nameDesc": (lambda item: (item[0].first_name or "").lower(), True),
    "mostBookings": (lambda item: item[1]["total_bookings"], True),
    "highestRevenue": (lambda item: item[1]["total_spent"], True),
}


def _spent(bookings: list[Booking]) -> float:
    return sum(
        booking.total_price or 0
        for booking in bookings
        if booking.status != BookingStatus.CANCELLED
    )


def summarise_bookings(bookings: list[Booking]) -> dict:
    """Booking stats for one exhibitor; ``bookings`` must be newest first."""
    return {
        "total_bookings": len(bookings),
        "active_bookings": sum(
            1 for booking in bookings if booking.status in REVENUE_BOOKING_STATUSES
        ),
        "total_spent": _spent(bookings),
        "recent_bookings": [
            {
                "event_name": booking.event_name,
                "booth_number": booking.booth_number,
                "date_range": booking.event_date or "Custom Date Range",
                "amount": booking.total_price,
            }
            for booking in bookings[:RECENT_BOOKINGS]
        ],
    }


def _format_day(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def build_timeline(user: User, bookings: list[Booking], total_spent: float) -> list[dict]:
    timeline = [
        {
            "text": "Registered as exhibitor",
            "date": _format_day(user.registration_date),
            "meta": "via sign-up form",
        }
    ]
    if bookings:
        first = bookings[-1]
        timeline.append(
            {
                "text": "First booking confirmed",
                "date": _format_day(first.booking_date),
                "meta": first.event_name,
            }
        )
    if total_spent > LOYALTY_THRESHOLD:
        timeline.append(
            {
                "text": "Total spent exceeded $50k",
                "date": _format_day(datetime.now(timezone.utc)),
                "meta": "Loyal customer milestone",
            }
        )
    return timeline


class ExhibitorService:

    def __init__(self, db: Session):
        self.db = db
        self.user_repository = UserRepository(db)
        self.booking_repository = BookingRepository(db)

    def list_exhibitors(
        self,
        industry: str | None = None,
        status: str | None = None,
        sort: str | None = None,
    ) -> list[tuple[User, dict]]:
        exhibitors = self.user_repository.list_users(
            role=UserRole.EXHIBITOR,
            status=self._parse_status(status),
            industry=industry if industry and industry != "all" else None,
        )
        bookings_by_user = self._bookings_by_user(exhibitors)

        rows = [
            (user, summarise_bookings(bookings_by_user[user.id]))
            for user in exhibitors
        ]
        key, reverse = _SORT_KEYS.get(sort or "name", _SORT_KEYS["name"])
        rows.sort(key=key, reverse=reverse)
        return rows

    def stats(self) -> dict:
        month_start = datetime.now(timezone.utc).replace(
            day=1, hour=0, minute=0, second=0, microsecond=0
        )
        total_revenue = self.booking_repository.total_price_in_statuses(
            REVENUE_BOOKING_STATUSES
        )
        return {
            "total_exhibitors": self.user_repository.count(role=UserRole.EXHIBITOR),
            "active_exhibitors": self.user_repository.count(
                role=UserRole.EXHIBITOR, status=UserStatus.ACTIVE
            ),
            "new_this_month": self.user_repository.count(
                role=UserRole.EXHIBITOR, registered_since=month_start
            ),
            "total_revenue": total_revenue,
            "total_revenue_k": round(total_revenue / 1000),
        }

    def export(self) -> list[tuple[User, dict]]:
        exhibitors = self.user_repository.list_users(role=UserRole.EXHIBITOR)
        bookings_by_user = self._bookings_by_user(exhibitors)
        return [
            (
                user,
                {
                    "total_bookings": len(bookings_by_user[user.id]),
                    "total_spent": _spent(bookings_by_user[user.id]),
                },
            )
            for user in exhibitors
        ]

    def get_detail(self, exhibitor_id: str) -> tuple[User, dict]:
        user = self._get_exhibitor(exhibitor_id)
        bookings = self._bookings_by_user([user])[user.id]

        summary = summarise_bookings(bookings)
        summary["timeline"] = build_timeline(user, bookings, summary["total_spent"])
        return user, summary

    def create_exhibitor(self, request) -> User:
        user = AuthService(self.db).register(
            request,
            role=UserRole.EXHIBITOR,
            status=request.status,
        )
        logger.info("Exhibitor created by admin. user_id=%s", user.id)
        return user

    def update_exhibitor(self, exhibitor_id: str, request) -> User:
        user = self._get_exhibitor(exhibitor_id)
        return AuthService(self.db).update_profile(user, request)

    def set_status(self, exhibitor_id: str, status: UserStatus) -> User:
        user = self._get_exhibitor(exhibitor_id)
        user.status = status
        self.db.flush()
        logger.info("Exhibitor status changed. user_id=%s status=%s", user.id, status.value)
        return user

    def delete_exhibitor(self, exhibitor_id: str) -> None:
        user = self._get_exhibitor(exhibitor_id)
        if self.booking_repository.count_for_user(user.id):
            logger.warning("Refused to delete exhibitor with bookings. user_id=%s", user.id)
            raise ConflictError("Exhibitor has bookings and cannot be deleted")

        self.user_repository.delete(user)
        self.db.flush()
        logger.info("Exhibitor deleted. user_id=%s", exhibitor_id)

    def _get_exhibitor(self, exhibitor_id: str) -> User:
        user = self.user_repository.get_by_id(exhibitor_id)
        if not user or user.role != UserRole.EXHIBITOR:
            raise NotFoundError("Exhibitor not found")
        return user

    def _bookings_by_user(self, users: list[User]) -> dict[str, list[Booking]]:
        grouped: dict[str, list[Booking]] = defaultdict(list)
        for booking in self.booking_repository.list_for_users([u.id for u in users]):
            grouped[booking.user_id].append(booking)
        return grouped

    @staticmethod
    def _parse_status(value: str | None) -> UserStatus | None:
        if not value or value == "all":
            return None
        try:
            return UserStatus(value)
        except ValueError as exc:
            raise ValidationError(f"Unknown exhibitor status '{value}'") from exc
