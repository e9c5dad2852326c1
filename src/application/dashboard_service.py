from datetime import datetime, timezone

from sqlalchemy.orm import Session

from src.domain.enums import BoothStatus, UserStatus
from src.domain.exceptions import ValidationError
from src.domain.state_machine import (
    ACTIVE_BOOKING_STATUSES,
    REVENUE_BOOKING_STATUSES,
    BookingStatus,
)
from src.infrastructure.db.models import ActivityEvent
from src.infrastructure.repositories.activity_repository import ActivityRepository
from src.infrastructure.repositories.booking_repository import BookingRepository
from src.infrastructure.repositories.booth_repository import BoothRepository
from src.infrastructure.repositories.user_repository import UserRepository

MAX_TREND_MONTHS = 24
MAX_ACTIVITY_ITEMS = 50


def month_starts(months: int, now: datetime | None = None) -> list[datetime]:
    """First instant of each of the last ``months`` calendar months, oldest first."""
    now = now or datetime.now(timezone.utc)
    year, month = now.year, now.month
    starts = []
    for _ in range(months):
        starts.append(datetime(year, month, 1, tzinfo=timezone.utc))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


class DashboardService:

    def __init__(self, db: Session):
        self.db = db
        self.booth_repository = BoothRepository(db)
        self.booking_repository = BookingRepository(db)
        self.user_repository = UserRepository(db)
        self.activity_repository = ActivityRepository(db)

    def global_stats(self) -> dict:
        booths = self.booth_repository.count_by_status()
        return {
            "total_booths": sum(booths.values()),
            "available_booths": booths[BoothStatus.AVAILABLE],
            "booked_booths": booths[BoothStatus.BOOKED],
            "maintenance_booths": booths[BoothStatus.MAINTENANCE],
            "total_bookings": self.booking_repository.count(),
            "pending_bookings": self.booking_repository.count(BookingStatus.PENDING),
            "confirmed_bookings": self.booking_repository.count(BookingStatus.CONFIRMED),
            "total_users": self.user_repository.count(),
            "active_users": self.user_repository.count(status=UserStatus.ACTIVE),
            "total_revenue": self.booking_repository.total_price_in_statuses(
                ACTIVE_BOOKING_STATUSES
            ),
        }

    def admin_stats(self) -> dict:
        booths = self.booth_repository.count_by_status()
        return {
            "total_booths": sum(booths.values()),
            "booked_booths": booths[BoothStatus.BOOKED],
            "available_booths": booths[BoothStatus.AVAILABLE],
            "maintenance_booths": booths[BoothStatus.MAINTENANCE],
            "pending_approvals": self.booking_repository.count(BookingStatus.PENDING),
            "total_revenue": self.booking_repository.total_price_in_statuses(
                REVENUE_BOOKING_STATUSES
            ),
        }

    def revenue_trends(self, months: int = 6) -> list[dict]:
        if months < 1 or months > MAX_TREND_MONTHS:
            raise ValidationError(f"months must be between 1 and {MAX_TREND_MONTHS}")

        starts = month_starts(months)
        buckets = {
            start.strftime("%Y-%m"): {"month": start.strftime("%Y-%m"), "revenue": 0.0, "bookings": 0}
            for start in starts
        }

        bookings = self.booking_repository.list_in_statuses_since(
            REVENUE_BOOKING_STATUSES, starts[0]
        )
        for booking in bookings:
            bucket = buckets.get(booking.booking_date.strftime("%Y-%m"))
            if bucket is None:
                continue
            bucket["revenue"] += booking.total_price or 0
            bucket["bookings"] += 1

        return list(buckets.values())

    def recent_activity(self, limit: int = 5) -> list[ActivityEvent]:
        if limit < 1 or limit > MAX_ACTIVITY_ITEMS:
            raise ValidationError(f"limit must be between 1 and {MAX_ACTIVITY_ITEMS}")
        return self.activity_repository.list_recent(limit)
