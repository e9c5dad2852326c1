from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.domain.enums import (
    BoothStatus,
    EventStatus,
    PaymentMethod,
    UserRole,
    UserStatus,
)
from src.domain.state_machine import BookingStatus


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    status: str = "OK"
    message: str
    timestamp: datetime


# ---------------------
# Users & auth
# ---------------------

class UserResponse(ORMModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str
    phone: str | None = None
    company_name: str | None = None
    industry: str | None = None
    company_size: str | None = None
    company_address: str | None = None
    role: UserRole
    status: UserStatus
    registration_date: datetime


class UserSummary(ORMModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str
    role: UserRole
    company_name: str | None = None


class RegisterRequest(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str = Field(pattern=EMAIL_PATTERN)
    phone: str | None = None
    company_name: str | None = None
    industry: str | None = None
    company_size: str | None = None
    company_address: str | None = None
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


class ProfileUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    phone: str | None = None
    company_name: str | None = None
    industry: str | None = None
    company_size: str | None = None
    company_address: str | None = None


class ProfileUpdateResponse(BaseModel):
    success: bool = True
    user: UserResponse


class ChangePasswordRequest(BaseModel):
    current_password: str | None = None
    new_password: str | None = None


# ---------------------
# Events
# ---------------------

class EventPayload(BaseModel):
    """Create/update body as the event form submits it."""

    title: str | None = None
    category: str | None = None
    date: str | None = None
    time: str | None = None
    end_date: str | None = None
    description: str | None = None
    venue: str | None = None
    address: str | None = None
    city: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    total_booths: int | str | None = None
    booth_price: float | None = Field(default=None, ge=0)
    booth_sizes: list[str] | None = None
    price_tiers: str | None = None
    status: EventStatus | None = None
    registration_open: bool | None = None
    image_url: str | None = None


class EventResponse(ORMModel):
    id: str
    name: str
    category: str | None = None
    start_date: datetime
    end_date: datetime
    location: str | None = None
    venue: str | None = None
    description: str | None = None
    status: EventStatus
    capacity: int | None = None
    max_booths: int
    booth_price: float | None = None
    booth_sizes: list[str] = []
    price_tiers: str | None = None
    registration_open: bool
    image_url: str | None = None
    created_at: datetime


class EventListResponse(BaseModel):
    events: list[EventResponse]


class EventMutationResponse(BaseModel):
    success: bool = True
    message: str
    event: EventResponse


# ---------------------
# Booths
# ---------------------

class Coordinates(BaseModel):
    x: float
    y: float


class ExhibitorSummary(ORMModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None
    email: str
    phone: str | None = None


class BoothCreate(BaseModel):
    booth_number: str = Field(min_length=1, max_length=64)
    event: str | None = None
    event_id: str | None = None
    date: str | None = None
    location: str | None = None
    size: str | None = None
    size_label: str | None = None
    price: float = Field(ge=0)
    note: str | None = None
    status: BoothStatus = BoothStatus.AVAILABLE
    features: list[str] = []
    description: str | None = None
    coordinates: Coordinates | None = None


class BoothUpdate(BaseModel):
    booth_number: str | None = Field(default=None, min_length=1, max_length=64)
    event: str | None = None
    event_id: str | None = None
    date: str | None = None
    location: str | None = None
    size: str | None = None
    size_label: str | None = None
    price: float | None = Field(default=None, ge=0)
    note: str | None = None
    status: BoothStatus | None = None
    features: list[str] | None = None
    description: str | None = None
    coordinates: Coordinates | None = None


class BoothResponse(BaseModel):
    id: str
    booth_number: str
    event: str | None = None
    event_id: str | None = None
    date: str | None = None
    location: str | None = None
    size: str | None = None
    size_label: str | None = None
    price: float
    note: str | None = None
    status: BoothStatus
    status_label: str
    features: list[str] = []
    description: str | None = None
    exhibitor: ExhibitorSummary | None = None
    coordinates: Coordinates | None = None

    @classmethod
    def from_booth(cls, booth) -> "BoothResponse":
        return cls(
            id=booth.id,
            booth_number=booth.booth_number,
            event=booth.event,
            event_id=booth.event_id,
            date=booth.date,
            location=booth.location,
            size=booth.size,
            size_label=booth.size_label,
            price=booth.price,
            note=booth.note,
            status=booth.status,
            status_label=booth.status.label,
            features=booth.features or [],
            description=booth.description,
            exhibitor=(
                ExhibitorSummary.model_validate(booth.exhibitor)
                if booth.exhibitor
                else None
            ),
            coordinates=(
                Coordinates(x=booth.position_x, y=booth.position_y)
                if booth.has_position
                else None
            ),
        )


class BoothListResponse(BaseModel):
    booths: list[BoothResponse]


class AdminBoothListResponse(BaseModel):
    success: bool = True
    booths: list[BoothResponse]


class BoothMutationResponse(BaseModel):
    success: bool = True
    message: str | None = None
    booth: BoothResponse


class BoothStatsResponse(BaseModel):
    total_booths: int
    booked_booths: int
    available_booths: int
    maintenance_booths: int


class AutoLayoutResponse(BaseModel):
    success: bool = True
    updated: int
    booths: list[BoothResponse]


# ---------------------
# Bookings
# ---------------------

class BookingCreate(BaseModel):
    booth_id: str | None = None
    company_name: str | None = None
    contact_person: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    special_requests: str | None = None
    total_price: float | None = None
    event_name: str | None = None
    booth_number: str | None = None
    event_date: str | None = None
    venue: str | None = None
    location: str | None = None


class BookingUpdate(BaseModel):
    company_name: str | None = None
    contact_person: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    special_requests: str | None = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    id: str
    booth_id: str | None = None
    user_id: str
    booth_number: str
    event_name: str
    event_date: str
    venue: str
    location: str
    total_price: float
    status: BookingStatus
    company_name: str
    contact_person: str
    contact_email: str
    contact_phone: str
    special_requests: str = ""
    created_at: datetime
    confirmed_at: datetime | None = None

    @classmethod
    def from_booking(cls, booking) -> "BookingResponse":
        """Fills gaps in the stored snapshot from the booth and the user."""
        booth = booking.booth
        user = booking.user
        booth_location = booth.location if booth else None

        return cls(
            id=booking.id,
            booth_id=booking.booth_id,
            user_id=booking.user_id,
            booth_number=booking.booth_number or (booth.booth_number if booth else None) or "N/A",
            event_name=booking.event_name or "N/A",
            event_date=booking.event_date or "Date TBD",
            venue=booking.venue or booth_location or "Venue TBD",
            location=booking.location or booth_location or "Location TBD",
            total_price=booking.total_price or 0,
            status=booking.status,
            company_name=booking.company_name or (user.company_name if user else None) or "N/A",
            contact_person=booking.contact_person or (user.full_name if user else None) or "N/A",
            contact_email=booking.contact_email or (user.email if user else None) or "N/A",
            contact_phone=booking.contact_phone or (user.phone if user else None) or "N/A",
            special_requests=booking.special_requests or "",
            created_at=booking.booking_date,
            confirmed_at=(
                booking.confirmed_at
                if booking.status == BookingStatus.CONFIRMED
                else None
            ),
        )


class BookingListResponse(BaseModel):
    success: bool = True
    bookings: list[BookingResponse]


class AdminBookingListResponse(BaseModel):
    bookings: list[BookingResponse]


class BookingEnvelope(BaseModel):
    success: bool = True
    booking: BookingResponse


class BookingStatusResponse(BaseModel):
    message: str
    booking: BookingResponse


# ---------------------
# Exhibitors
# ---------------------

class RecentBooking(BaseModel):
    event_name: str | None = None
    booth_number: str | None = None
    date_range: str
    amount: float


class ExhibitorResponse(UserResponse):
    total_bookings: int
    active_bookings: int
    total_spent: float
    recent_bookings: list[RecentBooking]


class TimelineEntry(BaseModel):
    text: str
    date: str
    meta: str | None = None


class ExhibitorDetailResponse(ExhibitorResponse):
    timeline: list[TimelineEntry]


class ExhibitorListResponse(BaseModel):
    exhibitors: list[ExhibitorResponse]


class ExhibitorExportRow(UserResponse):
    total_bookings: int
    total_spent: float


class ExhibitorStatsResponse(BaseModel):
    total_exhibitors: int
    active_exhibitors: int
    new_this_month: int
    total_revenue: float
    total_revenue_k: int


class ExhibitorCreate(RegisterRequest):
    status: UserStatus = UserStatus.ACTIVE


class ExhibitorStatusUpdate(BaseModel):
    status: UserStatus


class ExhibitorMutationResponse(BaseModel):
    message: str
    exhibitor: UserResponse


# ---------------------
# Stats & dashboard
# ---------------------

class GlobalStatsResponse(BaseModel):
    total_booths: int
    available_booths: int
    booked_booths: int
    maintenance_booths: int
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    total_users: int
    active_users: int
    total_revenue: float


class AdminStatsResponse(BaseModel):
    total_booths: int
    booked_booths: int
    available_booths: int
    maintenance_booths: int
    pending_approvals: int
    total_revenue: float


class RevenueTrendPoint(BaseModel):
    month: str
    revenue: float
    bookings: int


class RevenueTrendsResponse(BaseModel):
    trends: list[RevenueTrendPoint]


class ActivityItem(ORMModel):
    id: str
    event_type: str
    title: str
    description: str
    created_at: datetime


class ActivityResponse(BaseModel):
    activities: list[ActivityItem]


# ---------------------
# Payments
# ---------------------

class PaymentQuoteRequest(BaseModel):
    booth_ids: list[str] = Field(min_length=1)


class PaymentQuoteLine(BaseModel):
    booth_id: str
    booth_number: str
    price: float


class PaymentQuoteResponse(BaseModel):
    booths: list[PaymentQuoteLine]
    subtotal: float
    service_fee: float
    tax: float
    total: float


class PaymentProcessRequest(BaseModel):
    amount: float | None = None
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    # Accepted for form compatibility; never stored.
    card_details: dict[str, Any] | None = None
    booking_ids: list[str] = []


class PaymentProcessResponse(BaseModel):
    success: bool = True
    transaction_id: str
    status: str
    message: str


class PaymentRecordRequest(BaseModel):
    transaction_id: str | None = None
    amount: float = Field(gt=0)
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    status: str = "completed"
    booking_ids: list[str] = []


class PaymentResponse(ORMModel):
    id: str
    transaction_id: str
    amount: float
    currency: str
    payment_method: str
    status: str
    booking_ids: list[str] = []
    created_at: datetime


class PaymentRecordResponse(BaseModel):
    message: str
    payment: PaymentResponse


class PaymentListResponse(BaseModel):
    payments: list[PaymentResponse]
