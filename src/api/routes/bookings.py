from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_db
from src.api.schemas.schemas import (
    BookingCreate,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingStatusResponse,
    BookingUpdate,
    MessageResponse,
)
from src.application.booking_service import BookingService
from src.infrastructure.db.models import User

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=BookingListResponse)
def list_my_bookings(
    status_filter: str | None = Query(default=None, alias="status"),
    event_name: str | None = None,
    sort: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    bookings = BookingService(db).list_for_user(
        user,
        status=status_filter,
        event_name=event_name,
        sort=sort,
    )
    return BookingListResponse(bookings=[BookingResponse.from_booking(b) for b in bookings])


@router.get("/{booking_id}", response_model=BookingEnvelope)
def get_booking(
    booking_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    booking = BookingService(db).get_booking(booking_id, user)
    return BookingEnvelope(booking=BookingResponse.from_booking(booking))


@router.post(
    "",
    response_model=BookingEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_booking(
    request: BookingCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    booking = BookingService(db).create_booking(user, request)
    return BookingEnvelope(booking=BookingResponse.from_booking(booking))


@router.put("/{booking_id}", response_model=BookingEnvelope)
def update_booking(
    booking_id: str,
    request: BookingUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    booking = BookingService(db).update_details(booking_id, user, request)
    return BookingEnvelope(booking=BookingResponse.from_booking(booking))


@router.patch("/{booking_id}/cancel", response_model=BookingStatusResponse)
def cancel_booking(
    booking_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    booking = BookingService(db).cancel_booking(booking_id, user)
    return BookingStatusResponse(
        message="Booking cancelled successfully",
        booking=BookingResponse.from_booking(booking),
    )


@router.delete("/{booking_id}", response_model=MessageResponse)
def delete_booking(
    booking_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    BookingService(db).delete_booking(booking_id, user)
    return MessageResponse(message="Booking deleted successfully")
