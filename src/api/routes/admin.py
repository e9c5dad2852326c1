from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_db, require_admin
from src.api.schemas.schemas import (
    ActivityItem,
    ActivityResponse,
    AdminBookingListResponse,
    AdminBoothListResponse,
    AdminStatsResponse,
    AutoLayoutResponse,
    BookingResponse,
    BookingStatusResponse,
    BookingStatusUpdate,
    BoothCreate,
    BoothMutationResponse,
    BoothResponse,
    BoothUpdate,
    MessageResponse,
    RevenueTrendPoint,
    RevenueTrendsResponse,
)
from src.application.booking_service import BookingService
from src.application.booth_service import BoothService
from src.application.dashboard_service import DashboardService
from src.infrastructure.db.models import User

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


# ---------------------
# Booths
# ---------------------

@router.get("/booths", response_model=AdminBoothListResponse)
def admin_list_booths(
    event: str | None = None,
    hall: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
):
    booths = BoothService(db).list_for_admin(event=event, hall=hall, status=status_filter)
    return AdminBoothListResponse(booths=[BoothResponse.from_booth(b) for b in booths])


@router.post(
    "/booths",
    response_model=BoothMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def admin_create_booth(request: BoothCreate, db: Session = Depends(get_db)):
    booth = BoothService(db).create_booth(request)
    return BoothMutationResponse(booth=BoothResponse.from_booth(booth))


@router.post("/booths/auto-layout", response_model=AutoLayoutResponse)
def admin_auto_layout(
    event_id: str | None = None,
    location: str | None = None,
    db: Session = Depends(get_db),
):
    updated, booths = BoothService(db).auto_layout(event_id=event_id, location=location)
    return AutoLayoutResponse(
        updated=updated,
        booths=[BoothResponse.from_booth(b) for b in booths],
    )


@router.put("/booths/{booth_id}", response_model=BoothMutationResponse)
def admin_update_booth(
    booth_id: str,
    request: BoothUpdate,
    db: Session = Depends(get_db),
):
    booth = BoothService(db).update_booth(booth_id, request)
    return BoothMutationResponse(booth=BoothResponse.from_booth(booth))


@router.delete("/booths/{booth_id}", response_model=MessageResponse)
def admin_delete_booth(booth_id: str, db: Session = Depends(get_db)):
    BoothService(db).delete_booth(booth_id)
    return MessageResponse(message="Booth deleted successfully")


# ---------------------
# Bookings
# ---------------------

@router.get("/bookings", response_model=AdminBookingListResponse)
def admin_list_bookings(
    status_filter: str | None = Query(default=None, alias="status"),
    event_name: str | None = None,
    sort: str | None = None,
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    bookings = BookingService(db).list_all(
        status=status_filter,
        event_name=event_name,
        sort=sort,
        limit=limit,
    )
    return AdminBookingListResponse(
        bookings=[BookingResponse.from_booking(b) for b in bookings]
    )


@router.patch("/bookings/{booking_id}/status", response_model=BookingStatusResponse)
def admin_update_booking_status(
    booking_id: str,
    request: BookingStatusUpdate,
    db: Session = Depends(get_db),
):
    booking = BookingService(db).update_status(booking_id, request.status)
    return BookingStatusResponse(
        message="Booking status updated successfully",
        booking=BookingResponse.from_booking(booking),
    )


@router.delete("/bookings/{booking_id}", response_model=MessageResponse)
def admin_delete_booking(
    booking_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    BookingService(db).delete_booking(booking_id, admin)
    return MessageResponse(message="Booking deleted successfully")


# ---------------------
# Dashboard
# ---------------------

@router.get("/stats", response_model=AdminStatsResponse)
def admin_stats(db: Session = Depends(get_db)):
    return AdminStatsResponse(**DashboardService(db).admin_stats())


@router.get("/revenue-trends", response_model=RevenueTrendsResponse)
def admin_revenue_trends(
    months: int = Query(default=6, ge=1, le=24),
    db: Session = Depends(get_db),
):
    trends = DashboardService(db).revenue_trends(months)
    return RevenueTrendsResponse(trends=[RevenueTrendPoint(**t) for t in trends])


@router.get("/activity", response_model=ActivityResponse)
def admin_activity(
    limit: int = Query(default=5, ge=1, le=50),
    db: Session = Depends(get_db),
):
    activities = DashboardService(db).recent_activity(limit)
    return ActivityResponse(activities=[ActivityItem.model_validate(a) for a in activities])
