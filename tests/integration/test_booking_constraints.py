import pytest
from sqlalchemy.exc import IntegrityError

from src.domain.state_machine import BookingStatus
from src.infrastructure.db.models import Booking


def _booking(booth, user, status):
    return Booking(booth_id=booth.id, user_id=user.id, total_price=100, status=status)


def test_second_active_booking_on_booth_violates_index(db, booth, exhibitor, make_user):
    rival = make_user("rival@example.com")
    db.add(_booking(booth, exhibitor, BookingStatus.CONFIRMED))
    db.commit()

    db.add(_booking(booth, rival, BookingStatus.PENDING))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    assert db.query(Booking).count() == 1


def test_cancelled_bookings_do_not_hold_booth(db, booth, exhibitor):
    db.add(_booking(booth, exhibitor, BookingStatus.CANCELLED))
    db.add(_booking(booth, exhibitor, BookingStatus.CANCELLED))
    db.add(_booking(booth, exhibitor, BookingStatus.BOOKED))
    db.commit()

    assert db.query(Booking).count() == 3
