# tests/unit/test_state_machine.py

import pytest

from src.domain.state_machine import BookingStateMachine, BookingStatus
from src.domain.exceptions import InvalidStateTransitionError


# ---------------------
# VALID TRANSITIONS
# ---------------------

def test_valid_happy_path():
    assert BookingStateMachine.can_transition(
        BookingStatus.PENDING,
        BookingStatus.CONFIRMED,
    )

    assert BookingStateMachine.can_transition(
        BookingStatus.CONFIRMED,
        BookingStatus.BOOKED,
    )

    assert BookingStateMachine.can_transition(
        BookingStatus.BOOKED,
        BookingStatus.CANCELLED,
    )


def test_admin_can_move_confirmed_back_to_pending():
    assert BookingStateMachine.can_transition(
        BookingStatus.CONFIRMED,
        BookingStatus.PENDING,
    )


def test_booked_cannot_return_to_pending():
    with pytest.raises(InvalidStateTransitionError) as exc_info:
        BookingStateMachine.validate_transition(
            BookingStatus.BOOKED,
            BookingStatus.PENDING,
        )

    assert exc_info.value.allowed == ["cancelled", "confirmed"]
    assert "(allowed: cancelled, confirmed)" in str(exc_info.value)


# ---------------------
# INVALID TRANSITIONS
# ---------------------

def test_terminal_state_cancelled():
    assert BookingStateMachine.is_terminal(BookingStatus.CANCELLED)

    with pytest.raises(InvalidStateTransitionError) as exc_info:
        BookingStateMachine.validate_transition(
            BookingStatus.CANCELLED,
            BookingStatus.CONFIRMED,
        )

    assert "cancelled -> confirmed (allowed: none)" in str(exc_info.value)
    assert exc_info.value.status_code == 409


def test_active_statuses_hold_booth():
    assert BookingStateMachine.is_active(BookingStatus.PENDING)
    assert BookingStateMachine.is_active(BookingStatus.CONFIRMED)
    assert BookingStateMachine.is_active(BookingStatus.BOOKED)
    assert not BookingStateMachine.is_active(BookingStatus.CANCELLED)


def test_invalid_type_guard():
    with pytest.raises(TypeError):
        BookingStateMachine.validate_transition(
            "pending",  # invalid type
            BookingStatus.CONFIRMED,
        )
