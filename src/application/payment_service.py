import logging
import secrets
import string

from sqlalchemy.orm import Session

from src.domain.enums import BoothStatus
from src.domain.exceptions import (
    BoothUnavailableError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from src.infrastructure.db.models import Payment, User
from src.infrastructure.repositories.booking_repository import BookingRepository
from src.infrastructure.repositories.booth_repository import BoothRepository
from src.infrastructure.repositories.payment_repository import PaymentRepository

logger = logging.getLogger(__name__)

SERVICE_FEE_RATE = 0.02
TAX_RATE = 0.08
TRANSACTION_PREFIX = "TXN_"
_TRANSACTION_ALPHABET = string.ascii_uppercase + string.digits
_TRANSACTION_ATTEMPTS = 5


def calculate_totals(subtotal: float) -> dict[str, float]:
    service_fee = subtotal * SERVICE_FEE_RATE
    tax = (subtotal + service_fee) * TAX_RATE
    total = subtotal + service_fee + tax
    return {
        "subtotal": round(subtotal, 2),
        "service_fee": round(service_fee, 2),
        "tax": round(tax, 2),
        "total": round(total, 2),
    }


def generate_transaction_id() -> str:
    suffix = "".join(secrets.choice(_TRANSACTION_ALPHABET) for _ in range(9))
    return f"{TRANSACTION_PREFIX}{suffix}"


class PaymentService:
    """Stubbed checkout: quotes and records payments, never charges."""

    def __init__(self, db: Session):
        self.db = db
        self.booth_repository = BoothRepository(db)
        self.booking_repository = BookingRepository(db)
        self.payment_repository = PaymentRepository(db)

    def quote(self, booth_ids: list[str]) -> dict:
        lines = []
        seen = set()
        for booth_id in booth_ids:
            booth = self.booth_repository.get_by_identifier(booth_id)
            if not booth:
                raise NotFoundError(f"Booth {booth_id} not found")
            # An id and a booth number may name the same booth.
            if booth.id in seen:
                continue
            seen.add(booth.id)
            if booth.status != BoothStatus.AVAILABLE:
                raise BoothUnavailableError(f"Booth {booth.booth_number} is not available")
            lines.append(
                {"booth_id": booth.id, "booth_number": booth.booth_number, "price": booth.price}
            )

        quote = calculate_totals(sum(line["price"] for line in lines))
        quote["booths"] = lines
        return quote

    def process(self, user: User, request) -> Payment:
        if not request.amount or request.amount <= 0:
            raise ValidationError("Invalid amount")

        self._check_bookings(user, request.booking_ids)
        payment = self.payment_repository.create(
            transaction_id=self._new_transaction_id(),
            user_id=user.id,
            amount=request.amount,
            payment_method=request.payment_method.value,
            status="completed",
            booking_ids=list(request.booking_ids),
        )
        self.db.flush()

        logger.info(
            "Payment processed. transaction_id=%s user_id=%s amount=%.2f",
            payment.transaction_id,
            user.id,
            payment.amount,
        )
        return payment

    def record(self, user: User, request) -> Payment:
        self._check_bookings(user, request.booking_ids)

        transaction_id = request.transaction_id or self._new_transaction_id()
        if self.payment_repository.get_by_transaction_id(transaction_id):
            raise ValidationError("Payment record already exists for this transaction")

        payment = self.payment_repository.create(
            transaction_id=transaction_id,
            user_id=user.id,
            amount=request.amount,
            payment_method=request.payment_method.value,
            status=request.status,
            booking_ids=list(request.booking_ids),
        )
        self.db.flush()
        return payment

    def list_payments(self, user: User) -> list[Payment]:
        return self.payment_repository.list_for_user(user.id)

    def _check_bookings(self, user: User, booking_ids: list[str]) -> None:
        for booking_id in booking_ids:
            booking = self.booking_repository.get_by_id(booking_id)
            if not booking:
                raise NotFoundError("Booking not found")
            if booking.user_id != user.id:
                raise PermissionDeniedError("Can only pay for your own bookings")

    def _new_transaction_id(self) -> str:
        for _ in range(_TRANSACTION_ATTEMPTS):
            candidate = generate_transaction_id()
            if not self.payment_repository.get_by_transaction_id(candidate):
                return candidate
        raise RuntimeError("Could not allocate a unique transaction id")
