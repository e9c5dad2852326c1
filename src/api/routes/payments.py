from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_db
from src.api.schemas.schemas import (
    PaymentListResponse,
    PaymentProcessRequest,
    PaymentProcessResponse,
    PaymentQuoteRequest,
    PaymentQuoteResponse,
    PaymentRecordRequest,
    PaymentRecordResponse,
    PaymentResponse,
)
from src.application.payment_service import PaymentService
from src.infrastructure.db.models import User

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/quote", response_model=PaymentQuoteResponse)
def quote_payment(
    request: PaymentQuoteRequest,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return PaymentQuoteResponse(**PaymentService(db).quote(request.booth_ids))


@router.post("/process", response_model=PaymentProcessResponse)
def process_payment(
    request: PaymentProcessRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    payment = PaymentService(db).process(user, request)
    return PaymentProcessResponse(
        transaction_id=payment.transaction_id,
        status=payment.status,
        message="Payment processed successfully",
    )


@router.post(
    "",
    response_model=PaymentRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_payment(
    request: PaymentRecordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    payment = PaymentService(db).record(user, request)
    return PaymentRecordResponse(
        message="Payment record created successfully",
        payment=PaymentResponse.model_validate(payment),
    )


@router.get("", response_model=PaymentListResponse)
def list_payments(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    payments = PaymentService(db).list_payments(user)
    return PaymentListResponse(payments=[PaymentResponse.model_validate(p) for p in payments])
