# src/infrastructure/repositories/payment_repository.py

from sqlalchemy.orm import Session
from sqlalchemy import select

from src.infrastructure.db.models import Payment


class PaymentRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        stmt = select(Payment).where(Payment.transaction_id == transaction_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, **fields) -> Payment:
        payment = Payment(**fields)
        self.db.add(payment)
        return payment

    def list_for_user(self, user_id: str) -> list[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())
