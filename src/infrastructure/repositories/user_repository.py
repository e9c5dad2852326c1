# src/infrastructure/repositories/user_repository.py

from datetime import datetime

from sqlalchemy.orm import Session
from sqlalchemy import func, select

from src.domain.enums import UserRole, UserStatus
from src.infrastructure.db.models import User


class UserRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def list_users(
        self,
        role: UserRole | None = None,
        status: UserStatus | None = None,
        industry: str | None = None,
    ) -> list[User]:
        stmt = select(User)
        if role:
            stmt = stmt.where(User.role == role)
        if status:
            stmt = stmt.where(User.status == status)
        if industry:
            stmt = stmt.where(User.industry == industry)
        stmt = stmt.order_by(User.first_name, User.last_name, User.email)
        return list(self.db.execute(stmt).scalars().all())

    def create(self, **fields) -> User:
        user = User(**fields)
        self.db.add(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)

    def count(
        self,
        role: UserRole | None = None,
        status: UserStatus | None = None,
        registered_since: datetime | None = None,
    ) -> int:
        stmt = select(func.count(User.id))
        if role:
            stmt = stmt.where(User.role == role)
        if status:
            stmt = stmt.where(User.status == status)
        if registered_since:
            stmt = stmt.where(User.registration_date >= registered_since)
        return self.db.execute(stmt).scalar_one()
