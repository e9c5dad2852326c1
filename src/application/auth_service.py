import logging

from sqlalchemy.orm import Session

from src.domain.enums import UserRole, UserStatus
from src.domain.exceptions import AuthenticationError, NotFoundError, ValidationError
from src.infrastructure.db.models import User
from src.infrastructure.repositories.user_repository import UserRepository
from src.infrastructure.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "company_name",
    "industry",
    "company_size",
    "company_address",
)


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.email, user.role.value)


class AuthService:

    def __init__(self, db: Session):
        self.db = db
        self.user_repository = UserRepository(db)

    def register(
        self,
        request,
        role: UserRole = UserRole.EXHIBITOR,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> User:
        email = request.email.strip().lower()
        if self.user_repository.get_by_email(email):
            raise ValidationError("User already exists with this email")

        user = self.user_repository.create(
            first_name=request.first_name,
            last_name=request.last_name,
            email=email,
            phone=request.phone,
            company_name=request.company_name,
            industry=request.industry,
            company_size=request.company_size,
            company_address=request.company_address,
            password_hash=hash_password(request.password),
            role=role,
            status=status,
        )
        self.db.flush()

        logger.info("User registered. user_id=%s role=%s", user.id, role.value)
        return user

    def login(self, email: str, password: str) -> User:
        user = self.user_repository.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid credentials")
        if user.status != UserStatus.ACTIVE:
            raise ValidationError("Account is suspended")
        return user

    def get_user(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user: User, request) -> User:
        provided = request.model_fields_set

        if "email" in provided and request.email:
            email = request.email.strip().lower()
            owner = self.user_repository.get_by_email(email)
            if owner and owner.id != user.id:
                raise ValidationError("Email is already in use by another account")
            user.email = email

        for field in PROFILE_FIELDS:
            if field == "email" or field not in provided:
                continue
            setattr(user, field, getattr(request, field))

        self.db.flush()
        return user

    def change_password(self, user: User, current_password: str | None, new_password: str | None) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("New password must be at least 8 characters long")
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        self.db.flush()
        logger.info("Password changed. user_id=%s", user.id)
