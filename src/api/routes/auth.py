from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_db
from src.api.schemas.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    RegisterRequest,
    UserResponse,
    UserSummary,
)
from src.application.auth_service import AuthService, issue_token
from src.infrastructure.db.models import User

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    user = AuthService(db).register(request)
    return AuthResponse(
        message="User registered successfully",
        token=issue_token(user),
        user=UserSummary.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = AuthService(db).login(request.email, request.password)
    return AuthResponse(
        message="Login successful",
        token=issue_token(user),
        user=UserSummary.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.put("/me", response_model=ProfileUpdateResponse)
def update_me(
    request: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = AuthService(db).update_profile(user, request)
    return ProfileUpdateResponse(user=UserResponse.model_validate(updated))


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    request: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    AuthService(db).change_password(user, request.current_password, request.new_password)
    return MessageResponse(message="Password updated successfully")
