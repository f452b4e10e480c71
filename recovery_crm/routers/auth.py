"""Authentication router - register, login, logout, current user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_current_user, get_db, get_optional_user
from recovery_crm.core.rate_limit import auth_limit, limiter
from recovery_crm.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    LogoutResponse,
    RegisterRequest,
)
from recovery_crm.schemas.user import UserRead
from recovery_crm.services import attendance_service, auth_service


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=201)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account; the password is stored as a bcrypt hash."""
    try:
        return auth_service.register_user(db, data)
    except auth_service.UserAlreadyExistsError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/login", response_model=LoginResponse)
@limiter.limit(auth_limit)
def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange credentials for a Bearer token.

    Unknown user and wrong password return the same 401.
    """
    try:
        user, token = auth_service.login(db, data)
    except auth_service.InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return LoginResponse(access_token=token, user=UserRead.model_validate(user))


@router.post("/logout", response_model=LogoutResponse)
def logout(
    data: LogoutRequest | None = None,
    current_user=Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Close the caller's open attendance session."""
    user_id = (data.user_id if data else None) or (current_user.id if current_user else None)
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id is required")

    try:
        log = attendance_service.close_session(db, user_id)
    except attendance_service.NoOpenSessionError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return LogoutResponse(
        message="Logout successful",
        login_time=log.login_time,
        logout_time=log.logout_time,
        duration=attendance_service.format_duration(log.login_time, log.logout_time),
    )


@router.get("/me", response_model=UserRead)
def me(current_user=Depends(get_current_user)):
    return current_user
