"""Authentication service - registration, credential checks, attendance on login."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from recovery_crm.core.security import create_access_token, hash_password, verify_password
from recovery_crm.db.models import User
from recovery_crm.schemas.auth import LoginRequest, RegisterRequest
from recovery_crm.services import attendance_service, user_service
from recovery_crm.utils.normalization import normalize_email


logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username/email or password"


class AuthServiceError(Exception):
    """Base exception for auth service errors."""
    pass


class UserAlreadyExistsError(AuthServiceError):
    """Email or username already registered."""
    pass


class InvalidCredentialsError(AuthServiceError):
    """Unknown identifier or wrong password."""
    pass


def register_user(db: Session, data: RegisterRequest) -> User:
    """
    Create a user with a bcrypt password hash.

    Raises:
        UserAlreadyExistsError: If the email or username is taken
    """
    existing = db.query(User).filter(
        or_(User.email == data.email, User.username == data.username)
    ).first()
    if existing:
        raise UserAlreadyExistsError("User already exists")

    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone.strip(),
        role=data.role.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UserAlreadyExistsError("User already exists")
    db.refresh(user)
    logger.info("Registered user %s with role %s", user.id, user.role)
    return user


def authenticate(db: Session, data: LoginRequest) -> User:
    """
    Resolve a user by username (preferred) or email and check the password.

    Raises:
        InvalidCredentialsError: Same error for unknown user and bad password
    """
    if data.username:
        user = user_service.get_user_by_username(db, data.username.strip())
    else:
        user = user_service.get_user_by_email(db, normalize_email(data.email) or "")

    if not user or not verify_password(data.password, user.password_hash):
        raise InvalidCredentialsError(INVALID_CREDENTIALS)
    if not user.is_active:
        raise InvalidCredentialsError(INVALID_CREDENTIALS)
    return user


def login(db: Session, data: LoginRequest) -> tuple[User, str]:
    """Authenticate, open an attendance session and issue a Bearer token."""
    user = authenticate(db, data)
    attendance_service.open_session(db, user.id)
    db.commit()
    db.refresh(user)
    token = create_access_token(user.id, user.role)
    return user, token
