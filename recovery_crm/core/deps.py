"""FastAPI dependencies for database access and Bearer authentication."""

from typing import Generator
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from recovery_crm.core.security import decode_access_token
from recovery_crm.db.session import SessionLocal


AUTH_HEADER = "Authorization"
BEARER_PREFIX = "bearer "


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get(AUTH_HEADER, "")
    if header.lower().startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX):].strip()
        return token or None
    return None


def get_optional_user(request: Request, db: Session = Depends(get_db)):
    """
    Resolve the user behind a Bearer token, or None.

    A missing, malformed or expired token yields None rather than an error.
    """
    from recovery_crm.db.models import User

    token = _bearer_token(request)
    if not token:
        return None
    try:
        payload = decode_access_token(token)
        user_id = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        return None

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        return None
    return user


def get_current_user(request: Request, db: Session = Depends(get_db)):
    """
    Get the authenticated user from the Bearer token.

    Raises:
        HTTPException 401: Authentication failed
    """
    from recovery_crm.db.models import User

    token = _bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_access_token(token)
        user_id = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account disabled")

    return user


def parse_form(model_cls, **values):
    """
    Build a request schema from multipart form fields.

    Blank fields are treated as missing. Validation failures become the
    same 400 that JSON bodies get.
    """
    from pydantic import ValidationError

    from recovery_crm.schemas.common import first_error_message

    cleaned = {k: v for k, v in values.items() if v is not None and v != ""}
    try:
        return model_cls(**cleaned)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=first_error_message(exc.errors()))


def note_author(user) -> str | None:
    """Username recorded on case notes when a caller is known."""
    return user.username if user else None
