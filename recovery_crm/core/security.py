"""Security utilities for password hashing and JWT access tokens."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from recovery_crm.core.config import settings


JWT_ALGORITHM = "HS256"
BCRYPT_ROUNDS = 10


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# =============================================================================
# Access Token (Bearer JWT)
# =============================================================================

def create_access_token(user_id: UUID, role: str) -> str:
    """
    Create signed access JWT.

    Payload carries the user id and role; expiry comes from JWT_EXPIRES_HOURS.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify access JWT.

    Raises:
        jwt.InvalidTokenError: If token is malformed, tampered or expired
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[JWT_ALGORITHM])
