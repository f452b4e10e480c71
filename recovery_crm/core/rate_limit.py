"""Per-client request limits (slowapi), keyed by remote address."""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from recovery_crm.core.config import settings


def _testing() -> bool:
    return os.getenv("TESTING", "").lower() in ("1", "true", "yes")


def _default_limits() -> list[str]:
    if settings.RATE_LIMIT_API <= 0:
        return []
    return [f"{settings.RATE_LIMIT_API}/minute"]


# memory:// is per process; point this at redis:// when running several workers
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", "memory://"),
    default_limits=_default_limits(),
    enabled=not _testing(),
)


def auth_limit() -> str:
    """Limit string for credential endpoints."""
    return f"{settings.RATE_LIMIT_AUTH}/minute"
