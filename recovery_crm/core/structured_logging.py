"""Structured logging helpers (no personal data in log context)."""

import logging
from typing import Any

from recovery_crm.core.config import settings


def configure_logging() -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_log_context(
    *,
    user_id: str | None = None,
    role: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
    status_code: int | None = None,
    duration_ms: float | None = None,
) -> dict[str, Any]:
    """Return a log context dict with only the fields that are set."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if role:
        context["role"] = role
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    if status_code is not None:
        context["status_code"] = status_code
    if duration_ms is not None:
        context["duration_ms"] = round(duration_ms, 1)
    return context
