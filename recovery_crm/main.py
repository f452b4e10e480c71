"""FastAPI application entry point."""
import logging
import os
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text

from recovery_crm.core.config import settings
from recovery_crm.core.structured_logging import build_log_context, configure_logging
from recovery_crm.db.session import engine
from recovery_crm.schemas.common import first_error_message

configure_logging()
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV not in ("dev", "test"):
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,  # Customer records carry PAN/Aadhaar
    )
    logger.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from recovery_crm.core.rate_limit import limiter

# ============================================================================
# FastAPI App
# ============================================================================

SHOW_DOCS = settings.ENV in ("dev", "test")

app = FastAPI(
    title="Recovery CRM API",
    description="Loan recovery case management API",
    version=settings.VERSION,
    docs_url="/docs" if SHOW_DOCS else None,
    redoc_url="/redoc" if SHOW_DOCS else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Bearer tokens only, so no credentialed (cookie) CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Attach a request id and log one line per request."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    route = request.scope.get("route")
    logger.info(
        "request_completed",
        extra=build_log_context(
            request_id=request_id,
            route=getattr(route, "path", request.url.path),
            method=request.method,
            status_code=response.status_code,
            duration_ms=(time.perf_counter() - started) * 1000,
        ),
    )
    return response


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Validation failures are plain 400s with a readable first message."""
    errors = exc.errors()
    return JSONResponse(
        status_code=400,
        content={
            "detail": first_error_message(errors),
            "errors": [
                {"loc": list(e.get("loc", ())), "msg": str(e.get("msg", "")), "type": e.get("type")}
                for e in errors
            ],
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ============================================================================
# Routers
# ============================================================================

from recovery_crm.routers import (
    attendance,
    auth,
    call_logs,
    cases,
    customers,
    dashboard,
    expenses,
    field_data,
    followups,
    offers,
    payments,
    referrals,
    requests,
    users,
)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])

# Case lifecycle
app.include_router(customers.router, prefix="/api/customers", tags=["customers"])
app.include_router(cases.router, prefix="/api/cases", tags=["cases"])
app.include_router(offers.router, prefix="/api/offers", tags=["offers"])
app.include_router(requests.router, prefix="/api/requests", tags=["requests"])
app.include_router(payments.router, prefix="/api/payments", tags=["payments"])

# Telecalling
app.include_router(followups.router, prefix="/api/followups", tags=["followups"])
app.include_router(call_logs.router, prefix="/api/calllogs", tags=["call-logs"])

# Field work and back office
app.include_router(field_data.router, prefix="/api/field-data", tags=["field-data"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["expenses"])
app.include_router(referrals.router, prefix="/api/referrals", tags=["referrals"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["attendance"])

# Dashboards (mixed prefixes: /api/dashboard, /api/admin, /api/agent, /api/marketing)
app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])

# Uploaded documents
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.upload_url_prefix, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health", tags=["health"])
def health_check():
    """Liveness plus a round trip to the database."""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
