# backend/portfolio_tracker/main.py
"""
Portfolio Tracker web application.

Wires together:
- logging (configured before anything else logs)
- table creation and the daily snapshot job (lifespan)
- CORS, rate limiting and correlation id middleware
- exception handlers that render every failure as an ErrorDetail body
- the view, holdings, snapshot and health routers

Run with:
    uvicorn portfolio_tracker.main:app --app-dir backend
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_tracker.config import settings
from portfolio_tracker.database import init_db
from portfolio_tracker.dependencies import get_snapshot_scheduler
from portfolio_tracker.middleware import (
    CorrelationIdMiddleware,
    SlowAPIMiddleware,
    limiter,
    rate_limit_exceeded_handler,
)
from portfolio_tracker.routers import (
    health_router,
    holdings_router,
    snapshots_router,
    views_router,
)
from portfolio_tracker.schemas.errors import ErrorDetail, ValidationErrorDetail
from portfolio_tracker.services.exceptions import (
    InvalidUploadError,
    ServiceError,
    StoreError,
    ValidationError,
)
from portfolio_tracker.utils import setup_logging

setup_logging()

logger = logging.getLogger(__name__)

# Error type reported for HTTPExceptions raised by FastAPI or the routers
HTTP_ERROR_TYPES = {
    400: "BadRequestError",
    404: "NotFoundError",
    405: "MethodNotAllowedError",
    413: "PayloadTooLargeError",
    429: "RateLimitError",
    503: "ServiceUnavailableError",
}


def _error_response(
        status_code: int,
        error: str,
        message: str,
        details: dict | None = None,
        headers: dict | None = None,
) -> JSONResponse:
    body = ErrorDetail(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()

    scheduler = get_snapshot_scheduler()
    if settings.scheduler_enabled:
        scheduler.start()
    else:
        logger.info("Snapshot scheduler disabled")

    try:
        yield
    finally:
        scheduler.shutdown()


# =============================================================================
# APPLICATION
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Equity portfolio tracker with live quotes and daily snapshots",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter

# Last added runs first: correlation id wraps rate limiting wraps CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Bad input, including an unusable upload (400). Nothing was written."""
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")

    details = {}
    if exc.field:
        details["field"] = exc.field
    if isinstance(exc, InvalidUploadError) and exc.filename:
        details["filename"] = exc.filename

    return _error_response(400, type(exc).__name__, str(exc), details or None)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Persistence failure (500). The transaction was rolled back."""
    logger.error(f"Store error on {request.url.path}: {exc}")
    return _error_response(
        500,
        "StoreError",
        f"Could not {exc.operation.replace('_', ' ')} {exc.store}",
        {"store": exc.store, "operation": exc.operation},
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.error(f"Service error on {request.url.path}: {exc}")
    return _error_response(500, "ServiceError", str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Replace FastAPI's {"detail": ...} body with ErrorDetail."""
    return _error_response(
        exc.status_code,
        HTTP_ERROR_TYPES.get(exc.status_code, "HTTPError"),
        str(exc.detail) if exc.detail else "An error occurred",
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=422, content=ValidationErrorDetail(details=errors).model_dump())


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(views_router)
app.include_router(holdings_router)
app.include_router(snapshots_router)
app.include_router(health_router)
