# backend/portfolio_tracker/middleware/rate_limit.py
"""
Rate limiting for the HTTP surface, using slowapi.

Every page view and snapshot fans out to one quote request per held
symbol, so per-client limits also bound the load we put on the quote
source. Limits live in services/constants.py.

Key by: Client IP address (forwarding headers only from trusted proxies)
Storage: In-memory (single-instance deployment)

Usage:
    from portfolio_tracker.middleware.rate_limit import limiter, RATE_LIMIT_WRITE

    @router.post("/clear")
    @limiter.limit(RATE_LIMIT_WRITE)
    def clear_holdings(request: Request):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from portfolio_tracker.config import settings
from portfolio_tracker.schemas.errors import ErrorDetail
from portfolio_tracker.services.constants import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_SNAPSHOT,
    RATE_LIMIT_UPLOAD,
    RATE_LIMIT_WRITE,
)

logger = logging.getLogger(__name__)

# Seconds suggested to the client in Retry-After
DEFAULT_RETRY_AFTER = 60


def _is_trusted_proxy(request: Request) -> bool:
    """True if forwarding headers on this request may be believed."""
    if settings.trust_proxy_headers:
        return True
    return get_remote_address(request) in settings.trusted_proxy_ips


def _get_client_ip(request: Request) -> str:
    """
    Extract the client IP address used as the rate limit key.

    X-Forwarded-For / X-Real-IP are only honored from trusted proxies,
    otherwise any client could pick its own key.
    """
    if _is_trusted_proxy(request):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First entry is the original client
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    return get_remote_address(request)


limiter = Limiter(
    key_func=_get_client_ip,
    default_limits=[RATE_LIMIT_DEFAULT],
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 in the standard error format, with a Retry-After header."""
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"

    logger.warning(f"Rate limit exceeded for {_get_client_ip(request)}: {limit_info}")

    return JSONResponse(
        status_code=429,
        content=ErrorDetail(
            error="RateLimitError",
            message=f"Too many requests. {limit_info}",
            details={"retry_after": DEFAULT_RETRY_AFTER},
        ).model_dump(),
        headers={"Retry-After": str(DEFAULT_RETRY_AFTER)},
    )


__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_SNAPSHOT",
    "RATE_LIMIT_UPLOAD",
    "RATE_LIMIT_HEALTH",
]
