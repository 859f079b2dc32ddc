# backend/portfolio_tracker/middleware/__init__.py
"""
Middleware components for the Portfolio Tracker.

- Correlation ID tracking for request tracing
- Rate limiting for API protection

Usage:
    from portfolio_tracker.middleware import CorrelationIdMiddleware, limiter

    app.add_middleware(CorrelationIdMiddleware)
    app.state.limiter = limiter
"""

from portfolio_tracker.middleware.correlation import CorrelationIdMiddleware
from portfolio_tracker.middleware.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
    RATE_LIMIT_SNAPSHOT,
    RATE_LIMIT_UPLOAD,
    RATE_LIMIT_HEALTH,
)

__all__ = [
    "CorrelationIdMiddleware",
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_SNAPSHOT",
    "RATE_LIMIT_UPLOAD",
    "RATE_LIMIT_HEALTH",
]
