# backend/portfolio_tracker/utils/context.py
"""
Correlation ID storage for log tracing.

HTTP requests get their ID from CorrelationIdMiddleware; background
snapshot runs open their own scope with correlation_scope(). Stored in a
contextvar so each request task and each scheduler thread sees its own
value.

Usage:
    from portfolio_tracker.utils.context import correlation_scope

    with correlation_scope(new_correlation_id("snapshot-job")):
        run_job()
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the active correlation ID, or None outside any request or job."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


def new_correlation_id(prefix: str | None = None) -> str:
    """Generate a correlation ID, optionally prefixed (e.g. "snapshot-job-<uuid>")."""
    value = str(uuid.uuid4())
    return f"{prefix}-{value}" if prefix else value


@contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Set the correlation ID for the duration of the block, then restore the previous one."""
    token = _correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id_var.reset(token)
