# backend/portfolio_tracker/utils/__init__.py
"""Logging setup and correlation ID context helpers."""

from portfolio_tracker.utils.context import (
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    new_correlation_id,
    set_correlation_id,
)
from portfolio_tracker.utils.logging import setup_logging

__all__ = [
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "new_correlation_id",
    "correlation_scope",
]
