# backend/portfolio_tracker/routers/__init__.py
"""
API routers for the Portfolio Tracker.

- views: GET / (accounts, stocks and history views)
- holdings: POST /upload, POST /clear
- snapshots: POST /snapshot
- health: GET /health, GET /health/live
"""

from portfolio_tracker.routers.health import router as health_router
from portfolio_tracker.routers.holdings import router as holdings_router
from portfolio_tracker.routers.snapshots import router as snapshots_router
from portfolio_tracker.routers.views import router as views_router

__all__ = [
    "health_router",
    "holdings_router",
    "snapshots_router",
    "views_router",
]
