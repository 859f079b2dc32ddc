# backend/portfolio_tracker/routers/health.py
"""
Health check endpoints.

- GET /health - database connectivity (503 when unreachable) plus
  scheduler and quote provider status
- GET /health/live - process liveness, no dependency checks
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio_tracker.config import settings
from portfolio_tracker.database import get_db, pool_status
from portfolio_tracker.dependencies import get_quote_provider, get_snapshot_scheduler
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_HEALTH, limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Comprehensive health check endpoint.

    **Response Status Codes:**
    - 200: Database reachable (scheduler/provider details are informational)
    - 503: Database unreachable
    """
    checks = {}
    overall_status = "healthy"

    # Check 1: Database (CRITICAL)
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy", "critical": True}
        pool_info = pool_status()
        if pool_info:
            checks["database"]["pool"] = pool_info
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = {"status": "unhealthy", "critical": True, "error": str(e)}
        overall_status = "unhealthy"

    # Check 2: Snapshot scheduler - NON-CRITICAL
    scheduler_running = get_snapshot_scheduler().running
    if not settings.scheduler_enabled:
        scheduler_status = "disabled"
    elif scheduler_running:
        scheduler_status = "healthy"
    else:
        scheduler_status = "stopped"
        if overall_status == "healthy":
            overall_status = "degraded"
    checks["scheduler"] = {
        "status": scheduler_status,
        "critical": False,
        "schedule": settings.snapshot_schedule,
    }

    # Check 3: Quote provider (configuration only, no outbound call)
    checks["quote_provider"] = {
        "status": "configured",
        "critical": False,
        "provider": get_quote_provider().name,
    }

    response_data = {"status": overall_status, "checks": checks}

    if overall_status == "unhealthy":
        return JSONResponse(status_code=503, content=response_data)
    return response_data


@router.get("/live")
@limiter.limit(RATE_LIMIT_HEALTH)
def liveness_check(request: Request):
    """
    Liveness probe. Returns 200 whenever the process is serving requests.
    """
    return {"status": "alive"}
