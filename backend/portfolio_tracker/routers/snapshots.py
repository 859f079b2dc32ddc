# backend/portfolio_tracker/routers/snapshots.py
"""
Manual snapshot trigger.

POST /snapshot runs the same procedure as the daily 17:00 job,
synchronously, in the request's database session.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_snapshot_service
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_SNAPSHOT, limiter
from portfolio_tracker.schemas.snapshots import SnapshotResponse
from portfolio_tracker.services.snapshots import SnapshotResult, SnapshotService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Snapshots"])


def _map_snapshot_result(result: SnapshotResult) -> SnapshotResponse:
    """Map internal SnapshotResult to Pydantic schema."""
    snapshot = result.snapshot
    return SnapshotResponse(
        taken=result.taken,
        date=result.snapshot_date,
        accounts=snapshot.accounts if snapshot else {},
        total_value=snapshot.total_value if snapshot else None,
        history_size=result.history_size,
        replaced_existing=result.replaced_existing,
        evicted=list(result.evicted),
    )


@router.post(
    "/snapshot",
    response_model=SnapshotResponse,
    summary="Take today's snapshot now",
)
@limiter.limit(RATE_LIMIT_SNAPSHOT)
def take_snapshot(
        request: Request,
        db: Session = Depends(get_db),
        snapshot_service: SnapshotService = Depends(get_snapshot_service),
) -> SnapshotResponse:
    """
    Value every account and record today's totals in the history.

    - A snapshot already taken today is replaced
    - Only the newest 90 dates are kept
    - With no holdings stored nothing is written (`taken: false`)
    """
    result = snapshot_service.take_snapshot(db)
    return _map_snapshot_result(result)
