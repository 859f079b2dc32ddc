# backend/portfolio_tracker/services/snapshots/__init__.py
"""
Daily snapshot package.

Usage:
    from portfolio_tracker.services.snapshots import SnapshotService

    result = SnapshotService(engine).take_snapshot(db)

Architecture:
    snapshots/
    ├── service.py     # SnapshotService, merge_snapshot, clocks
    └── scheduler.py   # DailySnapshotScheduler (APScheduler cron job)
"""

from portfolio_tracker.services.snapshots.scheduler import (
    SNAPSHOT_JOB_ID,
    DailySnapshotScheduler,
)
from portfolio_tracker.services.snapshots.service import (
    SnapshotResult,
    SnapshotService,
    merge_snapshot,
    timezone_clock,
)

__all__ = [
    "SnapshotService",
    "SnapshotResult",
    "merge_snapshot",
    "timezone_clock",
    "DailySnapshotScheduler",
    "SNAPSHOT_JOB_ID",
]
