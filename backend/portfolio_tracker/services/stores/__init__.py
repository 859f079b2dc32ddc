# backend/portfolio_tracker/services/stores/__init__.py
"""
Persistence for holdings and snapshot history.

Both stores expose the same two operations, load() and replace_all(),
and receive the SQLAlchemy session in their constructor.

Usage:
    from portfolio_tracker.services.stores import HoldingsStore

    holdings = HoldingsStore(db).load()
"""

from portfolio_tracker.services.stores.holdings import HoldingsStore
from portfolio_tracker.services.stores.snapshots import SnapshotStore
from portfolio_tracker.services.stores.types import HoldingRecord, SnapshotRecord

__all__ = [
    "HoldingsStore",
    "SnapshotStore",
    "HoldingRecord",
    "SnapshotRecord",
]
