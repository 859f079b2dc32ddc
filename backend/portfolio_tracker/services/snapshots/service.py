# backend/portfolio_tracker/services/snapshots/service.py
"""
Snapshot Service - records each account's total value once per day.

take_snapshot():
1. Load holdings; with none stored, do nothing (history is not written)
2. Value every account
3. Load the history
4. Drop any snapshot on the same date (the new one wins)
5. Append, sort by date, keep the newest SNAPSHOT_RETENTION entries
6. Replace the stored history

"Today" comes from an injected clock so tests can pin the date; the
default clock reads the calendar date in the configured timezone.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

import pytz
from sqlalchemy.orm import Session

from portfolio_tracker.services.constants import SNAPSHOT_RETENTION
from portfolio_tracker.services.stores import HoldingsStore, SnapshotRecord, SnapshotStore
from portfolio_tracker.services.valuation import ValuationEngine

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


def timezone_clock(timezone_name: str) -> Clock:
    """Clock returning today's date in the named timezone (e.g. "America/Chicago")."""
    tz = pytz.timezone(timezone_name)

    def today() -> date:
        return datetime.now(tz).date()

    return today


@dataclass(frozen=True)
class SnapshotResult:
    """
    Outcome of a take_snapshot() call.

    Attributes:
        taken: False when there were no holdings (nothing written)
        snapshot_date: Date the snapshot was (or would have been) taken for
        snapshot: The stored snapshot (None if not taken)
        history_size: Snapshots in the history after the call
        replaced_existing: True if a snapshot for the same date was overwritten
        evicted: Dates dropped to stay within retention
    """

    taken: bool
    snapshot_date: date
    snapshot: SnapshotRecord | None
    history_size: int
    replaced_existing: bool = False
    evicted: tuple[date, ...] = ()


def merge_snapshot(
        history: list[SnapshotRecord],
        snapshot: SnapshotRecord,
        retention: int = SNAPSHOT_RETENTION,
) -> list[SnapshotRecord]:
    """
    Insert or replace a snapshot by date and apply retention.

    Returns:
        New history sorted by date ascending, at most `retention` entries
    """
    merged = [s for s in history if s.date != snapshot.date]
    merged.append(snapshot)
    merged.sort(key=lambda s: s.date)
    return merged[-retention:]


class SnapshotService:
    """
    Takes and reads daily snapshots.

    Attributes:
        _engine: Valuation engine used for account totals
        _clock: Returns "today"
        _retention: Maximum snapshots kept
    """

    def __init__(
            self,
            engine: ValuationEngine,
            clock: Clock | None = None,
            retention: int = SNAPSHOT_RETENTION,
    ) -> None:
        if retention < 1:
            raise ValueError(f"retention must be >= 1, got {retention}")
        self._engine = engine
        self._clock = clock or date.today
        self._retention = retention

    def today(self) -> date:
        return self._clock()

    def get_history(self, db: Session) -> list[SnapshotRecord]:
        """Stored snapshots, oldest first."""
        return SnapshotStore(db).load()

    def take_snapshot(self, db: Session, snapshot_date: date | None = None) -> SnapshotResult:
        """
        Capture today's account totals into the history.

        Args:
            db: Database session
            snapshot_date: Override the clock (e.g. backfilling); defaults to today

        Raises:
            StoreError: Loading or persisting failed (history unchanged)
        """
        snapshot_date = snapshot_date or self.today()
        snapshot_store = SnapshotStore(db)

        holdings = HoldingsStore(db).load()
        if not holdings:
            logger.info(f"No holdings stored, skipping snapshot for {snapshot_date}")
            return SnapshotResult(
                taken=False,
                snapshot_date=snapshot_date,
                snapshot=None,
                history_size=len(snapshot_store.load()),
            )

        valuations = self._engine.compute_account_valuations(holdings)
        snapshot = SnapshotRecord(
            date=snapshot_date,
            accounts={v.account: v.total_value for v in valuations},
        )

        history = snapshot_store.load()
        replaced = any(s.date == snapshot_date for s in history)
        merged = merge_snapshot(history, snapshot, self._retention)
        kept_dates = {s.date for s in merged}
        evicted = tuple(s.date for s in history if s.date not in kept_dates)

        snapshot_store.replace_all(merged)

        logger.info(
            f"Snapshot taken for {snapshot_date}: {len(snapshot.accounts)} accounts, "
            f"total={snapshot.total_value}"
            + (" (replaced same-day snapshot)" if replaced else "")
            + (f", evicted {len(evicted)}" if evicted else "")
        )
        return SnapshotResult(
            taken=True,
            snapshot_date=snapshot_date,
            snapshot=snapshot,
            history_size=len(merged),
            replaced_existing=replaced,
            evicted=evicted,
        )
