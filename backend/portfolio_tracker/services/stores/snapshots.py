# backend/portfolio_tracker/services/stores/snapshots.py
"""
Snapshot store: the daily history of per-account totals.

Like the holdings store, the history is replaced wholesale in one
transaction. Retention and same-date replacement are decided by the
snapshot service before calling replace_all().
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from portfolio_tracker.models import Snapshot, SnapshotAccountValue
from portfolio_tracker.services.exceptions import StoreError
from portfolio_tracker.services.stores.types import SnapshotRecord

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Repository for the snapshots and snapshot_account_values tables."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def load(self) -> list[SnapshotRecord]:
        """Return the snapshot history ordered by date ascending."""
        try:
            rows = self.db.scalars(
                select(Snapshot)
                .options(selectinload(Snapshot.account_values))
                .order_by(Snapshot.snapshot_date)
            ).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load snapshots: {e}")
            raise StoreError("snapshots", "load", str(e)) from e

        return [
            SnapshotRecord(
                date=row.snapshot_date,
                accounts={v.account: v.total_value for v in row.account_values},
            )
            for row in rows
        ]

    def replace_all(self, snapshots: list[SnapshotRecord]) -> int:
        """
        Atomically replace the snapshot history.

        Returns:
            Number of snapshots stored

        Raises:
            StoreError: The write failed; the previous history is still stored
        """
        try:
            # Children first: bulk deletes bypass ORM cascades
            self.db.execute(delete(SnapshotAccountValue))
            self.db.execute(delete(Snapshot))
            for record in snapshots:
                self.db.add(
                    Snapshot(
                        snapshot_date=record.date,
                        account_values=[
                            SnapshotAccountValue(account=account, total_value=value)
                            for account, value in record.accounts.items()
                        ],
                    )
                )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Snapshot replace failed, rolled back: {e}", exc_info=True)
            raise StoreError("snapshots", "replace_all", str(e)) from e

        logger.info(f"Stored {len(snapshots)} snapshots")
        return len(snapshots)
