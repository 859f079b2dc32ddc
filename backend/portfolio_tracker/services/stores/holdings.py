# backend/portfolio_tracker/services/stores/holdings.py
"""
Holdings store: the current uploaded set of positions.

The set is only ever replaced wholesale. replace_all() deletes every
stored row and inserts the new ones in a single transaction, so readers
see either the previous set or the new one.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio_tracker.models import Holding
from portfolio_tracker.services.exceptions import StoreError
from portfolio_tracker.services.stores.types import HoldingRecord

logger = logging.getLogger(__name__)


class HoldingsStore:
    """Repository for the holdings table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def load(self) -> list[HoldingRecord]:
        """
        Return all stored holdings in upload order.

        An empty list means no portfolio has been uploaded (or it was cleared).
        """
        try:
            rows = self.db.scalars(select(Holding).order_by(Holding.id)).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load holdings: {e}")
            raise StoreError("holdings", "load", str(e)) from e

        return [
            HoldingRecord(account=row.account, symbol=row.symbol, quantity=row.quantity)
            for row in rows
        ]

    def replace_all(self, holdings: list[HoldingRecord]) -> int:
        """
        Atomically replace the stored holdings.

        Returns:
            Number of holdings stored

        Raises:
            StoreError: The write failed; the previous set is still stored
        """
        try:
            self.db.execute(delete(Holding))
            self.db.add_all(
                Holding(account=h.account, symbol=h.symbol, quantity=h.quantity)
                for h in holdings
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Holdings replace failed, rolled back: {e}", exc_info=True)
            raise StoreError("holdings", "replace_all", str(e)) from e

        logger.info(f"Stored {len(holdings)} holdings")
        return len(holdings)

    def clear(self) -> None:
        """Remove every stored holding."""
        self.replace_all([])
