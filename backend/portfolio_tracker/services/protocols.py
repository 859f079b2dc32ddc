# backend/portfolio_tracker/services/protocols.py
"""
Protocol interfaces for service dependency injection.

Using typing.Protocol enables structural subtyping:
- Existing classes satisfy protocols without modification
- Test fakes work without explicit inheritance
"""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from portfolio_tracker.services.market_data.base import QuoteResult
    from portfolio_tracker.services.snapshots.service import SnapshotResult


class QuoteSource(Protocol):
    """Interface required by ValuationEngine."""

    @property
    def name(self) -> str:
        ...

    def fetch(self, symbol: str) -> QuoteResult:
        ...


@runtime_checkable
class SnapshotTrigger(Protocol):
    """Interface for anything that can take a snapshot on demand."""

    def run_now(self) -> SnapshotResult:
        ...
