# backend/portfolio_tracker/schemas/snapshots.py
"""
Pydantic schemas for the manual snapshot trigger.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field


class SnapshotResponse(BaseModel):
    """Response for POST /snapshot."""

    taken: bool = Field(
        ...,
        description="False when no holdings were stored (history unchanged)"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the snapshot in the snapshot timezone"
    )
    accounts: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Account name -> total value captured"
    )
    total_value: Decimal | None = Field(
        default=None,
        description="Sum of the captured account totals"
    )
    history_size: int = Field(
        ...,
        description="Snapshots stored after this call"
    )
    replaced_existing: bool = Field(
        default=False,
        description="True if an earlier snapshot for the same date was overwritten"
    )
    evicted: list[dt.date] = Field(
        default_factory=list,
        description="Dates dropped to stay within the retention limit"
    )
