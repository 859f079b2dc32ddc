# backend/portfolio_tracker/models.py
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class Holding(Base):
    """
    One position from the most recent CSV upload.

    The table always holds exactly one uploaded set; uploads replace it
    wholesale. Rows are read back ordered by id, which preserves the
    order of the uploaded file.
    """
    __tablename__ = "holdings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    account: Mapped[str] = mapped_column(String, index=True)
    symbol: Mapped[str] = mapped_column(String(32))  # e.g. "AAPL", always upper-case
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 8))  # Fractional shares allowed
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )


class Snapshot(Base):
    """
    Per-account valuation totals captured once per calendar day.

    At most one snapshot exists per date; a later snapshot on the same
    day replaces the earlier one.
    """
    __tablename__ = "snapshots"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    snapshot_date: Mapped[date] = mapped_column(Date, unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    account_values: Mapped[list["SnapshotAccountValue"]] = relationship(
        back_populates="snapshot",
        cascade="all, delete-orphan",
        order_by="SnapshotAccountValue.account",
    )


class SnapshotAccountValue(Base):
    __tablename__ = "snapshot_account_values"
    __table_args__ = (
        UniqueConstraint('snapshot_id', 'account', name='uq_snapshot_account'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    snapshot_id: Mapped[int] = mapped_column(
        ForeignKey("snapshots.id", ondelete="CASCADE"), index=True
    )
    account: Mapped[str] = mapped_column(String)
    total_value: Mapped[Decimal] = mapped_column(Numeric(18, 2))

    snapshot: Mapped["Snapshot"] = relationship(back_populates="account_values")
