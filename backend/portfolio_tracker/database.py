# backend/portfolio_tracker/database.py
"""
Engine, session factory and table setup.

SQLite is used by tests and small local installs, PostgreSQL in
production (QueuePool sized by the DB_POOL_* settings). The tables are
created on startup by init_db(); there are only three of them and they
never change shape at runtime.
"""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool

from .config import settings
from .models import Base

logger = logging.getLogger(__name__)

# Seconds a request waits for a pooled connection
POOL_TIMEOUT = 30


def _create_engine() -> Engine:
    if settings.is_sqlite:
        # Sessions are also opened from the scheduler thread
        sqlite_args = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in settings.database_url:
            # One shared connection, otherwise every session sees an empty database
            sqlite_args["poolclass"] = StaticPool
        logger.info(f"Using SQLite database: {settings.database_url}")
        return create_engine(settings.database_url, echo=settings.debug, **sqlite_args)

    logger.info(
        f"Using PostgreSQL with pool size={settings.db_pool_size} "
        f"overflow={settings.db_pool_max_overflow} "
        f"recycle={settings.db_pool_recycle}s"
    )
    return create_engine(
        settings.database_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_pool_max_overflow,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_timeout=POOL_TIMEOUT,
        echo=settings.debug,
    )


engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create the holdings and snapshot tables if they do not exist."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session, closed when the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def pool_status() -> dict | None:
    """Connection counts of the QueuePool, or None for SQLite pools."""
    pool = engine.pool
    if not isinstance(pool, QueuePool):
        return None
    return {
        "pool_size": pool.size(),
        "checked_in": pool.checkedin(),
        "checked_out": pool.checkedout(),
        "overflow": pool.overflow(),
    }
