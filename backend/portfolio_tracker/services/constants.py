# backend/portfolio_tracker/services/constants.py
"""
Centralized constants for the Portfolio Tracker services.

Single source of truth for business constants used across the
application. Values that operators may need to change per deployment
(timeouts, schedule) live in config.Settings instead.

Usage:
    from portfolio_tracker.services.constants import (
        SNAPSHOT_RETENTION,
        ZERO,
    )
"""

from decimal import Decimal


# =============================================================================
# SNAPSHOT HISTORY
# =============================================================================

# Maximum number of daily snapshots kept; the oldest dates are evicted first
# 90 = roughly one quarter of calendar days
SNAPSHOT_RETENTION: int = 90


# =============================================================================
# UTILITY CONSTANTS
# =============================================================================

# Type-safe zero for Decimal comparisons
ZERO: Decimal = Decimal("0")


# =============================================================================
# RATE LIMITING CONSTANTS
# =============================================================================
# Format follows slowapi/limits syntax: "100/minute", "10/hour", etc.

# Default rate limit for read endpoints (GET requests)
RATE_LIMIT_DEFAULT: str = "100/minute"

# Rate limit for write endpoints (POST)
RATE_LIMIT_WRITE: str = "30/minute"

# Rate limit for the manual snapshot trigger
# Each call fetches one quote per held symbol from the external source
RATE_LIMIT_SNAPSHOT: str = "10/minute"

# Rate limit for file upload endpoints
RATE_LIMIT_UPLOAD: str = "5/minute"

# Rate limit for health check endpoints
# Higher limit for monitoring tools that poll frequently
RATE_LIMIT_HEALTH: str = "300/minute"


# =============================================================================
# RESOURCE LIMIT CONSTANTS
# =============================================================================

# Maximum file upload size in bytes (10 MB)
MAX_UPLOAD_FILE_SIZE_BYTES: int = 10 * 1024 * 1024

# Maximum number of data rows in a single holdings file
MAX_UPLOAD_ROWS: int = 10000
