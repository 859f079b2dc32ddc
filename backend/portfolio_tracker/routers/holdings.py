# backend/portfolio_tracker/routers/holdings.py
"""
Holdings endpoints.

- POST /upload - replace all holdings from a CSV file
- POST /clear - remove all holdings

Both replace the stored holdings in a single transaction: a failed
request leaves the previous holdings in place.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_upload_service
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_UPLOAD, RATE_LIMIT_WRITE, limiter
from portfolio_tracker.schemas.upload import ClearResponse, UploadResponse
from portfolio_tracker.services.constants import MAX_UPLOAD_FILE_SIZE_BYTES
from portfolio_tracker.services.exceptions import ValidationError
from portfolio_tracker.services.stores import HoldingsStore
from portfolio_tracker.services.upload import UploadService

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(tags=["Holdings"])


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Replace holdings from a CSV file",
    responses={
        400: {"description": "No file, or the file is not a readable holdings CSV"},
        413: {"description": "File too large"},
    },
)
@limiter.limit(RATE_LIMIT_UPLOAD)
def upload_holdings(
        request: Request,  # Required for rate limiting
        file: UploadFile | None = File(
            default=None,
            description="CSV with columns account, symbol, quantity"
        ),
        db: Session = Depends(get_db),
        upload_service: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    """
    Replace all stored holdings with the rows of an uploaded CSV.

    **CSV Format:**
    ```
    account,symbol,quantity
    Brokerage,AAPL,10
    IRA,msft,2.5
    ```

    **Behavior:**
    - Values are trimmed and symbols upper-cased
    - Rows with a blank value or a quantity that is not a positive number
      are skipped; the rest are stored
    - The previous holdings are replaced atomically, even when every row
      was skipped

    Raises **400** if no file was sent or it has no usable header row.
    Raises **413** if the file exceeds the size limit.
    """
    if file is None:
        raise ValidationError("No file uploaded", field="file")

    filename = file.filename or "upload.csv"
    logger.info(f"Upload request: {filename}")

    # Read to check size, then rewind for parsing
    file_size = len(file.file.read())
    file.file.seek(0)

    if file_size > MAX_UPLOAD_FILE_SIZE_BYTES:
        max_mb = MAX_UPLOAD_FILE_SIZE_BYTES / (1024 * 1024)
        actual_mb = file_size / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large: {actual_mb:.1f}MB exceeds maximum of {max_mb:.0f}MB"
        )

    logger.debug(f"File size: {file_size} bytes")

    result = upload_service.process_file(db, file.file, filename)

    return UploadResponse(
        filename=result.filename,
        total_rows=result.total_rows,
        holdings_count=result.holdings_count,
        skipped_count=result.skipped_count,
    )


@router.post(
    "/clear",
    response_model=ClearResponse,
    summary="Remove all holdings",
)
@limiter.limit(RATE_LIMIT_WRITE)
def clear_holdings(
        request: Request,
        db: Session = Depends(get_db),
) -> ClearResponse:
    """
    Remove every stored holding.

    Snapshot history is kept.
    """
    HoldingsStore(db).clear()
    logger.info("Holdings cleared")
    return ClearResponse()
