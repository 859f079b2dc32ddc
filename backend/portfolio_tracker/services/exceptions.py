# backend/portfolio_tracker/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The application layer (main.py) maps them to HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   └── InvalidUploadError
    ├── StoreError
    └── MarketDataError
        ├── ProviderUnavailableError
        │   ├── QuoteTimeoutError
        │   └── TooManyRedirectsError
        ├── TickerNotFoundError
        ├── RateLimitError
        └── MalformedQuoteError

Market data errors never reach HTTP handlers: quote providers convert them
into an unavailable QuoteResult before returning.
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when input validation fails.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidUploadError(ValidationError):
    """
    Raised when an uploaded holdings file cannot be used at all.

    Row-level problems never raise; they are skipped by the parser.
    This is for file-level failures (undecodable bytes, missing header
    or required columns) where the stored holdings must stay untouched.

    Attributes:
        filename: Name of the uploaded file
    """

    def __init__(self, message: str, filename: str | None = None) -> None:
        self.filename = filename
        super().__init__(message, field="file")


# =============================================================================
# STORE ERRORS
# =============================================================================


class StoreError(ServiceError):
    """
    Raised when a store read or replace fails.

    The failed transaction has already been rolled back when this is
    raised, so the previous contents remain visible.

    Attributes:
        store: Name of the store ("holdings", "snapshots")
        operation: "load" or "replace_all"
    """

    def __init__(self, store: str, operation: str, reason: str) -> None:
        self.store = store
        self.operation = operation
        self.reason = reason
        super().__init__(f"{store} store {operation} failed: {reason}")


# =============================================================================
# MARKET DATA PROVIDER ERRORS
# =============================================================================


class MarketDataError(ServiceError):
    """
    Base exception for market data provider failures.

    Attributes:
        provider: Name of the provider that failed
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)


class ProviderUnavailableError(MarketDataError):
    """
    Raised when a market data provider cannot be reached.

    Examples:
    - Connection refused / DNS failure
    - Server errors (500, 502, 503) or any non-success status
    """

    def __init__(self, provider: str, reason: str) -> None:
        message = f"Provider '{provider}' is unavailable: {reason}"
        super().__init__(message, provider=provider)
        self.reason = reason


class QuoteTimeoutError(ProviderUnavailableError):
    """Raised when a quote request exceeds its timeout."""

    def __init__(self, provider: str, timeout: float) -> None:
        super().__init__(provider, f"timed out after {timeout}s")
        self.timeout = timeout


class TooManyRedirectsError(ProviderUnavailableError):
    """Raised when the quote source redirects more than the allowed hops."""

    def __init__(self, provider: str, max_redirects: int) -> None:
        super().__init__(provider, f"more than {max_redirects} redirects")
        self.max_redirects = max_redirects


class TickerNotFoundError(MarketDataError):
    """
    Raised when a ticker symbol is not found by the provider.

    The remote answered but reported an error for this symbol
    (unknown ticker, delisted, no data).
    """

    def __init__(self, ticker: str, provider: str, reason: str | None = None) -> None:
        message = f"Ticker '{ticker}' not found by {provider}"
        if reason:
            message += f": {reason}"
        super().__init__(message, provider=provider)
        self.ticker = ticker
        self.reason = reason


class RateLimitError(MarketDataError):
    """
    Raised when the provider's rate limit has been exceeded.

    Attributes:
        retry_after: Seconds the provider asked us to wait (if provided)
    """

    def __init__(self, provider: str, retry_after: int | None = None) -> None:
        message = f"Rate limit exceeded for provider '{provider}'"
        if retry_after:
            message += f" (retry after {retry_after}s)"
        super().__init__(message, provider=provider)
        self.retry_after = retry_after


class MalformedQuoteError(MarketDataError):
    """Raised when the provider's payload lacks the expected price fields."""

    def __init__(self, ticker: str, provider: str, reason: str) -> None:
        super().__init__(f"Malformed quote for '{ticker}' from {provider}: {reason}", provider=provider)
        self.ticker = ticker
        self.reason = reason


__all__ = [
    # Base
    "ServiceError",
    # Validation
    "ValidationError",
    "InvalidUploadError",
    # Store
    "StoreError",
    # Market Data
    "MarketDataError",
    "ProviderUnavailableError",
    "QuoteTimeoutError",
    "TooManyRedirectsError",
    "TickerNotFoundError",
    "RateLimitError",
    "MalformedQuoteError",
]
