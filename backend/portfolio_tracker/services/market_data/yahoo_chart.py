# backend/portfolio_tracker/services/market_data/yahoo_chart.py
"""
Yahoo chart endpoint quote provider (direct HTTP).

Issues one GET per symbol against the public chart endpoint
(`/v8/finance/chart/{symbol}`) and reads the price fields from the
response's "meta" object.

Transport rules:
- Browser-like User-Agent (the endpoint rejects default client agents)
- Per-request timeout (default 10s)
- Redirects followed transparently up to max_redirects hops (default 5);
  one more hop makes the quote unavailable
- Non-success HTTP status makes the quote unavailable (429 is reported
  as rate limiting, 404 as an unknown symbol)
"""

import logging
from collections.abc import Callable
from urllib.parse import quote as url_quote

import requests

from portfolio_tracker.services.exceptions import (
    MalformedQuoteError,
    ProviderUnavailableError,
    QuoteTimeoutError,
    RateLimitError,
    TickerNotFoundError,
    TooManyRedirectsError,
)
from portfolio_tracker.services.market_data.base import (
    Quote,
    QuoteProvider,
    parse_chart_document,
)

logger = logging.getLogger(__name__)

DEFAULT_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class YahooChartProvider(QuoteProvider):
    """
    Quote provider backed by the Yahoo chart JSON endpoint.

    A fresh requests.Session is opened per fetch, so one provider
    instance can be shared across the valuation thread pool.

    Example:
        provider = YahooChartProvider(timeout=10, max_redirects=5)
        result = provider.fetch("AAPL")
        if result.is_available:
            print(result.quote.current_price)
    """

    def __init__(
            self,
            base_url: str = DEFAULT_CHART_URL,
            timeout: float = 10,
            max_redirects: int = 5,
            user_agent: str = DEFAULT_USER_AGENT,
            session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        """
        Args:
            base_url: Chart endpoint prefix; the URL-encoded symbol is appended
            timeout: Request timeout in seconds
            max_redirects: Redirect hops followed before giving up
            user_agent: User-Agent header value
            session_factory: Builds the HTTP session (injectable for tests)
        """
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._user_agent = user_agent
        self._session_factory = session_factory
        logger.info(
            f"YahooChartProvider initialized "
            f"(timeout={timeout}s, max_redirects={max_redirects})"
        )

    @property
    def name(self) -> str:
        return "yahoo_chart"

    def build_url(self, symbol: str) -> str:
        return self._base_url + url_quote(symbol, safe="")

    def _fetch_quote(self, symbol: str) -> Quote:
        url = self.build_url(symbol)
        logger.debug(f"GET {url}")

        with self._session_factory() as session:
            session.max_redirects = self._max_redirects
            try:
                response = session.get(
                    url,
                    headers={"User-Agent": self._user_agent, "Accept": "application/json"},
                    timeout=self._timeout,
                    allow_redirects=True,
                )
            except requests.exceptions.Timeout:
                raise QuoteTimeoutError(self.name, self._timeout)
            except requests.exceptions.TooManyRedirects:
                raise TooManyRedirectsError(self.name, self._max_redirects)
            except requests.exceptions.RequestException as e:
                raise ProviderUnavailableError(self.name, str(e))

        return self._parse_response(symbol, response)

    def _parse_response(self, symbol: str, response: requests.Response) -> Quote:
        status = response.status_code

        if status == 429:
            raise RateLimitError(self.name, retry_after=_retry_after(response))
        if status == 404:
            raise TickerNotFoundError(symbol, self.name, reason="HTTP 404")
        if not 200 <= status < 300:
            raise ProviderUnavailableError(self.name, f"HTTP {status}")

        try:
            document = response.json()
        except ValueError as e:
            raise MalformedQuoteError(symbol, self.name, f"invalid JSON: {e}")

        return parse_chart_document(symbol, document, self.name)


def _retry_after(response: requests.Response) -> int | None:
    value = response.headers.get("Retry-After")
    if value and value.isdigit():
        return int(value)
    return None
