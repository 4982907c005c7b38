"""
Base HTTP client with timeout and error handling.

Every request is a single attempt; callers decide how to degrade on failure.
"""

from decimal import Decimal
from typing import Any, Optional

import httpx

from geocurrency.core.logging import get_logger

logger = get_logger(__name__)


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class RateLimitError(APIError):
    """Raised when API rate limit is exceeded."""

    pass


class BaseAPIClient:
    """
    Base class for JSON API clients.

    Features:
    - Lazily created shared ``httpx.AsyncClient``
    - Request/response logging
    - Error handling (HTTP status, transport and JSON errors become ``APIError``)
    - Injectable transport for tests
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Endpoint URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``)
        """
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "BaseAPIClient":
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_client(self) -> None:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        url: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Make a single HTTP request and decode the JSON body.

        Floats in the body are decoded as ``Decimal``.

        Args:
            method: HTTP method
            url: Absolute URL (defaults to ``base_url``)
            **kwargs: Additional arguments for httpx.request

        Returns:
            Response JSON data

        Raises:
            APIError: On HTTP, transport or decoding error
            RateLimitError: On rate limit exceeded
        """
        await self._ensure_client()

        url = url or self.base_url

        logger.debug(f"{method} {url}", extra={"params": kwargs.get("params")})

        try:
            assert self._client is not None
            response = await self._client.request(method, url, **kwargs)

            if response.status_code == 429:
                logger.warning(f"Rate limit exceeded for {url}")
                raise RateLimitError("Rate limit exceeded", status_code=429)

            response.raise_for_status()

            return response.json(parse_float=Decimal)

        except httpx.HTTPStatusError as e:
            logger.warning(f"HTTP error: {e.response.status_code} - {e.response.text[:200]}")
            raise APIError(
                f"HTTP {e.response.status_code}: {e.response.text[:200]}",
                status_code=e.response.status_code,
            ) from e

        except httpx.RequestError as e:
            logger.warning(f"Request error: {e!r}")
            raise APIError(f"Request failed: {e!r}") from e

        except ValueError as e:
            raise APIError(f"Invalid JSON from {url}: {e}") from e

    async def get(self, url: Optional[str] = None, **kwargs: Any) -> Any:
        """Make GET request."""
        return await self.request("GET", url, **kwargs)
