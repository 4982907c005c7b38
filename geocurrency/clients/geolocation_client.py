"""
IP geolocation client (ipapi.co JSON API).
"""

import asyncio
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from geocurrency.clients.base import APIError, BaseAPIClient
from geocurrency.core.config import settings
from geocurrency.core.logging import get_logger

logger = get_logger(__name__)


class IpInfo(BaseModel):
    """Subset of the ipapi.co response we use."""

    model_config = ConfigDict(extra="ignore")

    country: Optional[str] = None
    currency: Optional[str] = None
    error: bool = False
    reason: Optional[str] = None


class GeolocationClient(BaseAPIClient):
    """
    Looks up the caller's country and currency from its public IP.

    The whole lookup is bounded by ``timeout`` seconds, not just each
    connect/read phase.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            base_url=url or settings.geolocation_url,
            timeout=timeout if timeout is not None else settings.geolocation_timeout,
            transport=transport,
        )

    async def lookup(self) -> IpInfo:
        """
        Geolocate the current public IP.

        Returns:
            Parsed geolocation info

        Raises:
            APIError: On HTTP/transport failure, malformed body or provider error
            asyncio.TimeoutError: If the lookup exceeds ``timeout``
        """
        data = await asyncio.wait_for(self.get(), timeout=self.timeout)

        try:
            info = IpInfo.model_validate(data)
        except ValidationError as e:
            raise APIError(f"Malformed geolocation response: {e}", response=data) from e

        if info.error:
            raise APIError(f"Geolocation provider error: {info.reason}", response=data)

        return info
