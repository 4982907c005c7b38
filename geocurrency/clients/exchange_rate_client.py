"""
USD-based exchange rate client (exchangerate.host style API).
"""

from decimal import Decimal
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from geocurrency.clients.base import APIError, BaseAPIClient
from geocurrency.core.config import settings
from geocurrency.core.logging import get_logger

logger = get_logger(__name__)

BASE_CURRENCY = "USD"


class RatesResponse(BaseModel):
    """Rates keyed by ISO 4217 code, relative to the requested base."""

    model_config = ConfigDict(extra="ignore")

    rates: Optional[dict[str, Decimal]] = None


class ExchangeRateClient(BaseAPIClient):
    """Fetches USD→currency exchange rates."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            base_url=url or settings.exchange_rate_url,
            timeout=timeout if timeout is not None else settings.exchange_rate_timeout,
            transport=transport,
        )

    async def get_usd_rate(self, currency_code: str) -> Decimal:
        """
        Get the number of ``currency_code`` units per US dollar.

        Args:
            currency_code: Target currency (ISO 4217)

        Returns:
            Positive exchange rate

        Raises:
            APIError: On request failure, missing rate, or a rate that is not positive
        """
        code = currency_code.upper()
        data = await self.get(params={"base": BASE_CURRENCY, "symbols": code})

        try:
            resp = RatesResponse.model_validate(data)
        except ValidationError as e:
            raise APIError(f"Malformed rates response: {e}", response=data) from e

        rate = (resp.rates or {}).get(code)
        if rate is None:
            raise APIError(f"No {code} rate in response", response=data)
        if not rate.is_finite() or rate <= 0:
            raise APIError(f"Rejected non-positive {code} rate: {rate}", response=data)

        return rate
