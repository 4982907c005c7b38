"""
Per-session locale, currency and exchange rate state.

``CurrencyState`` resolves the caller's culture and currency once, through a
ranked fallback chain:

1. explicit ``culture`` / ``cc`` / ``currency`` query overrides
2. IP geolocation
3. the ``Accept-Language`` header
4. configured defaults

and keeps a USD→local rate cached for ``settings.rate_ttl``. Every external
failure degrades to the next tier or to the previous value; nothing is
raised to callers and the state always ends up ready.
"""

import asyncio
import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from geocurrency.clients.base import APIError
from geocurrency.clients.exchange_rate_client import ExchangeRateClient
from geocurrency.clients.geolocation_client import GeolocationClient
from geocurrency.core.config import settings
from geocurrency.core.culture import (
    culture_for_country,
    currency_symbol,
    parse_first_culture,
    region_currency,
)
from geocurrency.core.currency import CurrencyFormat, Number, convert_from_usd, format_currency
from geocurrency.core.logging import get_logger
from geocurrency.core.request import Overrides, RequestContext
from geocurrency.core.time import MIN_TIMESTAMP, utcnow

logger = get_logger(__name__)

USD = "USD"


@dataclass(frozen=True)
class CurrencySnapshot:
    """Read-only copy of the observable state."""

    culture_name: str
    currency_code: str
    currency_symbol: str
    usd_to_local: Decimal
    is_ready: bool
    last_rate_at: datetime


@dataclass(frozen=True)
class Resolution:
    """Outcome of one fallback tier. None fields keep the current value."""

    source: str
    culture_name: str
    currency_code: Optional[str] = None
    currency_symbol: Optional[str] = None


class CurrencyState:
    """
    Locale/currency state for one session or request.

    Safe for concurrent ``ensure_loaded`` calls: the first caller starts the
    resolution task and every caller awaits that same task.

    An instance belongs to a single event loop. The resolution task is bound
    to the loop of the first caller, so callers on another loop cannot await it.
    """

    def __init__(
        self,
        geolocation_client: GeolocationClient,
        exchange_rate_client: ExchangeRateClient,
        request: Optional[RequestContext] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._geolocation = geolocation_client
        self._rates = exchange_rate_client
        self._request = request
        self._clock = clock

        self._culture_name = settings.default_culture
        self._currency_code = settings.default_currency
        self._currency_symbol = settings.default_currency_symbol
        self._usd_to_local = Decimal("1")
        self._is_ready = False
        self._last_rate_at = MIN_TIMESTAMP

        self._lock = threading.Lock()
        self._load_task: Optional["asyncio.Future[None]"] = None

    @property
    def culture_name(self) -> str:
        return self._culture_name

    @property
    def currency_code(self) -> str:
        return self._currency_code

    @property
    def currency_symbol(self) -> str:
        return self._currency_symbol

    @property
    def usd_to_local(self) -> Decimal:
        return self._usd_to_local

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    @property
    def last_rate_at(self) -> datetime:
        return self._last_rate_at

    def snapshot(self) -> CurrencySnapshot:
        return CurrencySnapshot(
            culture_name=self._culture_name,
            currency_code=self._currency_code,
            currency_symbol=self._currency_symbol,
            usd_to_local=self._usd_to_local,
            is_ready=self._is_ready,
            last_rate_at=self._last_rate_at,
        )

    async def ensure_loaded(self) -> None:
        """
        Resolve culture, currency and rate once.

        Idempotent. Concurrent callers share the in-flight resolution; a
        cancelled caller does not cancel it for the others.
        """
        if self._is_ready:
            return

        with self._lock:
            if self._load_task is None:
                self._load_task = asyncio.ensure_future(self._load())
            task = self._load_task

        await asyncio.shield(task)

    async def _load(self) -> None:
        overrides = Overrides.from_request(self._request)
        logger.info(
            "Resolving currency state",
            extra={
                "cc": overrides.cc,
                "currency": overrides.currency,
                "culture": overrides.culture,
            },
        )

        try:
            if overrides.culture:
                self._culture_name = overrides.culture
            elif overrides.cc:
                self._culture_name = culture_for_country(overrides.cc.upper())

            if overrides.currency:
                # Forced currency: no geolocation
                self._currency_code = overrides.currency.upper()
                self._commit_symbol()
                await self.refresh_rate(force=True)
                return

            resolution = (
                await self._resolve_from_geolocation()
                or self._resolve_from_accept_language(overrides.accept_language)
                or self._resolve_default()
            )
            self._commit(resolution)

            if self._currency_code.upper() != USD:
                await self.refresh_rate(force=True)

        except Exception:
            logger.exception("Currency state resolution failed, keeping current values")

        finally:
            self._is_ready = True
            logger.info(
                "Currency state ready",
                extra={
                    "culture_name": self._culture_name,
                    "currency_code": self._currency_code,
                    "usd_to_local": str(self._usd_to_local),
                },
            )

    async def _resolve_from_geolocation(self) -> Optional[Resolution]:
        try:
            info = await self._geolocation.lookup()
        except (APIError, asyncio.TimeoutError) as e:
            logger.warning(
                "IP geolocation failed, falling back to Accept-Language",
                extra={"error_type": type(e).__name__, "error_message": str(e)},
            )
            return None

        country = (info.country or "").strip().upper()
        currency = (info.currency or "").strip().upper()

        culture = culture_for_country(country) if country else self._culture_name
        code = currency or self._currency_code

        # Without a currency in the response the current code is kept
        return Resolution(
            source="geolocation",
            culture_name=culture,
            currency_code=currency or None,
            currency_symbol=currency_symbol(code, culture),
        )

    def _resolve_from_accept_language(self, header: Optional[str]) -> Optional[Resolution]:
        culture = parse_first_culture(header)
        if culture is None:
            return None
        return self._region_resolution("accept-language", culture)

    def _resolve_default(self) -> Resolution:
        return self._region_resolution("default", settings.default_culture)

    @staticmethod
    def _region_resolution(source: str, culture: str) -> Resolution:
        region = region_currency(culture)
        if region is None:
            logger.warning(
                "No region currency for culture, keeping current currency",
                extra={"culture": culture, "source": source},
            )
            return Resolution(source=source, culture_name=culture)
        return Resolution(
            source=source,
            culture_name=culture,
            currency_code=region.code,
            currency_symbol=region.symbol,
        )

    def _commit(self, resolution: Resolution) -> None:
        logger.info(
            "Currency resolved",
            extra={"source": resolution.source, "culture": resolution.culture_name},
        )
        self._culture_name = resolution.culture_name
        if resolution.currency_code:
            self._currency_code = resolution.currency_code.upper()
        if resolution.currency_symbol:
            self._currency_symbol = resolution.currency_symbol

    def _commit_symbol(self) -> None:
        symbol = currency_symbol(self._currency_code, self._culture_name)
        if symbol:
            self._currency_symbol = symbol

    async def refresh_rate(self, force: bool = False) -> None:
        """
        Refresh the USD→local rate.

        Without ``force`` this is a no-op while the cached rate is younger
        than ``settings.rate_ttl``. Failures keep the previous rate.
        """
        if not force and self._clock() - self._last_rate_at < settings.rate_ttl:
            return

        code = self._currency_code
        try:
            rate = await self._rates.get_usd_rate(code)
        except (APIError, asyncio.TimeoutError) as e:
            logger.warning(
                "Exchange rate refresh failed, keeping previous rate",
                extra={
                    "currency": code,
                    "usd_to_local": str(self._usd_to_local),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return

        self._usd_to_local = rate
        self._last_rate_at = self._clock()
        logger.info("Exchange rate refreshed", extra={"currency": code, "usd_to_local": str(rate)})

    def format(self, usd_amount: Number) -> str:
        """
        Convert a USD amount and format it for the resolved culture.

        Examples:
            >>> state.format(Decimal("10"))  # pt-BR, BRL, rate 5
            'R$ 50,00'
        """
        fmt = CurrencyFormat.for_culture(self._culture_name, self._currency_code, self._currency_symbol)
        return format_currency(convert_from_usd(usd_amount, self._usd_to_local), fmt)
