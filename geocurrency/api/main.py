"""
FastAPI main application entry point.
"""

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from geocurrency import __version__
from geocurrency.clients.exchange_rate_client import ExchangeRateClient
from geocurrency.clients.geolocation_client import GeolocationClient
from geocurrency.core.config import settings
from geocurrency.core.currency_state import CurrencyState
from geocurrency.core.logging import get_logger, setup_logging
from geocurrency.core.time import format_iso

# Setup logging on import
setup_logging()

logger = get_logger(__name__)


class CurrencyResponse(BaseModel):
    culture_name: str
    currency_code: str
    currency_symbol: str
    usd_to_local: Decimal
    is_ready: bool
    last_rate_at: str


class PriceResponse(BaseModel):
    usd: Decimal
    amount: Decimal
    currency: str
    culture: str
    formatted: str


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Owns the HTTP clients shared by all request-scoped currency states.
    """
    logger.info(
        "Starting geocurrency API",
        extra={"version": __version__, "environment": settings.app_env},
    )

    app.state.geolocation_client = GeolocationClient()
    app.state.exchange_rate_client = ExchangeRateClient()

    yield

    logger.info("Shutting down geocurrency API")

    await app.state.geolocation_client.close()
    await app.state.exchange_rate_client.close()


app = FastAPI(
    title="Geocurrency API",
    description="Locale, currency and exchange rate inference for localized prices",
    version=__version__,
    docs_url="/docs" if settings.enable_api_docs else None,
    redoc_url="/redoc" if settings.enable_api_docs else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_geolocation_client(request: Request) -> GeolocationClient:
    return request.app.state.geolocation_client


def get_exchange_rate_client(request: Request) -> ExchangeRateClient:
    return request.app.state.exchange_rate_client


async def get_currency_state(
    request: Request,
    geolocation_client: GeolocationClient = Depends(get_geolocation_client),
    exchange_rate_client: ExchangeRateClient = Depends(get_exchange_rate_client),
) -> CurrencyState:
    """Request-scoped, loaded currency state honouring cc/currency/culture overrides."""
    state = CurrencyState(geolocation_client, exchange_rate_client, request=request)
    await state.ensure_loaded()
    return state


@app.get("/health")
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Status and version information
    """
    return {
        "status": "healthy",
        "version": __version__,
        "environment": settings.app_env,
    }


@app.get("/currency", response_model=CurrencyResponse)
async def currency(state: CurrencyState = Depends(get_currency_state)) -> CurrencyResponse:
    """Resolved culture, currency and rate for the caller."""
    snapshot = state.snapshot()
    return CurrencyResponse(
        culture_name=snapshot.culture_name,
        currency_code=snapshot.currency_code,
        currency_symbol=snapshot.currency_symbol,
        usd_to_local=snapshot.usd_to_local,
        is_ready=snapshot.is_ready,
        last_rate_at=format_iso(snapshot.last_rate_at),
    )


@app.get("/price", response_model=PriceResponse)
async def price(
    usd: Decimal = Query(..., ge=0, description="Amount in US dollars"),
    state: CurrencyState = Depends(get_currency_state),
) -> PriceResponse:
    """Convert a USD amount and format it for the caller's culture."""
    return PriceResponse(
        usd=usd,
        amount=usd * state.usd_to_local,
        currency=state.currency_code,
        culture=state.culture_name,
        formatted=state.format(usd),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled errors.

    Args:
        request: Request that caused the exception
        exc: Exception that was raised

    Returns:
        JSON error response
    """
    logger.error(
        "Unhandled exception",
        extra={
            "path": str(request.url),
            "method": request.method,
            "error": str(exc),
        },
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "geocurrency.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
