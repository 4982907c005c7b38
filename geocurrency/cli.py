#!/usr/bin/env python3
"""
Geocurrency - command line front end.

Resolves locale, currency and exchange rate the same way the API does and
prints USD amounts formatted for the result.

Usage:
    geocurrency show 9.99 19.99                      # Geolocate this machine
    geocurrency show 10 --currency EUR --culture de-DE
    geocurrency show 10 --accept-language "pt-BR,pt;q=0.9"
    geocurrency countries                             # Country → culture table
"""

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from geocurrency.clients.exchange_rate_client import ExchangeRateClient
from geocurrency.clients.geolocation_client import GeolocationClient
from geocurrency.core.culture import COUNTRY_CULTURES, FALLBACK_CULTURE
from geocurrency.core.currency_state import CurrencyState
from geocurrency.core.logging import get_logger
from geocurrency.core.request import StaticRequestContext
from geocurrency.core.time import format_iso

app = typer.Typer(help="Geocurrency - localized price display")
console = Console()
logger = get_logger(__name__)


async def resolve_state(context: StaticRequestContext) -> CurrencyState:
    """Resolve a currency state for ``context`` with short-lived clients."""
    async with GeolocationClient() as geolocation_client, ExchangeRateClient() as rates_client:
        state = CurrencyState(geolocation_client, rates_client, request=context)
        await state.ensure_loaded()
        return state


def parse_amounts(values: list[str]) -> list[Decimal]:
    amounts = []
    for value in values:
        try:
            amounts.append(Decimal(value))
        except InvalidOperation:
            raise typer.BadParameter(f"Not a number: {value}") from None
    return amounts


@app.command()
def show(
    amounts: Optional[list[str]] = typer.Argument(None, help="USD amounts to format"),
    cc: Optional[str] = typer.Option(None, "--cc", help="Country code override (BR, DE, ...)"),
    currency: Optional[str] = typer.Option(
        None, "--currency", help="ISO 4217 currency override (EUR, BRL, ...)"
    ),
    culture: Optional[str] = typer.Option(None, "--culture", help="Culture override (de-DE, ...)"),
    accept_language: Optional[str] = typer.Option(
        None, "--accept-language", help="Accept-Language header to fall back on"
    ),
) -> None:
    """Resolve the currency state and format USD amounts."""
    usd_amounts = parse_amounts(amounts or ["1"])
    context = StaticRequestContext.build(
        cc=cc, currency=currency, culture=culture, accept_language=accept_language
    )

    state = asyncio.run(resolve_state(context))
    snapshot = state.snapshot()

    console.print()
    console.print(Panel.fit("[bold cyan]Currency State[/bold cyan]", border_style="cyan"))
    console.print(f"Culture:  [green]{snapshot.culture_name}[/green]")
    console.print(f"Currency: [green]{snapshot.currency_code}[/green] ({snapshot.currency_symbol})")
    console.print(f"USD rate: [green]{snapshot.usd_to_local}[/green]")
    fetched = format_iso(snapshot.last_rate_at)
    console.print(f"Rate at:  [dim]{fetched or 'not fetched'}[/dim]")
    console.print()

    table = Table(title="Prices")
    table.add_column("USD", style="cyan", justify="right")
    table.add_column(snapshot.currency_code, style="yellow", justify="right")

    for amount in usd_amounts:
        table.add_row(f"{amount:.2f}", state.format(amount))

    console.print(table)


@app.command()
def countries() -> None:
    """Show the country → culture mapping."""
    table = Table(title="Country cultures")
    table.add_column("Country", style="cyan")
    table.add_column("Culture", style="green")

    for country, culture_name in COUNTRY_CULTURES.items():
        table.add_row(country, culture_name)
    table.add_row("[dim]other[/dim]", FALLBACK_CULTURE)

    console.print(table)


if __name__ == "__main__":
    app()
