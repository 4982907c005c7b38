"""
Currency amount conversion and locale-aware formatting.

Formatting takes an explicit ``CurrencyFormat`` (locale conventions plus a
symbol override) so a forced currency symbol is shown instead of the one
the locale would pick on its own.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from babel import Locale
from babel.numbers import format_currency as babel_format_currency
from babel.numbers import get_currency_symbol

from geocurrency.core.config import settings
from geocurrency.core.culture import load_locale

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class CurrencyFormat:
    """Locale conventions plus the symbol to render."""

    locale: Locale
    currency_code: str
    symbol: str

    @classmethod
    def for_culture(cls, culture_name: str, currency_code: str, symbol: str) -> "CurrencyFormat":
        """
        Build a format for a culture name.

        Unrecognised culture names fall back to the default culture's conventions.
        """
        locale = load_locale(culture_name) or load_locale(settings.default_culture)
        if locale is None:
            locale = Locale("en", "US")
        return cls(locale=locale, currency_code=currency_code.upper(), symbol=symbol)


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal without binary float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(amount: Decimal, decimals: int = 2) -> Decimal:
    """
    Round currency amount to specified decimals.

    Uses ROUND_HALF_UP (commercial rounding).

    Args:
        amount: Amount to round
        decimals: Number of decimal places

    Returns:
        Rounded amount
    """
    return amount.quantize(Decimal(10) ** -decimals, rounding=ROUND_HALF_UP)


def convert_from_usd(usd_amount: Number, usd_to_local: Decimal) -> Decimal:
    """
    Convert a USD amount with a USD→local multiplier.

    Examples:
        >>> convert_from_usd(Decimal("10"), Decimal("5"))
        Decimal('50')
    """
    return to_decimal(usd_amount) * usd_to_local


def format_currency(amount: Number, fmt: CurrencyFormat) -> str:
    """
    Format an amount with the locale's currency pattern and the override symbol.

    Args:
        amount: Amount in the target currency
        fmt: Locale conventions and symbol

    Returns:
        Formatted currency string (e.g., "R$ 50,00")
    """
    text = babel_format_currency(to_decimal(amount), fmt.currency_code, locale=fmt.locale)

    native_symbol = get_currency_symbol(fmt.currency_code, locale=fmt.locale)
    if native_symbol and native_symbol != fmt.symbol:
        text = text.replace(native_symbol, fmt.symbol, 1)
    return text
