"""
Culture (locale) resolution helpers.

Maps country codes and Accept-Language headers to culture names such as
``"pt-BR"`` and looks up the region's currency through Babel's CLDR data.
"""

from dataclasses import dataclass
from typing import Optional

from babel import Locale, UnknownLocaleError
from babel.core import get_global, parse_locale
from babel.numbers import get_currency_symbol, get_territory_currencies

from geocurrency.core.logging import get_logger

logger = get_logger(__name__)

FALLBACK_CULTURE = "en-US"

COUNTRY_CULTURES: dict[str, str] = {
    "BR": "pt-BR",
    "ES": "es-ES",
    "DE": "de-DE",
    "CN": "zh-CN",
    "JP": "ja-JP",
    "US": "en-US",
    "CO": "es-CO",
}


@dataclass(frozen=True)
class RegionCurrency:
    """Default currency of a culture's region."""

    code: str
    symbol: str


def culture_for_country(country_code: str) -> str:
    """
    Map a 2-letter country code to a culture name.

    Args:
        country_code: ISO 3166-1 alpha-2 code, uppercase

    Returns:
        Culture name, ``"en-US"`` for unlisted countries

    Examples:
        >>> culture_for_country("BR")
        'pt-BR'
        >>> culture_for_country("FR")
        'en-US'
    """
    return COUNTRY_CULTURES.get(country_code, FALLBACK_CULTURE)


def parse_first_culture(header: Optional[str]) -> Optional[str]:
    """
    Extract the first language tag from an Accept-Language header.

    The tag is not validated.

    Examples:
        >>> parse_first_culture("de-DE,de;q=0.9,en;q=0.8")
        'de-DE'
    """
    if header is None or not header.strip():
        return None

    first = header.split(",")[0]
    if not first.strip():
        return None

    return first.split(";")[0].strip() or None


def load_locale(culture_name: str) -> Optional[Locale]:
    """Parse a culture name (``pt-BR`` or ``pt_BR``) into a Babel locale, or None."""
    try:
        return Locale.parse(culture_name.replace("_", "-"), sep="-")
    except (ValueError, TypeError, UnknownLocaleError) as e:
        logger.debug(f"Unknown culture {culture_name!r}: {e}")
        return None


def _territory(locale: Locale) -> Optional[str]:
    if locale.territory:
        return locale.territory

    # Neutral cultures ("de") borrow the most likely region ("de_Latn_DE")
    likely = get_global("likely_subtags").get(locale.language)
    if likely:
        return parse_locale(likely)[1]
    return None


def region_currency(culture_name: str) -> Optional[RegionCurrency]:
    """
    Get the default currency of a culture's region.

    Args:
        culture_name: Culture name, e.g. ``"de-DE"``

    Returns:
        Currency code and symbol, or None if the culture is unknown or has
        no region with a legal tender
    """
    locale = load_locale(culture_name)
    if locale is None:
        return None

    territory = _territory(locale)
    if not territory:
        return None

    currencies = get_territory_currencies(territory, tender=True)
    if not currencies:
        return None

    code = currencies[0]
    return RegionCurrency(code=code, symbol=get_currency_symbol(code, locale=locale))


def currency_symbol(currency_code: str, culture_name: str) -> Optional[str]:
    """
    Get the symbol of ``currency_code`` as written in ``culture_name``.

    Returns:
        Symbol (e.g. ``"R$"`` for BRL in pt-BR), or None if the culture is unknown
    """
    locale = load_locale(culture_name)
    if locale is None:
        return None
    return get_currency_symbol(currency_code, locale=locale)
