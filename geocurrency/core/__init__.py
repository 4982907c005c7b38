"""Core application modules."""

from geocurrency.core.config import settings
from geocurrency.core.culture import culture_for_country, parse_first_culture, region_currency
from geocurrency.core.currency import CurrencyFormat, format_currency, round_currency
from geocurrency.core.logging import get_logger, setup_logging
from geocurrency.core.request import RequestContext, StaticRequestContext
from geocurrency.core.time import utcnow

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "utcnow",
    "culture_for_country",
    "parse_first_culture",
    "region_currency",
    "CurrencyFormat",
    "format_currency",
    "round_currency",
    "RequestContext",
    "StaticRequestContext",
]
