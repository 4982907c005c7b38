"""Locale, currency and exchange rate inference for localized price display."""

__version__ = "1.0.0"
