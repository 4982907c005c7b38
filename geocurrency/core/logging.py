"""
Structured logging configuration with JSON output and IP masking.

Client IP addresses show up in geolocation payloads and error messages;
they are masked before a record leaves the process when configured.
"""

import logging
import re
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from geocurrency.core.config import settings

IPV4_PATTERN = re.compile(r"\b(\d{1,3})\.(\d{1,3})\.\d{1,3}\.\d{1,3}\b")


def mask_ip_addresses(text: str) -> str:
    """Keep the first two octets of every IPv4 address in ``text``."""
    return IPV4_PATTERN.sub(lambda m: f"{m.group(1)}.{m.group(2)}.x.x", text)


class IPMaskingFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that masks IPv4 addresses in the rendered output.

    The record itself is left untouched for other handlers.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.mask_ips = settings.mask_client_ips_in_logs
        super().__init__(*args, **kwargs)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with IP masking if enabled."""
        text = super().format(record)
        return mask_ip_addresses(text) if self.mask_ips else text


class TextFormatter(logging.Formatter):
    """
    Simple text formatter for development/console output.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.mask_ips = settings.mask_client_ips_in_logs
        super().__init__(*args, **kwargs)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        return mask_ip_addresses(text) if self.mask_ips else text


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Sets up structured JSON logging for production or text logging for development.
    Respects LOG_LEVEL and LOG_FORMAT from settings.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if settings.log_format == "json":
        formatter: logging.Formatter = IPMaskingFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = TextFormatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if settings.is_development and settings.debug:
        logging.getLogger("httpx").setLevel(logging.DEBUG)

    root_logger.info(
        "Logging configured",
        extra={
            "log_level": settings.log_level,
            "log_format": settings.log_format,
            "environment": settings.app_env,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
