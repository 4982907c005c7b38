"""
Read-only view of the inbound request used for locale overrides.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol

import httpx

CC_PARAM = "cc"
CURRENCY_PARAM = "currency"
CULTURE_PARAM = "culture"
ACCEPT_LANGUAGE_HEADER = "Accept-Language"


class RequestContext(Protocol):
    """Anything exposing query parameters and headers (e.g. ``starlette.requests.Request``)."""

    @property
    def query_params(self) -> Mapping[str, str]: ...

    @property
    def headers(self) -> Mapping[str, str]: ...


@dataclass(frozen=True)
class StaticRequestContext:
    """Fixed request context for the CLI and tests. Header lookup is case-insensitive."""

    query_params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=httpx.Headers)

    @classmethod
    def build(
        cls,
        cc: Optional[str] = None,
        currency: Optional[str] = None,
        culture: Optional[str] = None,
        accept_language: Optional[str] = None,
    ) -> "StaticRequestContext":
        """Build a context from individual override values, skipping None."""
        params = {
            key: value
            for key, value in ((CC_PARAM, cc), (CURRENCY_PARAM, currency), (CULTURE_PARAM, culture))
            if value is not None
        }
        headers = httpx.Headers()
        if accept_language is not None:
            headers[ACCEPT_LANGUAGE_HEADER] = accept_language
        return cls(query_params=params, headers=headers)


@dataclass(frozen=True)
class Overrides:
    """Non-blank override values read from a request."""

    cc: Optional[str] = None
    currency: Optional[str] = None
    culture: Optional[str] = None
    accept_language: Optional[str] = None

    @classmethod
    def from_request(cls, request: Optional[RequestContext]) -> "Overrides":
        if request is None:
            return cls()

        def clean(value: Optional[str]) -> Optional[str]:
            if value is None or not value.strip():
                return None
            return value

        query = request.query_params
        return cls(
            cc=clean(query.get(CC_PARAM)),
            currency=clean(query.get(CURRENCY_PARAM)),
            culture=clean(query.get(CULTURE_PARAM)),
            accept_language=clean(request.headers.get(ACCEPT_LANGUAGE_HEADER)),
        )
