"""
Fake HTTP endpoints and clocks shared by the tests.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

import httpx


class FakeAPI:
    """
    Canned JSON endpoint served through ``httpx.MockTransport``.

    Records every request; set ``fail`` to simulate a connection error.
    """

    def __init__(
        self,
        payload: Any = None,
        status_code: int = 200,
        fail: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.payload = payload
        self.status_code = status_code
        self.fail = fail
        self.delay = delay
        self.calls: list[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now
