"""Shared fixtures: an httpx client backed by MockTransport."""
from typing import Awaitable, Callable

import httpx
import pytest

from fakes import BASE_URL
from vl_client.client import VL
from vl_client.config import Config

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


@pytest.fixture
def config() -> Config:
    return Config(max_tokens=1024, base_url=BASE_URL, log_level="INFO")


@pytest.fixture
def make_client(config):
    """Build a VL whose HTTP traffic goes to ``handler``; records requests."""

    def _make(handler: Handler, timeout: float | None = None) -> tuple[VL, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        async def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            result = handler(request)
            if not isinstance(result, httpx.Response):
                result = await result
            return result

        http = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        return VL(timeout=timeout, config=config, http_client=http), seen

    return _make
