"""Pytest configuration for the binance-rest test suite."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Callable, Iterator

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from binance_rest import BinanceRest  # noqa: E402


@pytest.fixture
def make_client() -> Iterator[Callable[..., tuple[BinanceRest, list[httpx.Request]]]]:
    """Return a factory wiring :class:`BinanceRest` to an ``httpx.MockTransport``.

    The factory returns the client plus the list of requests the transport saw.
    Every httpx client it creates is closed on teardown.
    """

    created: list[httpx.AsyncClient] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        **kwargs: Any,
    ) -> tuple[BinanceRest, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        created.append(http_client)
        kwargs.setdefault("api_key", "key")
        kwargs.setdefault("api_secret", "secret")
        return BinanceRest(client=http_client, **kwargs), seen

    yield factory

    for http_client in created:
        asyncio.run(http_client.aclose())
