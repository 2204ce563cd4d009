"""Async client for the Binance REST API."""

from __future__ import annotations

import asyncio
import functools
import logging
import re
import time
from typing import Any, Callable, Mapping

import httpx

from .beautifier import Beautifier
from .config import BinanceSettings, get_settings
from .constants import (
    BINANCE_BASE,
    DEFAULT_TIMEOUT_MS,
    PATH_ACCOUNT,
    PATH_AGG_TRADES,
    PATH_ALL_BOOK_TICKERS,
    PATH_ALL_ORDERS,
    PATH_ALL_PRICES,
    PATH_DEPTH,
    PATH_KLINES,
    PATH_MY_TRADES,
    PATH_OPEN_ORDERS,
    PATH_ORDER,
    PATH_ORDER_TEST,
    PATH_PING,
    PATH_TICKER_24HR,
    PATH_TIME,
    PATH_USER_DATA_STREAM,
)
from .errors import (
    BinanceAPIError,
    BinanceResponseError,
    BinanceTransportError,
    format_binance_error,
)
from .request import ClientConfig, Credentials, RequestSpec, SecurityTier, build_request

LOGGER = logging.getLogger(__name__)

Callback = Callable[[BaseException | None, Any], None]
Hook = Callable[[Any, str], Any]
Query = Mapping[str, Any] | str | None


def _now_ms() -> int:
    return int(time.time() * 1000)


def _redact_signature(text: str) -> str:
    if not text:
        return ""
    return re.sub(r"(signature=)[0-9a-fA-F]+", r"\1<redacted>", text)


def _shape_query(query: Query, shorthand: str | None = None) -> dict[str, Any]:
    """Return a private copy of *query*, expanding a bare string to ``{shorthand: value}``."""

    if query is None:
        return {}
    if isinstance(query, str) and shorthand:
        return {shorthand: query}
    if isinstance(query, Mapping):
        return dict(query)
    raise TypeError(f"query must be a mapping, got {type(query).__name__}")


def _with_timestamp(params: dict[str, Any]) -> dict[str, Any]:
    if not params.get("timestamp"):
        params["timestamp"] = _now_ms()
    return params


def _deliver(callback: Callback, task: asyncio.Task) -> None:
    """Hand the settled outcome of *task* to a ``callback(error, payload)``."""

    if task.cancelled():
        callback(asyncio.CancelledError(), None)
        return
    error = task.exception()
    if error is not None:
        callback(error, None)
    else:
        callback(None, task.result())


class BinanceRest:
    """Thin asynchronous wrapper around the Binance REST API.

    Every endpoint method accepts an optional ``callback``. Without one it
    returns an awaitable task resolving to the payload or raising a
    :class:`~binance_rest.errors.BinanceRestError`. With one it returns
    ``None`` and later calls ``callback(error, None)`` or
    ``callback(None, payload)`` exactly once. Both styles need a running
    event loop.
    """

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        *,
        recv_window: int | None = None,
        timeout: int = DEFAULT_TIMEOUT_MS,
        disable_beautification: bool = False,
        base_url: str = BINANCE_BASE,
        client: httpx.AsyncClient | None = None,
        beautifier: Hook | None = None,
    ) -> None:
        self._config = ClientConfig(
            credentials=Credentials(key=api_key, secret=api_secret),
            base_url=base_url,
            recv_window=recv_window,
            timeout_ms=timeout or DEFAULT_TIMEOUT_MS,
            disable_beautification=disable_beautification,
        )
        self._beautify: Hook = beautifier or Beautifier()
        self._pending: set[asyncio.Task] = set()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(self._config.timeout_ms / 1000))

    @classmethod
    def from_settings(
        cls,
        settings: BinanceSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        beautifier: Hook | None = None,
    ) -> "BinanceRest":
        """Build a client from :class:`BinanceSettings` (environment by default)."""

        config = (settings or get_settings()).to_client_config()
        return cls(
            config.credentials.key,
            config.credentials.secret,
            recv_window=config.recv_window,
            timeout=config.timeout_ms,
            disable_beautification=config.disable_beautification,
            base_url=config.base_url,
            client=client,
            beautifier=beautifier,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "BinanceRest":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------
    def _make_request(
        self,
        query: Mapping[str, Any],
        callback: Callback | None,
        route: str,
        security: SecurityTier = SecurityTier.NONE,
        method: str | None = None,
    ) -> asyncio.Task | None:
        if callback is not None and not callable(callback):
            raise TypeError("callback must be callable or None")

        spec = build_request(self._config, route, query, security, method)
        return self.dispatch(spec, callback)

    def dispatch(self, spec: RequestSpec, callback: Callback | None = None) -> asyncio.Task | None:
        """Schedule the HTTP call described by *spec*.

        The task is the only place an outcome is produced; a callback is
        attached to it as a done-callback so it fires once the task settles.
        """

        if callback is not None and not callable(callback):
            raise TypeError("callback must be callable or None")

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._dispatch(spec))
        if callback is None:
            return task
        # The loop only keeps a weak reference to tasks nobody awaits.
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        task.add_done_callback(functools.partial(_deliver, callback))
        return None

    async def _dispatch(self, spec: RequestSpec) -> Any:
        safe_url = _redact_signature(spec.url)
        LOGGER.info("→ %s %s", spec.method, safe_url)

        try:
            response = await self._client.request(
                spec.method,
                spec.url,
                headers=dict(spec.headers),
                timeout=spec.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            LOGGER.warning("Binance request %s %s failed: %s", spec.method, safe_url, exc)
            raise BinanceTransportError(
                format_binance_error(spec.method, safe_url, f"{type(exc).__name__}: {exc}"),
                cause=exc,
            ) from exc

        status_code = response.status_code
        LOGGER.info("Binance response %s %s status=%s", spec.method, safe_url, status_code)

        if status_code < 200 or status_code > 299:
            payload = self._parse_error_body(response)
            LOGGER.warning(
                "Binance rejected %s %s status=%s payload=%s",
                spec.method,
                safe_url,
                status_code,
                payload,
            )
            raise BinanceAPIError(
                format_binance_error(spec.method, safe_url, payload, status_code=status_code),
                status_code=status_code,
                payload=payload,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise BinanceResponseError(
                format_binance_error(
                    spec.method,
                    safe_url,
                    "response body is not valid JSON",
                    status_code=status_code,
                ),
                status_code=status_code,
                body=response.text,
            ) from exc

        LOGGER.debug("Binance payload %s %s: %s", spec.method, safe_url, payload)
        return self._normalise(payload, spec.route)

    @staticmethod
    def _parse_error_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _normalise(self, payload: Any, route: str) -> Any:
        if self._config.disable_beautification:
            return payload
        if isinstance(payload, list):
            return [self._beautify(item, route) for item in payload]
        return self._beautify(payload, route)

    # ------------------------------------------------------------------
    # Public market data
    # ------------------------------------------------------------------
    def ping(self, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request({}, callback, PATH_PING)

    def time(self, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request({}, callback, PATH_TIME)

    def depth(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request(_shape_query(query, "symbol"), callback, PATH_DEPTH)

    def agg_trades(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request(_shape_query(query, "symbol"), callback, PATH_AGG_TRADES)

    def klines(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request(_shape_query(query), callback, PATH_KLINES)

    def ticker_24hr(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request(_shape_query(query, "symbol"), callback, PATH_TICKER_24HR)

    def all_prices(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request(_shape_query(query, "symbol"), callback, PATH_ALL_PRICES)

    def all_book_tickers(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request(_shape_query(query, "symbol"), callback, PATH_ALL_BOOK_TICKERS)

    # ------------------------------------------------------------------
    # Signed trading and account endpoints
    # ------------------------------------------------------------------
    def new_order(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        params = _with_timestamp(_shape_query(query))
        return self._make_request(params, callback, PATH_ORDER, SecurityTier.SIGNED, "POST")

    def test_order(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        params = _with_timestamp(_shape_query(query))
        return self._make_request(params, callback, PATH_ORDER_TEST, SecurityTier.SIGNED, "POST")

    def query_order(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        params = _with_timestamp(_shape_query(query, "symbol"))
        return self._make_request(params, callback, PATH_ORDER, SecurityTier.SIGNED)

    def cancel_order(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        params = _with_timestamp(_shape_query(query, "symbol"))
        return self._make_request(params, callback, PATH_ORDER, SecurityTier.SIGNED, "DELETE")

    def open_orders(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        params = _with_timestamp(_shape_query(query, "symbol"))
        return self._make_request(params, callback, PATH_OPEN_ORDERS, SecurityTier.SIGNED)

    def all_orders(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        params = _with_timestamp(_shape_query(query, "symbol"))
        return self._make_request(params, callback, PATH_ALL_ORDERS, SecurityTier.SIGNED)

    def account(
        self, query: Query | Callback = None, callback: Callback | None = None
    ) -> asyncio.Task | None:
        if callable(query) and callback is None:
            query, callback = None, query
        params = _with_timestamp(_shape_query(query))
        return self._make_request(params, callback, PATH_ACCOUNT, SecurityTier.SIGNED)

    def my_trades(self, query: Query = None, callback: Callback | None = None) -> asyncio.Task | None:
        params = _with_timestamp(_shape_query(query, "symbol"))
        return self._make_request(params, callback, PATH_MY_TRADES, SecurityTier.SIGNED)

    # ------------------------------------------------------------------
    # User data stream (API key only)
    # ------------------------------------------------------------------
    def start_user_data_stream(self, callback: Callback | None = None) -> asyncio.Task | None:
        return self._make_request({}, callback, PATH_USER_DATA_STREAM, SecurityTier.API_KEY, "POST")

    def keep_alive_user_data_stream(
        self, query: Query = None, callback: Callback | None = None
    ) -> asyncio.Task | None:
        params = _shape_query(query, "listenKey")
        return self._make_request(params, callback, PATH_USER_DATA_STREAM, SecurityTier.API_KEY, "PUT")

    def close_user_data_stream(
        self, query: Query = None, callback: Callback | None = None
    ) -> asyncio.Task | None:
        params = _shape_query(query, "listenKey")
        return self._make_request(params, callback, PATH_USER_DATA_STREAM, SecurityTier.API_KEY, "DELETE")


__all__ = ["BinanceRest"]
