"""Exceptions and message helpers for failed Binance REST calls."""

from __future__ import annotations

from typing import Any, Mapping


def _error_details(payload: Any) -> str:
    """Return "code msg" for a Binance error body, whatever JSON shape it has."""

    if isinstance(payload, Mapping):
        parts = [payload.get("code"), payload.get("msg") or payload.get("message")]
        return " ".join(str(part) for part in parts if part not in (None, ""))
    if isinstance(payload, list):
        return "; ".join(filter(None, (_error_details(item) for item in payload)))
    return "" if payload in (None, "") else str(payload)


def format_binance_error(
    method: str | None,
    url: str | None,
    payload: Any,
    *,
    status_code: int | None = None,
) -> str:
    """Return a human readable error string including method and URL details."""

    method_token = (method or "").strip().upper() or "GET"
    details = _error_details(payload)
    base = f"Failed to contact Binance: {method_token} {url or '<unknown>'}"
    if status_code is not None:
        base = f"{base} (HTTP {status_code})"
    if details:
        base = f"{base} → {details}"
    return base


class BinanceRestError(RuntimeError):
    """Base exception for every failed Binance REST call."""


class BinanceTransportError(BinanceRestError):
    """Raised when no HTTP response was obtained (network failure or timeout)."""

    def __init__(self, message: str, *, cause: BaseException) -> None:
        super().__init__(message)
        self.cause = cause


class BinanceAPIError(BinanceRestError):
    """Raised when Binance answers with a status code outside ``200..299``.

    ``payload`` holds the decoded JSON error body exactly as Binance sent it,
    or the raw response text when the body could not be decoded.
    """

    def __init__(self, message: str, *, status_code: int, payload: Any) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload

    @property
    def code(self) -> Any | None:
        if isinstance(self.payload, Mapping):
            return self.payload.get("code")
        return None

    @property
    def msg(self) -> str | None:
        if isinstance(self.payload, Mapping):
            message = self.payload.get("msg") or self.payload.get("message")
            return None if message is None else str(message)
        return None


class BinanceResponseError(BinanceRestError):
    """Raised when a successful response body is not valid JSON."""

    def __init__(self, message: str, *, status_code: int, body: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


__all__ = [
    "BinanceAPIError",
    "BinanceResponseError",
    "BinanceRestError",
    "BinanceTransportError",
    "format_binance_error",
]
