"""Request descriptions and query string building for Binance REST calls."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import quote, urlencode

from .constants import (
    API_KEY_HEADER,
    BINANCE_BASE,
    DEFAULT_TIMEOUT_MS,
    HTTP_METHODS,
    SIGNATURE_PARAM,
)
from .signing import build_signature


class SecurityTier(enum.Enum):
    """Authorisation level an endpoint requires."""

    NONE = "NONE"
    API_KEY = "API-KEY"
    SIGNED = "SIGNED"


def normalise_base_url(base_url: str | None) -> str:
    """Return *base_url* with exactly the trailing slash routes are appended to."""

    token = (base_url or "").strip()
    if not token:
        return BINANCE_BASE
    return token if token.endswith("/") else f"{token}/"


@dataclass(frozen=True)
class Credentials:
    key: str = field(repr=False)
    secret: str = field(repr=False)


@dataclass(frozen=True)
class ClientConfig:
    """Per-client settings shared read-only by every request."""

    credentials: Credentials
    base_url: str = BINANCE_BASE
    recv_window: int | None = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    disable_beautification: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalise_base_url(self.base_url))


@dataclass(frozen=True)
class RequestSpec:
    """Fully qualified description of a single HTTP call."""

    base_url: str
    route: str
    query: Mapping[str, str]
    method: str = "GET"
    tier: SecurityTier = SecurityTier.NONE
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    query_string: str = ""
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (float, Decimal)):
        # Render via ``Decimal`` so 0.1 is sent as "0.1" and never as an exponent.
        decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
        text = format(decimal_value, "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text or "0"
    return str(value)


def encode_query(params: Mapping[str, Any]) -> str:
    """Return ``key=value&...`` for *params*, keeping insertion order.

    ``None`` values are dropped. The escaping matches ``encodeURIComponent`` so
    the string that is signed is the one the server reconstructs.
    """

    items = [(str(key), _stringify(value)) for key, value in params.items() if value is not None]
    if not items:
        return ""
    return urlencode(items, safe="-_.!~*'()", quote_via=quote)


def build_request(
    config: ClientConfig,
    route: str,
    query: Mapping[str, Any],
    tier: SecurityTier = SecurityTier.NONE,
    method: str | None = None,
) -> RequestSpec:
    """Assemble the :class:`RequestSpec` for *route*.

    Raises ``TypeError`` when *query* is not a mapping and ``ValueError`` for
    an unknown tier or HTTP verb. Nothing touches the network here.
    """

    if not isinstance(query, Mapping):
        raise TypeError(f"query must be a mapping, got {type(query).__name__}")
    if not isinstance(tier, SecurityTier):
        raise ValueError(f"Unknown security tier: {tier!r}")

    method_token = (method or "GET").strip().upper()
    if method_token not in HTTP_METHODS:
        raise ValueError(f"Unsupported HTTP method: {method!r}")

    params = dict(query)
    if (
        tier is SecurityTier.SIGNED
        and config.recv_window
        and params.get("recvWindow") is None
    ):
        params["recvWindow"] = config.recv_window

    query_string = encode_query(params)
    url = f"{config.base_url}{route}"
    if query_string:
        url = f"{url}?{query_string}"

    headers: dict[str, str] = {}
    if tier is SecurityTier.NONE:
        pass
    elif tier is SecurityTier.API_KEY:
        headers[API_KEY_HEADER] = config.credentials.key
    elif tier is SecurityTier.SIGNED:
        headers[API_KEY_HEADER] = config.credentials.key
        signature = build_signature(config.credentials.secret, query_string)
        separator = "&" if query_string else "?"
        url = f"{url}{separator}{SIGNATURE_PARAM}={signature}"
    else:  # pragma: no cover - the enum is closed
        raise ValueError(f"Unknown security tier: {tier!r}")

    return RequestSpec(
        base_url=config.base_url,
        route=route,
        query=MappingProxyType({key: _stringify(value) for key, value in params.items() if value is not None}),
        method=method_token,
        tier=tier,
        timeout_ms=config.timeout_ms,
        query_string=query_string,
        url=url,
        headers=MappingProxyType(headers),
    )


__all__ = [
    "ClientConfig",
    "Credentials",
    "RequestSpec",
    "SecurityTier",
    "build_request",
    "encode_query",
    "normalise_base_url",
]
