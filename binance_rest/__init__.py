"""Async client for the Binance REST API."""

from .beautifier import Beautifier
from .client import BinanceRest
from .config import BinanceSettings, get_settings
from .errors import BinanceAPIError, BinanceResponseError, BinanceRestError, BinanceTransportError
from .request import ClientConfig, Credentials, RequestSpec, SecurityTier, build_request
from .signing import build_signature

__all__ = [
    "Beautifier",
    "BinanceAPIError",
    "BinanceResponseError",
    "BinanceRest",
    "BinanceRestError",
    "BinanceSettings",
    "BinanceTransportError",
    "ClientConfig",
    "Credentials",
    "RequestSpec",
    "SecurityTier",
    "build_request",
    "build_signature",
    "get_settings",
]
