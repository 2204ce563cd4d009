"""Canonical Binance REST endpoint constants used by the client package."""

from __future__ import annotations


# Versioned REST origin. Every route below is relative to this prefix and the
# trailing slash is required for plain string concatenation.
BINANCE_BASE = "https://www.binance.com/api/v1/"

API_KEY_HEADER = "X-MBX-APIKEY"
SIGNATURE_PARAM = "signature"
SIGNATURE_SEPARATOR = "|"

DEFAULT_TIMEOUT_MS = 15_000

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

# Public market data.
PATH_PING = "ping"
PATH_TIME = "time"
PATH_DEPTH = "depth"
PATH_AGG_TRADES = "aggTrades"
PATH_KLINES = "klines"
PATH_TICKER_24HR = "ticker/24hr"
PATH_ALL_PRICES = "ticker/allPrices"
PATH_ALL_BOOK_TICKERS = "ticker/allBookTickers"

# Signed trading and account endpoints.
PATH_ORDER = "order"
PATH_ORDER_TEST = "order/test"
PATH_OPEN_ORDERS = "openOrders"
PATH_ALL_ORDERS = "allOrders"
PATH_ACCOUNT = "account"
PATH_MY_TRADES = "myTrades"

# User data stream endpoints only need the API key header.
PATH_USER_DATA_STREAM = "userDataStream"


__all__ = [
    "BINANCE_BASE",
    "API_KEY_HEADER",
    "SIGNATURE_PARAM",
    "SIGNATURE_SEPARATOR",
    "DEFAULT_TIMEOUT_MS",
    "HTTP_METHODS",
    "PATH_PING",
    "PATH_TIME",
    "PATH_DEPTH",
    "PATH_AGG_TRADES",
    "PATH_KLINES",
    "PATH_TICKER_24HR",
    "PATH_ALL_PRICES",
    "PATH_ALL_BOOK_TICKERS",
    "PATH_ORDER",
    "PATH_ORDER_TEST",
    "PATH_OPEN_ORDERS",
    "PATH_ALL_ORDERS",
    "PATH_ACCOUNT",
    "PATH_MY_TRADES",
    "PATH_USER_DATA_STREAM",
]
