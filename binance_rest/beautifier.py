"""Rename terse Binance response fields into readable names."""

from __future__ import annotations

from typing import Any, Mapping

from .constants import PATH_DEPTH, PATH_KLINES

FIELD_NAMES: Mapping[str, str] = {
    "a": "aggTradeId",
    "b": "bestBid",
    "B": "bestBidQuantity",
    "c": "close",
    "f": "firstTradeId",
    "h": "high",
    "l": "lastTradeId",
    "m": "maker",
    "M": "bestMatch",
    "n": "trades",
    "o": "open",
    "p": "price",
    "q": "quantity",
    "s": "symbol",
    "t": "tradeId",
    "T": "timestamp",
    "v": "volume",
    "x": "ignored",
}

KLINE_FIELDS = (
    "openTime",
    "open",
    "high",
    "low",
    "close",
    "volume",
    "closeTime",
    "quoteAssetVolume",
    "trades",
    "takerBaseAssetVolume",
    "takerQuoteAssetVolume",
    "ignored",
)

BOOK_LEVEL_FIELDS = ("price", "quantity")


def _zip_row(names: tuple[str, ...], row: list[Any]) -> dict[str, Any]:
    return {name: value for name, value in zip(names, row)}


class Beautifier:
    """Default post-processing hook for REST payloads.

    ``beautify`` receives one record at a time together with the route that
    produced it and returns a new object; the input is left untouched.
    """

    def __init__(self, field_names: Mapping[str, str] | None = None) -> None:
        self._field_names = dict(FIELD_NAMES if field_names is None else field_names)

    def __call__(self, record: Any, route: str | None = None) -> Any:
        return self.beautify(record, route)

    def beautify(self, record: Any, route: str | None = None) -> Any:
        if route == PATH_KLINES and isinstance(record, list):
            return _zip_row(KLINE_FIELDS, record)
        if isinstance(record, Mapping):
            if route == PATH_DEPTH:
                return self._beautify_depth(record)
            return self._rename_keys(record)
        return record

    def _rename_keys(self, record: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in record.items():
            name = self._field_names.get(key, key)
            # Never let a renamed key clobber a field that was already spelled out.
            if name != key and name in record:
                name = key
            result[name] = value
        return result

    @staticmethod
    def _beautify_depth(record: Mapping[str, Any]) -> dict[str, Any]:
        result = dict(record)
        for side in ("bids", "asks"):
            levels = record.get(side)
            if isinstance(levels, list):
                result[side] = [
                    _zip_row(BOOK_LEVEL_FIELDS, level) if isinstance(level, list) else level
                    for level in levels
                ]
        return result


__all__ = ["Beautifier", "FIELD_NAMES", "KLINE_FIELDS"]
