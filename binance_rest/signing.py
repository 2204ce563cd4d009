"""Signing helpers for Binance REST requests."""
from __future__ import annotations

import hashlib

from .constants import SIGNATURE_SEPARATOR


def build_signature(secret: str, query_string: str) -> str:
    """Return the hex SHA256 digest of ``secret|query_string``.

    This is a plain keyed hash rather than HMAC. The endpoint verifies exactly
    this construction, so the digest input must stay byte-for-byte identical
    to the query string that is sent on the wire.
    """

    message = f"{secret}{SIGNATURE_SEPARATOR}{query_string}"
    return hashlib.sha256(message.encode("utf-8")).hexdigest()


__all__ = ["build_signature"]
