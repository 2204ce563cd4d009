"""Client configuration loaded from environment variables."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BINANCE_BASE, DEFAULT_TIMEOUT_MS
from .request import ClientConfig, Credentials, normalise_base_url


class BinanceSettings(BaseSettings):
    """Binance REST settings sourced from ``BINANCE_*`` variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    api_key: str = Field("", alias="BINANCE_API_KEY")
    api_secret: str = Field("", alias="BINANCE_API_SECRET")
    base_url: str = Field(BINANCE_BASE, alias="BINANCE_BASE_URL")
    recv_window: Optional[int] = Field(default=None, alias="BINANCE_RECV_WINDOW")
    timeout: int = Field(DEFAULT_TIMEOUT_MS, alias="BINANCE_TIMEOUT")
    disable_beautification: bool = Field(False, alias="BINANCE_DISABLE_BEAUTIFICATION")

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("BINANCE_TIMEOUT must be a positive number of milliseconds")
        return value

    @field_validator("recv_window")
    @classmethod
    def _check_recv_window(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("BINANCE_RECV_WINDOW must be positive when set")
        return value

    @field_validator("base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        return normalise_base_url(value)

    def to_client_config(self) -> ClientConfig:
        return ClientConfig(
            credentials=Credentials(key=self.api_key, secret=self.api_secret),
            base_url=self.base_url,
            recv_window=self.recv_window,
            timeout_ms=self.timeout,
            disable_beautification=self.disable_beautification,
        )


@lru_cache
def get_settings() -> BinanceSettings:
    """Return cached settings instance."""

    return BinanceSettings()  # type: ignore[call-arg]


__all__ = ["BinanceSettings", "get_settings"]
