# app/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

DEFAULT_ASSETS = [
    "bitcoin",
    "ethereum",
    "binancecoin",
    "cardano",
    "solana",
    "polkadot",
    "dogecoin",
    "avalanche-2",
    "polygon",
    "chainlink",
    "litecoin",
    "bitcoin-cash",
    "algorand",
    "stellar",
]


def parse_csv(value: str | None, default: List[str]) -> List[str]:
    if not value:
        return default
    items = [x.strip() for x in value.split(",")]
    return [x for x in items if x]


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_int(value: str | None, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    return int(value)


def parse_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


@dataclass(frozen=True)
class Settings:
    COINGECKO_URL: str
    VS_CURRENCY: str
    TRACKED_ASSETS: List[str]
    PER_PAGE: int
    PAGE: int
    HTTP_TIMEOUT_SECONDS: float
    REFRESH_ENABLED: bool
    REFRESH_INTERVAL_SECONDS: int
    LOG_LEVEL: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            COINGECKO_URL=os.getenv("COINGECKO_URL", "https://api.coingecko.com/api/v3/coins/markets"),
            VS_CURRENCY=os.getenv("VS_CURRENCY", "usd"),
            TRACKED_ASSETS=parse_csv(os.getenv("TRACKED_ASSETS"), list(DEFAULT_ASSETS)),
            PER_PAGE=parse_int(os.getenv("PER_PAGE"), 50),
            PAGE=parse_int(os.getenv("PAGE"), 1),
            HTTP_TIMEOUT_SECONDS=parse_float(os.getenv("HTTP_TIMEOUT_SECONDS"), 10.0),
            REFRESH_ENABLED=parse_bool(os.getenv("REFRESH_ENABLED"), True),
            # never below 5s
            REFRESH_INTERVAL_SECONDS=max(5, parse_int(os.getenv("REFRESH_INTERVAL_SECONDS"), 60)),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the env."""
    global _settings
    _settings = None
