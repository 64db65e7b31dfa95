"""Helpers for interacting with the public CoinGecko API."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from app.config.settings import get_settings
from app.models.market import AssetRecord

logger = logging.getLogger("crypto_dashboard.coingecko")

PRICE_CHANGE_WINDOWS = ("1h", "24h", "7d")


class MarketDataError(RuntimeError):
    """Base class for anything that stops a fetch cycle from producing data."""


class TransportOrStatusError(MarketDataError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(MarketDataError):
    pass


def build_market_params(
    ids: Sequence[str],
    vs_currency: str = "usd",
    order: str = "market_cap_desc",
    per_page: int = 50,
    page: int = 1,
    sparkline: bool = False,
) -> dict[str, Any]:
    return {
        "vs_currency": vs_currency,
        "ids": ",".join(ids),
        "order": order,
        "per_page": per_page,
        "page": page,
        "sparkline": str(sparkline).lower(),
        "price_change_percentage": ",".join(PRICE_CHANGE_WINDOWS),
    }


def parse_market_payload(payload: Any) -> list[AssetRecord]:
    if not isinstance(payload, list):
        raise ParseError(f"expected a JSON array, got {type(payload).__name__}")
    try:
        return [AssetRecord.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise ParseError(f"unexpected market payload shape: {exc.error_count()} error(s)") from exc


async def fetch_market_data(
    ids: Sequence[str] | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> list[AssetRecord]:
    """Fetch one batched markets snapshot for the tracked assets.

    Raises TransportOrStatusError for network failures and non-2xx responses,
    ParseError when the body is not a list of market records.
    """
    settings = get_settings()
    params = build_market_params(
        ids if ids is not None else settings.TRACKED_ASSETS,
        vs_currency=settings.VS_CURRENCY,
        per_page=settings.PER_PAGE,
        page=settings.PAGE,
    )

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)

    try:
        response = await client.get(settings.COINGECKO_URL, params=params)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        raise TransportOrStatusError(f"HTTP error! status: {status}", status_code=status) from exc
    except httpx.HTTPError as exc:
        raise TransportOrStatusError(f"Unable to reach CoinGecko: {exc!r}") from exc
    finally:
        if owns_client:
            await client.aclose()

    try:
        payload = response.json()
    except ValueError as exc:
        raise ParseError("response body is not valid JSON") from exc

    records = parse_market_payload(payload)
    logger.debug("fetched %d market records", len(records))
    return records
