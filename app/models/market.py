"""Pydantic models for market-related payloads."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AssetRecord(BaseModel):
    """One asset's snapshot from the CoinGecko markets payload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    symbol: str
    name: str
    image: str = ""
    market_cap_rank: Optional[int] = None
    current_price: float
    market_cap: float
    total_volume: float

    # CoinGecko returns the windowed changes as *_in_currency when
    # price_change_percentage=1h,24h,7d is requested.
    price_change_percentage_1h: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("price_change_percentage_1h", "price_change_percentage_1h_in_currency"),
    )
    price_change_percentage_24h: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("price_change_percentage_24h", "price_change_percentage_24h_in_currency"),
    )
    price_change_percentage_7d: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("price_change_percentage_7d", "price_change_percentage_7d_in_currency"),
    )
