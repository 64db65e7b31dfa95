from __future__ import annotations

from typing import Sequence

from app.models.market import AssetRecord


def normalize_search_term(term: str | None) -> str:
    return (term or "").strip()


def matches(asset: AssetRecord, term: str) -> bool:
    """Case-insensitive substring match on name or symbol. `term` must be lowercased."""
    return term in asset.name.lower() or term in asset.symbol.lower()


def filter_assets(assets: Sequence[AssetRecord], term: str | None) -> tuple[AssetRecord, ...]:
    """
    Return the assets whose name or symbol contains `term`, in input order.
    Blank terms return the input unchanged.
    """
    needle = normalize_search_term(term).lower()
    if not needle:
        return tuple(assets)
    return tuple(a for a in assets if matches(a, needle))
