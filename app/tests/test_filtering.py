from __future__ import annotations

from app.models.market import AssetRecord
from app.services.filtering import filter_assets, normalize_search_term


def _asset(coin_id: str, name: str, symbol: str) -> AssetRecord:
    return AssetRecord(
        id=coin_id,
        name=name,
        symbol=symbol,
        current_price=1.0,
        market_cap=1.0,
        total_volume=1.0,
    )


ASSETS = (
    _asset("bitcoin", "Bitcoin", "btc"),
    _asset("ethereum", "Ethereum", "eth"),
    _asset("bitcoin-cash", "Bitcoin Cash", "bch"),
    _asset("stellar", "Stellar", "xlm"),
    _asset("solana", "Solana", "sol"),
)

TERMS = ["", "   ", "bit", "BIT", " eth ", "x", "sol", "cash", "zzz", "c"]


def test_blank_term_returns_full_list_in_order():
    for term in ("", "   ", "\t\n", None):
        assert filter_assets(ASSETS, term) == ASSETS


def test_filter_is_idempotent():
    for term in TERMS:
        once = filter_assets(ASSETS, term)
        assert filter_assets(once, term) == once


def test_membership_matches_name_or_symbol_case_insensitive():
    for term in TERMS:
        needle = term.strip().lower()
        result = filter_assets(ASSETS, term)
        for asset in ASSETS:
            expected = needle in asset.name.lower() or needle in asset.symbol.lower()
            assert (asset in result) is expected, (term, asset.id)


def test_filter_preserves_input_order():
    result = filter_assets(ASSETS, "bit")
    assert [a.id for a in result] == ["bitcoin", "bitcoin-cash"]


def test_symbol_only_match():
    assert [a.id for a in filter_assets(ASSETS, "XLM")] == ["stellar"]


def test_no_match_is_empty():
    assert filter_assets(ASSETS, "dogecoin") == ()


def test_normalize_search_term():
    assert normalize_search_term("  Bit ") == "Bit"
    assert normalize_search_term(None) == ""
