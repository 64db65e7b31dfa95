from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.models.market import AssetRecord
from app.services.coingecko import TransportOrStatusError
from app.services.dashboard import DashboardController


def _asset(coin_id: str, name: str, symbol: str) -> AssetRecord:
    return AssetRecord(
        id=coin_id,
        name=name,
        symbol=symbol,
        image=f"https://example.test/{coin_id}.png",
        market_cap_rank=1,
        current_price=2.5,
        market_cap=3_000_000.0,
        total_volume=500.0,
    )


ASSETS = [_asset("bitcoin", "Bitcoin", "btc"), _asset("dogecoin", "Dogecoin", "doge")]


@pytest.fixture()
def dashboard_client():
    state = {"outcome": ASSETS, "calls": 0}

    async def fake_fetch():
        state["calls"] += 1
        if isinstance(state["outcome"], Exception):
            raise state["outcome"]
        return state["outcome"]

    controller = DashboardController(fake_fetch)
    app = create_app(controller, start_jobs=False)
    client = TestClient(app)
    yield client, controller, state


def test_refresh_then_page_renders_cards(dashboard_client):
    client, _, state = dashboard_client

    resp = client.post("/refresh")
    assert resp.status_code == 200
    body = resp.json()
    assert body == {"accepted": True, "status": "loaded", "error": False, "count": 2}
    assert state["calls"] == 1

    page = client.get("/")
    assert page.status_code == 200
    assert page.headers["content-type"].startswith("text/html")
    assert page.text.count('class="crypto-card"') == 2
    assert "Last updated:" in page.text


def test_cards_fragment_filters_without_fetching(dashboard_client):
    client, controller, state = dashboard_client
    client.post("/refresh")

    resp = client.get("/cards", params={"q": "DOGE"})
    assert resp.status_code == 200
    assert resp.text.count('class="crypto-card"') == 1
    assert "Dogecoin" in resp.text
    assert controller.state.search_term == "DOGE"

    resp = client.get("/cards", params={"q": "nothing-here"})
    assert "No cryptocurrencies found matching your search." in resp.text
    assert "crypto-card" not in resp.text

    assert state["calls"] == 1


def test_failed_refresh_keeps_grid_and_shows_banner(dashboard_client):
    client, _, state = dashboard_client
    client.post("/refresh")
    grid_before = client.get("/cards").text

    state["outcome"] = TransportOrStatusError("HTTP error! status: 503", 503)
    resp = client.post("/refresh")
    assert resp.json()["status"] == "error"
    assert resp.json()["error"] is True

    assert client.get("/cards").text == grid_before
    assert 'class="error show"' in client.get("/").text


def test_assets_json_view(dashboard_client):
    client, _, _ = dashboard_client
    client.post("/refresh")

    resp = client.get("/api/assets", params={"q": "bit"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "loaded"
    assert body["total"] == 2
    assert body["count"] == 1
    assert body["assets"][0]["id"] == "bitcoin"
    assert body["last_updated"].endswith("Z")


def test_page_before_first_fetch_shows_no_results(dashboard_client):
    client, _, _ = dashboard_client
    page = client.get("/")
    assert page.status_code == 200
    assert "No cryptocurrencies found" in page.text


def test_health_endpoints(dashboard_client, monkeypatch):
    client, _, _ = dashboard_client
    monkeypatch.setenv("REFRESH_ENABLED", "false")
    from app.config import settings as settings_module

    settings_module.reset_settings()
    try:
        assert client.get("/live").json() == {"status": "ok"}

        resp = client.get("/ready")
        assert resp.status_code == 503
        assert resp.json()["degraded_reasons"] == ["no_market_data"]

        client.post("/refresh")
        resp = client.get("/ready")
        assert resp.status_code == 200
        assert resp.json()["checks"]["dashboard"]["assets"] == 2
        assert resp.json()["checks"]["dashboard"]["in_flight"] == 0
        assert resp.json()["checks"]["dashboard"]["generation"] == 1
    finally:
        settings_module.reset_settings()
