"""Jinja2 rendering for the dashboard page and its card grid."""

from __future__ import annotations

import os
from typing import Any, Dict, Sequence

from fastapi.templating import Jinja2Templates

from app.models.market import AssetRecord
from app.services.dashboard import DashboardView
from app.services.formatting import (
    change_class,
    format_large_number,
    format_percentage,
    format_price,
    format_rank,
)
from app.utils.time import local_clock

NO_RESULTS_TEXT = "No cryptocurrencies found matching your search."

CHANGE_WINDOWS = (
    ("1H", "price_change_percentage_1h"),
    ("24H", "price_change_percentage_24h"),
    ("7D", "price_change_percentage_7d"),
)

templates_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

# autoescape is on for every template
templates = Jinja2Templates(directory=templates_dir)
templates.env.filters.update(
    price=format_price,
    large_number=format_large_number,
    percentage=format_percentage,
    change_class=change_class,
    rank=format_rank,
    clock=local_clock,
)
templates.env.globals.update(change_windows=CHANGE_WINDOWS, no_results_text=NO_RESULTS_TEXT)


def grid_context(view: DashboardView) -> Dict[str, Any]:
    return {"assets": view.assets, "show_loading": view.show_loading}


def dashboard_context(view: DashboardView, refresh_interval_s: int = 60) -> Dict[str, Any]:
    return {
        **grid_context(view),
        "status": view.status.value,
        "search_term": view.search_term,
        "last_updated": view.last_updated,
        "error_visible": view.error_visible,
        "refresh_disabled": view.refresh_disabled,
        "refresh_ms": int(refresh_interval_s) * 1000,
    }


def render_card(asset: AssetRecord) -> str:
    return templates.get_template("_card.html").render(asset=asset)


def render_cards(assets: Sequence[AssetRecord]) -> str:
    """Cards for `assets`, or the single no-results placeholder when empty."""
    return templates.get_template("_grid.html").render(assets=assets, show_loading=False)


def render_grid(view: DashboardView) -> str:
    return templates.get_template("_grid.html").render(grid_context(view))


def render_dashboard(view: DashboardView, refresh_interval_s: int = 60) -> str:
    return templates.get_template("dashboard.html").render(dashboard_context(view, refresh_interval_s))
