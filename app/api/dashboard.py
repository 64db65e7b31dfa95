from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.config.settings import get_settings
from app.services.dashboard import DashboardController
from app.services.renderer import dashboard_context, grid_context, templates

router = APIRouter(tags=["dashboard"])


def get_controller(request: Request) -> DashboardController:
    return request.app.state.dashboard


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(
    request: Request,
    q: Optional[str] = None,
    controller: DashboardController = Depends(get_controller),
):
    if q is not None:
        controller.set_search_term(q)
    context = dashboard_context(controller.snapshot(), get_settings().REFRESH_INTERVAL_SECONDS)
    return templates.TemplateResponse(request, "dashboard.html", context)


@router.get("/cards", response_class=HTMLResponse)
async def cards_fragment(
    request: Request,
    q: str = "",
    controller: DashboardController = Depends(get_controller),
):
    """
    Grid fragment for the search box. Filters the already-fetched list;
    never calls CoinGecko.
    """
    controller.set_search_term(q)
    return templates.TemplateResponse(request, "_grid.html", grid_context(controller.snapshot()))


@router.post("/refresh")
async def manual_refresh(controller: DashboardController = Depends(get_controller)):
    accepted = await controller.refresh(manual=True)
    view = controller.snapshot()
    return {
        "accepted": accepted,
        "status": view.status.value,
        "error": view.error_visible,
        "count": len(view.assets),
    }


@router.get("/api/assets")
async def assets_json(
    q: Optional[str] = None,
    controller: DashboardController = Depends(get_controller),
):
    if q is not None:
        controller.set_search_term(q)
    return controller.snapshot().to_dict()
