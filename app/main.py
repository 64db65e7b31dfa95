# app/main.py
from __future__ import annotations

from fastapi import FastAPI

from app.api.dashboard import router as dashboard_router
from app.api.health import router as health_router

from app.config.log import configure_logging
from app.jobs.refresher import start_refresher, stop_refresher
from app.services.dashboard import DashboardController


def create_app(controller: DashboardController | None = None, start_jobs: bool = True) -> FastAPI:
    app = FastAPI(title="Crypto Dashboard")
    app.state.dashboard = controller or DashboardController()

    # Routers
    app.include_router(health_router)
    app.include_router(dashboard_router)

    @app.on_event("startup")
    async def on_startup() -> None:
        if start_jobs:
            start_refresher(app.state.dashboard)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await stop_refresher()

    return app


configure_logging()
app = create_app()
