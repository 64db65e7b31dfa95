# app/api/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, Response

from app.config.settings import get_settings
from app.jobs.refresher import get_refresher_status
from app.services.dashboard import DashboardController
from app.utils.time import iso_z_from_epoch, isoformat_z

router = APIRouter(tags=["health"])

APP_STARTED_AT = time.time()


def _now_meta() -> Dict[str, Any]:
    now_ts = time.time()
    now_dt = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    return {
        "now_unix": int(now_ts),
        "now_iso": now_dt.isoformat().replace("+00:00", "Z"),
        "uptime_s": int(now_ts - APP_STARTED_AT),
    }


def _check_dashboard(controller: DashboardController) -> Dict[str, Any]:
    st = controller.state
    return {
        "ok": st.last_updated is not None,
        "status": st.status.value,
        "error": st.error_visible,
        "assets": len(st.all_assets),
        "last_updated_iso": isoformat_z(st.last_updated),
        "last_success_ms": st.stats.get("last_success_ms"),
        "last_error_iso": iso_z_from_epoch(st.stats.get("last_error_ts")),
        "consecutive_failures": st.stats.get("consecutive_failures", 0),
        "in_flight": st.in_flight,
        "generation": st.generation,
    }


def _check_refresher() -> Dict[str, Any]:
    status = get_refresher_status()
    enabled = get_settings().REFRESH_ENABLED
    status["enabled"] = enabled
    status["ok"] = status["running"] or not enabled
    return status


@router.get("/live")
async def live():
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request, response: Response):
    checks = {
        "dashboard": _check_dashboard(request.app.state.dashboard),
        "refresher": _check_refresher(),
    }

    degraded_reasons = []
    if not checks["dashboard"]["ok"]:
        degraded_reasons.append("no_market_data")
    if not checks["refresher"]["ok"]:
        degraded_reasons.append("refresher_not_running")

    payload: Dict[str, Any] = {**_now_meta(), "checks": checks}
    if degraded_reasons:
        payload["status"] = "degraded"
        payload["degraded"] = True
        payload["degraded_reasons"] = degraded_reasons
        response.status_code = 503
    else:
        payload["status"] = "ok"
        payload["degraded"] = False
        payload["degraded_reasons"] = []
    return payload
