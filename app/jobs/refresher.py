# app/jobs/refresher.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from app.config.settings import get_settings
from app.services.dashboard import DashboardController
from app.utils.time import iso_z_from_epoch

logger = logging.getLogger("crypto_dashboard.refresher")


@dataclass
class RefresherState:
    started: bool = False
    stop_event: Optional[asyncio.Event] = None
    task: Optional[asyncio.Task] = None
    interval_s: float = 60
    started_at: Optional[float] = None
    ticks: int = 0
    last_run_ts: Optional[float] = None
    pending: Set[asyncio.Task] = field(default_factory=set)


_state = RefresherState()


async def _tick(controller: DashboardController) -> None:
    t0 = time.perf_counter()
    try:
        await controller.refresh()
    except asyncio.CancelledError:
        raise
    except Exception:
        dt_ms = int((time.perf_counter() - t0) * 1000)
        logger.exception("refresh tick error | %dms", dt_ms)


async def _refresh_loop(controller: DashboardController, stop_event: asyncio.Event, interval: float) -> None:
    next_tick = time.monotonic()  # run immediately once

    while not stop_event.is_set():
        now = time.monotonic()
        if now < next_tick:
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=(next_tick - now))
            except asyncio.TimeoutError:
                pass
            continue

        _state.ticks += 1
        _state.last_run_ts = time.time()

        # a tick fires whether or not the previous fetch has completed
        task = asyncio.create_task(_tick(controller))
        _state.pending.add(task)
        task.add_done_callback(_state.pending.discard)

        next_tick += interval
        if next_tick < time.monotonic() - interval:
            next_tick = time.monotonic() + interval

    logger.info("refresher stopped")


def start_refresher(controller: DashboardController, interval_s: Optional[float] = None) -> bool:
    s = get_settings()
    if not s.REFRESH_ENABLED:
        logger.info("refresher disabled (REFRESH_ENABLED=false)")
        return False

    if _state.started:
        logger.warning("refresher already started (in-process)")
        return True

    _state.stop_event = asyncio.Event()
    _state.interval_s = interval_s if interval_s is not None else s.REFRESH_INTERVAL_SECONDS
    _state.started = True
    _state.started_at = time.time()
    _state.ticks = 0
    _state.last_run_ts = None
    _state.task = asyncio.create_task(
        _refresh_loop(controller, _state.stop_event, _state.interval_s),
        name="dashboard-refresher",
    )
    logger.info("refresher started | interval_s=%s", _state.interval_s)
    return True


async def stop_refresher() -> None:
    if not _state.started:
        return

    if _state.stop_event:
        _state.stop_event.set()

    if _state.task:
        _state.task.cancel()
        await asyncio.gather(_state.task, return_exceptions=True)

    pending = list(_state.pending)
    for t in pending:
        t.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    _state.pending.clear()

    _state.task = None
    _state.stop_event = None
    _state.started = False


def get_refresher_status() -> Dict[str, Any]:
    running = bool(_state.started and _state.stop_event and not _state.stop_event.is_set())
    return {
        "running": running,
        "interval_s": _state.interval_s,
        "ticks": _state.ticks,
        "started_at_iso": iso_z_from_epoch(_state.started_at),
        "last_run_iso": iso_z_from_epoch(_state.last_run_ts),
    }
