# app/services/dashboard.py
from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple

from app.models.market import AssetRecord
from app.services.coingecko import MarketDataError, fetch_market_data
from app.services.filtering import filter_assets, normalize_search_term
from app.utils.time import isoformat_z, utcnow

logger = logging.getLogger("crypto_dashboard.dashboard")

Fetcher = Callable[[], Awaitable[Sequence[AssetRecord]]]


class DashboardStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class DashboardState:
    all_assets: Tuple[AssetRecord, ...] = ()
    filtered_assets: Tuple[AssetRecord, ...] = ()
    search_term: str = ""
    last_updated: Optional[datetime] = None
    status: DashboardStatus = DashboardStatus.IDLE
    error_visible: bool = False
    generation: int = 0                 # id of the latest initiated fetch cycle
    in_flight: int = 0
    manual_in_flight: bool = False
    stats: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DashboardView:
    """Read-only snapshot handed to the renderer and the JSON endpoint."""

    assets: Tuple[AssetRecord, ...]
    total: int
    search_term: str
    last_updated: Optional[datetime]
    status: DashboardStatus
    error_visible: bool
    refresh_disabled: bool
    show_loading: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "error": self.error_visible,
            "search_term": self.search_term,
            "last_updated": isoformat_z(self.last_updated),
            "total": self.total,
            "count": len(self.assets),
            "assets": [a.model_dump() for a in self.assets],
        }


class DashboardController:
    """
    Owns the dashboard state and runs fetch cycles.

    Timer ticks and manual refreshes may overlap. Every cycle takes a new
    generation number; a response is applied only if no newer cycle was
    started after it, so the latest-initiated request always wins.
    """

    def __init__(self, fetcher: Optional[Fetcher] = None) -> None:
        self._fetcher: Fetcher = fetcher or fetch_market_data
        self.state = DashboardState()

    async def refresh(self, *, manual: bool = False) -> bool:
        """Run one fetch cycle. Returns False if a manual refresh was already running."""
        st = self.state

        if manual:
            if st.manual_in_flight:
                logger.info("manual refresh ignored, one is already in flight")
                return False
            st.manual_in_flight = True

        st.generation += 1
        generation = st.generation
        st.in_flight += 1
        st.status = DashboardStatus.LOADING

        t0 = time.perf_counter()
        try:
            records = await self._fetcher()
        except MarketDataError:
            dt_ms = int((time.perf_counter() - t0) * 1000)
            if generation != st.generation:
                logger.info("discarding failed response | gen=%s latest=%s", generation, st.generation)
                return True
            logger.exception("Error fetching crypto data | gen=%s | %dms", generation, dt_ms)
            st.error_visible = True
            st.status = DashboardStatus.ERROR
            st.stats["last_error_ts"] = time.time()
            st.stats["consecutive_failures"] = int(st.stats.get("consecutive_failures", 0)) + 1
            return True
        except BaseException:
            # unexpected errors and cancellation propagate, but the latest cycle never stays in loading
            if generation == st.generation:
                st.error_visible = True
                st.status = DashboardStatus.ERROR
            raise
        finally:
            st.in_flight -= 1
            if manual:
                st.manual_in_flight = False

        dt_ms = int((time.perf_counter() - t0) * 1000)
        if generation != st.generation:
            logger.info("discarding stale response | gen=%s latest=%s", generation, st.generation)
            return True

        self._apply(records)
        st.stats["last_success_ts"] = time.time()
        st.stats["last_success_ms"] = dt_ms
        st.stats["consecutive_failures"] = 0
        logger.info("market data refreshed | gen=%s | assets=%d | %dms", generation, len(st.all_assets), dt_ms)
        return True

    def _apply(self, records: Sequence[AssetRecord]) -> None:
        st = self.state
        st.all_assets = tuple(records)
        st.filtered_assets = filter_assets(st.all_assets, st.search_term)
        st.last_updated = utcnow()
        st.error_visible = False
        st.status = DashboardStatus.LOADED

    def set_search_term(self, term: Optional[str]) -> Tuple[AssetRecord, ...]:
        st = self.state
        st.search_term = normalize_search_term(term)
        st.filtered_assets = filter_assets(st.all_assets, st.search_term)
        return st.filtered_assets

    def snapshot(self) -> DashboardView:
        st = self.state
        loading = st.status is DashboardStatus.LOADING
        return DashboardView(
            assets=st.filtered_assets,
            total=len(st.all_assets),
            search_term=st.search_term,
            last_updated=st.last_updated,
            status=st.status,
            error_visible=st.error_visible,
            refresh_disabled=st.manual_in_flight,
            show_loading=loading and (st.last_updated is None or st.manual_in_flight),
        )
