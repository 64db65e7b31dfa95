from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def isoformat_z(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def iso_z_from_epoch(ts: Optional[float]) -> Optional[str]:
    if ts is None:
        return None
    return isoformat_z(datetime.fromtimestamp(float(ts), tz=timezone.utc))


def local_clock(dt: datetime) -> str:
    """Wall-clock time in the server's local zone, e.g. 14:03:27."""
    return dt.astimezone().strftime("%H:%M:%S")
