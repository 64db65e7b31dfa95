# app/config/log.py
from __future__ import annotations

import logging

from app.config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or get_settings().LOG_LEVEL, format=LOG_FORMAT)
