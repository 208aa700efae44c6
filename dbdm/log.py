"""Logging setup for applications embedding the client."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from dbdm.config import AppSettings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """Route log records to stdout at the configured level.

    The library never calls this itself; it only emits records through
    module-level loggers.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level_value,
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
