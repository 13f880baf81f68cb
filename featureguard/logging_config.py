from __future__ import annotations

import logging
import sys

from featureguard.config import get_settings


def configure_logging(level: str | None = None) -> None:
    """
    One stdout handler on the root logger.

    `level` defaults to FEATUREGUARD_LOG_LEVEL. The package's own loggers
    drop to DEBUG in development so every decision is visible.
    Replaces existing handlers to avoid duplicates under reload.
    """
    settings = get_settings()
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(fmt="%(asctime)s %(levelname)s %(name)s [featureguard] %(message)s")
    )
    root.handlers = [handler]

    if settings.environment == "development":
        logging.getLogger("featureguard").setLevel(logging.DEBUG)
