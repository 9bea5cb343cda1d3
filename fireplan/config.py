"""Settings for the fireplan API host."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple

from fireplan.logger import get_app_logger

THEMES = ("light", "dark")

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


@dataclass(frozen=True)
class AppSettings:
    """Settings for the API host.

    Attributes:
        base_currency: Currency code used for chart labels when a request
            does not name one.
        theme: Default inline theme for rendered charts.
        log_level: Level name for the package logger.
        cors_origins: Origins allowed to call ``/api/*``.
    """

    base_currency: str = "GBP"
    theme: str = "dark"
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from environment variables.

        Returns:
            AppSettings: Settings sourced from ``FIREPLAN_*`` variables.
        """
        logger = get_app_logger(__name__)
        base_currency = os.getenv("FIREPLAN_BASE_CURRENCY", "GBP").strip().upper() or "GBP"
        theme = os.getenv("FIREPLAN_THEME", "dark").strip().lower()
        if theme not in THEMES:
            logger.warning(f"Unknown FIREPLAN_THEME {theme!r}, using dark")
            theme = "dark"
        log_level = os.getenv("FIREPLAN_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        raw_origins = os.getenv("FIREPLAN_CORS_ORIGINS")
        if raw_origins:
            origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip())
        else:
            origins = DEFAULT_CORS_ORIGINS
        return cls(
            base_currency=base_currency,
            theme=theme,
            log_level=log_level,
            cors_origins=origins,
        )


__all__ = ["AppSettings", "THEMES", "DEFAULT_CORS_ORIGINS"]
