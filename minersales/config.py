"""
Application Configuration.

Pydantic Settings model for the MinerSales commission engine.
All configuration is loaded from environment variables and .env files.
Inject an AppConfig instance via dependency injection where needed.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Commission policy ---
    # Commission slabs are defined in AED and converted with this rate.
    AED_TO_USD_RATE: Decimal = Decimal("0.272")
    COMMISSION_SALARY_MULTIPLIER: Decimal = Decimal("3")
    PREFERRED_VENDOR_CODE: str = "cmhk"

    # --- Reporting ---
    DEFAULT_SALESPERSON_ROLE: str = "Sales Executive"

    # --- Exchange rates ---
    EXCHANGE_RATE_CACHE_TTL_S: float = 3600.0
    FALLBACK_USD_RATES: dict[str, Decimal] = Field(default_factory=lambda: {
        "AED": Decimal("0.272"),
        "USD": Decimal("1"),
        "EUR": Decimal("1.08"),
        "GBP": Decimal("1.27"),
    })

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "minersales.log"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "MINERSALES_",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def _check_rates(self) -> "AppConfig":
        """Reject non-positive rates and note when running without a .env file."""
        if self.AED_TO_USD_RATE <= 0:
            raise ValueError("AED_TO_USD_RATE must be positive")
        if self.COMMISSION_SALARY_MULTIPLIER < 0:
            raise ValueError("COMMISSION_SALARY_MULTIPLIER must not be negative")

        if not Path(".env").exists():
            logging.getLogger("minersales.config").debug(
                "No .env file found; configuration loaded from "
                "environment variables or defaults."
            )
        return self

    @property
    def log_level(self) -> int:
        """Numeric ``logging`` level for ``LOG_LEVEL`` (INFO when unknown)."""
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


# ---------------------------------------------------------------------------
# Module-level singleton factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` singleton.

    Uses a check-lock-check pattern to avoid the lock overhead on the
    fast path while remaining thread-safe during first initialisation.
    Prefer constructor injection of ``AppConfig`` in new code.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance
