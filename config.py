from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from appdirs import user_log_dir
from dotenv import load_dotenv


@dataclass
class Settings:
    database_url: str = "sqlite:///crm.db"
    log_dir: str = field(default_factory=lambda: user_log_dir("subscription_crm"))
    log_level: str = "INFO"
    detailed_logging: bool = False
    tick_interval: float = 1.0
    currency_symbol: str = "€"


def _as_float(value: str | None, default: float) -> float:
    if not value:
        return default
    try:
        return float(value.replace(",", "."))
    except ValueError:
        return default


@lru_cache()
def get_settings() -> Settings:
    dotenv_path = Path(__file__).resolve().parent / ".env"
    load_dotenv(dotenv_path)

    return Settings(
        database_url=os.getenv("DATABASE_URL") or "sqlite:///crm.db",
        log_dir=os.getenv("LOG_DIR") or user_log_dir("subscription_crm"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        detailed_logging=os.getenv("DETAILED_LOGGING", "0").lower() in {"1", "true", "yes", "on"},
        tick_interval=_as_float(os.getenv("TICK_INTERVAL"), 1.0),
        currency_symbol=os.getenv("CURRENCY_SYMBOL", "€"),
    )
