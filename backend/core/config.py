"""
Environment-driven settings for the onboarding engine.

Values come from the process environment (optionally seeded from a `.env`
file). Every setting has a default that works for local development.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_positive_float(name: str, default: float) -> float:
    value = _env_float(name, default)
    return value if math.isfinite(value) and value > 0 else default


@dataclass(frozen=True)
class Settings:
    automation_base_url: str = "http://localhost:5678/webhook"
    automation_endpoint: str = "/onboarding-chat"
    automation_timeout: float = 30.0
    supabase_url: str = "http://localhost:54321"
    supabase_key: str = ""
    agents_table: str = "agents"
    api_token: Optional[str] = None
    require_gdpr_consent: bool = False
    build_total_seconds: float = 90.0
    build_tick_seconds: float = 0.1
    build_early_floor: float = 0.2
    build_completion_grace: float = 0.5
    fact_rotation_seconds: float = 7.5
    poll_initial_delay: float = 10.0
    poll_interval: float = 5.0
    log_level: str = "INFO"
    log_format: str = "text"


def load_settings() -> Settings:
    return Settings(
        automation_base_url=os.getenv("AUTOMATION_BASE_URL", Settings.automation_base_url),
        automation_endpoint=os.getenv("AUTOMATION_ENDPOINT", Settings.automation_endpoint),
        automation_timeout=_env_positive_float("AUTOMATION_TIMEOUT", Settings.automation_timeout),
        supabase_url=os.getenv("SUPABASE_URL", Settings.supabase_url),
        supabase_key=os.getenv("SUPABASE_ANON_KEY", Settings.supabase_key),
        agents_table=os.getenv("AGENTS_TABLE", Settings.agents_table),
        api_token=os.getenv("API_TOKEN") or None,
        require_gdpr_consent=_env_bool("REQUIRE_GDPR_CONSENT"),
        build_total_seconds=_env_positive_float("BUILD_TOTAL_SECONDS", Settings.build_total_seconds),
        build_tick_seconds=_env_positive_float("BUILD_TICK_SECONDS", Settings.build_tick_seconds),
        build_early_floor=_env_float("BUILD_EARLY_FLOOR", Settings.build_early_floor),
        build_completion_grace=_env_positive_float("BUILD_COMPLETION_GRACE", Settings.build_completion_grace),
        fact_rotation_seconds=_env_positive_float("FACT_ROTATION_SECONDS", Settings.fact_rotation_seconds),
        poll_initial_delay=_env_positive_float("POLL_INITIAL_DELAY", Settings.poll_initial_delay),
        poll_interval=_env_positive_float("POLL_INTERVAL", Settings.poll_interval),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level),
        log_format=os.getenv("LOG_FORMAT", Settings.log_format),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings; call `get_settings.cache_clear()` after changing the environment."""
    return load_settings()
