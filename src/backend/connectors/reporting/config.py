from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

DEFAULT_CACHE_TTL_SECONDS = 60


@dataclass(frozen=True)
class ReportingConfig:
    base_url: str
    api_token: str
    scope_id: str
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS


def get_reporting_config(scope_id: str = "") -> ReportingConfig:
    """
    Load reporting API configuration from environment variables.

    Reads REPORTING_BASE_URL, REPORTING_API_TOKEN and MONITOR_CACHE_TTL.
    The scope (advertiser/account id) normally comes from the workbook's
    ENTITY_ID setting; REPORTING_SCOPE_ID is the fallback.
    """
    ttl_raw = os.getenv("MONITOR_CACHE_TTL", "").strip()
    try:
        ttl = int(ttl_raw) if ttl_raw else DEFAULT_CACHE_TTL_SECONDS
    except ValueError as exc:
        raise ValueError(f"MONITOR_CACHE_TTL must be an integer (got {ttl_raw!r}).") from exc
    return ReportingConfig(
        base_url=_require_env("REPORTING_BASE_URL").rstrip("/"),
        api_token=_require_env("REPORTING_API_TOKEN"),
        scope_id=scope_id or _require_env("REPORTING_SCOPE_ID"),
        cache_ttl_seconds=ttl,
    )


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {name}")
    return value
