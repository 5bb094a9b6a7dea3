from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Dict, List, Tuple

from common.settings_grid.models import Granularity, RecordInfo

from .client import reporting_get
from .config import ReportingConfig


class ReportingClient:
    """Entity source and metrics provider backed by the reporting API.

    Responses are cached per (endpoint, granularity) for
    `config.cache_ttl_seconds` so one pass sees a stable entity list.
    """

    def __init__(self, config: ReportingConfig, *, clock: Callable[[], float] = time.monotonic):
        self.config = config
        self._clock = clock
        self._cache: Dict[Tuple[str, str], Tuple[float, Any]] = {}

    async def _cached_get(self, path: str, granularity: Granularity) -> Dict[str, Any]:
        key = (path, granularity.value)
        hit = self._cache.get(key)
        if hit is not None and self._clock() - hit[0] < self.config.cache_ttl_seconds:
            return hit[1]
        payload = await asyncio.to_thread(
            reporting_get,
            self.config,
            path,
            params={"scope": self.config.scope_id, "granularity": granularity.value},
        )
        self._cache[key] = (self._clock(), payload)
        return payload

    async def get_rows(self, granularity: Granularity) -> List[RecordInfo]:
        payload = await self._cached_get("/v1/entities", granularity)
        records = []
        for raw in payload.get("entities", []) or []:
            if not isinstance(raw, dict) or not raw.get("id"):
                continue
            records.append(
                RecordInfo(
                    id=str(raw["id"]),
                    display_name=str(raw.get("displayName", "")),
                    extra={k: v for k, v in raw.items() if k not in ("id", "displayName")},
                )
            )
        return records

    async def get_report(self, granularity: Granularity) -> List[Dict[str, Any]]:
        payload = await self._cached_get("/v1/reports", granularity)
        return [row for row in payload.get("rows", []) or [] if isinstance(row, dict) and "id" in row]
