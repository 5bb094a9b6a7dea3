from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from .models import Granularity, RecordInfo


class EntitySource(Protocol):
    async def get_rows(self, granularity: Granularity) -> List[RecordInfo]:
        """Return the authoritative list of tracked entities for a granularity."""
        ...


class MonitorClient(EntitySource, Protocol):
    async def get_report(self, granularity: Granularity) -> List[Dict[str, Any]]:
        """Return one metrics row per entity (each row carries at least `id`)."""
        ...


class GridStore(Protocol):
    def read_sheet(self, name: str) -> List[List[str]]:
        """Full snapshot of a sheet; an empty list when the sheet does not exist."""
        ...

    def write_sheet(self, name: str, grid: List[List[str]]) -> None:
        """Replace the whole sheet contents."""
        ...


class PropertyStore(Protocol):
    def get_property(self, key: str) -> Optional[str]:
        ...

    def set_property(self, key: str, value: str) -> None:
        ...
