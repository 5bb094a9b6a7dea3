from __future__ import annotations

import json
import os
import tempfile
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional

Grid = List[List[str]]


def _normalize(grid: List[List[Any]]) -> Grid:
    return [["" if cell is None else str(cell) for cell in row] for row in grid]


class InMemoryWorkbook:
    """Workbook held in process memory; used by tests and dry runs."""

    def __init__(
        self,
        *,
        sheets: Optional[Dict[str, Grid]] = None,
        named_settings: Optional[Dict[str, str]] = None,
        properties: Optional[Dict[str, str]] = None,
    ):
        self.sheets: Dict[str, Grid] = {name: _normalize(g) for name, g in (sheets or {}).items()}
        self.named_settings: Dict[str, str] = dict(named_settings or {})
        self.properties: Dict[str, str] = dict(properties or {})

    def sheet_names(self) -> List[str]:
        return list(self.sheets.keys())

    def read_sheet(self, name: str) -> Grid:
        return deepcopy(self.sheets.get(name, []))

    def write_sheet(self, name: str, grid: Grid) -> None:
        self.sheets[name] = _normalize(grid)

    def delete_sheet(self, name: str) -> None:
        self.sheets.pop(name, None)

    def get_named_setting(self, name: str) -> Optional[str]:
        return self.named_settings.get(name)

    def set_named_setting(self, name: str, value: str) -> None:
        self.named_settings[name] = value

    def get_property(self, key: str) -> Optional[str]:
        return self.properties.get(key)

    def set_property(self, key: str, value: str) -> None:
        self.properties[key] = value


class JsonWorkbook:
    """Workbook persisted as a single JSON document.

    Every read loads the file and every write rewrites it whole (temp file +
    rename), so each operation sees the latest snapshot.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Dict[str, Any]]:
        data: Dict[str, Any] = {}
        if self.path.exists():
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"Workbook file is not a JSON object: {self.path}")
        for section in ("sheets", "named_settings", "properties"):
            data.setdefault(section, {})
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".workbook-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def _update(self, section: str, key: str, value: Any) -> None:
        data = self._load()
        if value is None:
            data[section].pop(key, None)
        else:
            data[section][key] = value
        self._save(data)

    def sheet_names(self) -> List[str]:
        return list(self._load()["sheets"].keys())

    def read_sheet(self, name: str) -> Grid:
        return _normalize(self._load()["sheets"].get(name, []))

    def write_sheet(self, name: str, grid: Grid) -> None:
        self._update("sheets", name, _normalize(grid))

    def delete_sheet(self, name: str) -> None:
        self._update("sheets", name, None)

    def get_named_setting(self, name: str) -> Optional[str]:
        return self._load()["named_settings"].get(name)

    def set_named_setting(self, name: str, value: str) -> None:
        self._update("named_settings", name, value)

    def get_property(self, key: str) -> Optional[str]:
        return self._load()["properties"].get(key)

    def set_property(self, key: str, value: str) -> None:
        self._update("properties", key, value)
