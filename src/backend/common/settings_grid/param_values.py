from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import InputShapeError
from .models import DEFAULT_ROW, ParamDefinition

SettingsRecord = Dict[str, Optional[str]]


class ParamValueTable:
    """Per-entity parameter values with fallback to the `default` row.

    Keys are fixed at construction.  When `keys` is not given they are taken
    from the first record, so every record is expected to carry the same keys.
    """

    def __init__(
        self,
        values: Iterable[Tuple[str, Mapping[str, Optional[str]]]],
        keys: Optional[Sequence[str]] = None,
    ):
        self._map: Dict[str, SettingsRecord] = {}
        for entity_id, record in values:
            self._map[entity_id] = dict(record)
        if keys is None:
            first = next(iter(self._map.values()), {})
            keys = list(first.keys())
        self._keys: List[str] = list(keys)

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._map

    def ids(self) -> List[str]:
        return list(self._map.keys())

    def get(self, entity_id: str) -> SettingsRecord:
        if entity_id not in self._map:
            self._map[entity_id] = {key: "" for key in self._keys}
        return self._map[entity_id]

    def get_or_default(self, entity_id: str) -> Dict[str, str]:
        default = self._map.get(DEFAULT_ROW, {})
        own = self._map.get(entity_id, {})
        result: Dict[str, str] = {}
        for key in self._keys:
            value = own.get(key)
            if value is None or value == "":
                value = default.get(key)
            result[key] = value if value is not None else ""
        return result

    def set(self, entity_id: str, record: Mapping[str, Optional[str]]) -> None:
        self._map[entity_id] = dict(record)

    def entries(self) -> List[Tuple[str, List[str]]]:
        out: List[Tuple[str, List[str]]] = []
        for entity_id, record in self._map.items():
            out.append((entity_id, [record.get(key) or "" for key in self._keys]))
        return out


def transform_to_param_values(
    grid: Sequence[Sequence[str]],
    params: Mapping[str, ParamDefinition],
) -> ParamValueTable:
    """Convert a settings grid into a `ParamValueTable`.

    The first row holds parameter labels and the first column the entity id,
    e.g. in CSV form::

        ID,My Param 1,My Param 2
        default,hello,world
        1,foo,

    Labels are matched by header text, not position.  A declared label with no
    column yields `None` for that key, which `get_or_default` treats as blank.
    """
    if len(grid) < 2:
        raise InputShapeError(len(grid))
    headers = list(grid[0])
    columns: Dict[str, Optional[int]] = {}
    for key, definition in params.items():
        columns[key] = headers.index(definition.label) if definition.label in headers else None

    rows: List[Tuple[str, SettingsRecord]] = []
    for row in grid[1:]:
        entity_id = row[0] if row else ""
        if not entity_id:
            continue
        record: SettingsRecord = {}
        for key, col in columns.items():
            record[key] = row[col] if col is not None and col < len(row) else None
        rows.append((entity_id, record))
    return ParamValueTable(rows, keys=list(params.keys()))
