from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import MissingDefaultsError
from .interfaces import EntitySource, GridStore
from .models import DEFAULT_ROW, ID_ROW, IDENTITY_BLOCK, Granularity, RuleDefinition

logger = logging.getLogger(__name__)

Grid = List[List[str]]


def _index_settings(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Dict[str, Dict[str, str]]:
    """Re-key `[id, *cells]` rows as `{id: {header: cell}}`."""
    result: Dict[str, Dict[str, str]] = {}
    for row in rows:
        entity_id = row[0]
        settings = result.setdefault(entity_id, {})
        for c in range(1, len(row)):
            if c - 1 < len(headers):
                settings[headers[c - 1]] = row[c]
    return result


def skip_repeats(row: Sequence[str]) -> List[str]:
    """Blank every cell equal to its left neighbour, scanning right to left."""
    out = list(row)
    for c in range(len(out) - 1, 0, -1):
        if out[c - 1] == out[c]:
            out[c] = ""
    return out


def _pad(cells: Optional[Sequence[str]], length: int) -> List[str]:
    out = list(cells or [])[:length]
    out.extend([""] * (length - len(out)))
    return out


class RuleColumnRange:
    """Rule settings grid split into per-rule column blocks.

    The grid has two header rows: row 0 carries the rule name over each block
    and row 1 free-form helper text.  Every following row starts with the
    entity id.  Example in CSV form::

        ,,Rule A,,Rule B,,
        ,,helper A,,helper B,,
        ID,Campaign Name,a1,a2,b1,b2,b3
        default,,1,2,x,y,z
        123,Acme,,,,,

    Blocks are stored keyed by row index; the leading identity columns live in
    the `none` block.  A fresh instance is built from the stored grid for every
    reconciliation pass.
    """

    def __init__(
        self,
        grid: Optional[Sequence[Sequence[str]]],
        entity_source: EntitySource,
        definitions: Optional[Mapping[str, RuleDefinition]] = None,
        headers: Sequence[str] = (ID_ROW, DEFAULT_ROW),
    ):
        self._entity_source = entity_source
        self._definitions: Dict[str, RuleDefinition] = dict(definitions or {})
        self._headers = tuple(headers)
        self._row_index: Dict[str, int] = {}
        self._column_orders: Dict[str, Dict[str, int]] = {}
        self._rules: Dict[str, Dict[int, List[str]]] = {IDENTITY_BLOCK: {}}
        for i, header in enumerate(self._headers):
            self._row_index[header] = i
        if grid:
            self.set_rules(grid)

    @property
    def row_index(self) -> Dict[str, int]:
        return dict(self._row_index)

    def block_names(self) -> List[str]:
        return list(self._rules.keys())

    def set_rules(self, grid: Sequence[Sequence[str]]) -> None:
        """Split a raw grid into column blocks by scanning header row 0."""
        if not grid or not grid[0]:
            return
        header = list(grid[0])
        starts = [0]
        for c in range(1, len(header)):
            # A name repeated over its block (un-deduplicated header) continues it.
            if header[c] and header[c] != header[starts[-1]]:
                starts.append(c)
        bounds = zip(starts, starts[1:] + [len(header)])
        for start, end in bounds:
            name = header[start] or IDENTITY_BLOCK
            for row in grid[1:]:
                entity_id = row[0] if row else ""
                self.set_row(name, entity_id, list(row[start:end]))

    def set_row(self, rule_name: str, entity_id: str, cells: Iterable[str]) -> None:
        if entity_id == "":
            return
        if entity_id not in self._row_index:
            self._row_index[entity_id] = max(self._row_index.values(), default=-1) + 1
        self._rules.setdefault(rule_name, {})[self._row_index[entity_id]] = list(cells)

    def get_rule(self, rule_name: str) -> Grid:
        """Rows of one block prefixed with the entity id, in row order."""
        rows = self._rules.get(rule_name)
        if not rows:
            return []
        identity = self._rules[IDENTITY_BLOCK]
        indices = sorted(i for i in self._row_index.values() if i in identity and i in rows)
        return [[identity[i][0] if identity[i] else "", *rows[i]] for i in indices]

    def _ordered_labels(self, rule: RuleDefinition) -> List[str]:
        index_by_label = {label: i for i, label in enumerate(rule.labels())}
        order = self._column_orders.setdefault(rule.name, dict(index_by_label))
        # Labels seen on an earlier pass keep their slot; new ones go last.
        return sorted(
            index_by_label,
            key=lambda label: (label not in order, order.get(label, 0), index_by_label[label]),
        )

    async def fill_rule_values(self, rule: RuleDefinition) -> None:
        """Reconcile one rule's block against its declaration and the entity list."""
        if rule.defaults is None:
            raise MissingDefaultsError(rule.name)

        param_by_label = {p.label: key for key, p in rule.params.items()}
        labels = self._ordered_labels(rule)

        stored = self.get_rule(rule.name)
        current = _index_settings(stored[0][1:] if stored else [], stored)

        self.set_row(IDENTITY_BLOCK, ID_ROW, [ID_ROW, f"{rule.granularity.label} Name"])
        self.set_row(rule.name, ID_ROW, labels)
        self.set_row(IDENTITY_BLOCK, DEFAULT_ROW, [DEFAULT_ROW, ""])

        stored_defaults = current.get(DEFAULT_ROW, {})
        default_cells = []
        for label in labels:
            value = stored_defaults.get(label)
            if value is None:
                value = rule.defaults.get(param_by_label[label])
            default_cells.append(value if value is not None else "")
        self.set_row(rule.name, DEFAULT_ROW, default_cells)

        touched = set(self._headers)
        for record in await self._entity_source.get_rows(rule.granularity):
            settings = current.get(record.id, {})
            self.set_row(rule.name, record.id, [settings.get(label) or "" for label in labels])
            self.set_row(IDENTITY_BLOCK, record.id, [record.id, record.display_name])
            if record.id:
                touched.add(record.id)

        stale = [entity_id for entity_id in self._row_index if entity_id not in touched]
        for entity_id in stale:
            index = self._row_index.pop(entity_id)
            for rows in self._rules.values():
                rows.pop(index, None)
        if stale:
            logger.info("Pruned %d stale row(s) while reconciling rule=%s", len(stale), rule.name)

    def _wanted(self, block: str, granularity: Optional[Granularity]) -> bool:
        if granularity is None or block == IDENTITY_BLOCK:
            return True
        definition = self._definitions.get(block)
        return definition is not None and definition.granularity == granularity

    def get_values(self, granularity: Optional[Granularity] = None) -> Grid:
        """Fold every block back into one grid, re-densifying the row index."""
        ordered = sorted(self._row_index, key=self._row_index.__getitem__)
        values: Grid = [[], []] + [[] for _ in ordered]

        for block, rows in self._rules.items():
            if not self._wanted(block, granularity):
                continue
            length = max((len(rows.get(self._row_index[e]) or []) for e in ordered), default=0)
            if not length:
                continue
            if block == IDENTITY_BLOCK:
                values[0].extend([""] * length)
                values[1].extend([""] * length)
            else:
                definition = self._definitions.get(block)
                values[0].extend([block] * length)
                values[1].extend([definition.helper if definition else ""] + [""] * (length - 1))
            for r, entity_id in enumerate(ordered):
                values[r + 2].extend(_pad(rows.get(self._row_index[entity_id]), length))

        values[0] = skip_repeats(values[0])

        dense = {entity_id: position for position, entity_id in enumerate(ordered)}
        for block, rows in self._rules.items():
            self._rules[block] = {
                dense[e]: rows[self._row_index[e]] for e in ordered if self._row_index[e] in rows
            }
        self._row_index = dense
        return values

    def write_back(self, store: GridStore, sheet_name: str, granularity: Optional[Granularity] = None) -> Grid:
        values = self.get_values(granularity)
        store.write_sheet(sheet_name, values)
        logger.debug("Wrote %d row(s) to sheet=%s", len(values), sheet_name)
        return values
