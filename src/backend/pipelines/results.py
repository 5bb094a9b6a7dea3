from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from pydantic import ValidationError

from common.settings_grid.interfaces import GridStore
from common.settings_grid.models import ExecutorResult, RuleRunReport, ValueRecord

logger = logging.getLogger(__name__)

Grid = List[List[str]]


def results_sheet_name(rule_name: str) -> str:
    return f"{rule_name} - Results"


def build_result_matrix(result: ExecutorResult) -> Tuple[Grid, int]:
    """Return the result grid for one rule and the number of dropped records.

    Records that do not validate as `ValueRecord` are skipped; they only
    affect what is displayed, never what was stored.
    """
    records: List[Tuple[str, ValueRecord]] = []
    dropped = 0
    for entity_id, raw in result.values.items():
        try:
            record = raw if isinstance(raw, ValueRecord) else ValueRecord.model_validate(raw)
        except ValidationError:
            dropped += 1
            continue
        records.append((entity_id, record))

    fields: List[str] = []
    for _, record in records:
        for name in record.fields:
            if name not in fields:
                fields.append(name)

    grid: Grid = [["ID", "Value", "Anomalous", *fields]]
    for entity_id, record in records:
        grid.append(
            [
                entity_id,
                record.value,
                "TRUE" if record.anomalous else "FALSE",
                *[record.fields.get(name, "") for name in fields],
            ]
        )
    return grid, dropped


def populate_rule_results_in_sheets(store: GridStore, report: RuleRunReport) -> Dict[str, int]:
    written: Dict[str, int] = {}
    for result in report.results:
        grid, dropped = build_result_matrix(result)
        if dropped:
            logger.warning("Dropped %d malformed record(s) for rule=%s", dropped, result.rule_name)
        store.write_sheet(results_sheet_name(result.rule_name), grid)
        written[result.rule_name] = len(grid) - 1
    return written
