from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

# Reserved identity cells.
ID_ROW = "ID"
DEFAULT_ROW = "default"
IDENTITY_BLOCK = "none"


class Granularity(str, Enum):
    CAMPAIGN = "campaign"
    AD_GROUP = "ad_group"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class ParamDefinition(BaseModel):
    label: str
    default_value: Optional[str] = None
    # Passed through untouched to whatever renders the grid.
    validation: Optional[List[str]] = None
    number_format: Optional[str] = None


class RuleDefinition(BaseModel):
    """Everything the settings grid needs to know about a rule.

    `params` is ordered: the declaration order is the column order the first
    time a rule's block is written.  `defaults` maps param keys to the value
    seeded into the `default` row; when omitted it is derived from the params'
    `default_value`s.  A rule that declares neither cannot be reconciled.
    """

    name: str
    description: str = ""
    granularity: Granularity
    unique_key_prefix: str = ""
    params: Dict[str, ParamDefinition] = Field(default_factory=dict)
    defaults: Optional[Dict[str, str]] = None
    helper: str = ""

    @model_validator(mode="after")
    def _check_params(self) -> "RuleDefinition":
        labels = [p.label for p in self.params.values()]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ValueError(f"Duplicate parameter labels in rule '{self.name}': {duplicates}")
        if self.defaults is None:
            declared = {k: p.default_value for k, p in self.params.items() if p.default_value is not None}
            if declared:
                self.defaults = declared
        return self

    def labels(self) -> List[str]:
        return [p.label for p in self.params.values()]


class RecordInfo(BaseModel):
    id: str
    display_name: str = ""
    extra: Dict[str, Any] = Field(default_factory=dict)


class ValueRecord(BaseModel):
    value: str
    anomalous: bool = False
    fields: Dict[str, str] = Field(default_factory=dict)


class ExecutorResult(BaseModel):
    rule_name: str
    unique_key: str
    # entity id -> ValueRecord-shaped mapping. Kept loose so one bad record
    # does not sink the whole result sheet.
    values: Dict[str, Any] = Field(default_factory=dict)

    def anomaly_count(self) -> int:
        count = 0
        for record in self.values.values():
            if isinstance(record, ValueRecord) and record.anomalous:
                count += 1
            elif isinstance(record, dict) and record.get("anomalous"):
                count += 1
        return count


class RuleRunReport(BaseModel):
    run_id: str
    generated_at: datetime
    results: List[ExecutorResult] = Field(default_factory=list)
    anomalies: Dict[str, int] = Field(default_factory=dict)
