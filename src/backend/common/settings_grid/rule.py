from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from .anomalies import AnomalyRule, AnomalyStore
from .interfaces import MonitorClient
from .models import ExecutorResult, RuleDefinition, ValueRecord
from .param_values import ParamValueTable, transform_to_param_values


@dataclass(frozen=True)
class RuleUtilities:
    """Capabilities handed to `Rule.evaluate`."""

    client: MonitorClient
    anomaly_rule: AnomalyRule

    def get_rule(self) -> AnomalyRule:
        return self.anomaly_rule


class Rule(ABC):
    definition: RuleDefinition

    def __init__(self, client: MonitorClient, settings_grid: Sequence[Sequence[str]]):
        if getattr(self, "definition", None) is None:
            raise ValueError("Rule must define a definition")
        self.client = client
        if settings_grid:
            self.settings = transform_to_param_values(settings_grid, self.definition.params)
        else:
            self.settings = ParamValueTable([], keys=list(self.definition.params))

    @property
    def name(self) -> str:
        return self.definition.name

    def unique_key(self, scope_id: str) -> str:
        return f"{self.definition.unique_key_prefix}-{scope_id}"

    async def run(self, anomaly_store: AnomalyStore, scope_id: str) -> ExecutorResult:
        key = self.unique_key(scope_id)
        utilities = RuleUtilities(client=self.client, anomaly_rule=AnomalyRule(key=key, store=anomaly_store))
        values = await self.evaluate(utilities)
        return ExecutorResult(rule_name=self.name, unique_key=key, values=dict(values))

    @abstractmethod
    async def evaluate(self, utilities: RuleUtilities) -> Dict[str, ValueRecord | Any]:  # pragma: no cover
        raise NotImplementedError
