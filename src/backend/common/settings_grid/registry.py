from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Type

from .interfaces import MonitorClient
from .models import Granularity, RuleDefinition
from .rule import Rule


class RuleRegistry:
    def __init__(self):
        self._rules: Dict[str, Type[Rule]] = {}

    def register(self, rule_cls: Type[Rule]) -> None:
        definition = getattr(rule_cls, "definition", None)
        if definition is None or not definition.name:
            raise ValueError("Rule class missing definition")
        if definition.name in self._rules:
            raise ValueError(f"Duplicate rule name registered: {definition.name}")
        self._rules[definition.name] = rule_cls

    def get(self, name: str) -> Type[Rule]:
        return self._rules[name]

    def ids(self) -> Iterable[str]:
        return self._rules.keys()

    def definitions(self, granularity: Optional[Granularity] = None) -> Dict[str, RuleDefinition]:
        return {
            name: cls.definition
            for name, cls in self._rules.items()
            if granularity is None or cls.definition.granularity == granularity
        }

    def granularities(self) -> List[Granularity]:
        seen: List[Granularity] = []
        for cls in self._rules.values():
            if cls.definition.granularity not in seen:
                seen.append(cls.definition.granularity)
        return seen

    def create_all(
        self,
        client: MonitorClient,
        settings: Mapping[str, Sequence[Sequence[str]]],
    ) -> List[Rule]:
        return [cls(client, settings.get(name, [])) for name, cls in self._rules.items()]


registry = RuleRegistry()


def register_rule(rule_cls: Type[Rule]) -> Type[Rule]:
    registry.register(rule_cls)
    return rule_cls
