from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Protocol

from pydantic import BaseModel

from .interfaces import PropertyStore

ANOMALY_PROPERTY_PREFIX = "anomalies:"


class AnomalyStore(Protocol):
    def get(self, key: str) -> Dict[str, Any]:
        ...

    def save(self, key: str, values: Mapping[str, Any]) -> None:
        ...


class PropertyAnomalyStore:
    """Stores each rule's latest values as JSON under the property store."""

    def __init__(self, properties: PropertyStore):
        self._properties = properties

    def get(self, key: str) -> Dict[str, Any]:
        raw = self._properties.get_property(ANOMALY_PROPERTY_PREFIX + key)
        if not raw:
            return {}
        return json.loads(raw)

    def save(self, key: str, values: Mapping[str, Any]) -> None:
        payload = {
            entity_id: record.model_dump() if isinstance(record, BaseModel) else record
            for entity_id, record in values.items()
        }
        self._properties.set_property(ANOMALY_PROPERTY_PREFIX + key, json.dumps(payload, sort_keys=True))


@dataclass(frozen=True)
class AnomalyRule:
    """Handle on one rule's stored values, addressed by its unique key."""

    key: str
    store: AnomalyStore

    def get_values(self) -> Dict[str, Any]:
        return self.store.get(self.key)

    def save_values(self, values: Mapping[str, Any]) -> None:
        self.store.save(self.key, values)
