from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from .anomalies import AnomalyRule, AnomalyStore
from .models import RuleRunReport
from .rule import Rule

logger = logging.getLogger(__name__)


class RulesRunner:
    def __init__(self, rules: Iterable[Rule]):
        self._rules = list(rules)

    async def run(
        self,
        anomaly_store: AnomalyStore,
        scope_id: str,
        *,
        rule_names: Optional[set[str]] = None,
        save: bool = True,
    ) -> RuleRunReport:
        """Run every rule, then persist values only once all of them succeeded."""
        results = []
        for rule in self._rules:
            if rule_names is not None and rule.name not in rule_names:
                continue
            logger.debug("Running rule=%s", rule.name)
            results.append(await rule.run(anomaly_store, scope_id))

        if save:
            for result in results:
                AnomalyRule(key=result.unique_key, store=anomaly_store).save_values(result.values)

        anomalies = {result.rule_name: result.anomaly_count() for result in results}
        return RuleRunReport(
            run_id=str(uuid.uuid4()),
            generated_at=datetime.now(timezone.utc),
            results=results,
            anomalies=anomalies,
        )
