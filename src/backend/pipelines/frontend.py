from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from common.settings_grid.anomalies import AnomalyStore, PropertyAnomalyStore
from common.settings_grid.errors import MissingConfigurationError
from common.settings_grid.interfaces import GridStore, MonitorClient, PropertyStore
from common.settings_grid.migrations import MigrationRunner
from common.settings_grid.models import Granularity, RuleRunReport
from common.settings_grid.registry import RuleRegistry, registry as default_registry
from common.settings_grid.rule_range import Grid, RuleColumnRange
from common.settings_grid.runner import RulesRunner

from .migrations import CURRENT_VERSION, MIGRATIONS, settings_sheet_name
from .results import populate_rule_results_in_sheets

logger = logging.getLogger(__name__)

LAST_RUN_PROPERTY = "last_run"


class Workbook(GridStore, PropertyStore, Protocol):
    def delete_sheet(self, name: str) -> None:
        ...

    def get_named_setting(self, name: str) -> Optional[str]:
        ...

    def set_named_setting(self, name: str, value: str) -> None:
        ...


class MonitorFrontEnd:
    """Sequences a pass: load grid, reconcile, run rules, write back.

    Only one top-level operation is expected to run at a time; every pass
    re-reads the sheets and rewrites them whole.
    """

    def __init__(
        self,
        workbook: Workbook,
        client: MonitorClient,
        *,
        registry: RuleRegistry = default_registry,
        migrations: Optional[Mapping[str, Callable[[Any], None]]] = None,
        target_version: str = CURRENT_VERSION,
        anomaly_store: Optional[AnomalyStore] = None,
    ):
        self.workbook = workbook
        self.client = client
        self.registry = registry
        self.anomaly_store = anomaly_store or PropertyAnomalyStore(workbook)
        self._migrations = MigrationRunner(
            MIGRATIONS if migrations is None else migrations,
            workbook,
            target_version,
        )

    def require_setting(self, name: str) -> str:
        value = self.workbook.get_named_setting(name)
        if not value:
            raise MissingConfigurationError(name)
        return value

    def migrate(self) -> int:
        return self._migrations.apply(self)

    async def on_open(self) -> int:
        return self.migrate()

    async def reconcile(self, granularity: Granularity, *, write: bool = True) -> RuleColumnRange:
        sheet_name = settings_sheet_name(granularity)
        definitions = self.registry.definitions(granularity)
        rule_range = RuleColumnRange(self.workbook.read_sheet(sheet_name), self.client, definitions)
        for definition in definitions.values():
            await rule_range.fill_rule_values(definition)
        if write:
            rule_range.write_back(self.workbook, sheet_name, granularity)
        logger.info("Reconciled %d rule(s) on sheet=%s", len(definitions), sheet_name)
        return rule_range

    async def _reconcile_all(self, *, write: bool) -> Dict[Granularity, RuleColumnRange]:
        ranges = {}
        for granularity in self.registry.granularities():
            ranges[granularity] = await self.reconcile(granularity, write=False)
        # Nothing is written until every sheet has reconciled.
        if write:
            for granularity, rule_range in ranges.items():
                rule_range.write_back(self.workbook, settings_sheet_name(granularity), granularity)
        return ranges

    async def initialize_sheets(self) -> List[str]:
        self.require_setting("ENTITY_ID")
        ranges = await self._reconcile_all(write=True)
        return [settings_sheet_name(granularity) for granularity in ranges]

    async def _collect_settings(self, *, write: bool) -> Dict[str, Grid]:
        settings: Dict[str, Grid] = {}
        for granularity, rule_range in (await self._reconcile_all(write=write)).items():
            for name in self.registry.definitions(granularity):
                settings[name] = rule_range.get_rule(name)
        return settings

    async def launch_monitor(self) -> RuleRunReport:
        self.migrate()
        scope_id = self.require_setting("ENTITY_ID")
        settings = await self._collect_settings(write=True)
        rules = self.registry.create_all(self.client, settings)
        report = await RulesRunner(rules).run(self.anomaly_store, scope_id)
        populate_rule_results_in_sheets(self.workbook, report)
        self.workbook.set_property(LAST_RUN_PROPERTY, report.generated_at.isoformat())
        logger.info("Monitor run %s finished: %s", report.run_id, report.anomalies)
        return report

    async def pre_launch_qa(self) -> RuleRunReport:
        scope_id = self.require_setting("ENTITY_ID")
        settings = await self._collect_settings(write=False)
        rules = self.registry.create_all(self.client, settings)
        report = await RulesRunner(rules).run(self.anomaly_store, scope_id, save=False)
        for name, count in report.anomalies.items():
            logger.info("QA rule=%s anomalies=%d", name, count)
        return report
