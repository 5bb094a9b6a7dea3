import asyncio

import pytest

from common.settings_grid.anomalies import PropertyAnomalyStore
from common.settings_grid.models import Granularity, ParamDefinition, RuleDefinition, ValueRecord
from common.settings_grid.registry import RuleRegistry
from common.settings_grid.rule import Rule
from common.settings_grid.runner import RulesRunner
from connectors.workbook import InMemoryWorkbook


class EchoRule(Rule):
    definition = RuleDefinition(
        name="Echo",
        granularity=Granularity.CAMPAIGN,
        unique_key_prefix="echo",
        params={"threshold": ParamDefinition(label="Threshold", default_value="3")},
    )

    async def evaluate(self, utilities):
        report = await utilities.client.get_report(self.definition.granularity)
        return {
            row["id"]: ValueRecord(
                value=self.settings.get_or_default(row["id"])["threshold"],
                anomalous=row["id"] == "bad",
            )
            for row in report
        }


class FailingRule(Rule):
    definition = RuleDefinition(
        name="Failing",
        granularity=Granularity.AD_GROUP,
        unique_key_prefix="failing",
        params={"x": ParamDefinition(label="X", default_value="1")},
    )

    async def evaluate(self, utilities):
        raise RuntimeError("rule exploded")


def test_duplicate_labels_are_rejected():
    with pytest.raises(ValueError):
        RuleDefinition(
            name="Dup",
            granularity=Granularity.CAMPAIGN,
            params={"a": ParamDefinition(label="Same"), "b": ParamDefinition(label="Same")},
        )


def test_registry_rejects_duplicates_and_groups_by_granularity():
    reg = RuleRegistry()
    reg.register(EchoRule)
    reg.register(FailingRule)
    with pytest.raises(ValueError):
        reg.register(EchoRule)

    assert list(reg.ids()) == ["Echo", "Failing"]
    assert reg.granularities() == [Granularity.CAMPAIGN, Granularity.AD_GROUP]
    assert list(reg.definitions(Granularity.AD_GROUP)) == ["Failing"]


def test_rule_settings_come_from_its_grid_block(make_client):
    grid = [["ID", "Threshold"], ["default", "3"], ["c1", "7"]]
    rule = EchoRule(make_client(report=[{"id": "c1"}, {"id": "bad"}]), grid)
    store = PropertyAnomalyStore(InMemoryWorkbook())

    result = asyncio.run(rule.run(store, "42"))

    assert result.unique_key == "echo-42"
    assert result.values["c1"].value == "7"
    assert result.values["bad"].value == "3"
    assert result.anomaly_count() == 1


def test_runner_saves_values_after_all_rules_succeed(make_client):
    workbook = InMemoryWorkbook()
    store = PropertyAnomalyStore(workbook)
    rule = EchoRule(make_client(report=[{"id": "bad"}]), [])

    report = asyncio.run(RulesRunner([rule]).run(store, "42"))

    assert report.anomalies == {"Echo": 1}
    assert store.get("echo-42")["bad"]["anomalous"] is True


def test_runner_failure_saves_nothing(make_client):
    store = PropertyAnomalyStore(InMemoryWorkbook())
    client = make_client(report=[{"id": "c1"}])
    rules = [EchoRule(client, []), FailingRule(client, [])]

    with pytest.raises(RuntimeError, match="rule exploded"):
        asyncio.run(RulesRunner(rules).run(store, "42"))
    assert store.get("echo-42") == {}


def test_runner_can_skip_saving(make_client):
    store = PropertyAnomalyStore(InMemoryWorkbook())
    rule = EchoRule(make_client(report=[{"id": "c1"}]), [])

    report = asyncio.run(RulesRunner([rule]).run(store, "42", save=False))

    assert len(report.results) == 1
    assert store.get("echo-42") == {}
