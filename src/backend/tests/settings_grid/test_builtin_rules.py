import asyncio

import yaml

from common.settings_grid.anomalies import PropertyAnomalyStore
from common.settings_grid.catalog import _dump_yaml, build_catalog
from common.settings_grid.rules import CampaignBudgetPacing, CampaignImpressionsFloor
from connectors.workbook import InMemoryWorkbook


def test_budget_pacing_flags_ratio_outside_range(make_client):
    grid = [
        ["ID", "Min. Pacing Ratio", "Max. Pacing Ratio"],
        ["default", "0.5", "1.1"],
        ["c2", "", "2"],
    ]
    report = [
        {"id": "c1", "budget": "100", "spend": "120"},
        {"id": "c2", "budget": "100", "spend": "150"},
        {"id": "c3", "budget": "0", "spend": "5"},
    ]
    rule = CampaignBudgetPacing(make_client(report=report), grid)
    store = PropertyAnomalyStore(InMemoryWorkbook())

    result = asyncio.run(rule.run(store, "42"))

    assert result.unique_key == "budgetPacing-42"
    assert result.values["c1"].value == "1.20"
    assert result.values["c1"].anomalous is True
    assert result.values["c2"].anomalous is False
    assert result.values["c3"].value == ""
    assert result.values["c3"].anomalous is True


def test_impressions_floor_reports_previous_value(make_client):
    store = PropertyAnomalyStore(InMemoryWorkbook())
    store.save("impressionsFloor-42", {"c1": {"value": "10", "anomalous": False, "fields": {}}})
    report = [{"id": "c1", "impressions": 0}, {"id": "c2", "impressions": 5}]
    grid = [["ID", "Min. Impressions"], ["default", "1"]]
    rule = CampaignImpressionsFloor(make_client(report=report), grid)

    result = asyncio.run(rule.run(store, "42"))

    assert result.values["c1"].anomalous is True
    assert result.values["c1"].fields == {"Previous": "10"}
    assert result.values["c2"].anomalous is False


def test_catalog_lists_builtin_rules():
    entries = {entry.name: entry for entry in build_catalog()}
    pacing = entries["Budget Pacing"]
    assert pacing.labels == ["Min. Pacing Ratio", "Max. Pacing Ratio"]
    assert pacing.defaults == {"Min. Pacing Ratio": "0.5", "Max. Pacing Ratio": "1.1"}
    assert pacing.granularity == "campaign"

    dumped = yaml.safe_load(_dump_yaml([e.model_dump() for e in build_catalog()]))
    assert {row["name"] for row in dumped} >= {"Budget Pacing", "Impressions Floor"}
