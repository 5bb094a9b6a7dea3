from datetime import datetime, timezone

from common.settings_grid.models import ExecutorResult, RuleRunReport, ValueRecord
from connectors.workbook import InMemoryWorkbook
from pipelines.results import build_result_matrix, populate_rule_results_in_sheets


def test_result_matrix_drops_malformed_records():
    result = ExecutorResult(
        rule_name="Budget Pacing",
        unique_key="budgetPacing-42",
        values={
            "c1": ValueRecord(value="1.2", anomalous=True, fields={"Spend": "120"}),
            "c2": {"value": "0.9", "fields": {"Budget": "100"}},
            "c3": {"anomalous": True},
            "c4": "oops",
        },
    )

    grid, dropped = build_result_matrix(result)

    assert dropped == 2
    assert grid == [
        ["ID", "Value", "Anomalous", "Spend", "Budget"],
        ["c1", "1.2", "TRUE", "120", ""],
        ["c2", "0.9", "FALSE", "", "100"],
    ]


def test_populate_writes_one_sheet_per_rule():
    report = RuleRunReport(
        run_id="r1",
        generated_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        results=[
            ExecutorResult(rule_name="A", unique_key="a-1", values={"x": {"value": "1"}}),
            ExecutorResult(rule_name="B", unique_key="b-1", values={}),
        ],
    )
    workbook = InMemoryWorkbook()

    assert populate_rule_results_in_sheets(workbook, report) == {"A": 1, "B": 0}
    assert workbook.read_sheet("A - Results") == [["ID", "Value", "Anomalous"], ["x", "1", "FALSE"]]
    assert workbook.read_sheet("B - Results") == [["ID", "Value", "Anomalous"]]
