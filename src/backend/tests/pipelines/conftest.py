import pytest

from connectors.workbook import InMemoryWorkbook
from pipelines.frontend import MonitorFrontEnd


@pytest.fixture
def campaign_rows():
    return [("c1", "Campaign 1"), ("c2", "Campaign 2")]


@pytest.fixture
def campaign_report():
    return [
        {"id": "c1", "budget": "100", "spend": "120", "impressions": 0},
        {"id": "c2", "budget": "100", "spend": "100", "impressions": 50},
    ]


@pytest.fixture
def make_frontend(make_client, campaign_rows, campaign_report):
    def _make(*, named_settings=None, properties=None, sheets=None, rows=None, report=None, registry=None):
        workbook = InMemoryWorkbook(
            sheets=sheets,
            named_settings={"ENTITY_ID": "42"} if named_settings is None else named_settings,
            properties=properties,
        )
        client = make_client(
            rows=campaign_rows if rows is None else rows,
            report=campaign_report if report is None else report,
        )
        if registry is None:
            return MonitorFrontEnd(workbook, client)
        return MonitorFrontEnd(workbook, client, registry=registry)

    return _make
