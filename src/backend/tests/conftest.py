import os
import sys

import pytest


# Ensure `src/backend` is on sys.path so imports like `import common...` work,
# even when pytest's rootdir is the repository root.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from common.settings_grid.models import RecordInfo  # noqa: E402


class FakeClient:
    def __init__(self, rows=None, report=None):
        self.rows = list(rows or [])
        self.report = list(report or [])
        self.row_calls = 0

    async def get_rows(self, granularity):
        self.row_calls += 1
        return [RecordInfo(id=entity_id, display_name=name) for entity_id, name in self.rows]

    async def get_report(self, granularity):
        return list(self.report)


@pytest.fixture
def make_client():
    def _make(*, rows=None, report=None) -> FakeClient:
        return FakeClient(rows=rows, report=report)

    return _make
