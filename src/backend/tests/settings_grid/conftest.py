import pytest

from common.settings_grid.models import Granularity, ParamDefinition, RuleDefinition


@pytest.fixture
def make_definition():
    def _make(
        *,
        name: str = "A",
        params=None,
        defaults=None,
        granularity: Granularity = Granularity.CAMPAIGN,
        helper: str = "",
    ) -> RuleDefinition:
        if params is None:
            params = {
                "p1": ParamDefinition(label="label1"),
                "p2": ParamDefinition(label="label2", default_value="d2"),
            }
        return RuleDefinition(
            name=name,
            granularity=granularity,
            unique_key_prefix=name.lower(),
            params=params,
            defaults=defaults,
            helper=helper,
        )

    return _make


@pytest.fixture
def scenario_grid():
    return [
        ["", "A", ""],
        ["ID", "label1", "label2"],
        ["default", "", "d2"],
        ["1", "v1", ""],
    ]
