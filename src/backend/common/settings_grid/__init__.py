"""Settings grid core for the rule monitor.

This package owns the grid <-> structured settings transformation:
- Rule settings live in a sparse grid (rows = entities, column blocks = rules).
- No spreadsheet host or reporting API calls live here; those are injected.
"""

from .errors import InputShapeError, MissingConfigurationError, MissingDefaultsError, SettingsGridError
from .models import (
    ExecutorResult,
    Granularity,
    ParamDefinition,
    RecordInfo,
    RuleDefinition,
    RuleRunReport,
    ValueRecord,
)
from .param_values import ParamValueTable, transform_to_param_values
from .rule_range import RuleColumnRange
from .runner import RulesRunner
from .versions import compare_versions, sort_migrations

# Import built-in rules so they self-register with the global registry.
from . import rules as _builtin_rules  # noqa: F401
