from __future__ import annotations


class SettingsGridError(RuntimeError):
    """Base class for settings grid failures that abort a reconciliation pass."""


class InputShapeError(SettingsGridError):
    def __init__(self, rows: int):
        super().__init__(
            f"Expected a grid with row and column headers of at least size 2 (got {rows} row(s))."
        )
        self.rows = rows


class MissingDefaultsError(SettingsGridError):
    def __init__(self, rule_name: str):
        super().__init__(f"Missing default values definition for rule '{rule_name}'.")
        self.rule_name = rule_name


class MissingConfigurationError(SettingsGridError):
    def __init__(self, name: str):
        super().__init__(f"Missing required setting: {name}")
        self.name = name
