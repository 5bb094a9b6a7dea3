from __future__ import annotations

from typing import Any, Callable, Dict

from common.settings_grid.models import Granularity

CURRENT_VERSION = "1.2.0"

LEGACY_SETTINGS_SHEET = "Rule Settings"


def settings_sheet_name(granularity: Granularity) -> str:
    return f"Rule Settings - {granularity.label}"


def _split_legacy_settings_sheet(frontend: Any) -> None:
    workbook = frontend.workbook
    legacy = workbook.read_sheet(LEGACY_SETTINGS_SHEET)
    if not legacy:
        return
    target = settings_sheet_name(Granularity.CAMPAIGN)
    if not workbook.read_sheet(target):
        workbook.write_sheet(target, legacy)
    workbook.delete_sheet(LEGACY_SETTINGS_SHEET)


def _seed_label_setting(frontend: Any) -> None:
    workbook = frontend.workbook
    if workbook.get_named_setting("LABEL"):
        return
    workbook.set_named_setting("LABEL", workbook.get_named_setting("ENTITY_ID") or "")


# Each migration must be safe to run twice.
MIGRATIONS: Dict[str, Callable[[Any], None]] = {
    "1.1.0": _split_legacy_settings_sheet,
    "1.2.0": _seed_label_setting,
}
