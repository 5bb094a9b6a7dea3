from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .migrations import CURRENT_VERSION


load_dotenv()

DEFAULT_WORKBOOK_PATH = Path("workbook.json")


@dataclass(frozen=True)
class MonitorConfig:
    workbook_path: Path
    target_version: str


def get_monitor_config() -> MonitorConfig:
    """Load monitor settings from MONITOR_WORKBOOK_PATH and MONITOR_TARGET_VERSION."""
    workbook_path = os.getenv("MONITOR_WORKBOOK_PATH", "").strip()
    target_version = os.getenv("MONITOR_TARGET_VERSION", "").strip() or CURRENT_VERSION
    return MonitorConfig(
        workbook_path=Path(workbook_path) if workbook_path else DEFAULT_WORKBOOK_PATH,
        target_version=target_version,
    )
