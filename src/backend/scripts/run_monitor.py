from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _summarize(result) -> str:
    if hasattr(result, "model_dump"):
        return json.dumps(result.model_dump(mode="json"), indent=2)
    return json.dumps(result, indent=2, default=str)


def main(argv: list[str] | None = None) -> int:
    _ensure_backend_on_path()

    from common.settings_grid.errors import SettingsGridError
    from connectors.reporting import ReportingClient, ReportingHttpError, get_reporting_config
    from connectors.workbook import JsonWorkbook
    from pipelines.commands import Command, build_dispatcher, dispatch
    from pipelines.config import get_monitor_config
    from pipelines.frontend import MonitorFrontEnd

    parser = argparse.ArgumentParser(description="Run one rule monitor command against a workbook.")
    parser.add_argument("command", choices=[c.value for c in Command])
    parser.add_argument("--workbook", type=Path, help="Workbook JSON path (default: MONITOR_WORKBOOK_PATH).")
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a named workbook setting before running (repeatable).",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("run_monitor")

    config = get_monitor_config()
    workbook = JsonWorkbook(args.workbook or config.workbook_path)
    for assignment in args.set:
        name, sep, value = assignment.partition("=")
        if not sep or not name.strip():
            parser.error(f"--set expects NAME=VALUE (got {assignment!r})")
        workbook.set_named_setting(name.strip(), value)

    try:
        client = ReportingClient(get_reporting_config(workbook.get_named_setting("ENTITY_ID") or ""))
        frontend = MonitorFrontEnd(workbook, client, target_version=config.target_version)
        result = asyncio.run(dispatch(build_dispatcher(frontend), args.command))
    except (SettingsGridError, ReportingHttpError, ValueError) as exc:
        log.error("%s failed: %s", args.command, exc)
        return 1

    print(_summarize(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
