from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Dict

from .frontend import MonitorFrontEnd

Handler = Callable[[], Awaitable[Any]]


class Command(str, Enum):
    ON_OPEN = "on-open"
    INITIALIZE_SHEETS = "initialize-sheets"
    LAUNCH_MONITOR = "launch-monitor"
    PRE_LAUNCH_QA = "pre-launch-qa"
    MIGRATE = "migrate"


def build_dispatcher(frontend: MonitorFrontEnd) -> Dict[Command, Handler]:
    async def _migrate() -> int:
        return frontend.migrate()

    return {
        Command.ON_OPEN: frontend.on_open,
        Command.INITIALIZE_SHEETS: frontend.initialize_sheets,
        Command.LAUNCH_MONITOR: frontend.launch_monitor,
        Command.PRE_LAUNCH_QA: frontend.pre_launch_qa,
        Command.MIGRATE: _migrate,
    }


async def dispatch(dispatcher: Dict[Command, Handler], command: Command | str) -> Any:
    handler = dispatcher[Command(command)]
    return await handler()
