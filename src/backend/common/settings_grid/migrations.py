from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Tuple

from .interfaces import PropertyStore
from .versions import compare_versions, sort_migrations

logger = logging.getLogger(__name__)

VERSION_PROPERTY = "sheet_version"

Migration = Callable[[Any], None]


class MigrationRunner:
    """Applies versioned upgrade callbacks between the stored and target version.

    Migrations must be idempotent: the stored version is committed after each
    callback, so a crash between the callback and the commit replays it.
    A workbook with no stored version is treated as freshly created at
    `target_version` and nothing is applied.
    """

    def __init__(
        self,
        migrations: Mapping[str, Migration],
        properties: PropertyStore,
        target_version: str,
    ):
        self._migrations: Dict[str, Migration] = dict(migrations)
        self._properties = properties
        self._target_version = target_version

    @property
    def current_version(self) -> str | None:
        return self._properties.get_property(VERSION_PROPERTY)

    def pending(self, current_version: str) -> List[Tuple[str, Migration]]:
        return [
            (version, migration)
            for version, migration in sort_migrations(self._migrations)
            if compare_versions(version, current_version) > 0
            and compare_versions(version, self._target_version) <= 0
        ]

    def apply(self, frontend: Any) -> int:
        current = self.current_version
        if current is None:
            self._properties.set_property(VERSION_PROPERTY, self._target_version)
            logger.info("No stored version; initialized at %s", self._target_version)
            return 0

        applied = 0
        for version, migration in self.pending(current):
            logger.info("Applying migration %s (stored=%s)", version, current)
            migration(frontend)
            self._properties.set_property(VERSION_PROPERTY, version)
            current = version
            applied += 1

        if not applied and compare_versions(current, self._target_version) != 0:
            self._properties.set_property(VERSION_PROPERTY, self._target_version)
        return applied
