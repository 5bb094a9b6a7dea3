from __future__ import annotations

from functools import cmp_to_key
from itertools import zip_longest
from typing import Callable, List, Mapping, Tuple, TypeVar

T = TypeVar("T")


def _segments(version: str) -> List[int]:
    return [int(part) for part in version.strip().split(".")]


def compare_versions(ver1: str, ver2: str) -> int:
    """Compare dotted numeric versions segment by segment.

    Missing trailing segments count as zero, so "1.2" == "1.2.0" and
    "1.10.0" > "1.9.9".  Returns -1, 0 or 1.
    """
    for a, b in zip_longest(_segments(ver1), _segments(ver2), fillvalue=0):
        if a != b:
            return -1 if a < b else 1
    return 0


def sort_migrations(migrations: Mapping[str, Callable[..., T]]) -> List[Tuple[str, Callable[..., T]]]:
    return sorted(migrations.items(), key=cmp_to_key(lambda x, y: compare_versions(x[0], y[0])))
