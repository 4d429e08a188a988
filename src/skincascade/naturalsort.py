"""Natural ("human") ordering for file and directory names.

``2.css`` sorts before ``10.css`` and version ``1.1`` before ``1.10``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

__all__ = ["naturalized", "natural_sorted", "dir_entries"]

_RUN_RE = re.compile(r"[0-9]+|[^0-9]+")

# Numeric runs sort ahead of text runs at the same position so that keys
# never compare an int against a str.
_NUMBER = 0
_TEXT = 1
_DIGITS = "0123456789"


def naturalized(name: str) -> tuple:
    """Return a sort key splitting *name* into numeric and text runs.

    The raw name is appended as a final tie-breaker (``"01"`` vs ``"1"``), so
    the key is a total order.
    """
    runs = tuple(
        (_NUMBER, int(run), "") if run[0] in _DIGITS else (_TEXT, 0, run)
        for run in _RUN_RE.findall(name)
    )
    return (runs, name)


def natural_sorted(names: Iterable[str]) -> list[str]:
    return sorted(names, key=naturalized)


def dir_entries(directory: str | Path, pattern: str | re.Pattern[str]) -> list[str]:
    """Names in *directory* matching *pattern*, naturally sorted.

    A missing directory has no entries.
    """
    path = Path(directory)
    if not path.is_dir():
        return []
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    return natural_sorted(p.name for p in path.iterdir() if regex.search(p.name))
