"""Blame results of a file."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class Blame:
    """The commit that last touched each line of a file."""

    def __init__(self, lines: Sequence[Any]) -> None:
        self._lines = list(lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self._lines)

    def line(self, i: int) -> Any | None:
        """Return the commit of line ``i`` (1-based), or None when there is no such line."""
        if i <= 0 or i > len(self._lines):
            return None
        return self._lines[i - 1]