"""Version of the git binary in use."""

from __future__ import annotations

import threading

from .command import Command
from .errors import GitError

_lock = threading.Lock()
_version: str | None = None
_error: Exception | None = None


def _parse_version(output: str) -> str:
    fields = output.split()
    if len(fields) < 3:
        raise GitError(f"not enough output: {output}")
    raw = fields[2]
    index = raw.find("windows")
    if index >= 1:
        return raw[: index - 1]
    return raw


def bin_version() -> str:
    """Return the version of the git binary; the result is computed once."""
    global _version, _error
    with _lock:
        if _version is None and _error is None:
            try:
                _version = _parse_version(Command("version").run().decode("utf-8", "replace"))
            except Exception as exc:
                _error = exc
        if _error is not None:
            raise _error
        return _version