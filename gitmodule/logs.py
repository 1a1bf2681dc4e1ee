"""Optional logging of executed commands."""

from __future__ import annotations

from typing import TextIO

_output: TextIO | None = None
_prefix = "[git-module] "


def set_output(output: TextIO | None) -> None:
    """Set the text stream logs are written to; None disables logging."""
    global _output
    if output is not None and not callable(getattr(output, "write", None)):
        raise TypeError("log output must provide a write() method")
    _output = output


def set_prefix(prefix: str) -> None:
    """Set the prefix prepended to each log entry."""
    global _prefix
    if not isinstance(prefix, str):
        raise TypeError("log prefix must be a string")
    _prefix = prefix


def get_prefix() -> str:
    """Return the prefix prepended to each log entry."""
    return _prefix


def log(message: str, *args: object) -> None:
    """Write one log entry, formatting ``message`` with ``args`` when given."""
    if _output is None:
        return
    text = message % args if args else message
    _output.write(f"{_prefix}{text}\n")