"""Running git commands."""

from __future__ import annotations

import io
import os
import subprocess
import threading
import time
from typing import BinaryIO

from . import logs
from .errors import CommandError, ExecTimeoutError

DEFAULT_TIMEOUT = 60.0
"""Default timeout in seconds for every command."""

_LOG_LIMIT = 512
_OMITTED = b"... (more omitted)"
_CHUNK = 64 * 1024


class _LogCapture:
    """Passes everything to a sink while keeping the first bytes for the log."""

    def __init__(self, sink: BinaryIO | None, limit: int = _LOG_LIMIT) -> None:
        self._sink = sink
        self._remaining = limit
        self._prompted = False
        self._buf = bytearray()

    def write(self, data: bytes) -> int:
        if self._remaining > 0:
            chunk = data[: self._remaining]
            self._buf += chunk
            self._remaining -= len(chunk)
        if not self._prompted and self._remaining <= 0:
            self._prompted = True
            self._buf += _OMITTED
        if self._sink is not None:
            self._sink.write(data)
        return len(data)

    def text(self) -> str:
        return self._buf.decode("utf-8", "replace")


class _Pump(threading.Thread):
    """Copies a pipe into a writer until EOF."""

    def __init__(self, pipe: BinaryIO, sink) -> None:
        super().__init__(daemon=True)
        self._pipe = pipe
        self._sink = sink
        self.error: BaseException | None = None

    def run(self) -> None:
        with self._pipe:
            for chunk in iter(lambda: self._pipe.read1(_CHUNK), b""):
                if self._sink is None or self.error is not None:
                    continue
                try:
                    self._sink.write(chunk)
                except Exception as exc:  # keep draining so the process can finish
                    self.error = exc


def _effective_timeout(timeout: float | None) -> float:
    if timeout is None or timeout <= 0:
        return DEFAULT_TIMEOUT
    return float(timeout)


class Command:
    """A git command with its arguments and extra environment variables."""

    def __init__(self, *args: str) -> None:
        self.name = "git"
        self.args: list[str] = list(args)
        self.envs: list[str] = []

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name} {' '.join(self.args)}"

    def __repr__(self) -> str:
        return f"Command({str(self)!r})"

    def add_args(self, *args: str) -> Command:
        """Append arguments and return the command."""
        self.args.extend(args)
        return self

    def add_envs(self, *args: str) -> Command:
        """Append ``KEY=VALUE`` environment variables and return the command."""
        self.envs.extend(args)
        return self

    def _environment(self) -> dict[str, str] | None:
        if not self.envs:
            return None
        env = dict(os.environ)
        for entry in self.envs:
            key, _, value = entry.partition("=")
            env[key] = value
        return env

    def _execute(self, stdout, stderr, dir: str | None, timeout: float) -> None:
        deadline = time.monotonic() + timeout
        if time.monotonic() >= deadline:
            raise ExecTimeoutError()

        proc = subprocess.Popen(
            [self.name, *self.args],
            cwd=dir or None,
            env=self._environment(),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        pumps = [_Pump(proc.stdout, stdout), _Pump(proc.stderr, stderr)]
        for pump in pumps:
            pump.start()

        try:
            proc.wait(timeout=max(deadline - time.monotonic(), 0))
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
            for pump in pumps:
                pump.join()
            raise ExecTimeoutError() from None

        for pump in pumps:
            pump.join()
        for pump in pumps:
            if pump.error is not None:
                raise pump.error
        if proc.returncode != 0:
            raise CommandError(proc.returncode, command=str(self))

    def run_in_dir_pipeline(
        self,
        stdout: BinaryIO | None,
        stderr: BinaryIO | None,
        dir: str | os.PathLike | None = None,
        timeout: float | None = None,
    ) -> None:
        """Run the command in ``dir``, streaming its output to the given writers.

        A missing or non-positive ``timeout`` means :data:`DEFAULT_TIMEOUT`.
        Raises :class:`ExecTimeoutError` when the command runs out of time and
        :class:`CommandError` when it exits with a non-zero status.
        """
        timeout = _effective_timeout(timeout)
        dir = os.fspath(dir) if dir else None
        capture = _LogCapture(stdout)
        try:
            self._execute(capture, stderr, dir, timeout)
        finally:
            where = f"{dir}: " if dir else ""
            logs.log("[timeout: %ss] %s%s\n%s", f"{timeout:g}", where, self, capture.text())

    def run_in_dir(self, dir: str | os.PathLike | None = None, timeout: float | None = None) -> bytes:
        """Run the command in ``dir`` and return its standard output.

        A failing command raises :class:`CommandError` carrying its stderr.
        """
        out = io.BytesIO()
        err = io.BytesIO()
        try:
            self.run_in_dir_pipeline(out, err, dir, timeout)
        except CommandError as exc:
            raise CommandError(
                exc.returncode,
                err.getvalue().decode("utf-8", "replace"),
                command=exc.command,
            ) from None
        return out.getvalue()

    def run(self, timeout: float | None = None) -> bytes:
        """Run the command in the working directory and return its standard output."""
        return self.run_in_dir(None, timeout)