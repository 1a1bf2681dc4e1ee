"""Parsing of unified diffs produced by git."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import IO, Union

from .errors import GitError

DiffSource = Union[str, bytes, bytearray, IO[str], IO[bytes]]

_DIFF_HEAD = "diff --git "
_NO_NEWLINE = "\\ No newline at end of file"
_INTEGER = re.compile(r"[+-]?\d+")
_ESCAPE = re.compile(rb"\\([0-7]{1,3}|.)", re.DOTALL)
_ESCAPES = {
    b"a": b"\a",
    b"b": b"\b",
    b"f": b"\f",
    b"n": b"\n",
    b"r": b"\r",
    b"t": b"\t",
    b"v": b"\v",
    b"\\": b"\\",
    b'"': b'"',
}


class DiffLineType(IntEnum):
    """The type of a line in a diff."""

    PLAIN = 1
    ADD = 2
    DELETE = 3
    SECTION = 4


class DiffFileType(IntEnum):
    """The status of a file in a diff."""

    ADD = 1
    CHANGE = 2
    DELETE = 3
    RENAME = 4


@dataclass
class DiffLine:
    """A line in a diff section."""

    type: DiffLineType
    content: str = ""
    left_line: int = 0
    right_line: int = 0


@dataclass
class DiffSection:
    """A hunk of a file diff, starting with its ``@@`` header line."""

    lines: list[DiffLine] = field(default_factory=list)
    num_additions: int = 0
    num_deletions: int = 0

    def num_lines(self) -> int:
        """Return the number of lines in the section, header included."""
        return len(self.lines)

    def line(self, typ: DiffLineType, line: int) -> DiffLine | None:
        """Return the added or deleted line matching ``line`` on the opposite side.

        Returns None when there is no match or the surrounding block has an
        unequal number of additions and deletions.
        """
        difference = 0
        add_count = 0
        del_count = 0
        matched: DiffLine | None = None

        for diff_line in self.lines:
            if diff_line.type == DiffLineType.ADD:
                add_count += 1
            elif diff_line.type == DiffLineType.DELETE:
                del_count += 1
            else:
                if matched is not None:
                    break
                difference = diff_line.right_line - diff_line.left_line
                add_count = 0
                del_count = 0

            if typ == DiffLineType.DELETE:
                if diff_line.right_line == 0 and diff_line.left_line == line - difference:
                    matched = diff_line
            elif typ == DiffLineType.ADD:
                if diff_line.left_line == 0 and diff_line.right_line == line + difference:
                    matched = diff_line

        return matched if add_count == del_count else None


@dataclass
class DiffFile:
    """One file of a diff.

    ``index`` is the new blob hash for added or changed files and the old one
    for deleted files.
    """

    name: str = ""
    type: DiffFileType = DiffFileType.CHANGE
    index: str = ""
    sections: list[DiffSection] = field(default_factory=list)
    num_additions: int = 0
    num_deletions: int = 0
    old_name: str = ""
    is_binary: bool = False
    is_submodule: bool = False
    is_incomplete: bool = False

    def num_sections(self) -> int:
        """Return the number of sections in the file."""
        return len(self.sections)

    def is_created(self) -> bool:
        """Return True if the file is newly created."""
        return self.type == DiffFileType.ADD

    def is_deleted(self) -> bool:
        """Return True if the file has been deleted."""
        return self.type == DiffFileType.DELETE

    def is_renamed(self) -> bool:
        """Return True if the file has been renamed."""
        return self.type == DiffFileType.RENAME


@dataclass
class Diff:
    """A parsed diff."""

    files: list[DiffFile] = field(default_factory=list)
    total_additions: int = 0
    total_deletions: int = 0
    is_incomplete: bool = False

    def num_files(self) -> int:
        """Return the number of files in the diff."""
        return len(self.files)


def _atoi(text: str) -> int:
    return int(text) if _INTEGER.fullmatch(text) else 0


def _unquote(text: str) -> str:
    """Undo git's C-style quoting of a path."""

    def replace(match: re.Match[bytes]) -> bytes:
        code = match.group(1)
        if code[:1].isdigit():
            return bytes([int(code, 8) & 0xFF])
        return _ESCAPES.get(code, code)

    return _ESCAPE.sub(replace, text.encode("utf-8")).decode("utf-8", "replace")


def _open(reader: DiffSource):
    if isinstance(reader, str):
        return io.StringIO(reader)
    if isinstance(reader, (bytes, bytearray)):
        return io.BytesIO(bytes(reader))
    return reader


class _DiffParser:
    def __init__(self, stream, max_files: int, max_file_lines: int, max_line_chars: int) -> None:
        self._stream = stream
        self._max_files = max_files
        self._max_file_lines = max_file_lines
        self._max_line_chars = max_line_chars
        # The next line that has not been processed yet.
        self._buffer: str | None = None
        self._eof = False

    def _readline(self) -> str:
        try:
            raw = self._stream.readline()
        except (OSError, ValueError) as exc:
            raise GitError(f"read string: {exc}") from exc
        if isinstance(raw, (bytes, bytearray)):
            raw = bytes(raw).decode("utf-8", "replace")
        return raw

    def _read_line(self) -> None:
        if self._buffer is not None:
            return
        raw = self._readline()
        if raw.endswith("\n"):
            raw = raw[:-1]
        else:
            self._eof = True
        self._buffer = raw

    def _take(self) -> str:
        line = self._buffer or ""
        self._buffer = None
        return line

    def _drain(self) -> None:
        while self._readline():
            pass

    def _parse_file_header(self) -> DiffFile:
        line = self._take()
        begin = len(_DIFF_HEAD)
        if len(line) <= begin:
            raise GitError(f"malformed diff header: {line!r}")

        # File names are surrounded by double quotes when they need escaping.
        has_quote = line[begin] == '"'
        middle = line.find(' "b/' if has_quote else " b/")
        if middle < begin:
            raise GitError(f"malformed diff header: {line!r}")

        a = line[begin + 2 : middle]
        b = line[middle + 3 :]
        if has_quote:
            a = _unquote(a[1:-1])
            b = _unquote(b[1:-1])

        file = DiffFile(name=a, type=DiffFileType.CHANGE)

        while not self._eof:
            self._read_line()
            line = self._take()
            if not line:
                continue

            if line.startswith("new file"):
                file.type = DiffFileType.ADD
                file.is_submodule = line.endswith(" 160000")
            elif line.startswith("deleted"):
                file.type = DiffFileType.DELETE
                file.is_submodule = line.endswith(" 160000")
            elif line.startswith("index"):  # e.g. index ee791be..9997571 100644
                fields = line[6:].split()
                shas = fields[0].split("..") if fields else []
                if len(shas) != 2:
                    raise GitError("malformed index: expect two SHAs in the form of <old>..<new>")
                file.index = shas[0] if file.is_deleted() else shas[1]
                break
            elif line.startswith("similarity index "):
                file.type = DiffFileType.RENAME
                file.old_name = a
                file.name = b
                # A pure rename has no index line.
                if line.endswith("100%"):
                    break
            elif line.startswith("old mode"):
                break

        return file

    def _parse_section(self) -> tuple[DiffSection, bool]:
        line = self._take()
        section = DiffSection(lines=[DiffLine(DiffLineType.SECTION, line)])

        # Line numbers, e.g. @@ -0,0 +1,3 @@
        parts = line.split("@@")
        if len(parts) < 2:
            raise GitError(f"malformed section header: {line!r}")
        ranges = parts[1][1:].split(" ")
        left_line = _atoi(ranges[0].split(",")[0][1:])
        right_line = _atoi(ranges[1].split(",")[0]) if len(ranges) > 1 else left_line

        while not self._eof:
            self._read_line()
            if not self._buffer:
                self._buffer = None
                continue

            if self._buffer[0] not in " +-":
                if self._buffer.startswith(_NO_NEWLINE):
                    self._buffer = None
                    continue
                return section, False

            line = self._take()
            if self._max_line_chars > 0 and len(line.encode("utf-8")) > self._max_line_chars:
                return section, True

            marker = line[0]
            if marker == " ":
                section.lines.append(DiffLine(DiffLineType.PLAIN, line, left_line, right_line))
                left_line += 1
                right_line += 1
            elif marker == "+":
                section.lines.append(DiffLine(DiffLineType.ADD, line, 0, right_line))
                section.num_additions += 1
                right_line += 1
            else:
                section.lines.append(DiffLine(DiffLineType.DELETE, line, left_line, 0))
                section.num_deletions += 1
                if left_line > 0:
                    left_line += 1

        return section, False

    def parse(self) -> Diff:
        diff = Diff()
        file = DiffFile()
        current_file_lines = 0

        while not self._eof:
            self._read_line()
            buffer = self._buffer
            if not buffer or buffer.startswith("+++ ") or buffer.startswith("--- "):
                self._buffer = None
                continue

            if buffer.startswith(_DIFF_HEAD):
                if self._max_files > 0 and len(diff.files) >= self._max_files:
                    diff.is_incomplete = True
                    self._drain()
                    break
                file = self._parse_file_header()
                diff.files.append(file)
                current_file_lines = 0
                continue

            if file.is_incomplete:
                self._buffer = None
                continue

            if buffer.startswith("Binary"):
                self._buffer = None
                file.is_binary = True
                continue

            if buffer[0] != "@":
                self._buffer = None
                continue

            if self._max_file_lines > 0 and current_file_lines > self._max_file_lines:
                file.is_incomplete = True
                diff.is_incomplete = True
                continue

            section, incomplete = self._parse_section()
            file.sections.append(section)
            file.num_additions += section.num_additions
            file.num_deletions += section.num_deletions
            diff.total_additions += section.num_additions
            diff.total_deletions += section.num_deletions
            current_file_lines += section.num_lines()
            if incomplete:
                file.is_incomplete = True
                diff.is_incomplete = True

        return diff


def parse_diff(
    reader: DiffSource,
    max_files: int = 0,
    max_file_lines: int = 0,
    max_line_chars: int = 0,
) -> Diff:
    """Parse a diff read line by line from ``reader``.

    ``reader`` is a text or binary stream, or the diff itself as str or bytes.
    Each limit is ignored when not positive; exceeding one marks the diff
    (and the affected file) incomplete instead of failing.
    """
    parser = _DiffParser(_open(reader), max_files, max_file_lines, max_line_chars)
    return parser.parse()