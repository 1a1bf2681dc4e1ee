"""Archives of a repository revision."""

from __future__ import annotations

import os
from enum import Enum

from .command import Command


class ArchiveFormat(str, Enum):
    """An archive format git can produce."""

    ZIP = "zip"
    TAR_GZ = "tar.gz"

    def __str__(self) -> str:
        return self.value


def _prefix(repo_path: str) -> str:
    trimmed = repo_path[: -len(".git")] if repo_path.endswith(".git") else repo_path
    base = os.path.basename(trimmed.rstrip(os.sep + "/")) or "."
    return base + "/"


def create_archive(
    repo_path: str | os.PathLike,
    rev: str,
    format: ArchiveFormat | str,
    dst: str | os.PathLike,
) -> None:
    """Write an archive of ``rev`` to ``dst``.

    Every entry is placed under a directory named after the repository,
    without a trailing ``.git``.
    """
    repo_path = os.fspath(repo_path)
    fmt = ArchiveFormat(format)
    Command(
        "archive",
        f"--prefix={_prefix(repo_path)}",
        f"--format={fmt.value}",
        "-o",
        os.fspath(dst),
        rev,
    ).run_in_dir(repo_path)