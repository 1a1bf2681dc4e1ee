"""Repository-level git operations."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from .command import Command
from .errors import CommandError, RevisionNotExistError

PathLike = str | os.PathLike


class Identity(Protocol):
    """Anything with a name and an e-mail address, e.g. a signature."""

    name: str
    email: str


@dataclass
class NameStatus:
    """Files added, removed and modified by a commit."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)


@dataclass
class CountObject:
    """Disk usage report of a repository; sizes are in bytes."""

    count: int = 0
    size: int = 0
    in_pack: int = 0
    packs: int = 0
    size_pack: int = 0
    prune_packable: int = 0
    garbage: int = 0
    size_garbage: int = 0


# Prefix of a "count-objects -v" line, the field it sets and its multiplier.
_COUNT_FIELDS = (
    ("count: ", "count", 1),
    ("size: ", "size", 1024),
    ("in-pack: ", "in_pack", 1),
    ("packs: ", "packs", 1),
    ("size-pack: ", "size_pack", 1024),
    ("prune-packable: ", "prune_packable", 1),
    ("garbage: ", "garbage", 1),
    ("size-garbage: ", "size_garbage", 1024),
)


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def _fspath(path: PathLike) -> str:
    return os.fspath(path)


def init(path: PathLike, bare: bool = False, timeout: float | None = None) -> None:
    """Create the directory if needed and initialise a git repository in it."""
    path = _fspath(path)
    os.makedirs(path, exist_ok=True)
    cmd = Command("init")
    if bare:
        cmd.add_args("--bare")
    cmd.run_in_dir(path, timeout)


def open_repository(repo_path: PathLike) -> Repository:
    """Open the repository at ``repo_path``.

    Raises FileNotFoundError when the path is not an existing directory.
    """
    path = os.path.abspath(_fspath(repo_path))
    if not os.path.isdir(path):
        raise FileNotFoundError(f"no such directory: {path}")
    return Repository(path)


def clone(
    url: str,
    dst: PathLike,
    mirror: bool = False,
    bare: bool = False,
    quiet: bool = False,
    branch: str = "",
    timeout: float | None = None,
) -> None:
    """Clone the repository at ``url`` into ``dst``.

    ``branch`` is checked out only for a non-bare clone.
    """
    dst = _fspath(dst)
    parent = os.path.dirname(dst)
    if parent:
        os.makedirs(parent, exist_ok=True)

    cmd = Command("clone")
    if mirror:
        cmd.add_args("--mirror")
    if bare:
        cmd.add_args("--bare")
    if quiet:
        cmd.add_args("--quiet")
    if not bare and branch:
        cmd.add_args("-b", branch)
    cmd.add_args(url, dst).run(timeout)


def repo_push(
    repo_path: PathLike,
    remote: str,
    branch: str,
    envs: Iterable[str] = (),
    timeout: float | None = None,
) -> None:
    """Push ``branch`` to ``remote``, with extra ``KEY=VALUE`` environment variables."""
    Command("push", remote, branch).add_envs(*envs).run_in_dir(_fspath(repo_path), timeout)


def repo_checkout(
    repo_path: PathLike,
    branch: str,
    base_branch: str = "",
    timeout: float | None = None,
) -> None:
    """Check out ``branch``; with ``base_branch`` a new branch is created from it."""
    cmd = Command("checkout")
    if base_branch:
        cmd.add_args("-b")
    cmd.add_args(branch)
    if base_branch:
        cmd.add_args(base_branch)
    cmd.run_in_dir(_fspath(repo_path), timeout)


def repo_reset(
    repo_path: PathLike,
    rev: str,
    hard: bool = False,
    timeout: float | None = None,
) -> None:
    """Reset the working tree to ``rev``."""
    cmd = Command("reset")
    if hard:
        cmd.add_args("--hard")
    cmd.add_args(rev).run_in_dir(_fspath(repo_path), timeout)


def repo_move(
    repo_path: PathLike,
    src: str,
    dst: str,
    timeout: float | None = None,
) -> None:
    """Move a file, directory or symlink from ``src`` to ``dst``."""
    Command("mv", src, dst).run_in_dir(_fspath(repo_path), timeout)


def repo_add(
    repo_path: PathLike,
    all: bool = False,
    pathspecs: Iterable[str] = (),
    timeout: float | None = None,
) -> None:
    """Add local changes to the index."""
    cmd = Command("add")
    if all:
        cmd.add_args("--all")
    pathspecs = list(pathspecs)
    if pathspecs:
        cmd.add_args("--", *pathspecs)
    cmd.run_in_dir(_fspath(repo_path), timeout)


def repo_commit(
    repo_path: PathLike,
    committer: Identity,
    message: str,
    author: Identity | None = None,
    timeout: float | None = None,
) -> None:
    """Commit staged changes; the author defaults to the committer.

    Having nothing to commit is not an error.
    """
    author = author or committer
    cmd = Command("commit")
    cmd.add_envs(
        f"GIT_COMMITTER_NAME={committer.name}",
        f"GIT_COMMITTER_EMAIL={committer.email}",
    )
    cmd.add_args(f"--author={author.name} <{author.email}>", "-m", message)
    try:
        cmd.run_in_dir(_fspath(repo_path), timeout)
    except CommandError as exc:
        # Exit status 1 without stderr means there was nothing to commit.
        if exc.returncode == 1 and not exc.stderr:
            return
        raise


def _parse_name_status(output: str) -> NameStatus:
    status = NameStatus()
    targets = {"A": status.added, "D": status.removed, "M": status.modified}
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        target = targets.get(fields[0][0])
        if target is not None:
            target.append(fields[1])
    return status


def repo_show_name_status(
    repo_path: PathLike,
    rev: str,
    timeout: float | None = None,
) -> NameStatus:
    """Return the files added, removed and modified by ``rev``."""
    stdout = Command("show", "--name-status", "--pretty=format:''", rev).run_in_dir(
        _fspath(repo_path), timeout
    )
    return _parse_name_status(stdout.decode("utf-8", "replace"))


def _parse_count_objects(output: str) -> CountObject:
    result = CountObject()
    for line in output.split("\n"):
        for prefix, name, scale in _COUNT_FIELDS:
            if line.startswith(prefix):
                setattr(result, name, _to_int(line[len(prefix):]) * scale)
                break
    return result


def repo_count_objects(repo_path: PathLike, timeout: float | None = None) -> CountObject:
    """Return the disk usage report of the repository."""
    stdout = Command("count-objects", "-v").run_in_dir(_fspath(repo_path), timeout)
    return _parse_count_objects(stdout.decode("utf-8", "replace"))


def repo_fsck(
    repo_path: PathLike,
    args: Iterable[str] = (),
    timeout: float | None = None,
) -> None:
    """Verify the connectivity and validity of the objects in the repository."""
    Command("fsck", *args).run_in_dir(_fspath(repo_path), timeout)


@dataclass(frozen=True)
class Repository:
    """A git repository at an absolute path."""

    path: str

    def fetch(self, prune: bool = False, timeout: float | None = None) -> None:
        """Fetch updates from the remotes."""
        cmd = Command("fetch")
        if prune:
            cmd.add_args("--prune")
        cmd.run_in_dir(self.path, timeout)

    def pull(
        self,
        rebase: bool = False,
        all: bool = False,
        remote: str = "",
        branch: str = "",
        timeout: float | None = None,
    ) -> None:
        """Pull updates; ``remote`` and ``branch`` are used only when ``all`` is false."""
        cmd = Command("pull")
        if rebase:
            cmd.add_args("--rebase")
        if all:
            cmd.add_args("--all")
        if not all and remote:
            cmd.add_args(remote)
            if branch:
                cmd.add_args(branch)
        cmd.run_in_dir(self.path, timeout)

    def push(
        self,
        remote: str,
        branch: str,
        envs: Iterable[str] = (),
        timeout: float | None = None,
    ) -> None:
        """Push ``branch`` to ``remote``."""
        repo_push(self.path, remote, branch, envs, timeout)

    def checkout(self, branch: str, base_branch: str = "", timeout: float | None = None) -> None:
        """Check out ``branch``, creating it from ``base_branch`` when given."""
        repo_checkout(self.path, branch, base_branch, timeout)

    def reset(self, rev: str, hard: bool = False, timeout: float | None = None) -> None:
        """Reset the working tree to ``rev``."""
        repo_reset(self.path, rev, hard, timeout)

    def move(self, src: str, dst: str, timeout: float | None = None) -> None:
        """Move ``src`` to ``dst`` inside the working tree."""
        repo_move(self.path, src, dst, timeout)

    def add(
        self,
        all: bool = False,
        pathspecs: Iterable[str] = (),
        timeout: float | None = None,
    ) -> None:
        """Add local changes to the index."""
        repo_add(self.path, all, pathspecs, timeout)

    def commit(
        self,
        committer: Identity,
        message: str,
        author: Identity | None = None,
        timeout: float | None = None,
    ) -> None:
        """Commit staged changes."""
        repo_commit(self.path, committer, message, author, timeout)

    def show_name_status(self, rev: str, timeout: float | None = None) -> NameStatus:
        """Return the name status of ``rev``."""
        return repo_show_name_status(self.path, rev, timeout)

    def rev_parse(self, rev: str, timeout: float | None = None) -> str:
        """Return the full object ID that ``rev`` names.

        Raises RevisionNotExistError when git cannot resolve it.
        """
        try:
            stdout = Command("rev-parse", rev).run_in_dir(self.path, timeout)
        except CommandError as exc:
            if exc.returncode == 128:
                raise RevisionNotExistError() from exc
            raise
        return stdout.decode("utf-8", "replace").strip()

    def count_objects(self, timeout: float | None = None) -> CountObject:
        """Return the disk usage report of the repository."""
        return repo_count_objects(self.path, timeout)

    def fsck(self, args: Iterable[str] = (), timeout: float | None = None) -> None:
        """Verify the objects in the repository."""
        repo_fsck(self.path, args, timeout)