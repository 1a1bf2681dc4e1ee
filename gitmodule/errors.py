"""Exceptions raised by the package."""

from __future__ import annotations


class GitError(Exception):
    """Base class of every error raised by the package."""

    default_message = "git error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class ParentNotExistError(GitError):
    default_message = "parent does not exist"


class SubmoduleNotExistError(GitError):
    default_message = "submodule does not exist"


class RevisionNotExistError(GitError):
    default_message = "revision does not exist"


class RemoteNotExistError(GitError):
    default_message = "remote does not exist"


class ExecTimeoutError(GitError):
    default_message = "execution was timed out"


class NoMergeBaseError(GitError):
    default_message = "no merge based was found"


class NotBlobError(GitError):
    default_message = "the entry is not a blob"


class CommandError(GitError):
    """A git command exited with a non-zero status."""

    def __init__(self, returncode: int, stderr: str = "", command: str | None = None) -> None:
        self.returncode = returncode
        self.stderr = stderr
        self.command = command
        message = f"exit status {returncode}"
        if stderr:
            message = f"{message} - {stderr}"
        super().__init__(message)