"""Work with Git repositories by driving the git binary: commands, repositories, diffs, hooks and archives."""

__version__ = "0.1.0"