# gitmodule

A small Python library for working with Git repositories. It runs the `git`
binary found on your `PATH` and turns its output into Python objects. It has
no dependencies beyond the standard library.

## Installation

```
pip install gitmodule
```

Git itself must be installed.

## Quick look

```python
from gitmodule.command import Command
from gitmodule.repo import open_repository, clone, init
from gitmodule.version import bin_version

print(bin_version())                  # e.g. "2.39.2"

init("/tmp/fresh", bare=True)
clone("/path/to/source.git", "/tmp/work", branch="develop")

repo = open_repository("/tmp/work")   # FileNotFoundError if not a directory
print(repo.rev_parse("HEAD"))
status = repo.show_name_status("HEAD")
print(status.added, status.modified, status.removed)

out = Command("log", "--oneline", "-n", "3").run_in_dir(repo.path)
```

## Modules

### `gitmodule.command`

`Command(*args)` builds a `git` invocation. `add_args` and `add_envs`
(`"KEY=VALUE"` strings) append in steps and return the command, so calls can
be chained; `str(cmd)` shows the command line.

- `run(timeout=None)` runs in the current directory and returns stdout as bytes.
- `run_in_dir(dir=None, timeout=None)` does the same in `dir`.
- `run_in_dir_pipeline(stdout, stderr, dir=None, timeout=None)` streams the
  output into the given binary writers instead.

A missing or non-positive timeout means `DEFAULT_TIMEOUT` (60 seconds). When
the time runs out the process is killed and `ExecTimeoutError` is raised. A
non-zero exit status raises `CommandError`; from `run` and `run_in_dir` its
message is `exit status N - <stderr>` and it carries `returncode`, `stderr`
and `command`.

### `gitmodule.repo`

Module-level functions taking a repository path: `init`, `clone`,
`repo_push`, `repo_checkout`, `repo_reset`, `repo_move`, `repo_add`,
`repo_commit`, `repo_show_name_status`, `repo_count_objects`, `repo_fsck`.

`Repository` (from `open_repository`) holds an absolute `path` and offers
`fetch`, `pull`, `push`, `checkout`, `reset`, `move`, `add`, `commit`,
`show_name_status`, `rev_parse`, `count_objects` and `fsck`.

- `commit` takes a committer and optional author — any objects with `name`
  and `email` attributes. Having nothing to commit is not an error.
- `rev_parse` raises `RevisionNotExistError` when git cannot resolve the
  revision.
- `show_name_status` returns a `NameStatus` with `added`, `removed` and
  `modified` lists.
- `count_objects` returns a `CountObject`; sizes are converted to bytes.

### `gitmodule.diff`

`parse_diff(reader, max_files=0, max_file_lines=0, max_line_chars=0)` parses
a unified diff from a text or binary stream, or from a `str`/`bytes` value. It
returns a `Diff` of `DiffFile`s, each with `DiffSection`s of `DiffLine`s, plus
addition and deletion counts. Renames, new and deleted files, binary files,
submodules and quoted file names are recognised. A positive limit that is
exceeded marks the diff (and the affected file) `is_incomplete` rather than
failing. `DiffSection.line(typ, line)` finds the added or deleted line paired
with a line number on the other side.

```python
from gitmodule.diff import parse_diff

diff = parse_diff(diff_text, max_files=50)
for f in diff.files:
    print(f.name, f.num_additions, f.num_deletions, f.is_renamed())
```

### Other modules

- `gitmodule.hook` — `HookName`, `SERVER_SIDE_HOOKS`,
  `SERVER_SIDE_HOOK_SAMPLES` and `Hook`, whose `update(content)` strips the
  text, removes carriage returns and writes it to the hook file, creating
  parent directories.
- `gitmodule.archive` — `create_archive(repo_path, rev, format, dst)` writes a
  `ArchiveFormat.ZIP` or `ArchiveFormat.TAR_GZ` archive of a revision, with
  entries under a directory named after the repository.
- `gitmodule.blame` — `Blame`, a 1-based lookup (`line(i)`) over a list of
  per-line values; out-of-range lines give `None`.
- `gitmodule.version` — `bin_version()` returns the git version, computed once.
- `gitmodule.logs` — `set_output`, `set_prefix`, `get_prefix` and `log`. With
  an output stream set, every command run is logged with its timeout,
  directory and the first 512 bytes of its output.
- `gitmodule.objects` — the `ObjectType` enum.
- `gitmodule.errors` — `GitError` and its subclasses.

## What it does not do

There is no model of commits, trees or blobs: the package does not read
commit metadata, list tree entries, show file contents, walk history or read
submodules. `Blame` only indexes values you give it; nothing here runs
`git blame` for you. There is no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```