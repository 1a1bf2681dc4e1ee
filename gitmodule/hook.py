"""Server-side git hooks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class HookName(str, Enum):
    """The name of a git hook."""

    PRE_RECEIVE = "pre-receive"
    UPDATE = "update"
    POST_RECEIVE = "post-receive"

    def __str__(self) -> str:
        return self.value


SERVER_SIDE_HOOKS: tuple[HookName, ...] = (
    HookName.PRE_RECEIVE,
    HookName.UPDATE,
    HookName.POST_RECEIVE,
)
"""Hooks supported on the server side."""

_PRE_RECEIVE_SAMPLE = r"""#!/bin/sh
#
# Sample pre-receive hook.
#
# Every push option of the form "echoback=<text>" is written back to the
# client, and the push is refused when the "reject" option is given.
#
# Rename this file to "pre-receive" to enable it.

count=${GIT_PUSH_OPTION_COUNT:-0}
n=0
while [ "$n" -lt "$count" ]; do
	eval "opt=\${GIT_PUSH_OPTION_$n}"
	case "$opt" in
	echoback=*)
		echo "pre-receive says: ${opt#echoback=}" >&2
		;;
	reject)
		exit 1
		;;
	esac
	n=$((n + 1))
done
exit 0
"""

_UPDATE_SAMPLE = r"""#!/bin/sh
#
# Sample update hook, called as: update <refname> <old-sha> <new-sha>
#
# It guards refs according to these boolean settings:
#   hooks.allowunannotated   accept lightweight tags (default: no)
#   hooks.allowdeletetag     accept tag deletion (default: no)
#   hooks.allowmodifytag     accept moving an existing tag (default: no)
#   hooks.allowdeletebranch  accept branch deletion (default: no)
#   hooks.denycreatebranch   refuse new branches (default: no)
#
# Rename this file to "update" to enable it.

ref="$1"
old="$2"
new="$3"

if [ -z "$GIT_DIR" ]; then
	echo "This hook is meant to be run by git receive-pack." >&2
	exit 1
fi
if [ -z "$ref" ] || [ -z "$old" ] || [ -z "$new" ]; then
	echo "usage: $0 <ref> <old-sha> <new-sha>" >&2
	exit 1
fi

setting() {
	git config --bool "hooks.$1"
}

null_sha="0000000000000000000000000000000000000000"
if [ "$new" = "$null_sha" ]; then
	kind=delete
else
	kind=$(git cat-file -t "$new")
fi

deny() {
	echo "*** $1" >&2
	exit 1
}

case "$ref:$kind" in
refs/tags/*:commit)
	[ "$(setting allowunannotated)" = "true" ] ||
		deny "Lightweight tag ${ref#refs/tags/} is not accepted; use an annotated tag."
	;;
refs/tags/*:delete)
	[ "$(setting allowdeletetag)" = "true" ] || deny "Tags may not be deleted."
	;;
refs/tags/*:tag)
	if [ "$(setting allowmodifytag)" != "true" ] &&
		git rev-parse --verify --quiet "$ref" > /dev/null; then
		deny "Tag $ref exists and may not be moved."
	fi
	;;
refs/heads/*:commit)
	if [ "$old" = "$null_sha" ] && [ "$(setting denycreatebranch)" = "true" ]; then
		deny "New branches are not accepted."
	fi
	;;
refs/heads/*:delete | refs/remotes/*:delete)
	[ "$(setting allowdeletebranch)" = "true" ] || deny "Branches may not be deleted."
	;;
refs/remotes/*:commit)
	;;
*)
	deny "Unexpected update of $ref to an object of type $kind."
	;;
esac

exit 0
"""

_POST_RECEIVE_SAMPLE = r"""#!/bin/sh
#
# Sample post-receive hook.
#
# Runs after the pushed refs have been updated. Each line on standard input
# has the form: <old-sha> <new-sha> <refname>

while read old new ref
do
    name=$(git rev-parse --symbolic --abbrev-ref "$ref")
    if [ "$name" = "master" ]; then
        : # react to updates of the main branch here
    fi
done"""

SERVER_SIDE_HOOK_SAMPLES: dict[HookName, str] = {
    HookName.PRE_RECEIVE: _PRE_RECEIVE_SAMPLE,
    HookName.UPDATE: _UPDATE_SAMPLE,
    HookName.POST_RECEIVE: _POST_RECEIVE_SAMPLE,
}
"""Sample scripts for the server-side hooks."""


@dataclass
class Hook:
    """A git hook: its name, absolute file path and content."""

    name: HookName
    path: str
    content: str = ""
    is_sample: bool = False

    def update(self, content: str) -> None:
        """Write ``content`` to the hook file and keep it as the hook's content.

        Surrounding whitespace and carriage returns are removed first; missing
        parent directories are created.
        """
        self.content = content.strip().replace("\r", "")

        path = os.fspath(self.path)
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o777)
        with os.fdopen(fd, "wb") as handle:
            handle.write(self.content.encode("utf-8"))

        self.is_sample = False