"""Git object types."""

from enum import Enum


class ObjectType(str, Enum):
    """The type of a Git object."""

    COMMIT = "commit"
    TREE = "tree"
    BLOB = "blob"
    TAG = "tag"

    def __str__(self) -> str:
        return self.value