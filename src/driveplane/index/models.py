"""Value types shared by the index builder, store and query engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResourceKind(Enum):
    """Kind of drive resource a path denotes."""

    FILE = "file"
    FOLDER = "folder"


class SearchCategory(Enum):
    """Result category, as exposed on the wire."""

    ALL = "ALL"
    FILES = "FILES"
    FOLDERS = "FOLDERS"


_CATEGORY_BY_KIND = {
    ResourceKind.FILE: SearchCategory.FILES,
    ResourceKind.FOLDER: SearchCategory.FOLDERS,
}


@dataclass(frozen=True, slots=True)
class ResourceRef:
    """Reference to a file or folder in the directory tree.

    The index only caches this; the tree stays authoritative.
    """

    kind: ResourceKind
    id: str

    @classmethod
    def file(cls, file_id: str) -> ResourceRef:
        return cls(ResourceKind.FILE, file_id)

    @classmethod
    def folder(cls, folder_id: str) -> ResourceRef:
        return cls(ResourceKind.FOLDER, folder_id)

    @property
    def category(self) -> SearchCategory:
        return _CATEGORY_BY_KIND[self.kind]

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """One (path, resource, deleted) triple enumerated by the directory tree."""

    path: str
    ref: ResourceRef
    deleted: bool = False


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A single ranked match. Produced per query, never persisted."""

    path: str
    score: int
    resource_ref: ResourceRef

    @property
    def category(self) -> SearchCategory:
        return self.resource_ref.category

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "path": self.path,
            "score": self.score,
            "resource_id": self.resource_ref.id,
            "category": self.category.value,
        }
