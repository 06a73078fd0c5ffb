"""
Domain models for Uploadcare file groups.

A stored field value is only a string. These models describe what that
string means (a GroupReference) and what we can say about the group it
points at (GroupAttributes, FileGroup). They have no dependencies on
HTTP, caches or web frameworks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class ReferenceKind(Enum):
    """The shapes a stored group value can take."""
    CANONICAL_GROUP = "canonical_group"  # "<uuid>~<count>"
    URL_LIST = "url_list"                # "https://...,https://..."
    SINGLE_URL = "single_url"
    EMPTY = "empty"


@dataclass(frozen=True)
class GroupReference:
    """
    A classified raw field value.

    Derived on every access and never persisted. `group_id` is only
    set for canonical references; `file_urls` only for URL lists and
    single URLs.
    """
    raw: str
    kind: ReferenceKind
    group_id: Optional[str] = None
    file_urls: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.kind is ReferenceKind.EMPTY

    @property
    def is_canonical(self) -> bool:
        return self.kind is ReferenceKind.CANONICAL_GROUP


@dataclass
class GroupAttributes:
    """
    The resolved summary of a group reference.

    This is the shape stored in the cache: a flat mapping of
    cdn_url, id, files_count and file_urls.
    """
    cdn_url: str
    id: Optional[str] = None
    files_count: int = 0
    file_urls: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cdn_url": self.cdn_url,
            "id": self.id,
            "files_count": self.files_count,
            "file_urls": list(self.file_urls),
        }


@dataclass(frozen=True)
class FileGroup:
    """
    Read-only view of a group, as seen by templates and the store hook.

    Frozen because a group value is recomputed from the stored string
    on every access; nothing should hold on to it and mutate it.
    """
    cdn_url: str
    id: Optional[str] = None
    files_count: int = 0
    file_urls: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.files_count < 0:
            raise ValueError("files_count cannot be negative")
        if self.file_urls and self.files_count != len(self.file_urls):
            raise ValueError("files_count must match the number of file_urls")

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any]) -> "FileGroup":
        """
        Build a group from a cached or freshly computed attribute mapping.

        Unknown keys are ignored so cache entries written by newer code
        still load.
        """
        file_urls = attributes.get("file_urls") or ()
        return cls(
            cdn_url=str(attributes.get("cdn_url") or ""),
            id=attributes.get("id") or None,
            files_count=int(attributes.get("files_count") or 0),
            file_urls=tuple(file_urls),
        )

    @property
    def is_stored_group(self) -> bool:
        """True when the value points at a server-side group we can store."""
        return self.id is not None

    def to_attributes(self) -> GroupAttributes:
        return GroupAttributes(
            cdn_url=self.cdn_url,
            id=self.id,
            files_count=self.files_count,
            file_urls=list(self.file_urls),
        )
