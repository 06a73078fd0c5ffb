"""
Resolution of group references into FileGroup values.

Canonical group ids go through a read-through cache: if another part of
the system (the store job) has cached the group's info, that wins.
Otherwise we build default attributes from the reference itself and a
files-count lookup. URL lists and single URLs are resolved locally.

Field access must never fail because of what happens to be stored, so
lookup failures and unusable cache entries are logged and ignored.
"""

import logging
from typing import Any, Mapping, Optional, Protocol

from .models import FileGroup, GroupReference, ReferenceKind
from .parser import classify, files_count_from_group_id

logger = logging.getLogger(__name__)


DEFAULT_CACHE_NAMESPACE = "uploadcare"


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class GroupCacheReader(Protocol):
    """The read side of the group cache. Resolution never writes."""

    def read(self, key: str) -> Optional[Mapping[str, Any]]:
        """Return the cached mapping for key, or None."""
        ...


class FilesCountLookup(Protocol):
    """Something that knows how many files a group holds."""

    def lookup(self, group_id: str) -> Optional[int]:
        """Return the file count, or None if unknown. May raise."""
        ...


# ---------------------------------------------------------------------------
# Files-count lookups
# ---------------------------------------------------------------------------

class SuffixFilesCountLookup:
    """
    Reads the count from the "~N" suffix of the group id.

    No network access; this is the default.
    """

    def lookup(self, group_id: str) -> Optional[int]:
        return files_count_from_group_id(group_id)


class ApiFilesCountLookup:
    """Asks the Uploadcare REST API for the group's files_count."""

    def __init__(self, client) -> None:
        self._client = client

    def lookup(self, group_id: str) -> Optional[int]:
        info = self._client.get_group(group_id)
        if not info:
            return None
        count = info.get("files_count")
        return int(count) if count is not None else None


# ---------------------------------------------------------------------------
# Cache keys
# ---------------------------------------------------------------------------

def build_cache_key(raw: str, namespace: str = DEFAULT_CACHE_NAMESPACE) -> str:
    """
    Derive the cache key for a stored group value.

    Deterministic, so the store job and the resolver agree on the key
    for the same value.
    """
    return f"{namespace}:group:{raw.strip()}"


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class GroupResolver:
    """
    Turns raw stored values into FileGroup objects.

    The cache and count lookup are injected; either can be omitted,
    in which case canonical groups are resolved from the id alone.
    """

    def __init__(
        self,
        cache: Optional[GroupCacheReader] = None,
        files_count_lookup: Optional[FilesCountLookup] = None,
        cache_namespace: str = DEFAULT_CACHE_NAMESPACE,
    ) -> None:
        self._cache = cache
        self._files_count_lookup = files_count_lookup or SuffixFilesCountLookup()
        self._cache_namespace = cache_namespace

    def cache_key(self, raw: str) -> str:
        return build_cache_key(raw, self._cache_namespace)

    def resolve_value(self, raw: Optional[str]) -> Optional[FileGroup]:
        """Classify and resolve in one step. None for empty values."""
        return self.resolve(classify(raw))

    def resolve(self, reference: GroupReference) -> Optional[FileGroup]:
        if reference.kind is ReferenceKind.EMPTY:
            return None

        if reference.kind is ReferenceKind.CANONICAL_GROUP:
            return self._resolve_canonical(reference)

        # URL lists and single URLs never carry a group id
        return FileGroup(
            cdn_url=reference.raw.strip(),
            id=None,
            files_count=len(reference.file_urls),
            file_urls=reference.file_urls,
        )

    def _resolve_canonical(self, reference: GroupReference) -> FileGroup:
        raw = reference.raw.strip()

        cached = self._read_cache(raw)
        if cached:
            try:
                return FileGroup.from_attributes(cached)
            except (TypeError, ValueError) as e:
                logger.warning(
                    "Ignoring unusable cached group attributes",
                    extra={"group_id": reference.group_id, "error": str(e)}
                )

        return FileGroup(
            cdn_url=raw,
            id=reference.group_id,
            files_count=self._lookup_files_count(reference.group_id),
        )

    def _read_cache(self, raw: str) -> Optional[Mapping[str, Any]]:
        if self._cache is None:
            return None

        key = self.cache_key(raw)
        try:
            cached = self._cache.read(key)
        except Exception as e:
            logger.warning(
                "Group cache read failed",
                extra={"cache_key": key, "error": str(e)}
            )
            return None

        if cached is not None and not isinstance(cached, Mapping):
            logger.warning(
                "Ignoring cached group entry that is not a mapping",
                extra={"cache_key": key, "entry_type": type(cached).__name__}
            )
            return None
        return cached

    def _lookup_files_count(self, group_id: str) -> int:
        try:
            count = self._files_count_lookup.lookup(group_id)
        except Exception as e:
            logger.warning(
                "Files count lookup failed, treating as 0",
                extra={"group_id": group_id, "error": str(e)}
            )
            return 0

        if count is None or count < 0:
            return 0
        return count
