"""
Job that stores a file group.

Run by the after-save hook, inline or queued when store_files_async is
enabled. The job does not retry; a failure is logged and re-raised for
the caller or whatever runs the queue.

After a successful store the job refreshes the group cache, which is
the only place group info is written.
"""

import logging
from typing import Any, Optional

from ...core.groups.models import GroupAttributes
from ...core.groups.resolver import build_cache_key
from ..cache.client import GroupCache
from ..uploadcare.client import GroupApiClient, UploadcareApiError

logger = logging.getLogger(__name__)


def group_attributes_from_info(group_id: str, info: dict[str, Any]) -> GroupAttributes:
    """
    Convert REST group info into cacheable attributes.

    Member URLs are kept only when every file is present, so that
    files_count and file_urls stay consistent.
    """
    files = [f for f in (info.get("files") or []) if f]
    files_count = int(info.get("files_count") or 0)
    file_urls = [f.get("original_file_url") or f.get("cdn_url") for f in files]

    if len(file_urls) != files_count or not all(file_urls):
        file_urls = []

    return GroupAttributes(
        cdn_url=info.get("cdn_url") or group_id,
        id=info.get("id") or group_id,
        files_count=files_count,
        file_urls=file_urls,
    )


class StoreGroupJob:
    """Stores a group upstream and refreshes its cache entry."""

    def __init__(
        self,
        client: GroupApiClient,
        cache: Optional[GroupCache] = None,
        cache_namespace: str = "uploadcare",
        cache_expires_in: Optional[int] = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._cache_namespace = cache_namespace
        self._cache_expires_in = cache_expires_in

    @classmethod
    def from_settings(cls, client: GroupApiClient, cache: Optional[GroupCache], settings) -> "StoreGroupJob":
        return cls(
            client=client,
            cache=cache if settings.cache_files else None,
            cache_namespace=settings.cache_namespace,
            cache_expires_in=settings.cache_expires_in,
        )

    def perform(self, group_id: str) -> dict[str, Any]:
        try:
            result = self._client.store_group(group_id)
        except UploadcareApiError as e:
            logger.error(
                "Store group job failed",
                extra={"group_id": group_id, "error": str(e)}
            )
            raise

        if self._cache is not None:
            self._refresh_cache(group_id)

        return result

    def store_group(self, group_id: str) -> dict[str, Any]:
        """Lets the job stand in as the after-save storer."""
        return self.perform(group_id)

    def _refresh_cache(self, group_id: str) -> None:
        try:
            info = self._client.get_group(group_id)
        except UploadcareApiError as e:
            logger.warning(
                "Could not refresh group cache",
                extra={"group_id": group_id, "error": str(e)}
            )
            return

        if not info:
            return

        attributes = group_attributes_from_info(group_id, info)
        key = build_cache_key(group_id, self._cache_namespace)
        self._cache.write(key, attributes.to_dict(), expires_in=self._cache_expires_in)
