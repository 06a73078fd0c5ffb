"""
Parsing of stored group values.

A file-group field can hold three kinds of value, depending on how it
was filled in:

1. A canonical group id, "<uuid>~<count>", as returned by Uploadcare
   when the uploader creates a group (possibly inside a CDN URL).
2. Comma-separated CDN URLs, written by the uploader in multiple mode.
3. A single CDN URL.

The checks run in that order. A value containing both a canonical id
and a comma is a canonical group; existing data relies on that.
"""

import re
from typing import Optional

from .models import GroupReference, ReferenceKind


GROUP_ID_PATTERN = re.compile(
    r"\b[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}~\d+",
    re.IGNORECASE,
)


def extract_group_id(raw: Optional[str]) -> Optional[str]:
    """Return the first canonical group id found in `raw`, or None."""
    if not raw:
        return None
    match = GROUP_ID_PATTERN.search(raw)
    return match.group(0) if match else None


def files_count_from_group_id(group_id: Optional[str]) -> Optional[int]:
    """
    Read the file count encoded in a group id's "~N" suffix.

    Returns None when the id carries no usable suffix.
    """
    if not group_id or "~" not in group_id:
        return None
    suffix = group_id.rsplit("~", 1)[1]
    if not suffix.isdigit():
        return None
    return int(suffix)


def split_url_list(raw: str) -> tuple[str, ...]:
    """Split a comma-separated URL list, dropping blank entries."""
    return tuple(piece.strip() for piece in raw.split(",") if piece.strip())


def classify(raw: Optional[str]) -> GroupReference:
    """
    Classify a raw stored value.

    Never raises: anything that is not a canonical id or a URL list is
    treated as a single URL.
    """
    value = "" if raw is None else str(raw)

    if not value.strip():
        return GroupReference(raw=value, kind=ReferenceKind.EMPTY)

    group_id = extract_group_id(value)
    if group_id:
        return GroupReference(
            raw=value,
            kind=ReferenceKind.CANONICAL_GROUP,
            group_id=group_id,
        )

    if "," in value:
        return GroupReference(
            raw=value,
            kind=ReferenceKind.URL_LIST,
            file_urls=split_url_list(value),
        )

    return GroupReference(
        raw=value,
        kind=ReferenceKind.SINGLE_URL,
        file_urls=(value.strip(),),
    )
