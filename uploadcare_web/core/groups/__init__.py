"""
Uploadcare file-group values: parsing, resolution and mounting.
"""

from .models import FileGroup, GroupAttributes, GroupReference, ReferenceKind
from .mount import (
    FileGroupMountError,
    FileGroupRegistry,
    MountedField,
    MountOptions,
    StoreGroupHook,
)
from .parser import GROUP_ID_PATTERN, classify, extract_group_id
from .resolver import (
    ApiFilesCountLookup,
    GroupResolver,
    SuffixFilesCountLookup,
    build_cache_key,
)

__all__ = [
    "FileGroup",
    "GroupAttributes",
    "GroupReference",
    "ReferenceKind",
    "FileGroupMountError",
    "FileGroupRegistry",
    "MountedField",
    "MountOptions",
    "StoreGroupHook",
    "GROUP_ID_PATTERN",
    "classify",
    "extract_group_id",
    "ApiFilesCountLookup",
    "GroupResolver",
    "SuffixFilesCountLookup",
    "build_cache_key",
]
