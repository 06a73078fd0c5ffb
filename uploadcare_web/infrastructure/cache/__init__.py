"""
Group info cache.
"""

from .client import GroupCache, InMemoryGroupCache, create_group_cache

__all__ = ["GroupCache", "InMemoryGroupCache", "create_group_cache"]
