"""
HTML snippets for Uploadcare Web Components.

Pure string rendering; usable from any template engine.
"""

from .include_tags import include_tag
from .uploader_tags import UploaderTags

__all__ = ["include_tag", "UploaderTags"]
