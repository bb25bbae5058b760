"""
@file_name: __init__.py
@description: Schema package exports

Usage:
    from story_store.schema import (
        IndexEntry,
        StoryIndex,
        CSFFile,
        PreparedStory,
        StoryContext,
        ...
    )
"""

from typing import Any, Awaitable, Callable, Mapping

# ===== Index Schema =====
from .index_schema import (
    EntryType,
    IndexEntry,
    StoryIndex,
    StoryIndexV3,
    V3CompatIndexEntry,
)

# ===== Annotation Schema =====
from .annotation_schema import (
    BaseAnnotations,
    NormalizedProjectAnnotations,
    NormalizedComponentAnnotations,
    NormalizedStoryAnnotations,
    CSFFile,
    PreparedMeta,
)

# ===== Story Schema =====
from .story_schema import (
    PreparedStory,
    StoryContext,
    BoundStory,
    LoadedEntry,
)

# ===== Loader types =====
# Raw exports of a CSF module: export name -> value ("default" is the meta)
ModuleExports = Mapping[str, Any]
# Async loader: import path -> module exports
ImportFn = Callable[[str], Awaitable[ModuleExports]]

__all__ = [
    # Index
    "EntryType",
    "IndexEntry",
    "StoryIndex",
    "StoryIndexV3",
    "V3CompatIndexEntry",
    # Annotations
    "BaseAnnotations",
    "NormalizedProjectAnnotations",
    "NormalizedComponentAnnotations",
    "NormalizedStoryAnnotations",
    "CSFFile",
    "PreparedMeta",
    # Stories
    "PreparedStory",
    "StoryContext",
    "BoundStory",
    "LoadedEntry",
    # Loader types
    "ModuleExports",
    "ImportFn",
]
