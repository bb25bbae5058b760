"""
Story Store - Lazy, memoized story materialization

Turns a static story index into prepared, ready-to-render stories:
- Schema: index entries, annotations, prepared stories, contexts
- CSF: pure annotation transforms (process, merge, prepare)
- Store: the StoryStore orchestrator and its runtime state stores
- Loaders: default async import function for Python CSF files
"""

__version__ = "0.1.0"

# Export core components - organized by dependency order
# 1. Schema (data structures, no dependencies)
from .schema import (
    EntryType,
    IndexEntry,
    StoryIndex,
    CSFFile,
    PreparedMeta,
    PreparedStory,
    StoryContext,
    BoundStory,
    LoadedEntry,
)

# 2. Utils (exceptions, memoization)
from .utils import (
    StoryStoreError,
    StoryIndexEntryNotFoundError,
    MissingStoryFromCsfFileError,
    CalledExtractOnStoreError,
    StoryStoreUsageError,
    memoize,
)

# 3. CSF transforms
from .csf import (
    normalize_project_annotations,
    process_csf_file,
    prepare_meta,
    prepare_story,
    prepare_context,
)

# 4. Store
from .store import (
    StoryStore,
    StoryIndexStore,
    ArgsStore,
    GlobalsStore,
    HooksContext,
)

# 5. Loaders
from .loaders import ModuleImporter

__all__ = [
    "__version__",
    "EntryType",
    "IndexEntry",
    "StoryIndex",
    "CSFFile",
    "PreparedMeta",
    "PreparedStory",
    "StoryContext",
    "BoundStory",
    "LoadedEntry",
    "StoryStoreError",
    "StoryIndexEntryNotFoundError",
    "MissingStoryFromCsfFileError",
    "CalledExtractOnStoreError",
    "StoryStoreUsageError",
    "memoize",
    "normalize_project_annotations",
    "process_csf_file",
    "prepare_meta",
    "prepare_story",
    "prepare_context",
    "StoryStore",
    "StoryIndexStore",
    "ArgsStore",
    "GlobalsStore",
    "HooksContext",
    "ModuleImporter",
]
