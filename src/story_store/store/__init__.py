"""
@file_name: __init__.py
@description: Unified exports for the Store package

Store structure:
    store/
    ├── __init__.py            # This file - unified exports
    ├── story_store.py         # StoryStore orchestrator
    ├── story_index_store.py   # Index accessor
    ├── args_store.py          # Current args per story
    ├── globals_store.py       # Current globals
    └── hooks_context.py       # Per-story hook handle

Usage:
    >>> from story_store.store import StoryStore
    >>> store = StoryStore(story_index, import_fn, project_annotations)
"""

from .story_index_store import StoryIndexStore
from .args_store import ArgsStore
from .globals_store import GlobalsStore
from .hooks_context import HooksContext
from .story_store import StoryStore

__all__ = [
    "StoryStore",
    "StoryIndexStore",
    "ArgsStore",
    "GlobalsStore",
    "HooksContext",
]
