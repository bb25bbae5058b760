"""
Utils Package

@file_name: __init__.py
@description: Utility modules for story_store

Exports:
- memoize / IdentityLRUCache: bounded identity-keyed memoization
- Custom exceptions
- configure_logging: loguru sink setup for entry points
"""

from story_store.utils.memoize import (
    IdentityLRUCache,
    memoize,
)

# Custom exceptions
from story_store.utils.exceptions import (
    # Base
    StoryStoreError,
    # Index errors
    StoryIndexError,
    StoryIndexEntryNotFoundError,
    ImportPathNotFoundError,
    # CSF errors
    MissingStoryFromCsfFileError,
    AnnotationError,
    # Usage errors
    StoryStoreUsageError,
    CalledExtractOnStoreError,
)

from story_store.utils.log_config import configure_logging

__all__ = [
    # Memoization
    "IdentityLRUCache",
    "memoize",
    # Exceptions
    "StoryStoreError",
    "StoryIndexError",
    "StoryIndexEntryNotFoundError",
    "ImportPathNotFoundError",
    "MissingStoryFromCsfFileError",
    "AnnotationError",
    "StoryStoreUsageError",
    "CalledExtractOnStoreError",
    # Logging
    "configure_logging",
]
