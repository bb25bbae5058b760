"""
Custom Exceptions - Custom exception hierarchy

@file_name: exceptions.py
@description: Define custom exception types for story_store

=============================================================================
Design Goals
=============================================================================

Every failure the store can detect on its own is a typed signal:
- Lookups fail fast (no retry, these are data/programming errors)
- Exception chains are preserved (cause)
- Context information is attached for structured logging

Loader failures (the import function raising) are NOT wrapped here.
They propagate to the caller unchanged.

Exception hierarchy:
    StoryStoreError (base class)
    ├── StoryIndexError (index lookups)
    │   ├── StoryIndexEntryNotFoundError
    │   └── ImportPathNotFoundError
    ├── MissingStoryFromCsfFileError
    ├── StoryStoreUsageError
    │   └── CalledExtractOnStoreError
    └── AnnotationError

Usage example:
    try:
        entry = store.story_index.story_id_to_entry("button--primary")
    except StoryIndexEntryNotFoundError as e:
        logger.warning("Unknown story", extra=e.to_dict())

=============================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Optional


# =============================================================================
# Base Exceptions
# =============================================================================

class StoryStoreError(Exception):
    """
    Base exception class for story_store

    Attributes:
        message: Error message
        cause: Original exception (if any)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        self.message = message
        self.cause = cause
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message"""
        parts = [self.message]

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"[{context_str}]")

        if self.cause:
            parts.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging purposes"""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "cause_type": type(self.cause).__name__ if self.cause else None,
            **self.context,
        }


# =============================================================================
# Index Exceptions
# =============================================================================

class StoryIndexError(StoryStoreError):
    """Base exception class for story index lookups"""
    pass


class StoryIndexEntryNotFoundError(StoryIndexError):
    """
    Raised when a story id is absent from the index

    Example:
        raise StoryIndexEntryNotFoundError(story_id="button--missing")
    """

    def __init__(self, story_id: str, **context: Any):
        self.story_id = story_id
        super().__init__(
            f"Couldn't find story matching id '{story_id}' in the index",
            story_id=story_id,
            **context,
        )


class ImportPathNotFoundError(StoryIndexError):
    """Raised when no index entry uses the given import path"""

    def __init__(self, import_path: str, **context: Any):
        self.import_path = import_path
        super().__init__(
            f"Couldn't find any index entry for import path '{import_path}'",
            import_path=import_path,
            **context,
        )


# =============================================================================
# CSF / Annotation Exceptions
# =============================================================================

class MissingStoryFromCsfFileError(StoryStoreError):
    """
    Raised when a story id is not exported by an already-loaded CSF file

    This usually means the index and the module disagree (stale index, or
    a story export was renamed without re-indexing).
    """

    def __init__(self, story_id: str, **context: Any):
        self.story_id = story_id
        super().__init__(
            f"Couldn't find story matching id '{story_id}' after importing its CSF file",
            story_id=story_id,
            **context,
        )


class AnnotationError(StoryStoreError):
    """Raised when a CSF module or annotation object is malformed"""
    pass


# =============================================================================
# Usage Exceptions
# =============================================================================

class StoryStoreUsageError(StoryStoreError):
    """Raised when the store is called in an order it does not support"""
    pass


class CalledExtractOnStoreError(StoryStoreUsageError):
    """Raised when extract() runs before cache_all_csf_files()"""

    def __init__(self, **context: Any):
        super().__init__(
            "Cannot call extract() unless you call cache_all_csf_files() first",
            **context,
        )
