"""
@file_name: naming.py
@description: Story id and name helpers

- sanitize("Example/Button") -> "example-button"
- to_id("Example/Button", "Primary") -> "example-button--primary"
- story_name_from_export("PrimaryButton") -> "Primary Button"
- is_export_story(key, meta) -> whether a module export is a story
"""

import re
from typing import Iterable, Optional

from story_store.utils.exceptions import AnnotationError

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])|[_\-\s]+")


def sanitize(string: str) -> str:
    """Lowercase, replace runs of non-alphanumerics with '-', trim dashes"""
    return _NON_ALNUM.sub("-", string.lower()).strip("-")


def to_id(kind: str, name: Optional[str] = None) -> str:
    sanitized_kind = sanitize(kind)
    if not sanitized_kind:
        raise AnnotationError(f"Invalid kind '{kind}', must include alphanumeric characters")
    if name is None:
        return sanitized_kind

    sanitized_name = sanitize(name)
    if not sanitized_name:
        raise AnnotationError(f"Invalid name '{name}', must include alphanumeric characters")
    return f"{sanitized_kind}--{sanitized_name}"


def story_name_from_export(key: str) -> str:
    words = [word for word in _WORD_BOUNDARY.split(key) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _matches(key: str, patterns: Iterable[str]) -> bool:
    # Patterns are plain export names or regular expressions
    try:
        return any(key == pattern or re.fullmatch(pattern, key) for pattern in patterns)
    except re.error as e:
        raise AnnotationError(f"Invalid story pattern: {e}", cause=e, export_name=key) from e


def is_export_story(
    key: str,
    include_stories: Optional[Iterable[str]] = None,
    exclude_stories: Optional[Iterable[str]] = None,
) -> bool:
    if key == "default" or key.startswith("_"):
        return False
    if include_stories is not None and not _matches(key, include_stories):
        return False
    if exclude_stories is not None and _matches(key, exclude_stories):
        return False
    return True
