"""
@file_name: memoize.py
@description: Bounded, identity-keyed memoization

The CSF transforms take dicts and pydantic models as inputs, which are
unhashable or compare by value. What the store needs is "same input objects
-> same output object", so arguments are keyed by identity:

- str / int / float / bool / bytes / None are keyed by value
- everything else is keyed by id()

Each cache entry keeps a strong reference to its arguments so an id() cannot
be recycled while the entry is alive. Least recently used entries are evicted
once the limit is reached; eviction only loses referential stability.

Usage:
    process_with_cache = memoize(1000)(process_csf_file)
    a = process_with_cache(exports, "./Button.stories.py", "Button")
    b = process_with_cache(exports, "./Button.stories.py", "Button")
    assert a is b
"""

from __future__ import annotations

from collections import OrderedDict
from functools import wraps
from typing import Any, Callable, Generic, Hashable, Optional, Tuple, TypeVar

R = TypeVar("R")

_VALUE_TYPES = (str, int, float, bool, bytes, type(None))


def _key_part(value: Any) -> Hashable:
    if isinstance(value, _VALUE_TYPES):
        return ("v", type(value).__name__, value)
    return ("id", id(value))


class IdentityLRUCache(Generic[R]):
    """
    Bounded LRU mapping from argument identities to results

    Args:
        limit: Maximum number of entries kept (must be positive)
    """

    def __init__(self, limit: int):
        if limit < 1:
            raise ValueError(f"Cache limit must be positive, got {limit}")
        self.limit = limit
        self._entries: "OrderedDict[Tuple[Hashable, ...], Tuple[tuple, R]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(args: tuple) -> Tuple[Hashable, ...]:
        return tuple(_key_part(arg) for arg in args)

    def get(self, args: tuple) -> Tuple[bool, Optional[R]]:
        key = self.make_key(args)
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return False, None
        self._entries.move_to_end(key)
        self.hits += 1
        return True, entry[1]

    def set(self, args: tuple, result: R) -> None:
        key = self.make_key(args)
        self._entries[key] = (args, result)
        self._entries.move_to_end(key)
        while len(self._entries) > self.limit:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)


def memoize(limit: int) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """
    Decorator factory: memoize a pure function on the identity of its
    positional arguments

    The wrapper exposes the underlying cache as ``wrapper.cache``.
    Keyword arguments are not supported (the transforms are all positional).
    """

    def decorator(fn: Callable[..., R]) -> Callable[..., R]:
        cache: IdentityLRUCache[R] = IdentityLRUCache(limit)

        @wraps(fn)
        def wrapper(*args: Any) -> R:
            found, result = cache.get(args)
            if found:
                return result  # type: ignore[return-value]
            result = fn(*args)
            cache.set(args, result)
            return result

        wrapper.cache = cache  # type: ignore[attr-defined]
        return wrapper

    return decorator
