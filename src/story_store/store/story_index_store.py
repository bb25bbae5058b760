"""
@file_name: story_index_store.py
@description: Index accessor

Wraps the story index entry table. The table is swapped wholesale (never
patched) when the index changes, see StoryStore.on_stories_changed().
"""

from typing import Any, Dict, Mapping, Union

from loguru import logger

from story_store.schema import IndexEntry, StoryIndex
from story_store.utils.exceptions import ImportPathNotFoundError, StoryIndexEntryNotFoundError


class StoryIndexStore:
    """
    Story index accessor

    Usage:
        >>> index = StoryIndexStore({"v": 5, "entries": {...}})
        >>> entry = index.story_id_to_entry("button--primary")
        >>> first = index.import_path_to_entry("./Button.stories.py")
    """

    def __init__(self, story_index: Union[StoryIndex, Mapping[str, Any]]):
        self.entries = self._coerce(story_index).entries

    @staticmethod
    def _coerce(story_index: Union[StoryIndex, Mapping[str, Any]]) -> StoryIndex:
        if isinstance(story_index, StoryIndex):
            return story_index
        return StoryIndex.model_validate(story_index)

    @property
    def entries(self) -> Dict[str, IndexEntry]:
        return self._entries

    @entries.setter
    def entries(self, entries: Mapping[str, Any]) -> None:
        # Accept raw dicts as well as IndexEntry instances
        self._entries = StoryIndex.model_validate({"entries": entries}).entries
        logger.debug(f"Story index entries set: {len(self._entries)} entries")

    def story_id_to_entry(self, story_id: str) -> IndexEntry:
        """
        Look up an index entry by story id

        Raises:
            StoryIndexEntryNotFoundError: No such story id
        """
        entry = self._entries.get(story_id)
        if entry is None:
            raise StoryIndexEntryNotFoundError(story_id=story_id)
        return entry

    def import_path_to_entry(self, import_path: str) -> IndexEntry:
        """
        First entry (in index order) backed by import_path

        Raises:
            ImportPathNotFoundError: No entry uses this path
        """
        for entry in self._entries.values():
            if entry.import_path == import_path:
                return entry
        raise ImportPathNotFoundError(import_path=import_path)
