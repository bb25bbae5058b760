"""
@file_name: args_store.py
@description: Current arg values, keyed by story id

PreparedStory.initial_args never changes; the values a user has edited live
here. set_initial() only seeds a story the first time it is seen.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from loguru import logger

from story_store.schema import PreparedStory


class ArgsStore:
    """Arg value store"""

    def __init__(self):
        self.initial_args_by_story_id: Dict[str, Dict[str, Any]] = {}
        self.args_by_story_id: Dict[str, Dict[str, Any]] = {}

    def contains(self, story_id: str) -> bool:
        return story_id in self.args_by_story_id

    def set_initial(self, story: PreparedStory) -> None:
        """Seed args from the story's initial args unless a value already exists"""
        if story.id not in self.initial_args_by_story_id:
            self.initial_args_by_story_id[story.id] = dict(story.initial_args)
        if story.id not in self.args_by_story_id:
            self.args_by_story_id[story.id] = dict(story.initial_args)
            logger.debug(f"Seeded args for {story.id}: {list(story.initial_args)}")

    def get(self, story_id: str) -> Dict[str, Any]:
        """Current args of a story (an empty dict when never seeded)"""
        return self.args_by_story_id.get(story_id, {})

    def update(self, story_id: str, arg_updates: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge arg_updates into the story's current args"""
        self.args_by_story_id[story_id] = {**self.get(story_id), **arg_updates}
        return self.args_by_story_id[story_id]

    def reset(self, story_id: str, arg_names: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Reset args to their initial values

        Args:
            story_id: Story to reset
            arg_names: Only reset these args (None resets all of them)
        """
        initial = self.initial_args_by_story_id.get(story_id, {})
        if arg_names is None:
            self.args_by_story_id[story_id] = dict(initial)
            return self.args_by_story_id[story_id]

        current = dict(self.get(story_id))
        for name in arg_names:
            if name in initial:
                current[name] = initial[name]
            else:
                current.pop(name, None)
        self.args_by_story_id[story_id] = current
        return current
