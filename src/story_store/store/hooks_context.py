"""
@file_name: hooks_context.py
@description: Per-story hook handle

Tracks the side effects a story registers while rendering. The StoryStore
keeps exactly one HooksContext per story id; callers release it through
StoryStore.cleanup_story() when they are done with the story.

Effect lifecycle:
1. use_effect(create) during render queues `create`
2. run_effects() after render calls each queued `create`; a callable return
   value is kept as its destroy function
3. clean() calls every destroy function and forgets all effects
"""

from typing import Any, Callable, List, Optional

from loguru import logger

Effect = Callable[[], Optional[Callable[[], Any]]]


class HooksContext:
    """Hook handle of one story"""

    def __init__(self):
        self._pending_effects: List[Effect] = []
        self._destroy_callbacks: List[Callable[[], Any]] = []
        self.render_count = 0

    @property
    def has_effects(self) -> bool:
        return bool(self._pending_effects or self._destroy_callbacks)

    def use_effect(self, create: Effect) -> None:
        self._pending_effects.append(create)

    def run_effects(self) -> None:
        """Run effects queued by the last render"""
        effects, self._pending_effects = self._pending_effects, []
        self.render_count += 1
        for create in effects:
            destroy = create()
            if callable(destroy):
                self._destroy_callbacks.append(destroy)

    def clean(self) -> None:
        """Destroy every effect that ran and drop queued ones"""
        callbacks, self._destroy_callbacks = self._destroy_callbacks, []
        self._pending_effects = []
        for destroy in reversed(callbacks):
            destroy()
        if callbacks:
            logger.debug(f"Cleaned {len(callbacks)} effects")
