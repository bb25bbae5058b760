"""
@file_name: globals_store.py
@description: Current global values, shared by every story

Initial globals are the declared default_value of each global type,
overridden by the explicit project globals.
"""

from typing import Any, Dict, Mapping, Optional

from loguru import logger


class GlobalsStore:
    """
    Global value store

    Usage:
        >>> store = GlobalsStore(globals={"theme": "light"}, global_types={"locale": {"default_value": "en"}})
        >>> store.get()
        {'locale': 'en', 'theme': 'light'}
    """

    def __init__(
        self,
        globals: Optional[Mapping[str, Any]] = None,
        global_types: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ):
        self.allowed_global_names: set = set()
        self.initial_globals: Dict[str, Any] = {}
        self.globals: Dict[str, Any] = {}
        self.set(globals=globals, global_types=global_types)

    def set(
        self,
        globals: Optional[Mapping[str, Any]] = None,
        global_types: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> None:
        """Replace declarations and reset current values to the new defaults"""
        globals = dict(globals or {})
        global_types = dict(global_types or {})

        self.allowed_global_names = set(globals) | set(global_types)

        defaults = {
            name: global_type["default_value"]
            for name, global_type in global_types.items()
            if global_type and "default_value" in global_type
        }
        self.initial_globals = {**defaults, **globals}
        self.globals = dict(self.initial_globals)
        logger.debug(f"Globals set: {sorted(self.globals)}")

    def filter_allowed_globals(self, globals: Mapping[str, Any]) -> Dict[str, Any]:
        allowed: Dict[str, Any] = {}
        for name, value in globals.items():
            if name in self.allowed_global_names:
                allowed[name] = value
            else:
                logger.warning(
                    f"Attempted to set a global ({name}) that is not defined in initial globals or global_types"
                )
        return allowed

    def get(self) -> Dict[str, Any]:
        """Copy of the current values"""
        return dict(self.globals)

    def update(self, new_globals: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge allowed keys of new_globals into the current values"""
        self.globals = {**self.globals, **self.filter_allowed_globals(new_globals)}
        return self.get()

    def reset(self) -> Dict[str, Any]:
        self.globals = dict(self.initial_globals)
        return self.get()
