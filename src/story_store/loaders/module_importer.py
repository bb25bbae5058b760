"""
@file_name: module_importer.py
@description: Default import function for Python CSF files

Loads story files (e.g. ./components/Button.stories.py) relative to a root
directory and returns their exports as a mapping. Imports run in a worker
thread so the event loop is not blocked by module execution.

Exports of a module:
- the names in __all__ when it is defined
- otherwise every public name that is not a module and was not imported
  from another module ("default" is always kept)

Each import path is executed once; later calls return the same mapping
object, which keeps the StoryStore's process_csf_file cache warm. Call
invalidate() after a file changes and pass the importer to
StoryStore.on_stories_changed().
"""

import asyncio
import importlib.util
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Optional, Union

from loguru import logger

from story_store.schema import ModuleExports


def _module_name(import_path: str) -> str:
    return "_story_store_csf_" + re.sub(r"\W+", "_", import_path).strip("_")


def module_exports(module: ModuleType) -> Dict[str, Any]:
    """Collect the exports of an executed module"""
    namespace = vars(module)
    names = getattr(module, "__all__", None)
    if names is not None:
        exports = {name: namespace[name] for name in names}
        if "default" in namespace:
            exports.setdefault("default", namespace["default"])
        return exports

    exports = {}
    for name, value in namespace.items():
        if name.startswith("_") or isinstance(value, ModuleType):
            continue
        defined_in = getattr(value, "__module__", module.__name__)
        if name != "default" and defined_in != module.__name__ and callable(value):
            continue
        exports[name] = value
    return exports


class ModuleImporter:
    """
    Async import function for CSF files on disk

    Usage:
        >>> importer = ModuleImporter("./stories")
        >>> store = StoryStore(index, importer, project_annotations)
        >>> importer.invalidate("./Button.stories.py")
        >>> await store.on_stories_changed(import_fn=importer)
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()
        self._exports: Dict[str, ModuleExports] = {}

    async def __call__(self, import_path: str) -> ModuleExports:
        cached = self._exports.get(import_path)
        if cached is not None:
            return cached

        exports = await asyncio.to_thread(self._load, import_path)
        self._exports[import_path] = exports
        return exports

    def _load(self, import_path: str) -> ModuleExports:
        file_path = (self.root / import_path).resolve()
        if not file_path.is_file():
            raise FileNotFoundError(f"CSF file not found: {file_path}")

        name = _module_name(import_path)
        spec = importlib.util.spec_from_file_location(name, file_path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load CSF file: {file_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(name, None)
            raise

        exports = module_exports(module)
        logger.debug(f"Imported {import_path}: {len(exports)} exports")
        return exports

    def invalidate(self, import_path: Optional[str] = None) -> None:
        """Forget one import path (or all of them) so the next call re-executes it"""
        paths = [import_path] if import_path is not None else list(self._exports)
        for path in paths:
            self._exports.pop(path, None)
            sys.modules.pop(_module_name(path), None)
