"""
@file_name: story_store.py
@description: StoryStore - lazy, memoized story materialization

The StoryStore turns index entries into PreparedStory objects:

    index entry -> import_fn(import_path) -> process_csf_file -> prepare_story

and keeps the mutable runtime state (current args, current globals, hook
handles) next to, never inside, the immutable prepared stories.

Caching:
- process_csf_file / prepare_meta / prepare_story are memoized on the
  identity of their inputs (bounded LRU), so preparing the same story from
  the same inputs twice returns the same instance
- Replacing project annotations or the import function produces new input
  identities, so old entries are superseded rather than purged
- cache_all_csf_files() materializes every CSF file; only then are the
  synchronous bulk operations (extract, legacy payloads, from_id/raw) allowed

Concurrency:
- Single event loop; the only suspension point is `await import_fn(path)`
- Bulk loads fan out with asyncio.gather and fail on the first error
- Concurrent loads of the same path are not coalesced; the memoized
  transform makes the duplicate work idempotent
"""

from __future__ import annotations

import asyncio
import copy
import warnings
from typing import Any, Dict, List, Mapping, Optional, Union

from loguru import logger

from story_store.config import EXTRACT_EXCLUDED_FIELDS, V3_ALLOWED_PARAMETERS
from story_store.csf import (
    normalize_project_annotations,
    prepare_context,
    prepare_meta,
    prepare_story,
    process_csf_file,
)
from story_store.csf.normalize import ProjectAnnotationsInput
from story_store.schema import (
    BoundStory,
    CSFFile,
    EntryType,
    ImportFn,
    IndexEntry,
    LoadedEntry,
    PreparedMeta,
    PreparedStory,
    StoryContext,
    StoryIndex,
    StoryIndexV3,
    V3CompatIndexEntry,
)
from story_store.settings import settings
from story_store.store.args_store import ArgsStore
from story_store.store.globals_store import GlobalsStore
from story_store.store.hooks_context import HooksContext
from story_store.store.story_index_store import StoryIndexStore
from story_store.utils.exceptions import (
    CalledExtractOnStoreError,
    MissingStoryFromCsfFileError,
    StoryIndexEntryNotFoundError,
    StoryStoreUsageError,
)
from story_store.utils.memoize import memoize


class StoryStore:
    """
    Story Store - resolution and cache orchestrator

    Owns the index accessor, the import function, the normalized project
    annotations, the three memoized transforms, the optional materialized
    CSF file map and the hook handles.

    Usage:
        >>> store = StoryStore(story_index, import_fn, project_annotations)
        >>> story = await store.load_story("button--primary")
        >>> context = store.get_story_context(story)
        >>> rendered = story.unbound_story_fn(context)
        >>> store.cleanup_story(story)
    """

    def __init__(
        self,
        story_index: Union[StoryIndex, Mapping[str, Any]],
        import_fn: ImportFn,
        project_annotations: ProjectAnnotationsInput = None,
        *,
        csf_cache_size: Optional[int] = None,
        story_cache_size: Optional[int] = None,
    ):
        """
        Initialize StoryStore

        Args:
            story_index: Index (model or raw mapping with "entries")
            import_fn: Async function import_path -> module exports
            project_annotations: Project annotations, normalized here
            csf_cache_size: Capacity of the CSF file / meta caches (default: settings)
            story_cache_size: Capacity of the prepared story cache (default: settings)
        """
        self.story_index = StoryIndexStore(story_index)
        self.import_fn = import_fn

        self.project_annotations = normalize_project_annotations(project_annotations)
        self.args = ArgsStore()
        self.globals = GlobalsStore(
            globals=self.project_annotations.globals,
            global_types=self.project_annotations.global_types,
        )
        self.hooks: Dict[str, HooksContext] = {}
        self.cached_csf_files: Optional[Dict[str, CSFFile]] = None

        csf_limit = csf_cache_size or settings.csf_cache_size
        story_limit = story_cache_size or settings.story_cache_size

        # Cached for performance, and so that preparing the same story from the
        # same inputs always yields the same object
        self.process_csf_file_with_cache = memoize(csf_limit)(process_csf_file)
        self.prepare_meta_with_cache = memoize(csf_limit)(prepare_meta)
        self.prepare_story_with_cache = memoize(story_limit)(prepare_story)

        logger.info(
            f"StoryStore initialized ({len(self.story_index.entries)} entries, "
            f"csf_cache={csf_limit}, story_cache={story_limit})"
        )

    # =========================================================================
    # Source changes
    # =========================================================================

    def set_project_annotations(self, project_annotations: ProjectAnnotationsInput) -> None:
        """
        Replace project annotations and reset globals to the new defaults

        Memoized prepare_meta / prepare_story entries keyed on the old
        annotations are not purged; new calls simply miss the cache.
        """
        self.project_annotations = normalize_project_annotations(project_annotations)
        self.globals.set(
            globals=self.project_annotations.globals,
            global_types=self.project_annotations.global_types,
        )
        logger.info("Project annotations replaced")

    async def on_stories_changed(
        self,
        import_fn: Optional[ImportFn] = None,
        story_index: Optional[Union[StoryIndex, Mapping[str, Any]]] = None,
    ) -> None:
        """
        One or more CSF files (or the index) changed

        - A new import_fn yields new module identities, so every cached CSF
          file is superseded
        - A new index swaps the entry table
        - If CSF files were materialized, they are re-materialized now
        """
        if import_fn is not None:
            self.import_fn = import_fn
        if story_index is not None:
            self.story_index.entries = StoryIndexStore._coerce(story_index).entries
            logger.info(f"Story index replaced ({len(self.story_index.entries)} entries)")
        if self.cached_csf_files is not None:
            # A failed refresh must not leave the old map next to the new index
            self.cached_csf_files = None
            await self.cache_all_csf_files()

    # =========================================================================
    # Loading
    # =========================================================================

    async def story_id_to_entry(self, story_id: str) -> IndexEntry:
        """
        Get an entry from the index

        Raises:
            StoryIndexEntryNotFoundError: Unknown story id
        """
        return self.story_index.story_id_to_entry(story_id)

    async def load_csf_file_by_story_id(self, story_id: str) -> CSFFile:
        """Import and process the CSF file backing a story"""
        entry = self.story_index.story_id_to_entry(story_id)
        module_exports = await self.import_fn(entry.import_path)

        # The title comes from the index, it may have been generated from the file path
        return self.process_csf_file_with_cache(module_exports, entry.import_path, entry.title)

    async def load_all_csf_files(self) -> Dict[str, CSFFile]:
        """
        Load every CSF file referenced by the index, concurrently

        One load per distinct import path. Fails on the first loader error;
        no partial map is returned.
        """
        import_paths: Dict[str, str] = {}
        for story_id, entry in self.story_index.entries.items():
            import_paths.setdefault(entry.import_path, story_id)

        logger.debug(f"Loading {len(import_paths)} CSF files")
        csf_files = await asyncio.gather(
            *(self.load_csf_file_by_story_id(story_id) for story_id in import_paths.values())
        )
        return dict(zip(import_paths.keys(), csf_files))

    async def cache_all_csf_files(self) -> None:
        """Materialize every CSF file, enabling the synchronous bulk operations"""
        self.cached_csf_files = await self.load_all_csf_files()
        logger.info(f"Materialized {len(self.cached_csf_files)} CSF files")

    async def load_entry(self, entry_id: str) -> LoadedEntry:
        """
        Load everything needed to render an entry

        Docs entries also load the CSF file of each referenced import path
        (through the first index entry using that path), so the page can
        reference arbitrary stories. All loads run concurrently.
        """
        entry = await self.story_id_to_entry(entry_id)
        story_imports = entry.stories_imports if entry.type == EntryType.DOCS else []
        first_story_ids = [
            self.story_index.import_path_to_entry(story_import_path).id
            for story_import_path in story_imports
        ]

        entry_exports, *csf_files = await asyncio.gather(
            self.import_fn(entry.import_path),
            *(self.load_csf_file_by_story_id(story_id) for story_id in first_story_ids),
        )
        return LoadedEntry(entry_exports=entry_exports, csf_files=csf_files)

    # =========================================================================
    # Preparing
    # =========================================================================

    def prepared_meta_from_csf_file(self, csf_file: CSFFile) -> PreparedMeta:
        default_export = None
        if csf_file.module_exports is not None:
            default_export = csf_file.module_exports.get("default")
        return self.prepare_meta_with_cache(csf_file.meta, self.project_annotations, default_export)

    async def load_story(self, story_id: str) -> PreparedStory:
        """Load the CSF file of a story and prepare the story from it"""
        csf_file = await self.load_csf_file_by_story_id(story_id)
        return self.story_from_csf_file(story_id, csf_file)

    def story_from_csf_file(self, story_id: str, csf_file: CSFFile) -> PreparedStory:
        """
        Prepare a story from an already loaded CSF file

        Synchronous for convenience. Besides preparing, this seeds the story's
        args (first time only) and makes sure it has a hook handle.

        Raises:
            MissingStoryFromCsfFileError: The CSF file doesn't export story_id
        """
        story_annotations = csf_file.stories.get(story_id)
        if story_annotations is None:
            raise MissingStoryFromCsfFileError(story_id=story_id)

        story = self.prepare_story_with_cache(
            story_annotations,
            csf_file.meta,
            self.project_annotations,
        )
        self.args.set_initial(story)
        if story.id not in self.hooks:
            self.hooks[story.id] = HooksContext()
        return story

    def component_stories_from_csf_file(self, csf_file: CSFFile) -> List[PreparedStory]:
        """Every story of a CSF file, in index order"""
        return [
            self.story_from_csf_file(story_id, csf_file)
            for story_id in self.story_index.entries
            if story_id in csf_file.stories
        ]

    # =========================================================================
    # Runtime state
    # =========================================================================

    def get_story_context(
        self,
        story: PreparedStory,
        force_initial_args: bool = False,
    ) -> StoryContext:
        """
        Build the transient context of a story

        Args come from the ArgsStore (or the story's initial args when
        forced), globals from the GlobalsStore, hooks from the hook map.
        The prepared story itself is never modified.
        """
        return prepare_context(
            story,
            args=story.initial_args if force_initial_args else self.args.get(story.id),
            globals=self.globals.get(),
            hooks=self.hooks.get(story.id),
        )

    def cleanup_story(self, story: PreparedStory) -> None:
        """Clean the story's hook handle"""
        hooks = self.hooks.get(story.id)
        if hooks is None:
            logger.debug(f"No hooks to clean for {story.id}")
            return
        hooks.clean()

    # =========================================================================
    # Bulk (synchronous, requires cache_all_csf_files)
    # =========================================================================

    @staticmethod
    def _snapshot(story: PreparedStory) -> Dict[str, Any]:
        # Deep copies: the frozen story's dicts are shared with the cache
        snapshot: Dict[str, Any] = {"args": copy.deepcopy(story.initial_args)}
        for key, value in story:
            if key in EXTRACT_EXCLUDED_FIELDS or callable(value):
                continue
            if isinstance(value, list):
                value = sorted(value, key=str)
            snapshot[key] = copy.deepcopy(value)
        return snapshot

    def extract(self, include_docs_only: bool = False) -> Dict[str, Dict[str, Any]]:
        """
        Read-only snapshot of every story in the index

        Docs entries are skipped; stories with parameters["docs_only"] are
        skipped unless include_docs_only is set.

        Raises:
            CalledExtractOnStoreError: cache_all_csf_files() has not run
        """
        cached_csf_files = self.cached_csf_files
        if cached_csf_files is None:
            raise CalledExtractOnStoreError()

        extracted: Dict[str, Dict[str, Any]] = {}
        for story_id, entry in self.story_index.entries.items():
            if entry.type == EntryType.DOCS:
                continue

            csf_file = cached_csf_files[entry.import_path]
            story = self.story_from_csf_file(story_id, csf_file)
            if not include_docs_only and story.parameters.get("docs_only"):
                continue

            extracted[story_id] = self._snapshot(story)

        logger.debug(f"Extracted {len(extracted)} stories")
        return extracted

    def get_set_stories_payload(self) -> Dict[str, Any]:
        """Legacy v2 payload: flat stories keyed by id"""
        stories = self.extract(include_docs_only=True)
        kind_parameters = {story["title"]: {} for story in stories.values()}
        return {
            "v": 2,
            "globals": self.globals.get(),
            "global_parameters": {},
            "kind_parameters": kind_parameters,
            "stories": stories,
        }

    def get_stories_json_data(self) -> Dict[str, Any]:
        """
        Legacy v3 stories.json data

        Keeps the old "kind" (= title) and "story" (= name) fields and a small
        allow-list of parameters, with file_name forced to the import path.
        """
        value = self.get_set_stories_payload()

        stories: Dict[str, V3CompatIndexEntry] = {}
        for story_id, story in value["stories"].items():
            import_path = self.story_index.entries[story["id"]].import_path
            parameters = {
                key: story["parameters"][key]
                for key in V3_ALLOWED_PARAMETERS
                if key in story["parameters"]
            }
            parameters["file_name"] = import_path
            stories[story_id] = V3CompatIndexEntry(
                id=story["id"],
                name=story["name"],
                title=story["title"],
                import_path=import_path,
                kind=story["title"],
                story=story["name"],
                parameters=parameters,
            )

        return StoryIndexV3(v=3, stories=stories).model_dump()

    # =========================================================================
    # Deprecated
    # =========================================================================

    def raw(self) -> List[BoundStory]:
        """Deprecated: every extracted story, bound to its context"""
        warnings.warn(
            "StoryStore.raw() is deprecated, please use extract() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        bound_stories = [self._bind(story_id) for story_id in self.extract()]
        return [story for story in bound_stories if story is not None]

    def from_id(self, story_id: str) -> Optional[BoundStory]:
        """Deprecated: prepared story plus a story_fn bound to a fresh context"""
        warnings.warn(
            "StoryStore.from_id() is deprecated, please use load_story() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self._bind(story_id)

    def _bind(self, story_id: str) -> Optional[BoundStory]:
        if self.cached_csf_files is None:
            raise StoryStoreUsageError(
                "Cannot call from_id/raw() unless you call cache_all_csf_files() first"
            )

        try:
            entry = self.story_index.story_id_to_entry(story_id)
        except StoryIndexEntryNotFoundError:
            return None

        csf_file = self.cached_csf_files[entry.import_path]
        story = self.story_from_csf_file(story_id, csf_file)

        def story_fn(update: Optional[Mapping[str, Any]] = None) -> Any:
            context = self.get_story_context(story).model_copy(
                update={"view_mode": "story", **(update or {})}
            )
            return story.unbound_story_fn(context)

        return BoundStory(**dict(story), story_fn=story_fn)
