"""
@file_name: process_csf_file.py
@description: Process loaded module exports into a CSFFile

A CSF module exports:
- "default": the component meta mapping
- every other public export that passes include_stories / exclude_stories:
  a story (mapping of annotations, or a render function)

The result is a pure function of (module_exports, import_path, title).
"""

from typing import Dict, Optional

from loguru import logger

from story_store.csf.naming import is_export_story
from story_store.csf.normalize import normalize_component_annotations, normalize_story
from story_store.schema import CSFFile, ModuleExports, NormalizedStoryAnnotations
from story_store.utils.exceptions import AnnotationError


def process_csf_file(
    module_exports: ModuleExports,
    import_path: str,
    title: Optional[str] = None,
) -> CSFFile:
    """
    Split a CSF module into component annotations and per-story annotations

    Args:
        module_exports: Raw exports returned by the import function
        import_path: Path the module was imported from
        title: Title from the index (may have been generated by naming conventions)

    Returns:
        CSFFile keyed by story id, in export order

    Raises:
        AnnotationError: No title (neither index nor default export), or two
            exports resolving to the same story id
    """
    meta = normalize_component_annotations(module_exports.get("default"), title, import_path)

    stories: Dict[str, NormalizedStoryAnnotations] = {}
    for key, story_export in module_exports.items():
        if not is_export_story(key, meta.include_stories, meta.exclude_stories):
            continue

        story = normalize_story(key, story_export, meta)
        if story.id in stories:
            raise AnnotationError(
                f"Duplicate story id '{story.id}'",
                import_path=import_path,
                export_name=key,
            )
        stories[story.id] = story

    logger.debug(f"Processed CSF file {import_path}: title={meta.title}, stories={len(stories)}")
    return CSFFile(meta=meta, stories=stories, module_exports=module_exports)
