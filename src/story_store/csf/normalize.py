"""
@file_name: normalize.py
@description: Turn raw annotation mappings into normalized, frozen models

Raw annotations are plain mappings (or, for function stories, a callable
carrying attributes). Keys are snake_case:
    parameters, decorators, loaders, args, arg_types, tags, render, play
Project annotations additionally accept:
    globals, global_types, args_enhancers, arg_types_enhancers
Component annotations additionally accept:
    title, id, component, subcomponents, include_stories, exclude_stories
Story annotations additionally accept:
    id, name (or legacy story_name)
"""

import re
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Union

from loguru import logger

from story_store.csf.merge import combine_args, combine_parameters
from story_store.csf.naming import story_name_from_export, to_id
from story_store.schema import (
    NormalizedComponentAnnotations,
    NormalizedProjectAnnotations,
    NormalizedStoryAnnotations,
)
from story_store.utils.exceptions import AnnotationError

ProjectAnnotationsInput = Union[
    Mapping[str, Any],
    NormalizedProjectAnnotations,
    Sequence[Mapping[str, Any]],
    None,
]

# Attributes read off function stories (CSF2 style: `Primary.args = {...}`)
_FUNCTION_STORY_ATTRIBUTES = (
    "id",
    "name",
    "story_name",
    "args",
    "arg_types",
    "parameters",
    "decorators",
    "loaders",
    "tags",
    "play",
)


def normalize_input_type(name: str, input_type: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Expand arg/global type shorthands

    - {"type": "string"} -> {"type": {"name": "string"}}
    - {"control": "text"} -> {"control": {"type": "text"}}
    - "name" defaults to the key
    """
    normalized = dict(input_type)
    normalized.setdefault("name", name)
    if isinstance(normalized.get("type"), str):
        normalized["type"] = {"name": normalized["type"]}
    if isinstance(normalized.get("control"), str):
        normalized["control"] = {"type": normalized["control"]}
    return normalized


def normalize_input_types(input_types: Optional[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    if not input_types:
        return {}
    return {
        name: normalize_input_type(name, input_type or {})
        for name, input_type in input_types.items()
    }


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def compose_configs(configs: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Compose several project annotation mappings into one

    Later configs take precedence; list-valued hooks are concatenated.
    """
    config_list = [config for config in configs if config]

    def values(key: str) -> list:
        return [config.get(key) for config in config_list if config.get(key) is not None]

    def concat(key: str) -> list:
        return [item for value in values(key) for item in _as_list(value)]

    def last(key: str) -> Any:
        found = values(key)
        return found[-1] if found else None

    return {
        "parameters": combine_parameters(*values("parameters")),
        "decorators": concat("decorators"),
        "loaders": concat("loaders"),
        "args": combine_args(*values("args")),
        "arg_types": combine_parameters(*values("arg_types")),
        "tags": concat("tags"),
        "globals": combine_args(*values("globals")),
        "global_types": combine_parameters(*values("global_types")),
        "args_enhancers": concat("args_enhancers"),
        "arg_types_enhancers": concat("arg_types_enhancers"),
        "render": last("render"),
        "play": last("play"),
    }


def normalize_project_annotations(
    project_annotations: ProjectAnnotationsInput,
) -> NormalizedProjectAnnotations:
    """
    Normalize project annotations

    Accepts a single mapping, a sequence of mappings (composed in order), an
    already normalized model (returned unchanged) or None.
    """
    if isinstance(project_annotations, NormalizedProjectAnnotations):
        return project_annotations
    if project_annotations is None:
        raw: Mapping[str, Any] = {}
    elif isinstance(project_annotations, Mapping):
        raw = project_annotations
    elif isinstance(project_annotations, (list, tuple)):
        raw = compose_configs(project_annotations)
    else:
        raise AnnotationError(
            "Project annotations must be a mapping or a sequence of mappings",
            received=type(project_annotations).__name__,
        )

    return NormalizedProjectAnnotations(
        parameters=dict(raw.get("parameters") or {}),
        decorators=_as_list(raw.get("decorators")),
        loaders=_as_list(raw.get("loaders")),
        args=dict(raw.get("args") or {}),
        arg_types=normalize_input_types(raw.get("arg_types")),
        tags=_as_list(raw.get("tags")),
        render=raw.get("render"),
        play=raw.get("play"),
        globals=dict(raw.get("globals") or {}),
        global_types=normalize_input_types(raw.get("global_types")),
        args_enhancers=_as_list(raw.get("args_enhancers")),
        arg_types_enhancers=_as_list(raw.get("arg_types_enhancers")),
    )


def _story_patterns(
    default_export: Mapping[str, Any],
    key: str,
    import_path: str,
) -> Optional[list]:
    """include_stories / exclude_stories, with every regex checked up front"""
    patterns = default_export.get(key)
    if patterns is None:
        return None
    patterns = _as_list(patterns)
    for pattern in patterns:
        try:
            re.compile(pattern)
        except (re.error, TypeError) as e:
            raise AnnotationError(
                f"Invalid {key} pattern {pattern!r}",
                cause=e,
                import_path=import_path,
            ) from e
    return patterns


def normalize_component_annotations(
    default_export: Any,
    title: Optional[str],
    import_path: str,
) -> NormalizedComponentAnnotations:
    """
    Normalize the default export of a CSF module

    Args:
        default_export: The "default" export. Anything but a mapping (a docs
            page component, or no default export at all) yields empty meta
        title: Title computed by the indexer, takes precedence over the export's own
        import_path: Recorded as parameters["file_name"]
    """
    if not isinstance(default_export, Mapping):
        logger.debug(f"{import_path} has no default export mapping, using empty meta")
        default_export = {}

    resolved_title = title or default_export.get("title")
    if not resolved_title:
        raise AnnotationError(
            "CSF file has no title: set it on the default export or in the index",
            import_path=import_path,
        )

    return NormalizedComponentAnnotations(
        id=default_export.get("id") or to_id(resolved_title),
        title=resolved_title,
        component=default_export.get("component"),
        subcomponents=dict(default_export.get("subcomponents") or {}),
        include_stories=_story_patterns(default_export, "include_stories", import_path),
        exclude_stories=_story_patterns(default_export, "exclude_stories", import_path),
        parameters={**(default_export.get("parameters") or {}), "file_name": import_path},
        decorators=_as_list(default_export.get("decorators")),
        loaders=_as_list(default_export.get("loaders")),
        args=dict(default_export.get("args") or {}),
        arg_types=normalize_input_types(default_export.get("arg_types")),
        tags=_as_list(default_export.get("tags")),
        render=default_export.get("render"),
        play=default_export.get("play"),
    )


def _story_object(story_export: Any) -> Dict[str, Any]:
    if isinstance(story_export, Mapping):
        return dict(story_export)
    if callable(story_export):
        story_object: Dict[str, Any] = {"render": story_export}
        for attribute in _FUNCTION_STORY_ATTRIBUTES:
            value = getattr(story_export, attribute, None)
            if value is not None:
                story_object[attribute] = value
        return story_object
    raise AnnotationError(
        "Story export must be a mapping or a callable",
        received=type(story_export).__name__,
    )


def normalize_story(
    export_name: str,
    story_export: Any,
    meta: NormalizedComponentAnnotations,
) -> NormalizedStoryAnnotations:
    """Normalize one named story export of a CSF module"""
    story_object = _story_object(story_export)
    export_as_name = story_name_from_export(export_name)
    name = story_object.get("name") or story_object.get("story_name") or export_as_name
    story_id = story_object.get("id") or to_id(meta.id, export_as_name)

    if "story_name" in story_object:
        logger.debug(f"Story '{story_id}' uses legacy 'story_name', prefer 'name'")

    render: Optional[Callable[..., Any]] = story_object.get("render")
    return NormalizedStoryAnnotations(
        id=story_id,
        name=name,
        export_name=export_name,
        module_export=story_export,
        parameters=dict(story_object.get("parameters") or {}),
        decorators=_as_list(story_object.get("decorators")),
        loaders=_as_list(story_object.get("loaders")),
        args=dict(story_object.get("args") or {}),
        arg_types=normalize_input_types(story_object.get("arg_types")),
        tags=_as_list(story_object.get("tags")),
        render=render,
        play=story_object.get("play"),
    )
