"""
@file_name: merge.py
@description: Three-way annotation merge (project < component < story)

Responsibility: combine the three annotation layers into one set of values.
Every function here is pure; inputs are never modified.

Merge strategy per field:
- parameters / arg_types: deep merge of plain dicts, later layer wins,
  non-dict values (lists included) are replaced wholesale
- args: shallow merge, later layer wins
- decorators: story decorators innermost -> [*story, *component, *project]
- loaders: outermost first -> [*project, *component, *story]
- tags: defaults + all layers, "!tag" removes tag
- render / play: first non-None from story, component, project
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from story_store.config import DEFAULT_TAGS
from story_store.schema import BaseAnnotations


def combine_parameters(*parameter_sets: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Deep merge dicts, later ones take precedence

    Example:
        >>> combine_parameters({"a": {"x": 1}, "b": 1}, {"a": {"y": 2}})
        {'a': {'x': 1, 'y': 2}, 'b': 1}
    """
    result: Dict[str, Any] = {}
    for parameters in parameter_sets:
        if not parameters:
            continue
        for key, value in parameters.items():
            existing = result.get(key)
            if isinstance(value, dict) and isinstance(existing, dict):
                result[key] = combine_parameters(existing, value)
            elif isinstance(value, dict):
                result[key] = combine_parameters(value)
            else:
                result[key] = value
    return result


def combine_args(*arg_sets: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for args in arg_sets:
        if args:
            result.update(args)
    return result


def combine_tags(*tags: str) -> List[str]:
    """
    Combine tag lists, honouring "!tag" removals

    Order of first appearance is preserved.
    """
    seen: Dict[str, None] = {}
    for tag in tags:
        seen.setdefault(tag, None)
    removed = {tag[1:] for tag in seen if tag.startswith("!")}
    return [tag for tag in seen if not tag.startswith("!") and tag not in removed]


def _first(*values: Optional[Callable[..., Any]]) -> Optional[Callable[..., Any]]:
    for value in values:
        if value is not None:
            return value
    return None


def _flatten(*lists: Iterable[Any]) -> List[Any]:
    return [item for items in lists for item in items]


def merge_annotations(layers: Sequence[BaseAnnotations]) -> Dict[str, Any]:
    """
    Merge annotation layers given lowest precedence first

    Args:
        layers: e.g. [project, component, story] or [project, component]

    Returns:
        Dict with merged parameters, args, arg_types, tags, decorators,
        loaders, render and play
    """
    ordered = list(layers)
    return {
        "parameters": combine_parameters(*(layer.parameters for layer in ordered)),
        "args": combine_args(*(layer.args for layer in ordered)),
        "arg_types": combine_parameters(*(layer.arg_types for layer in ordered)),
        "tags": combine_tags(*DEFAULT_TAGS, *_flatten(*(layer.tags for layer in ordered))),
        "decorators": _flatten(*(layer.decorators for layer in reversed(ordered))),
        "loaders": _flatten(*(layer.loaders for layer in ordered)),
        "render": _first(*(layer.render for layer in reversed(ordered))),
        "play": _first(*(layer.play for layer in reversed(ordered))),
    }
