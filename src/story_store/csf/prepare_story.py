"""
@file_name: prepare_story.py
@description: Resolve annotations into prepared metas, prepared stories and contexts

Functions:
1. prepare_meta() - component + project annotations -> PreparedMeta
2. prepare_story() - story + component + project annotations -> PreparedStory
3. prepare_context() - PreparedStory + args + globals + hooks -> StoryContext
4. decorate_story() - wrap a story function with decorators

prepare_meta / prepare_story are pure and are memoized by the StoryStore.
prepare_context runs on every access and is never cached.

Calling conventions:
- render(args, context) (a render taking one argument gets only args,
  none gets nothing)
- decorator(story_fn, context), where story_fn(update=None) renders the
  inner story with the context optionally updated
"""

import inspect
from functools import reduce
from typing import Any, Callable, Dict, List, Mapping, Optional

from loguru import logger

from story_store.csf.merge import combine_args, combine_parameters, merge_annotations
from story_store.schema import (
    NormalizedComponentAnnotations,
    NormalizedProjectAnnotations,
    NormalizedStoryAnnotations,
    PreparedMeta,
    PreparedStory,
    StoryContext,
)
from story_store.utils.exceptions import AnnotationError

StoryFn = Callable[[StoryContext], Any]
Decorator = Callable[..., Any]


# =============================================================================
# Render helpers
# =============================================================================

def _positional_arity(fn: Callable[..., Any]) -> Optional[int]:
    """Number of positional parameters, None when it accepts *args or is opaque"""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


def is_args_story(render: Callable[..., Any]) -> bool:
    """A story is an "args story" when its render function takes args"""
    arity = _positional_arity(render)
    return arity is None or arity > 0


def _call_render(render: Callable[..., Any], context: StoryContext) -> Any:
    arity = _positional_arity(render)
    if arity == 0:
        return render()
    if arity == 1:
        return render(context.args)
    return render(context.args, context)


def _default_render(args: Dict[str, Any], context: StoryContext) -> Any:
    if context.component is None:
        raise AnnotationError(
            "No render function available and no component to render",
            story_id=context.id,
        )
    return context.component(**args)


def _update_context(context: StoryContext, update: Mapping[str, Any]) -> StoryContext:
    changes = dict(update)
    if "args" in changes:
        changes["args"] = {**context.args, **changes["args"]}
    return context.model_copy(update=changes)


def decorate_story(story_fn: StoryFn, decorators: List[Decorator]) -> StoryFn:
    """
    Wrap story_fn with decorators, first decorator innermost

    Each decorator receives a bound story function it may call with a
    context update, plus the current context.
    """

    def apply(inner: StoryFn, decorator: Decorator) -> StoryFn:
        def decorated(context: StoryContext) -> Any:
            current = {"context": context}

            def bound_story_fn(update: Optional[Mapping[str, Any]] = None) -> Any:
                if update:
                    current["context"] = _update_context(current["context"], update)
                return inner(current["context"])

            return decorator(bound_story_fn, context)

        return decorated

    return reduce(apply, decorators, story_fn)


# =============================================================================
# Arg type inference
# =============================================================================

_TYPE_NAMES = {
    bool: "boolean",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
    tuple: "array",
    dict: "object",
}


def infer_type(value: Any) -> Dict[str, Any]:
    for python_type, name in _TYPE_NAMES.items():
        if type(value) is python_type:
            return {"name": name}
    if callable(value):
        return {"name": "function"}
    return {"name": "other", "value": type(value).__name__}


def infer_arg_types(
    arg_types: Dict[str, Dict[str, Any]],
    initial_args: Mapping[str, Any],
) -> Dict[str, Dict[str, Any]]:
    """Declare a type for every arg that has no arg type yet"""
    inferred = {
        name: {"name": name, "type": infer_type(value)}
        for name, value in initial_args.items()
        if name not in arg_types
    }
    return combine_parameters(inferred, arg_types)


# =============================================================================
# Prepare
# =============================================================================

def prepare_meta(
    component_annotations: NormalizedComponentAnnotations,
    project_annotations: NormalizedProjectAnnotations,
    default_export: Any = None,
) -> PreparedMeta:
    """Resolve component annotations against the project annotations"""
    merged = merge_annotations([project_annotations, component_annotations])
    return PreparedMeta(
        id=component_annotations.id,
        title=component_annotations.title,
        tags=merged["tags"],
        parameters=merged["parameters"],
        initial_args=merged["args"],
        arg_types=infer_arg_types(merged["arg_types"], merged["args"]),
        component=component_annotations.component,
        subcomponents=component_annotations.subcomponents,
        module_export=default_export,
        decorators=merged["decorators"],
        loaders=merged["loaders"],
        render=merged["render"],
    )


def prepare_story(
    story_annotations: NormalizedStoryAnnotations,
    component_annotations: NormalizedComponentAnnotations,
    project_annotations: NormalizedProjectAnnotations,
) -> PreparedStory:
    """
    Merge story, component and project annotations into a PreparedStory

    Precedence: story > component > project. The result is independent of
    runtime state; args/globals/hooks are attached by prepare_context().
    """
    merged = merge_annotations([project_annotations, component_annotations, story_annotations])

    render = merged["render"] or _default_render
    parameters = {
        **merged["parameters"],
        "__id": story_annotations.id,
        "__is_args_story": is_args_story(render),
    }

    base_context = dict(
        id=story_annotations.id,
        name=story_annotations.name,
        title=component_annotations.title,
        component_id=component_annotations.id,
        tags=merged["tags"],
        parameters=parameters,
        component=component_annotations.component,
    )

    arg_types = infer_arg_types(merged["arg_types"], merged["args"])
    for enhancer in project_annotations.arg_types_enhancers:
        arg_types = dict(
            enhancer({**base_context, "arg_types": arg_types, "initial_args": merged["args"]})
        )

    initial_args = dict(merged["args"])
    for enhancer in project_annotations.args_enhancers:
        enhanced = enhancer({**base_context, "arg_types": arg_types, "initial_args": initial_args})
        # Explicitly passed args always win over enhancer defaults
        initial_args = combine_args(enhanced, initial_args)

    def undecorated_story_fn(context: StoryContext) -> Any:
        return _call_render(render, context)

    decorators = merged["decorators"]
    unbound_story_fn = decorate_story(undecorated_story_fn, decorators)

    logger.debug(
        f"Prepared story {story_annotations.id}: "
        f"{len(decorators)} decorators, {len(initial_args)} args"
    )
    return PreparedStory(
        **base_context,
        initial_args=initial_args,
        arg_types=arg_types,
        subcomponents=component_annotations.subcomponents,
        module_export=story_annotations.module_export,
        decorators=decorators,
        loaders=merged["loaders"],
        original_story_fn=render,
        undecorated_story_fn=undecorated_story_fn,
        unbound_story_fn=unbound_story_fn,
        play_function=merged["play"],
    )


# =============================================================================
# Context
# =============================================================================

def include_conditional_arg(
    arg_type: Mapping[str, Any],
    args: Mapping[str, Any],
    globals: Mapping[str, Any],
) -> bool:
    """
    Evaluate an arg type's "if" condition

    Condition shape: {"arg": name} or {"global": name}, plus one of
    "truthy" (default True), "exists", "eq", "neq".
    """
    condition = arg_type.get("if")
    if not condition:
        return True

    if "arg" in condition:
        value = args.get(condition["arg"])
    elif "global" in condition:
        value = globals.get(condition["global"])
    else:
        raise AnnotationError("Conditional arg must reference an 'arg' or a 'global'", condition=condition)

    if "eq" in condition:
        return value == condition["eq"]
    if "neq" in condition:
        return value != condition["neq"]
    if "exists" in condition:
        return (value is not None) == bool(condition["exists"])
    return bool(value) == bool(condition.get("truthy", True))


def _map_arg(value: Any, arg_type: Mapping[str, Any]) -> Any:
    mapping = arg_type.get("mapping")
    if not mapping:
        return value
    try:
        return mapping.get(value, value)
    except TypeError:
        # Unhashable values can't be mapping keys
        return value


def prepare_context(
    story: PreparedStory,
    args: Mapping[str, Any],
    globals: Mapping[str, Any],
    hooks: Any = None,
    view_mode: Optional[str] = None,
) -> StoryContext:
    """
    Build a StoryContext for one access

    args are mapped through arg type "mapping"s; args whose "if" condition
    fails are dropped. unmapped_args keeps the raw values.
    """
    mapped_args: Dict[str, Any] = {}
    for name, value in args.items():
        arg_type = story.arg_types.get(name, {})
        if not include_conditional_arg(arg_type, args, globals):
            continue
        mapped_args[name] = _map_arg(value, arg_type)

    return StoryContext(
        id=story.id,
        name=story.name,
        title=story.title,
        component_id=story.component_id,
        tags=story.tags,
        parameters=story.parameters,
        initial_args=story.initial_args,
        arg_types=story.arg_types,
        component=story.component,
        subcomponents=story.subcomponents,
        args=mapped_args,
        unmapped_args=dict(args),
        globals=dict(globals),
        hooks=hooks,
        view_mode=view_mode,
    )
