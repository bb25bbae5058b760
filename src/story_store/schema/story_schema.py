"""
@file_name: story_schema.py
@description: Prepared story and story context models

Includes:
- PreparedStory - Immutable, fully merged story definition
- StoryContext - Transient per-access context (story + args + globals + hooks)
- BoundStory - Legacy: a PreparedStory with a context-bound story_fn
- LoadedEntry - Result of StoryStore.load_entry()

A prepared story does not include args, globals or hooks. These live in the
store (ArgsStore / GlobalsStore / hooks map) and are only attached when a
StoryContext is built.
"""

from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from story_store.schema.annotation_schema import CSFFile


class PreparedStory(BaseModel):
    """Fully merged story definition, independent of any runtime state"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    name: str
    title: str
    component_id: str
    tags: List[str] = Field(default_factory=list)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    initial_args: Dict[str, Any] = Field(default_factory=dict)
    arg_types: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    component: Any = None
    subcomponents: Dict[str, Any] = Field(default_factory=dict)
    module_export: Any = None
    decorators: List[Callable[..., Any]] = Field(default_factory=list)
    loaders: List[Callable[..., Any]] = Field(default_factory=list)

    # The render function as written by the user
    original_story_fn: Callable[..., Any]
    # Render function called with (args, context), without decorators
    undecorated_story_fn: Callable[..., Any]
    # Decorated render function, called with a StoryContext
    unbound_story_fn: Callable[..., Any]
    play_function: Optional[Callable[..., Any]] = None


class StoryContext(BaseModel):
    """
    Transient context handed to the rendering layer

    Built fresh on every access and never cached. Extra fields are allowed
    so decorators and renderers can pass updates through it.
    """
    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    id: str
    name: str
    title: str
    component_id: str
    tags: List[str] = Field(default_factory=list)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    initial_args: Dict[str, Any] = Field(default_factory=dict)
    arg_types: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    component: Any = None
    subcomponents: Dict[str, Any] = Field(default_factory=dict)

    # Runtime state
    args: Dict[str, Any] = Field(default_factory=dict)
    unmapped_args: Dict[str, Any] = Field(default_factory=dict)
    globals: Dict[str, Any] = Field(default_factory=dict)
    hooks: Any = None
    view_mode: Optional[str] = None
    loaded: Dict[str, Any] = Field(default_factory=dict)


class BoundStory(PreparedStory):
    """Legacy: a prepared story whose story_fn is bound to a fresh context"""
    story_fn: Callable[..., Any]


class LoadedEntry(BaseModel):
    """
    Everything needed to render an index entry

    entry_exports: raw exports of the entry's own module
    csf_files: for docs entries, the CSF files of every referenced import path
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    entry_exports: Any
    csf_files: List[CSFFile] = Field(default_factory=list)
