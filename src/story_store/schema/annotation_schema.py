"""
@file_name: annotation_schema.py
@description: Normalized annotation models and the processed CSF file

Includes:
- NormalizedProjectAnnotations - Project-wide annotations (preview config)
- NormalizedComponentAnnotations - The default export of a CSF file
- NormalizedStoryAnnotations - One named story export of a CSF file
- CSFFile - A processed CSF module (meta + stories + raw exports)
- PreparedMeta - Component annotations resolved against the project

All models are frozen: the memoized transforms hand out the same instances
to every caller, so nobody is allowed to mutate them in place.
"""

from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseAnnotations(BaseModel):
    """Annotation fields shared by project, component and story level"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    parameters: Dict[str, Any] = Field(default_factory=dict)
    decorators: List[Callable[..., Any]] = Field(default_factory=list)
    loaders: List[Callable[..., Any]] = Field(default_factory=list)
    args: Dict[str, Any] = Field(default_factory=dict)
    arg_types: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)
    render: Optional[Callable[..., Any]] = None
    play: Optional[Callable[..., Any]] = None


class NormalizedProjectAnnotations(BaseAnnotations):
    """Project level annotations, after normalize_project_annotations()"""
    globals: Dict[str, Any] = Field(default_factory=dict)
    global_types: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    # Called with a partially prepared story context, return extra args / arg types
    args_enhancers: List[Callable[..., Any]] = Field(default_factory=list)
    arg_types_enhancers: List[Callable[..., Any]] = Field(default_factory=list)


class NormalizedComponentAnnotations(BaseAnnotations):
    """Component level annotations (the CSF default export)"""
    id: str
    title: str
    component: Any = None
    subcomponents: Dict[str, Any] = Field(default_factory=dict)
    include_stories: Optional[List[str]] = None
    exclude_stories: Optional[List[str]] = None


class NormalizedStoryAnnotations(BaseAnnotations):
    """Story level annotations (one named CSF export)"""
    id: str
    name: str
    export_name: str
    # The raw export value the annotations were read from
    module_export: Any = None


class CSFFile(BaseModel):
    """
    A processed CSF module

    `module_exports` is kept as-is (not copied) so the handle identity the
    loader returned survives processing.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    meta: NormalizedComponentAnnotations
    stories: Dict[str, NormalizedStoryAnnotations] = Field(default_factory=dict)
    module_exports: Any = None


class PreparedMeta(BaseModel):
    """Component annotations merged with project annotations"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    title: str
    tags: List[str] = Field(default_factory=list)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    initial_args: Dict[str, Any] = Field(default_factory=dict)
    arg_types: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    component: Any = None
    subcomponents: Dict[str, Any] = Field(default_factory=dict)
    module_export: Any = None
    decorators: List[Callable[..., Any]] = Field(default_factory=list)
    loaders: List[Callable[..., Any]] = Field(default_factory=list)
    render: Optional[Callable[..., Any]] = None
