"""
CSF Package - Pure annotation transforms

@file_name: __init__.py
@description: Exports of the Component Story Format transforms

Module list:
- naming: story ids and names
- merge: three-way annotation merge
- normalize: raw annotations -> normalized models
- process_csf_file: module exports -> CSFFile
- prepare_story: PreparedMeta / PreparedStory / StoryContext

None of these functions hold state. Caching is the StoryStore's job.
"""

from .naming import (
    sanitize,
    to_id,
    story_name_from_export,
    is_export_story,
)
from .merge import (
    combine_parameters,
    combine_args,
    combine_tags,
    merge_annotations,
)
from .normalize import (
    compose_configs,
    normalize_input_types,
    normalize_project_annotations,
    normalize_component_annotations,
    normalize_story,
)
from .process_csf_file import process_csf_file
from .prepare_story import (
    decorate_story,
    include_conditional_arg,
    infer_arg_types,
    is_args_story,
    prepare_context,
    prepare_meta,
    prepare_story,
)

__all__ = [
    # Naming
    "sanitize",
    "to_id",
    "story_name_from_export",
    "is_export_story",
    # Merge
    "combine_parameters",
    "combine_args",
    "combine_tags",
    "merge_annotations",
    # Normalize
    "compose_configs",
    "normalize_input_types",
    "normalize_project_annotations",
    "normalize_component_annotations",
    "normalize_story",
    # Process / prepare
    "process_csf_file",
    "decorate_story",
    "include_conditional_arg",
    "infer_arg_types",
    "is_args_story",
    "prepare_context",
    "prepare_meta",
    "prepare_story",
]
