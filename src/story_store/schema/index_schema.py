"""
@file_name: index_schema.py
@description: Story index data models

Includes:
- EntryType - "story" or "docs"
- IndexEntry - One entry of the story index
- StoryIndex - The index itself (loaded from index.json)
- V3CompatIndexEntry / StoryIndexV3 - Legacy stories.json shape
"""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EntryType(str, Enum):
    """
    Kind of index entry

    Inherits from str so it compares equal to the raw JSON value.
    """
    STORY = "story"
    DOCS = "docs"


class IndexEntry(BaseModel):
    """
    Static descriptor locating a story or docs page within a CSF file

    Immutable once issued; the index swaps whole entry tables instead.
    Accepts camelCase keys (importPath, storiesImports) as found in index.json.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    name: str
    import_path: str
    type: EntryType = EntryType.STORY
    # Docs entries only: other CSF files the page references
    stories_imports: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class StoryIndex(BaseModel):
    """Story index: story id -> IndexEntry, in iteration order"""
    v: int = 5
    entries: Dict[str, IndexEntry] = Field(default_factory=dict)


class V3CompatIndexEntry(BaseModel):
    """Entry shape of the legacy v3 stories.json"""
    id: str
    name: str
    title: str
    import_path: str
    kind: str  # legacy alias of title
    story: str  # legacy alias of name
    parameters: Dict[str, Any] = Field(default_factory=dict)


class StoryIndexV3(BaseModel):
    """Legacy v3 stories.json payload"""
    v: int = 3
    stories: Dict[str, V3CompatIndexEntry] = Field(default_factory=dict)
