"""
Pytest fixtures for story_store tests.

The fake CSF "modules" below are plain export mappings; the import function
is an AsyncMock returning the same mapping object for a path every time,
which is what keeps the store's identity-keyed caches warm.
"""

from typing import Any, Dict
from unittest.mock import AsyncMock

import pytest

from story_store.store import StoryStore


def Button(**props: Any) -> Dict[str, Any]:
    """Stand-in component: renders to a dict of its props."""
    return {"type": "button", **props}


def Header(**props: Any) -> Dict[str, Any]:
    return {"type": "header", **props}


def docs_page() -> str:
    return "<intro/>"


BUTTON_PATH = "./Button.stories.py"
HEADER_PATH = "./Header.stories.py"
INTRO_PATH = "./Intro.docs.py"


def make_modules() -> Dict[str, Dict[str, Any]]:
    return {
        BUTTON_PATH: {
            "default": {
                "title": "Example/Button",
                "component": Button,
                "args": {"size": "medium"},
                "parameters": {"layout": "centered"},
                "tags": ["autodocs"],
            },
            "Primary": {"args": {"primary": True, "label": "Button"}},
            "Secondary": {"args": {"label": "Button"}},
        },
        HEADER_PATH: {
            "default": {"title": "Example/Header", "component": Header},
            "LoggedIn": {"args": {"user": {"name": "Jane"}}},
            "DocsOnly": {"parameters": {"docs_only": True}},
        },
        INTRO_PATH: {"default": docs_page},
    }


def make_index() -> Dict[str, Any]:
    def entry(id: str, title: str, name: str, import_path: str, type: str = "story", **extra: Any):
        return {"id": id, "title": title, "name": name, "import_path": import_path, "type": type, **extra}

    return {
        "v": 5,
        "entries": {
            "example-button--docs": entry(
                "example-button--docs", "Example/Button", "Docs", BUTTON_PATH, "docs"
            ),
            "example-button--primary": entry(
                "example-button--primary", "Example/Button", "Primary", BUTTON_PATH
            ),
            "example-button--secondary": entry(
                "example-button--secondary", "Example/Button", "Secondary", BUTTON_PATH
            ),
            "example-header--logged-in": entry(
                "example-header--logged-in", "Example/Header", "Logged In", HEADER_PATH
            ),
            "example-header--docs-only": entry(
                "example-header--docs-only", "Example/Header", "Docs Only", HEADER_PATH
            ),
            "intro--docs": entry(
                "intro--docs", "Intro", "Docs", INTRO_PATH, "docs", stories_imports=[BUTTON_PATH]
            ),
        },
    }


def make_project_annotations() -> Dict[str, Any]:
    return {
        "parameters": {"layout": "padded", "framework": "python"},
        "globals": {"theme": "light"},
        "global_types": {"locale": {"default_value": "en"}},
    }


@pytest.fixture
def modules() -> Dict[str, Dict[str, Any]]:
    return make_modules()


@pytest.fixture
def story_index() -> Dict[str, Any]:
    return make_index()


@pytest.fixture
def project_annotations() -> Dict[str, Any]:
    return make_project_annotations()


@pytest.fixture
def import_fn(modules) -> AsyncMock:
    return AsyncMock(side_effect=lambda path: modules[path])


@pytest.fixture
def store(story_index, import_fn, project_annotations) -> StoryStore:
    return StoryStore(story_index, import_fn, project_annotations)
