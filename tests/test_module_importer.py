"""Tests for ModuleImporter, the default import function for CSF files on disk."""

import textwrap

import pytest

from story_store.loaders import ModuleImporter
from story_store.store import StoryStore

BUTTON_STORIES = textwrap.dedent(
    """
    from os.path import join


    def Button(**props):
        return {"type": "button", **props}


    default = {"title": "Example/Button", "component": Button}

    Primary = {"args": {"label": "Button", "primary": True}}
    """
)


@pytest.fixture
def stories_root(tmp_path):
    (tmp_path / "Button.stories.py").write_text(BUTTON_STORIES, encoding="utf-8")
    return tmp_path


class TestModuleImporter:
    """Tests for ModuleImporter."""

    @pytest.mark.asyncio
    async def test_exports(self, stories_root):
        """Public names defined in the module are exported, imports are not."""
        importer = ModuleImporter(stories_root)
        exports = await importer("./Button.stories.py")

        assert set(exports) == {"Button", "default", "Primary"}
        assert exports["default"]["title"] == "Example/Button"

    @pytest.mark.asyncio
    async def test_same_mapping_until_invalidated(self, stories_root):
        importer = ModuleImporter(stories_root)
        first = await importer("./Button.stories.py")
        assert await importer("./Button.stories.py") is first

        importer.invalidate("./Button.stories.py")
        assert await importer("./Button.stories.py") is not first

    @pytest.mark.asyncio
    async def test_dunder_all(self, tmp_path):
        (tmp_path / "Only.stories.py").write_text(
            '__all__ = ["Shown"]\ndefault = {"title": "Only"}\nShown = {}\nHidden = {}\n',
            encoding="utf-8",
        )
        exports = await ModuleImporter(tmp_path)("./Only.stories.py")
        assert set(exports) == {"Shown", "default"}

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await ModuleImporter(tmp_path)("./Missing.stories.py")

    @pytest.mark.asyncio
    async def test_store_renders_from_disk(self, stories_root):
        """End to end: index -> file on disk -> rendered story."""
        index = {
            "entries": {
                "example-button--primary": {
                    "id": "example-button--primary",
                    "title": "Example/Button",
                    "name": "Primary",
                    "importPath": "./Button.stories.py",
                }
            }
        }
        store = StoryStore(index, ModuleImporter(stories_root))

        story = await store.load_story("example-button--primary")
        rendered = story.unbound_story_fn(store.get_story_context(story))

        assert rendered == {"type": "button", "label": "Button", "primary": True}
