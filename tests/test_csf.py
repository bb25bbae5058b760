"""Tests for the pure CSF helpers: naming, merging, normalization and file processing."""

import pytest

from story_store.csf import (
    combine_args,
    combine_parameters,
    combine_tags,
    is_export_story,
    merge_annotations,
    normalize_component_annotations,
    normalize_input_types,
    normalize_project_annotations,
    normalize_story,
    process_csf_file,
    sanitize,
    story_name_from_export,
    to_id,
)
from story_store.schema import NormalizedStoryAnnotations
from story_store.utils.exceptions import AnnotationError


class TestNaming:
    """Tests for id and name helpers."""

    def test_sanitize(self):
        assert sanitize("Example/Button") == "example-button"
        assert sanitize("  Hello, World!  ") == "hello-world"

    def test_to_id(self):
        assert to_id("Example/Button", "Primary") == "example-button--primary"
        assert to_id("Example/Button") == "example-button"

    def test_to_id_rejects_empty(self):
        """Kinds and names need at least one alphanumeric character."""
        with pytest.raises(AnnotationError):
            to_id("///", "Primary")
        with pytest.raises(AnnotationError):
            to_id("Button", "!!!")

    def test_story_name_from_export(self):
        assert story_name_from_export("PrimaryButton") == "Primary Button"
        assert story_name_from_export("with_long_label") == "With Long Label"
        assert story_name_from_export("HTMLInput") == "HTML Input"

    def test_is_export_story(self):
        """default and private exports are never stories."""
        assert is_export_story("Primary")
        assert not is_export_story("default")
        assert not is_export_story("_helper")

    def test_include_and_exclude(self):
        """Patterns are export names or full-match regexes."""
        assert is_export_story("Primary", include_stories=["Primary"])
        assert not is_export_story("Secondary", include_stories=["Primary"])
        assert not is_export_story("mock_data", exclude_stories=[r".*_data"])
        assert is_export_story("Primary", exclude_stories=[r".*_data"])

    def test_invalid_pattern(self):
        with pytest.raises(AnnotationError):
            is_export_story("Primary", include_stories=["[bad"])


class TestMerge:
    """Tests for the three-way annotation merge."""

    def test_combine_parameters_deep_merges(self):
        """Nested dicts merge, later values win, inputs are untouched."""
        project = {"backgrounds": {"default": "light", "values": ["light"]}, "layout": "padded"}
        story = {"backgrounds": {"default": "dark"}}

        combined = combine_parameters(project, story)

        assert combined == {
            "backgrounds": {"default": "dark", "values": ["light"]},
            "layout": "padded",
        }
        assert project["backgrounds"]["default"] == "light"

    def test_combine_parameters_replaces_lists(self):
        assert combine_parameters({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}

    def test_combine_args_is_shallow(self):
        assert combine_args({"user": {"name": "a", "age": 1}}, {"user": {"name": "b"}}) == {
            "user": {"name": "b"}
        }

    def test_combine_tags(self):
        """Negated tags remove earlier ones."""
        assert combine_tags("dev", "test", "autodocs", "!test") == ["dev", "autodocs"]
        assert combine_tags("dev", "dev") == ["dev"]

    def test_merge_precedence(self):
        """Story beats component beats project."""

        def project_render(args, context):
            return "project"

        def story_render(args, context):
            return "story"

        project = normalize_project_annotations(
            {"parameters": {"layout": "padded"}, "args": {"a": 1}, "render": project_render}
        )
        component = normalize_component_annotations(
            {"args": {"a": 2, "b": 2}, "tags": ["autodocs"]}, "Button", "./Button.stories.py"
        )
        story = normalize_story("Primary", {"args": {"b": 3}, "render": story_render}, component)

        merged = merge_annotations([project, component, story])

        assert merged["args"] == {"a": 2, "b": 3}
        assert merged["parameters"]["layout"] == "padded"
        assert merged["tags"] == ["dev", "test", "autodocs"]
        assert merged["render"] is story_render

    def test_merge_hook_order(self):
        """Decorators run story-first, loaders project-first."""

        def make(name):
            def fn(*args):
                return name

            fn.__name__ = name
            return fn

        project = normalize_project_annotations(
            {"decorators": [make("pd")], "loaders": [make("pl")], "play": make("pp")}
        )
        component = normalize_component_annotations(
            {"decorators": [make("cd")], "loaders": [make("cl")]}, "Button", "./Button.stories.py"
        )
        story = normalize_story(
            "Primary", {"decorators": [make("sd")], "loaders": [make("sl")]}, component
        )

        merged = merge_annotations([project, component, story])

        assert [fn.__name__ for fn in merged["decorators"]] == ["sd", "cd", "pd"]
        assert [fn.__name__ for fn in merged["loaders"]] == ["pl", "cl", "sl"]
        assert merged["play"].__name__ == "pp"


class TestNormalize:
    """Tests for annotation normalization."""

    def test_input_type_shorthands(self):
        normalized = normalize_input_types({"label": {"type": "string", "control": "text"}})
        assert normalized == {
            "label": {"name": "label", "type": {"name": "string"}, "control": {"type": "text"}}
        }

    def test_project_annotations_sequence(self):
        """A sequence of configs is composed in order."""

        def first(story_fn, context):
            return story_fn()

        def second(story_fn, context):
            return story_fn()

        project = normalize_project_annotations(
            [
                {"parameters": {"a": {"x": 1}}, "decorators": [first], "globals": {"theme": "light"}},
                {"parameters": {"a": {"y": 2}}, "decorators": second, "globals": {"theme": "dark"}},
            ]
        )

        assert project.parameters == {"a": {"x": 1, "y": 2}}
        assert project.decorators == [first, second]
        assert project.globals == {"theme": "dark"}

    def test_project_annotations_rejects_other_types(self):
        with pytest.raises(AnnotationError):
            normalize_project_annotations(42)

    def test_index_title_wins(self):
        """The index title overrides the default export's own title."""
        meta = normalize_component_annotations({"title": "Own"}, "Indexed/Title", "./a.py")
        assert meta.title == "Indexed/Title"
        assert meta.id == "indexed-title"
        assert meta.parameters == {"file_name": "./a.py"}

    def test_missing_title(self):
        with pytest.raises(AnnotationError):
            normalize_component_annotations({}, None, "./a.py")

    def test_non_mapping_default_export(self):
        """Docs modules may export a page component as default."""
        meta = normalize_component_annotations(lambda: "page", "Intro", "./Intro.docs.py")
        assert meta.title == "Intro"
        assert meta.args == {}

    def test_function_story(self):
        """Function stories carry their annotations as attributes."""
        meta = normalize_component_annotations({}, "Example/Button", "./Button.stories.py")

        def WithLabel(args):
            return args

        WithLabel.args = {"label": "Hi"}
        WithLabel.story_name = "Labelled"

        story = normalize_story("WithLabel", WithLabel, meta)

        assert isinstance(story, NormalizedStoryAnnotations)
        assert story.id == "example-button--with-label"
        assert story.name == "Labelled"
        assert story.args == {"label": "Hi"}
        assert story.render is WithLabel
        assert story.module_export is WithLabel

    def test_explicit_story_id(self):
        meta = normalize_component_annotations({}, "Example/Button", "./Button.stories.py")
        story = normalize_story("Primary", {"id": "custom-id", "name": "Main"}, meta)
        assert story.id == "custom-id"
        assert story.name == "Main"

    def test_invalid_story_export(self):
        meta = normalize_component_annotations({}, "Example/Button", "./Button.stories.py")
        with pytest.raises(AnnotationError):
            normalize_story("Primary", 42, meta)


class TestProcessCsfFile:
    """Tests for process_csf_file."""

    def test_splits_meta_and_stories(self, modules):
        """Stories are keyed by id in export order."""
        exports = modules["./Button.stories.py"]
        csf_file = process_csf_file(exports, "./Button.stories.py", "Example/Button")

        assert csf_file.meta.title == "Example/Button"
        assert list(csf_file.stories) == [
            "example-button--primary",
            "example-button--secondary",
        ]
        assert csf_file.module_exports is exports

    def test_title_from_default_export(self, modules):
        csf_file = process_csf_file(modules["./Header.stories.py"], "./Header.stories.py")
        assert csf_file.meta.title == "Example/Header"

    def test_exclude_stories(self):
        exports = {
            "default": {"title": "Data", "exclude_stories": [r".*_data"]},
            "Table": {},
            "table_data": [1, 2, 3],
        }
        csf_file = process_csf_file(exports, "./Data.stories.py")
        assert list(csf_file.stories) == ["data--table"]

    def test_invalid_story_pattern(self):
        """A malformed exclude_stories regex is reported with the file's path."""
        exports = {"default": {"title": "Data", "exclude_stories": ["(unclosed"]}, "Table": {}}
        with pytest.raises(AnnotationError) as exc_info:
            process_csf_file(exports, "./Data.stories.py")
        assert exc_info.value.context["import_path"] == "./Data.stories.py"

    def test_duplicate_story_ids(self):
        """Two exports resolving to one id is an annotation error."""
        exports = {"default": {"title": "Dup"}, "First": {"id": "dup--same"}, "Second": {"id": "dup--same"}}
        with pytest.raises(AnnotationError, match="Duplicate story id"):
            process_csf_file(exports, "./Dup.stories.py")
