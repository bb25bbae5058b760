"""Tests for the story-store-extract command."""

import json
import textwrap

import pytest

from story_store.cli import build_parser, main

HEADER_STORIES = textwrap.dedent(
    """
    def Header(**props):
        return {"type": "header", **props}


    default = {"component": Header, "parameters": {"docs": {"page": None}}}

    LoggedIn = {"args": {"user": {"name": "Jane"}}}
    LoggedOut = {}
    """
)

PREVIEW = 'parameters = {"framework": "python"}\nglobals = {"theme": "light"}\n'


@pytest.fixture
def project_dir(tmp_path):
    (tmp_path / "Header.stories.py").write_text(HEADER_STORIES, encoding="utf-8")
    (tmp_path / "preview.py").write_text(PREVIEW, encoding="utf-8")

    def entry(story_id, name):
        return {
            "id": story_id,
            "title": "Example/Header",
            "name": name,
            "importPath": "./Header.stories.py",
            "type": "story",
            "tags": [],
        }

    index = {
        "v": 5,
        "entries": {
            "example-header--logged-in": entry("example-header--logged-in", "Logged In"),
            "example-header--logged-out": entry("example-header--logged-out", "Logged Out"),
        },
    }
    (tmp_path / "index.json").write_text(json.dumps(index), encoding="utf-8")
    return tmp_path


class TestCli:
    """Tests for the CLI entry point."""

    def test_parser_defaults(self):
        args = build_parser().parse_args(["index.json"])
        assert args.payload == "v3"
        assert args.output is None
        assert not args.debug

    def test_v3_payload(self, project_dir):
        """Writes stories.json with titles from the index."""
        output = project_dir / "stories.json"
        exit_code = main(
            [
                str(project_dir / "index.json"),
                "--root", str(project_dir),
                "--project", "./preview.py",
                "--output", str(output),
            ]
        )

        assert exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["v"] == 3
        assert list(data["stories"]) == ["example-header--logged-in", "example-header--logged-out"]
        logged_in = data["stories"]["example-header--logged-in"]
        assert logged_in["kind"] == "Example/Header"
        assert logged_in["story"] == "Logged In"
        assert logged_in["parameters"]["framework"] == "python"
        assert logged_in["parameters"]["file_name"] == "./Header.stories.py"

    def test_v2_payload(self, project_dir):
        output = project_dir / "payload.json"
        exit_code = main(
            [
                str(project_dir / "index.json"),
                "--root", str(project_dir),
                "--project", "./preview.py",
                "--payload", "v2",
                "--output", str(output),
            ]
        )

        assert exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["v"] == 2
        assert data["globals"] == {"theme": "light"}
        assert data["stories"]["example-header--logged-in"]["args"] == {"user": {"name": "Jane"}}

    def test_missing_csf_file(self, project_dir):
        """A file the index points at but that doesn't exist fails with exit code 1."""
        (project_dir / "Header.stories.py").unlink()
        assert main([str(project_dir / "index.json"), "--root", str(project_dir)]) == 1

    def test_unknown_story_in_index(self, project_dir):
        """A story the module doesn't export fails with exit code 1."""
        index_path = project_dir / "index.json"
        index = json.loads(index_path.read_text(encoding="utf-8"))
        index["entries"]["example-header--gone"] = {
            **index["entries"]["example-header--logged-in"],
            "id": "example-header--gone",
            "name": "Gone",
        }
        index_path.write_text(json.dumps(index), encoding="utf-8")

        assert main([str(index_path), "--root", str(project_dir)]) == 1
