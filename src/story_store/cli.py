"""
@file_name: cli.py
@description: story-store-extract - dump a legacy stories payload

Loads an index.json, imports every CSF file it references from --root,
and writes the v3 stories.json (default) or the v2 set-stories payload.

Usage:
    story-store-extract index.json --root ./stories --output stories.json
    story-store-extract index.json --root ./stories --project preview.py --payload v2
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from story_store.loaders.module_importer import ModuleImporter
from story_store.schema import StoryIndex
from story_store.store import StoryStore
from story_store.utils.exceptions import StoryStoreError
from story_store.utils.log_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="story-store-extract",
        description="Extract stories from an index into a legacy stories payload",
    )
    parser.add_argument("index", type=Path, help="Path to index.json")
    parser.add_argument(
        "--root", "-r",
        type=Path,
        default=Path("."),
        help="Directory import paths are relative to (default: .)",
    )
    parser.add_argument(
        "--project", "-p",
        default=None,
        help="Project annotations file, relative to --root (its exports are the annotations)",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--payload",
        choices=("v2", "v3"),
        default="v3",
        help="Payload shape (default: v3 stories.json)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


async def extract_payload(
    index_path: Path,
    root: Path,
    project: Optional[str] = None,
    payload: str = "v3",
) -> Dict[str, Any]:
    """Build a store from files on disk and return the requested payload"""
    story_index = StoryIndex.model_validate_json(index_path.read_text(encoding="utf-8"))
    importer = ModuleImporter(root)
    project_annotations = dict(await importer(project)) if project else None

    store = StoryStore(story_index, importer, project_annotations)
    await store.cache_all_csf_files()

    if payload == "v2":
        return store.get_set_stories_payload()
    return store.get_stories_json_data()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.debug else None)

    try:
        data = asyncio.run(extract_payload(args.index, args.root, args.project, args.payload))
    except StoryStoreError as e:
        logger.error(f"Extraction failed: {e}")
        return 1
    except (OSError, ImportError) as e:
        logger.error(f"Extraction failed loading a file: {type(e).__name__}: {e}")
        return 1

    output = json.dumps(data, indent=2, default=str)
    if args.output is None:
        sys.stdout.write(output + "\n")
    else:
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(data.get('stories', {}))} stories to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
