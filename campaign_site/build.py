#!/usr/bin/env python3
"""
Static site generator for a tabletop campaign's Obsidian vault.

Pipeline:
- Scan all notes into a link table used to resolve [[wikilinks]]
- Copy the vault's images folder to images/
- Render each top-level folder: one page per note, an index.html per folder
- Write the homepage, styles.css, search.js and search-index.json

Usage:
  python -m campaign_site --input ../CurseOfStrahdNotes --output ./docs
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

from campaign_site.config import SiteConfig
from campaign_site.fs_utils import clean_output_dir, copy_images, copy_static_assets
from campaign_site.links import LinkTable, build_link_table
from campaign_site.search import SearchRecord, write_search_index
from campaign_site.templates import render_home_html
from campaign_site.walker import compute_folders_with_content, walk_folder

logger = logging.getLogger(__name__)


class BuildResult:
    """What one build produced."""

    def __init__(self, output_root: Path, link_table: LinkTable, folders_with_content: Dict[str, bool], records: List[SearchRecord]):
        self.output_root = output_root
        self.link_table = link_table
        self.folders_with_content = folders_with_content
        self.records = records


def build(config: SiteConfig) -> BuildResult:
    """Regenerate the whole site. Any I/O error aborts the build."""
    source_root = config.source_root
    output_root = config.output_root
    if not source_root.is_dir():
        raise FileNotFoundError(f"Input directory not found: {source_root}")

    logger.info("Starting build from %s", source_root)
    clean_output_dir(output_root)

    logger.info("Building link table...")
    table = build_link_table(source_root, config.folders, config.images_folder)

    copy_images(source_root, output_root, config.images_folder)

    folders_with_content = compute_folders_with_content(source_root, config.folders, config.images_folder)

    records: List[SearchRecord] = []
    for folder in config.folders:
        logger.info("Processing %s...", folder)
        records += walk_folder(folder, table, folders_with_content, config)

    (output_root / "index.html").write_text(render_home_html(folders_with_content, config), encoding="utf-8")
    copy_static_assets(output_root)
    write_search_index(records, output_root)

    logger.info("Build complete: %d pages", len(records))
    return BuildResult(output_root, table, folders_with_content, records)


# -- CLI --
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a static campaign website from an Obsidian vault.")
    parser.add_argument(
        "--input",
        type=Path,
        default=Path("../CurseOfStrahdNotes"),
        help="Path to the vault folder (default: ../CurseOfStrahdNotes)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("./docs"),
        help="Output folder for generated site (deleted and rebuilt)",
    )
    parser.add_argument(
        "--title",
        type=str,
        default="Curse of Strahd Campaign",
        help="Site title shown on the homepage and in page titles",
    )
    parser.add_argument(
        "--map-data",
        type=Path,
        default=None,
        help="Leaflet plugin data.json for the _Map note (default: inside the vault's _data folder)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every written page")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_root: Path = args.input.expanduser().resolve()
    output_root: Path = args.output.resolve()

    if not input_root.exists() or not input_root.is_dir():
        raise SystemExit(f"Input directory not found: {input_root}")

    config = SiteConfig(
        source_root=input_root,
        output_root=output_root,
        site_title=args.title,
        map_data_path=args.map_data,
    )
    build(config)

    print(f"Site generated at: {output_root}")


if __name__ == "__main__":
    main()
