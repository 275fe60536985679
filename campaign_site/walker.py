"""Recursive folder walk: note pages plus one listing page per folder."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Tuple
from urllib.parse import quote

from campaign_site.config import SiteConfig
from campaign_site.content import Note, process_note
from campaign_site.links import LinkTable, output_relpath
from campaign_site.search import SearchRecord
from campaign_site.templates import AssetPaths, render_index_html

logger = logging.getLogger(__name__)

_LEADING_NUMBER_RE = re.compile(r"^(\d+)")


def is_markdown_file(path: Path) -> bool:
    return path.is_file() and path.name.endswith(".md")


def has_markdown_files(path: Path) -> bool:
    """True when a markdown file exists anywhere beneath *path*."""
    try:
        entries = list(path.iterdir())
    except OSError:
        return False
    for entry in entries:
        if is_markdown_file(entry):
            return True
        if entry.is_dir() and has_markdown_files(entry):
            return True
    return False


def compute_folders_with_content(source_root: Path, folders: Iterable[str], images_folder: str = "_images") -> Dict[str, bool]:
    """Map each top-level folder to whether it holds any notes."""
    flags: Dict[str, bool] = {}
    for folder in folders:
        if folder == images_folder:
            continue
        folder_path = source_root / folder
        flags[folder] = folder_path.is_dir() and has_markdown_files(folder_path)
    return flags


def listing_sort_key(name: str) -> Tuple[int, int, str, str]:
    """Names with a leading number sort numerically, ahead of the rest.

    >>> sorted(["10_b.md", "2_a.md", "c.md"], key=listing_sort_key)
    ['2_a.md', '10_b.md', 'c.md']
    """
    match = _LEADING_NUMBER_RE.match(name)
    if match:
        return (0, int(match.group(1)), name.casefold(), name)
    return (1, 0, name.casefold(), name)


def sort_listing(names: Iterable[str]) -> List[str]:
    return sorted(names, key=listing_sort_key)


def folder_title(name: str) -> str:
    """``1_SessionNotes`` -> ``SessionNotes``; underscores become spaces."""
    return re.sub(r"^\d+_", "", name).replace("_", " ")


def render_listing_html(files: List[str], subdirectories: List[str]) -> str:
    """Folder listing items: subdirectories first, then notes."""
    items = [
        f'<li><a href="{quote(subdir)}/index.html">{html.escape(subdir.replace("_", " "))}</a></li>'
        for subdir in subdirectories
    ]
    for name in sort_listing(files):
        stem = name[: -len(".md")]
        items.append(f'<li><a href="{quote(stem + ".html")}">{html.escape(stem)}</a></li>')
    return "\n".join(items)


def _walk_directory(
    current_source: Path,
    current_output: Path,
    table: LinkTable,
    folders_with_content: Dict[str, bool],
    config: SiteConfig,
) -> List[SearchRecord]:
    records: List[SearchRecord] = []
    files: List[str] = []
    subdirectories: List[str] = []

    entries = sorted(current_source.iterdir(), key=lambda p: p.name)
    for entry in entries:
        if entry.is_dir():
            if not has_markdown_files(entry):
                logger.debug("Skipping %s: no notes beneath it", entry)
                continue
            subdirectories.append(entry.name)
            sub_output = current_output / entry.name
            sub_output.mkdir(parents=True, exist_ok=True)
            records += _walk_directory(entry, sub_output, table, folders_with_content, config)
        elif is_markdown_file(entry):
            files.append(entry.name)

    for name in sort_listing(files):
        source_path = current_source / name
        relative_path = output_relpath(config.source_root, source_path)
        note = Note.read(source_path, relative_path)
        page_html, record = process_note(note, table, folders_with_content, config)
        (config.output_root / relative_path).write_text(page_html, encoding="utf-8")
        records.append(record)
        logger.debug("Wrote %s", relative_path)

    if "index.md" in files:
        # the note owns index.html; links and its search record point there
        logger.warning(
            "%s is a note named index; it replaces the folder listing",
            (current_source / "index.md").relative_to(config.source_root).as_posix(),
        )
    elif files or subdirectories:
        depth = len(current_output.relative_to(config.output_root).parts)
        index_html = render_index_html(
            title=folder_title(current_output.name),
            paths=AssetPaths(depth),
            listing_html=render_listing_html(files, subdirectories),
            folders_with_content=folders_with_content,
            config=config,
        )
        (current_output / "index.html").write_text(index_html, encoding="utf-8")

    return records


def walk_folder(
    folder: str,
    table: LinkTable,
    folders_with_content: Dict[str, bool],
    config: SiteConfig,
) -> List[SearchRecord]:
    """Render every note under one top-level folder; return their search records."""
    source_folder = config.source_root / folder
    if not source_folder.is_dir():
        logger.warning("Source folder %s does not exist", folder)
        return []

    output_folder = config.output_root / folder
    output_folder.mkdir(parents=True, exist_ok=True)
    records = _walk_directory(source_folder, output_folder, table, folders_with_content, config)
    logger.info("Processed %s: %d notes", folder, len(records))
    return records
