"""Wiki-link resolution.

The link table maps note names to output paths relative to the site root.
It is built once per build by :func:`build_link_table` and passed to every
:func:`resolve_link` call.
"""

from __future__ import annotations

import logging
import os
import re
import unicodedata
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List
from urllib.parse import quote

logger = logging.getLogger(__name__)

LinkTable = Dict[str, str]

# characters left alone by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def hyphenate(name: str) -> str:
    """Lowercase *name* and replace whitespace runs with single hyphens."""
    return re.sub(r"\s+", "-", name).lower()


def link_keys(base_name: str) -> List[str]:
    """Keys a note is reachable under: exact, lowercase, hyphenated lowercase."""
    keys: List[str] = []
    for key in (base_name, base_name.lower(), hyphenate(base_name)):
        if key not in keys:
            keys.append(key)
    return keys


def output_relpath(source_root: Path, md_path: Path) -> str:
    """Site-relative ``.html`` path for a markdown file, always ``/``-separated."""
    rel = md_path.relative_to(source_root).as_posix()
    return re.sub(r"\.md$", ".html", rel)


def _scan_markdown(directory: Path) -> Iterable[Path]:
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        for fname in sorted(filenames):
            if fname.endswith(".md"):
                yield Path(dirpath) / fname


def build_link_table(source_root: Path, folders: Iterable[str], images_folder: str = "_images") -> LinkTable:
    """Scan every configured folder and map note names to output paths.

    When two notes share a key the one scanned later wins; a warning names
    both paths.
    """
    source_root = Path(source_root)
    table: LinkTable = {}

    for folder in folders:
        if folder == images_folder:
            continue
        folder_path = source_root / folder
        if not folder_path.is_dir():
            continue

        for md_path in _scan_markdown(folder_path):
            out_path = output_relpath(source_root, md_path)
            base_name = md_path.stem
            clashes = [table[k] for k in link_keys(base_name) if k in table and table[k] != out_path]
            if clashes:
                logger.warning(
                    "Link name %r of %s already maps to %s; the later note wins",
                    base_name, out_path, clashes[0],
                )
            for key in link_keys(base_name):
                table[key] = out_path

    logger.debug("Link table holds %d keys", len(table))
    return table


def slugify_fragment(text: str) -> str:
    """Turn a heading reference into the id the ``toc`` extension assigns.

    >>> slugify_fragment("The Vistani Camp!")
    'the-vistani-camp'
    """
    value = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^\w\s-]", "", value).lower()
    value = re.sub(r"\s+", "-", value)
    value = re.sub(r"-+", "-", value)
    return value.strip("-")


def resolve_link(link_text: str, table: LinkTable) -> str:
    """Resolve a wiki-link target to a site-relative ``.html`` path.

    Handles ``Name`` and ``Name#Heading``. Unknown names fall back to
    ``<hyphenated-name>.html`` instead of failing.
    """
    name = link_text
    fragment = ""
    if "#" in link_text:
        name, _, heading = link_text.partition("#")
        fragment = "#" + slugify_fragment(heading)

    for key in (name, name.lower(), hyphenate(name)):
        if key in table:
            return table[key] + fragment

    return f"{hyphenate(name)}.html{fragment}"


# -- relative path helpers --
def page_depth(relative_path: str) -> int:
    """Number of folders between the site root and a page."""
    parent = PurePosixPath(relative_path).parent
    if str(parent) == ".":
        return 0
    return len(parent.parts)


def up_levels(relative_path: str) -> str:
    return "../" * page_depth(relative_path)


def encode_link_path(path: str) -> str:
    """Percent-encode each path segment, keeping ``/`` and any ``#fragment``."""
    path_part, sep, fragment = path.partition("#")
    encoded = "/".join(quote(segment, safe=_URI_COMPONENT_SAFE) for segment in path_part.split("/"))
    return encoded + sep + fragment


def page_link(link_text: str, relative_path: str, table: LinkTable) -> str:
    """Href from the page at *relative_path* to the note named by *link_text*."""
    return encode_link_path(up_levels(relative_path) + resolve_link(link_text, table))
