"""Note loading and Obsidian-to-HTML content conversion."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Tuple
from xml.etree.ElementTree import Element

import markdown
from bs4 import BeautifulSoup
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from campaign_site.config import MAP_NOTE_NAME, SiteConfig
from campaign_site.frontmatter import Frontmatter, parse_frontmatter, render_properties_html
from campaign_site.leaflet_map import generate_map_html
from campaign_site.links import LinkTable, encode_link_path, page_link
from campaign_site.search import SearchRecord
from campaign_site.templates import relative_asset_paths, render_page_html

logger = logging.getLogger(__name__)

_IMAGE_EMBED_RE = re.compile(r"!\[\[([^\]]+)\]\]")
_WIKILINK_RE = re.compile(r"\[\[([^\]]+)\]\]")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


# -- data structures --
class Note:
    """A markdown note read from the vault."""

    def __init__(self, source_path: Path, relative_path: str, frontmatter: Optional[Frontmatter], body: str):
        self.source_path = source_path
        self.relative_path = relative_path
        self.frontmatter = frontmatter
        self.body = body

    @property
    def base_name(self) -> str:
        return self.source_path.stem

    @classmethod
    def read(cls, source_path: Path, relative_path: str) -> "Note":
        text = source_path.read_text(encoding="utf-8")
        frontmatter, body = parse_frontmatter(text)
        return cls(source_path, relative_path, frontmatter, body)


# -- obsidian syntax --
def transform_images(body: str, relative_path: str) -> str:
    """Rewrite ``![[name|align|size]]`` embeds as markdown images.

    Alignment and size travel in the alt text and are applied by
    :class:`ObsidianImageExtension` at render time.
    """
    image_base = relative_asset_paths(relative_path).images

    def _repl(match: re.Match) -> str:
        parts = [part.strip() for part in match.group(1).split("|")]
        name = parts[0]
        alignment = parts[1] if len(parts) > 1 else ""
        size = parts[2] if len(parts) > 2 else ""
        return f"![{alignment}|{size}]({image_base}{encode_link_path(name)})"

    return _IMAGE_EMBED_RE.sub(_repl, body)


def transform_wikilinks(body: str, relative_path: str, table: LinkTable) -> str:
    """Rewrite ``[[Target]]`` and ``[[Target|Display]]`` as markdown links."""

    def _repl(match: re.Match) -> str:
        link_text = match.group(1)
        target = display = link_text
        if "|" in link_text:
            parts = link_text.split("|")
            target = parts[0].strip()
            display = parts[1].strip()
        return f"[{display}]({page_link(target, relative_path, table)})"

    return _WIKILINK_RE.sub(_repl, body)


# -- image rendering --
def _is_number(token: str) -> bool:
    """Plain decimal widths only; `nan`, `inf` and `1_0` are not sizes."""
    return _NUMBER_RE.fullmatch(token) is not None


def parse_image_options(alt: str) -> Tuple[str, str]:
    """Return ``(alignment, size)`` from an ``align|size`` alt string.

    A lone numeric token is a size, a lone word an alignment. With two
    tokens either order works; anything else yields no options.
    """
    parts = [part.strip() for part in alt.split("|") if part.strip()]
    alignment = size = ""

    if len(parts) == 1:
        if _is_number(parts[0]):
            size = parts[0]
        else:
            alignment = parts[0]
    elif len(parts) == 2:
        first_numeric = _is_number(parts[0])
        second_numeric = _is_number(parts[1])
        if first_numeric and not second_numeric:
            size, alignment = parts
        elif second_numeric and not first_numeric:
            alignment, size = parts

    return alignment, size


def image_style(alignment: str, size: str) -> str:
    styles = []
    if alignment == "left":
        styles += ["float: left", "margin: 0 1rem 1rem 0"]
    elif alignment == "center":
        styles += ["display: block", "margin: 1rem auto"]
    if size and _is_number(size):
        styles.append(f"max-width: {size}px !important")
    return "; ".join(styles)


class ObsidianImageTreeprocessor(Treeprocessor):
    """Turn ``align|size`` alt text into inline styles on every ``<img>``."""

    def run(self, root: Element) -> None:
        for img in root.iter("img"):
            alignment, size = parse_image_options(img.get("alt", ""))
            style = image_style(alignment, size)
            # the alt text only carried layout options
            img.set("alt", "")
            if style:
                img.set("style", style)


class ObsidianImageExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # after inline patterns (20) have produced <img> elements
        md.treeprocessors.register(ObsidianImageTreeprocessor(md), "obsidian_image", 15)


def render_markdown(md_text: str) -> str:
    """Convert markdown to HTML; headings get ``toc``-style ids."""
    return markdown.markdown(
        md_text,
        extensions=["extra", "fenced_code", "tables", "toc", ObsidianImageExtension()],
    )


def extract_text_from_html(html_text: str) -> str:
    """Plain text of an HTML fragment with whitespace collapsed."""
    text = BeautifulSoup(html_text, "html.parser").get_text(" ")
    return re.sub(r"\s+", " ", text).strip()


def convert_body(body: str, relative_path: str, table: LinkTable) -> str:
    """Obsidian markdown body to HTML."""
    processed = transform_images(body, relative_path)
    processed = transform_wikilinks(processed, relative_path, table)
    return render_markdown(processed)


# -- whole notes --
def process_note(
    note: Note,
    table: LinkTable,
    folders_with_content: Dict[str, bool],
    config: SiteConfig,
) -> Tuple[str, SearchRecord]:
    """Render a note to a full page and build its search record."""
    paths = relative_asset_paths(note.relative_path)
    properties_html = render_properties_html(note.frontmatter)

    if note.base_name == MAP_NOTE_NAME:
        logger.debug("Rendering %s as interactive map", note.relative_path)
        title = config.map_title
        content_html = generate_map_html(note.relative_path, table, config)
        text = config.map_description
    else:
        title = note.base_name
        content_html = convert_body(note.body, note.relative_path, table)
        text = extract_text_from_html(content_html)

    record = SearchRecord.from_note(title, text, note.frontmatter, note.relative_path, config)
    page_html = render_page_html(
        title=title,
        paths=paths,
        properties_html=properties_html,
        content_html=content_html,
        folders_with_content=folders_with_content,
        config=config,
    )
    return page_html, record
