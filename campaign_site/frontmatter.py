"""Frontmatter parsing for vault notes.

Supported grammar, one entry per line inside the leading ``---`` block::

    key: value        scalar string
    key:              bare key, starts a list
      - item          list item appended to the last bare key

Nested maps, quoted strings containing colons, flow sequences (``[a, b]``)
and multi-line scalars are not supported; such lines are read with the rules
above and no error is raised.
"""

from __future__ import annotations

import html
import re
from typing import Dict, List, Optional, Tuple, Union

FrontmatterValue = Union[str, List[str]]
Frontmatter = Dict[str, FrontmatterValue]

_FRONTMATTER_RE = re.compile(r"^---\s*\n([\s\S]*?)\n---\s*\n?([\s\S]*)$")


def parse_frontmatter_block(block: str) -> Frontmatter:
    """Parse the text between the ``---`` delimiters."""
    data: Frontmatter = {}
    current_key: Optional[str] = None

    for line in block.splitlines():
        stripped = line.strip()
        if not stripped:
            continue

        if stripped.startswith("- "):
            # list items only count under a bare key
            if current_key is not None:
                items = data.get(current_key)
                if not isinstance(items, list):
                    items = []
                    data[current_key] = items
                items.append(stripped[2:])
            continue

        if ":" in stripped:
            key, _, value = stripped.partition(":")
            key = key.strip()
            value = value.strip()
            if value:
                data[key] = value
                current_key = None
            else:
                current_key = key

    return data


def parse_frontmatter(text: str) -> Tuple[Optional[Frontmatter], str]:
    """Split a note into ``(frontmatter, body)``.

    ``frontmatter`` is ``None`` when the note has no leading block.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None, text
    return parse_frontmatter_block(match.group(1)), match.group(2)


def display_key(key: str) -> str:
    return key[:1].upper() + key[1:]


def display_value(value: FrontmatterValue) -> str:
    if isinstance(value, list):
        return ", ".join(value)
    return value


def render_properties_html(frontmatter: Optional[Frontmatter]) -> str:
    """Render frontmatter as the properties list shown above a note."""
    if not frontmatter:
        return ""

    items = "\n".join(
        f'<li><span class="property-key">{html.escape(display_key(key))}:</span> '
        f'<span class="property-value">{html.escape(display_value(value))}</span></li>'
        for key, value in frontmatter.items()
    )
    return (
        f'<div class="note-properties">\n'
        f'        <ul class="properties-list">\n'
        f'            {items}\n'
        f'        </ul>\n'
        f'    </div>'
    )
