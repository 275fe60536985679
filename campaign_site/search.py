"""Search index records and the scoring used by the browser widget.

``static/search.js`` runs the same scoring in the browser; the Python
implementation here is the reference for it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from campaign_site.config import SiteConfig
from campaign_site.frontmatter import Frontmatter

logger = logging.getLogger(__name__)

CONTENT_LIMIT = 500
RESULT_LIMIT = 10

# field weights used by the scorer
TITLE_WEIGHT = 3
ALIAS_WEIGHT = 2.5
TAG_WEIGHT = 2
CATEGORY_WEIGHT = 2
CONTENT_WEIGHT = 1


def _as_list(value: Any) -> List[str]:
    return list(value) if isinstance(value, list) else [value]


class SearchRecord:
    """One searchable note."""

    def __init__(
        self,
        title: str,
        path: str,
        category: str,
        content: str,
        frontmatter: Optional[Frontmatter] = None,
        aliases: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
    ):
        self.title = title
        self.path = path
        self.category = category
        self.content = content
        self.frontmatter = frontmatter or {}
        self.aliases = aliases
        self.tags = tags

    @classmethod
    def from_note(
        cls,
        title: str,
        content: str,
        frontmatter: Optional[Frontmatter],
        relative_path: str,
        config: SiteConfig,
    ) -> "SearchRecord":
        aliases = tags = None
        if frontmatter:
            if frontmatter.get("aliases"):
                aliases = _as_list(frontmatter["aliases"])
            if frontmatter.get("tags"):
                tags = _as_list(frontmatter["tags"])
        return cls(
            title=title,
            path=relative_path,
            category=category_for_path(relative_path, config),
            content=content,
            frontmatter=frontmatter,
            aliases=aliases,
            tags=tags,
        )

    def to_dict(self, content_limit: Optional[int] = None) -> Dict[str, Any]:
        content = self.content
        if content_limit is not None and len(content) > content_limit:
            content = content[:content_limit] + "..."
        data: Dict[str, Any] = {
            "title": self.title,
            "path": self.path,
            "category": self.category,
            "content": content,
            "frontmatter": dict(self.frontmatter),
        }
        if self.aliases is not None:
            data["aliases"] = list(self.aliases)
        if self.tags is not None:
            data["tags"] = list(self.tags)
        return data


def category_for_path(relative_path: str, config: SiteConfig) -> str:
    """Category label of a page, taken from its top-level folder."""
    folder = relative_path.split("/")[0]
    return config.category_map().get(folder, "Other")


# -- build time --
def serialize_index(records: List[SearchRecord]) -> List[Dict[str, Any]]:
    """Records as JSON-ready dicts with ``content`` truncated."""
    return [record.to_dict(content_limit=CONTENT_LIMIT) for record in records]


def write_search_index(records: List[SearchRecord], output_root: Path) -> Path:
    index_path = Path(output_root) / "search-index.json"
    index_path.write_text(json.dumps(serialize_index(records), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Generated search index with %d items", len(records))
    return index_path


# -- query time --
class SearchHit:
    def __init__(self, item: Dict[str, Any], score: float, matches: List[str]):
        self.item = item
        self.score = score
        self.matches = matches

    def __repr__(self) -> str:
        return f"SearchHit(title={self.item.get('title')!r}, score={self.score})"


def calculate_match_score(text: str, words: List[str], weight: float = 1) -> tuple:
    """Score one lowercased field against the query words.

    Whole-token hits earn ``2 * weight``, substring hits ``weight``, and the
    full phrase appearing anywhere adds ``3 * weight``.
    """
    score = 0.0
    matches: List[str] = []
    tokens = text.split(" ")

    for word in words:
        if word in text:
            score += (2 if word in tokens else 1) * weight
            matches.append(word)

    if " ".join(words) in text:
        score += 3 * weight

    return score, matches


def score_item(item: Dict[str, Any], words: List[str]) -> SearchHit:
    fields = [(item.get("title", ""), TITLE_WEIGHT)]
    fields += [(alias, ALIAS_WEIGHT) for alias in item.get("aliases") or []]
    fields += [(tag, TAG_WEIGHT) for tag in item.get("tags") or []]
    fields.append((item.get("content", ""), CONTENT_WEIGHT))
    fields.append((item.get("category", ""), CATEGORY_WEIGHT))

    total = 0.0
    matches: List[str] = []
    for text, weight in fields:
        score, found = calculate_match_score(str(text).lower(), words, weight)
        total += score
        matches.extend(m for m in found if m not in matches)
    return SearchHit(item, total, matches)


def search_items(query: str, index: List[Dict[str, Any]], limit: int = RESULT_LIMIT) -> List[SearchHit]:
    """Rank index entries for *query*; zero-score entries are dropped."""
    words = [word for word in query.lower().split(" ") if word]
    if not words:
        return []

    hits = [score_item(item, words) for item in index]
    hits = [hit for hit in hits if hit.score > 0]
    hits.sort(key=lambda hit: hit.score, reverse=True)
    return hits[:limit]
