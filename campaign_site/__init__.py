"""Static website generator for an Obsidian campaign vault."""

from campaign_site.build import BuildResult, build
from campaign_site.config import SiteConfig
from campaign_site.links import build_link_table, resolve_link
from campaign_site.search import search_items

__all__ = [
    "BuildResult",
    "SiteConfig",
    "build",
    "build_link_table",
    "resolve_link",
    "search_items",
]
