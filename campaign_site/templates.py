"""HTML page templates: note pages, folder indexes and the homepage."""

from __future__ import annotations

import html
from typing import Dict, List

from campaign_site.config import Section, SiteConfig
from campaign_site.links import page_depth


class AssetPaths:
    """Relative prefixes from one page back to site-wide assets."""

    def __init__(self, depth: int):
        self.base = "../" * depth
        self.css = self.base + "styles.css"
        self.js = self.base + "search.js"
        self.images = self.base + "images/"


def relative_asset_paths(relative_path: str) -> AssetPaths:
    """Asset paths for the page at *relative_path* (e.g. ``2_Locations/Vallaki.html``)."""
    return AssetPaths(page_depth(relative_path))


def visible_sections(config: SiteConfig, folders_with_content: Dict[str, bool]) -> List[Section]:
    """Sections whose folder is not known to be empty."""
    return [s for s in config.sections if folders_with_content.get(s.folder) is not False]


def render_nav_html(base: str, config: SiteConfig, folders_with_content: Dict[str, bool]) -> str:
    items = "\n                ".join(
        f'<li><a href="{html.escape(base)}{html.escape(s.folder)}/index.html">{html.escape(s.title)}</a></li>'
        for s in visible_sections(config, folders_with_content)
    )
    return f"""<nav>
        <div class="nav-container">
            <a class="site-title" href="{html.escape(base)}index.html">{html.escape(config.site_title)}</a>
            <ul>
                {items}
            </ul>
        </div>
    </nav>"""


def _document(title: str, paths: AssetPaths, nav_html: str, main_html: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{
            margin: 0;
            background: #0a0a0b;
            color: #ffffff;
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', roboto, sans-serif;
            opacity: 0;
            transition: opacity 0.1s ease-in;
        }}
        body.loaded {{ opacity: 1; }}
    </style>
    <link rel="stylesheet" href="{html.escape(paths.css)}">
</head>
<body>
    {nav_html}
    <main>
{main_html}
    </main>
    <script>
        document.addEventListener('DOMContentLoaded', function() {{
            document.body.classList.add('loaded');
        }});
    </script>
    <script src="{html.escape(paths.js)}"></script>
</body>
</html>
"""


def render_page_html(
    title: str,
    paths: AssetPaths,
    properties_html: str,
    content_html: str,
    folders_with_content: Dict[str, bool],
    config: SiteConfig,
) -> str:
    """Full document for a single note."""
    nav_html = render_nav_html(paths.base, config, folders_with_content)
    main_html = f"""        <h1>{html.escape(title)}</h1>
        {properties_html}
        <article>
{content_html}
        </article>"""
    return _document(f"{html.escape(title)} - {html.escape(config.site_title)}", paths, nav_html, main_html)


def render_index_html(
    title: str,
    paths: AssetPaths,
    listing_html: str,
    folders_with_content: Dict[str, bool],
    config: SiteConfig,
) -> str:
    """Folder listing page."""
    nav_html = render_nav_html(paths.base, config, folders_with_content)
    main_html = f"""        <h1>{html.escape(title)}</h1>
        <ul class="file-list">
            {listing_html}
        </ul>"""
    return _document(f"{html.escape(title)} - {html.escape(config.site_title)}", paths, nav_html, main_html)


def render_home_html(folders_with_content: Dict[str, bool], config: SiteConfig) -> str:
    """Homepage with one card per section that has content."""
    paths = AssetPaths(0)
    nav_html = render_nav_html(paths.base, config, folders_with_content)
    cards = "\n            ".join(
        f'<a href="{html.escape(s.folder)}/index.html" class="section-card-link">\n'
        f'                <div class="section-card">\n'
        f'                    <h2>{html.escape(s.title)}</h2>\n'
        f'                </div>\n'
        f'            </a>'
        for s in visible_sections(config, folders_with_content)
        if s.on_homepage
    )
    main_html = f"""        <h1>{html.escape(config.site_title)}</h1>
        <div class="section-grid">
            {cards}
        </div>"""
    return _document(html.escape(config.site_title), paths, nav_html, main_html)
