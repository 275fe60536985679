"""Interactive map page built from Obsidian Leaflet plugin data."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from campaign_site.config import SiteConfig
from campaign_site.links import LinkTable, page_link
from campaign_site.templates import relative_asset_paths

logger = logging.getLogger(__name__)

MAP_DATA_NOT_FOUND = "<p>Map data not found.</p>"
MAP_NOT_FOUND = "<p>Leaflet map data not found.</p>"


def load_map_data(config: SiteConfig) -> Optional[Dict[str, Any]]:
    if not config.map_data_path.is_file():
        logger.warning("Map data file not found: %s", config.map_data_path)
        return None
    return json.loads(config.map_data_path.read_text(encoding="utf-8"))


def transform_marker(
    marker: Dict[str, Any],
    relative_path: str,
    table: LinkTable,
    image_size: tuple,
) -> Optional[Dict[str, Any]]:
    """Convert a plugin marker to pixel coordinates with a resolved link.

    Returns ``None`` for markers without ``percent`` coordinates; moving the
    marker once in Obsidian makes the plugin store them.
    """
    percent = marker.get("percent")
    if not isinstance(percent, list) or len(percent) < 2:
        logger.warning(
            "Marker %r (%s) has no percent coordinates, skipping. "
            "Move it slightly on the map in Obsidian to add them.",
            marker.get("id"), marker.get("link") or marker.get("description"),
        )
        return None

    width, height = image_size
    pixel_x = percent[0] * width
    # plugin y runs bottom-up
    pixel_y = (1 - percent[1]) * height

    link = marker.get("link")
    return {
        "id": marker.get("id"),
        "type": marker.get("type"),
        "loc": [pixel_y, pixel_x],
        "link": link,
        "resolvedLinkPath": page_link(link, relative_path, table) if link else None,
        "description": marker.get("description"),
        "tooltip": marker.get("tooltip"),
    }


def marker_icons(data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    icons: Dict[str, Dict[str, Any]] = {}
    for icon in data.get("markerIcons", []):
        icons[icon["type"]] = {
            "iconName": icon.get("iconName"),
            "color": icon.get("color"),
            "size": icon.get("transform", {}).get("size"),
        }
    default = data.get("defaultMarker")
    if default:
        icons["default"] = {
            "iconName": default.get("iconName"),
            "color": default.get("color"),
            "size": default.get("transform", {}).get("size"),
        }
    return icons


def generate_map_html(relative_path: str, table: LinkTable, config: SiteConfig) -> str:
    """HTML fragment for the ``_Map`` note, or a short notice when data is missing."""
    data = load_map_data(config)
    if data is None:
        return MAP_DATA_NOT_FOUND

    map_data = next((m for m in data.get("mapMarkers", []) if m.get("id") == config.map_id), None)
    if map_data is None:
        logger.warning("No map with id %r in %s", config.map_id, config.map_data_path)
        return MAP_NOT_FOUND

    markers: List[Dict[str, Any]] = []
    for marker in map_data.get("markers", []):
        transformed = transform_marker(marker, relative_path, table, config.map_size)
        if transformed is not None:
            markers.append(transformed)
    logger.info("Map %r: %d markers", config.map_id, len(markers))

    width, height = config.map_size
    image_url = relative_asset_paths(relative_path).images + config.map_image
    return f"""
    <style>
        main, article {{ margin: 0; padding: 0; }}
        main h1, .note-properties {{ display: none; }}
        #map {{
            width: 100vw;
            height: calc(100vh - 50px);
            position: fixed;
            top: 50px;
            left: 0;
            z-index: 1;
        }}
        .custom-div-icon {{ background: none !important; border: none !important; }}
        .custom-div-icon i {{ color: #dddddd; text-shadow: 2px 2px 4px rgba(0,0,0,0.7); font-size: 18px; }}
    </style>
    <div id="map"></div>
    <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css"
        integrity="sha256-p4NxAoJBhIIN+hmNHrzRCf9tD/miZyoHS5obTRR9BMY=" crossorigin="">
    <script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"
        integrity="sha256-20nQCchB9co0qIjJZRGuk2/Z9VM+kNiyxNV1lvTlZBo=" crossorigin=""></script>
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.0.0/css/all.min.css">
    <script>
        const imageWidth = {width};
        const imageHeight = {height};
        const map = L.map('map', {{ crs: L.CRS.Simple, minZoom: -2, maxZoom: 3 }});
        const bounds = [[0, 0], [imageHeight, imageWidth]];
        L.imageOverlay({json.dumps(image_url)}, bounds).addTo(map);

        const markerIcons = {json.dumps(marker_icons(data), indent=2)};
        const style = document.createElement('style');
        style.textContent = Object.entries(markerIcons)
            .map(([type, config]) => '.marker-' + type + ' i {{ color: ' + config.color + ' !important; }}')
            .join('\\n');
        document.head.appendChild(style);

        function createCustomIcon(type) {{
            const iconConfig = markerIcons[type] || markerIcons['default'];
            return L.divIcon({{
                html: '<i class="fas fa-' + iconConfig.iconName + '"></i>',
                iconSize: [iconConfig.size, iconConfig.size],
                className: 'custom-div-icon marker-' + type,
                iconAnchor: [iconConfig.size, -iconConfig.size]
            }});
        }}

        const markers = {json.dumps(markers, indent=2)};
        markers.forEach(markerData => {{
            const marker = L.marker(markerData.loc, {{ icon: createCustomIcon(markerData.type) }}).addTo(map);
            if (markerData.link) {{
                marker.on('click', () => {{ window.location.href = markerData.resolvedLinkPath; }});
                const description = markerData.description ? markerData.description + '<br>' : '';
                marker.bindPopup('<strong>' + markerData.link + '</strong><br>' + description + '<em>Click marker to visit page</em>');
            }}
            if (markerData.tooltip === 'always' && markerData.link) {{
                marker.bindTooltip(markerData.link, {{ permanent: true }});
            }} else if (markerData.tooltip === 'hover' && (markerData.link || markerData.description)) {{
                marker.bindTooltip(markerData.link || markerData.description);
            }}
        }});

        setTimeout(() => map.fitBounds(bounds), 100);
    </script>
"""
