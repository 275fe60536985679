"""Build configuration: vault layout, section titles and map settings."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional


class Section:
    """A top-level vault folder shown as a navigation entry."""

    def __init__(self, folder: str, title: str, on_homepage: bool = True):
        self.folder = folder
        self.title = title
        self.on_homepage = on_homepage


DEFAULT_SECTIONS: List[Section] = [
    Section("1_SessionNotes", "Session Notes"),
    Section("2_Locations", "Locations"),
    Section("3_Characters", "Characters"),
    Section("4_Items", "Items"),
    Section("5_Concepts", "Concepts"),
    Section("7_Quests", "Quests"),
    Section("8_Custom", "Custom", on_homepage=False),
]

IMAGES_FOLDER = "_images"
MAP_NOTE_NAME = "_Map"
MAP_DATA_RELPATH = Path("_data/LeafletMaps/plugins/obsidian-leaflet-plugin/data.json")


class SiteConfig:
    """Settings for one build.

    ``folders`` is the ordered list of top-level vault folders to publish; the
    images folder is copied rather than walked.
    """

    def __init__(
        self,
        source_root: Path,
        output_root: Path,
        site_title: str = "Curse of Strahd Campaign",
        sections: Optional[List[Section]] = None,
        images_folder: str = IMAGES_FOLDER,
        map_data_path: Optional[Path] = None,
        map_id: str = "leaflet-map",
        map_title: str = "Barovia Map",
        map_description: str = "Interactive map of Barovia with locations and markers",
        map_image: str = "Barovia.jpg",
        map_size: tuple = (5025, 3225),
    ):
        self.source_root = Path(source_root)
        self.output_root = Path(output_root)
        self.site_title = site_title
        self.sections = list(sections) if sections is not None else list(DEFAULT_SECTIONS)
        self.images_folder = images_folder
        self.map_data_path = Path(map_data_path) if map_data_path else self.source_root / MAP_DATA_RELPATH
        self.map_id = map_id
        self.map_title = map_title
        self.map_description = map_description
        self.map_image = map_image
        self.map_size = map_size

    @property
    def folders(self) -> List[str]:
        return [s.folder for s in self.sections]

    def category_map(self) -> Dict[str, str]:
        return {s.folder: s.title for s in self.sections}

    def __repr__(self) -> str:
        return f"SiteConfig(source_root={self.source_root!r}, output_root={self.output_root!r})"
