"""Unit tests for campaign_site.links."""

import logging
from pathlib import Path

import markdown
import pytest

from campaign_site.links import (
    build_link_table,
    encode_link_path,
    page_depth,
    page_link,
    resolve_link,
    slugify_fragment,
    up_levels,
)
from tests.conftest import write_note

FOLDERS = ["1_SessionNotes", "2_Locations", "3_Characters", "_images"]


@pytest.fixture()
def table(vault: Path):
    return build_link_table(vault, FOLDERS)


class TestBuildLinkTable:
    def test_three_keys_per_note(self, table):
        path = "3_Characters/Strahd von Zarovich.html"
        assert table["Strahd von Zarovich"] == path
        assert table["strahd von zarovich"] == path
        assert table["strahd-von-zarovich"] == path

    def test_nested_notes_keep_their_folders(self, table):
        assert table["Ireena Kolyana"] == "3_Characters/Allies/Ireena Kolyana.html"

    def test_images_folder_is_not_scanned(self, vault: Path):
        write_note(vault, "_images/readme.md", "not a note")
        assert "readme" not in build_link_table(vault, FOLDERS)

    def test_missing_folder_is_skipped(self, vault: Path):
        table = build_link_table(vault, ["9_Nowhere", "2_Locations"])
        assert table["Castle Ravenloft"] == "2_Locations/Castle Ravenloft.html"

    def test_collision_later_wins_and_warns(self, vault: Path, caplog):
        write_note(vault, "2_Locations/Strahd von Zarovich.md", "Statue.")
        with caplog.at_level(logging.WARNING, logger="campaign_site.links"):
            table = build_link_table(vault, FOLDERS)
        assert table["Strahd von Zarovich"] == "3_Characters/Strahd von Zarovich.html"
        assert any("Strahd von Zarovich" in r.getMessage() for r in caplog.records)


class TestResolveLink:
    def test_indexed_name(self, table):
        assert resolve_link("Castle Ravenloft", table) == "2_Locations/Castle Ravenloft.html"

    def test_case_insensitive(self, table):
        assert resolve_link("CASTLE RAVENLOFT", table) == "2_Locations/Castle Ravenloft.html"

    def test_hyphenated(self, table):
        assert resolve_link("Castle  Ravenloft", table) == "2_Locations/Castle Ravenloft.html"

    def test_fragment_is_slugified(self, table):
        assert resolve_link("Castle Ravenloft#The Great Hall!", table) == (
            "2_Locations/Castle Ravenloft.html#the-great-hall"
        )

    def test_unknown_name_falls_back(self, table):
        assert resolve_link("Tser Pool Encampment", table) == "tser-pool-encampment.html"

    def test_unknown_name_with_fragment(self):
        assert resolve_link("Old Bonegrinder#Top Floor", {}) == "old-bonegrinder.html#top-floor"


class TestSlugifyFragment:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Lair Actions", "lair-actions"),
            ("  The -- Great   Hall  ", "the-great-hall"),
            ("What's inside?", "whats-inside"),
            ("-edge-", "edge"),
        ],
    )
    def test_examples(self, text, expected):
        assert slugify_fragment(text) == expected

    @pytest.mark.parametrize("text", ["Lair Actions", "Amber Temple (Vault)", "a - b", "Élan vital"])
    def test_idempotent(self, text):
        once = slugify_fragment(text)
        assert slugify_fragment(once) == once

    @pytest.mark.parametrize("heading", ["Lair Actions", "The Great Hall", "Böse Träume"])
    def test_matches_rendered_heading_ids(self, heading):
        html = markdown.markdown(f"## {heading}", extensions=["toc"])
        assert f'id="{slugify_fragment(heading)}"' in html


class TestRelativePaths:
    def test_depth(self):
        assert page_depth("index.html") == 0
        assert page_depth("3_Characters/Strahd.html") == 1
        assert page_depth("3_Characters/Allies/Ireena.html") == 2
        assert up_levels("3_Characters/Allies/Ireena.html") == "../../"

    def test_encode_keeps_separators_and_fragment(self):
        assert encode_link_path("../3_Characters/Strahd von Zarovich.html#lair-actions") == (
            "../3_Characters/Strahd%20von%20Zarovich.html#lair-actions"
        )

    def test_page_link(self, table):
        assert page_link("Ireena Kolyana", "1_SessionNotes/2_a.html", table) == (
            "../3_Characters/Allies/Ireena%20Kolyana.html"
        )
