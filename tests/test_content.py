"""Unit tests for campaign_site.content."""

import textwrap
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from campaign_site.content import (
    Note,
    convert_body,
    extract_text_from_html,
    image_style,
    parse_image_options,
    process_note,
    render_markdown,
    transform_images,
    transform_wikilinks,
)
from campaign_site.links import build_link_table
from campaign_site.templates import relative_asset_paths

TABLE = {
    "Strahd von Zarovich": "3_Characters/Strahd von Zarovich.html",
    "strahd von zarovich": "3_Characters/Strahd von Zarovich.html",
    "strahd-von-zarovich": "3_Characters/Strahd von Zarovich.html",
}


def _img(html: str):
    return BeautifulSoup(html, "html.parser").find("img")


# ---------------------------------------------------------------------------
# Obsidian syntax
# ---------------------------------------------------------------------------


class TestTransformImages:
    def test_root_page(self):
        assert transform_images("![[map.png]]", "index.html") == "![|](images/map.png)"

    def test_nested_page_with_options(self):
        out = transform_images("![[pic.jpg|center|300]]", "3_Characters/Strahd.html")
        assert out == "![center|300](../images/pic.jpg)"

    def test_spaces_in_name_are_encoded(self):
        out = transform_images("![[Castle Map.jpg|left]]", "2_Locations/Barovia/Village.html")
        assert out == "![left|](../../images/Castle%20Map.jpg)"

    def test_prefix_matches_page_asset_paths(self):
        relative_path = "2_Locations/Barovia/Village.html"
        assert relative_asset_paths(relative_path).images == "../../images/"
        assert transform_images("![[a.png]]", relative_path).endswith("(../../images/a.png)")


class TestTransformWikilinks:
    def test_plain_link(self):
        out = transform_wikilinks("Met [[Strahd von Zarovich]].", "1_SessionNotes/1_cos.html", TABLE)
        assert out == "Met [Strahd von Zarovich](../3_Characters/Strahd%20von%20Zarovich.html)."

    def test_display_text_and_fragment(self):
        out = transform_wikilinks("[[strahd von zarovich#Lair Actions|his lair]]", "1_SessionNotes/1_cos.html", TABLE)
        assert out == "[his lair](../3_Characters/Strahd%20von%20Zarovich.html#lair-actions)"

    def test_unresolved_link_uses_fallback(self):
        out = transform_wikilinks("[[Van Richten]]", "index.html", TABLE)
        assert out == "[Van Richten](van-richten.html)"

    def test_image_embeds_are_handled_first(self):
        body = transform_images("![[a.png]] and [[Strahd von Zarovich]]", "x/y.html")
        out = transform_wikilinks(body, "x/y.html", TABLE)
        assert out.startswith("![|](../images/a.png) and [Strahd von Zarovich](")


# ---------------------------------------------------------------------------
# Image rendering
# ---------------------------------------------------------------------------


class TestImageOptions:
    @pytest.mark.parametrize(
        "alt, expected",
        [
            ("", ("", "")),
            ("|", ("", "")),
            ("center|", ("center", "")),
            ("|300", ("", "300")),
            ("center|300", ("center", "300")),
            ("300|left", ("left", "300")),
            ("left|right", ("", "")),
        ],
    )
    def test_parse(self, alt, expected):
        assert parse_image_options(alt) == expected

    def test_styles(self):
        assert image_style("left", "") == "float: left; margin: 0 1rem 1rem 0"
        assert image_style("center", "200") == "display: block; margin: 1rem auto; max-width: 200px !important"
        assert image_style("right", "") == ""

    @pytest.mark.parametrize("token", ["nan", "inf", "Infinity", "1_0", "1e3", "-5"])
    def test_float_lookalikes_are_not_sizes(self, token):
        assert parse_image_options(token) == (token, "")
        assert parse_image_options(f"center|{token}") == ("", "")
        assert "max-width" not in image_style("center", token)


class TestRenderMarkdown:
    def test_center_sized_image_at_depth_one(self):
        html = render_markdown(transform_images("![[pic.jpg|center|300]]", "3_Characters/Strahd.html"))
        img = _img(html)
        assert img["src"] == "../images/pic.jpg"
        assert "margin: 1rem auto" in img["style"]
        assert "max-width: 300px" in img["style"]
        assert img["alt"] == ""

    def test_unaligned_image_has_no_style(self):
        img = _img(render_markdown("![|](images/a.png)"))
        assert not img.has_attr("style")

    def test_headings_get_ids(self):
        assert 'id="lair-actions"' in render_markdown("## Lair Actions")

    def test_convert_body_produces_links(self):
        html = convert_body("See [[Strahd von Zarovich#Lair Actions]].", "1_SessionNotes/a.html", TABLE)
        link = BeautifulSoup(html, "html.parser").find("a")
        assert link["href"] == "../3_Characters/Strahd%20von%20Zarovich.html#lair-actions"
        assert link.text == "Strahd von Zarovich#Lair Actions"


def test_extract_text_from_html():
    assert extract_text_from_html("<h1>Strahd</h1>\n<p>The  <em>vampire</em> &amp; lord</p>") == (
        "Strahd The vampire & lord"
    )


# ---------------------------------------------------------------------------
# Whole notes
# ---------------------------------------------------------------------------


class TestProcessNote:
    def test_regular_note(self, vault: Path, config):
        table = build_link_table(vault, config.folders)
        path = vault / "3_Characters/Strahd von Zarovich.md"
        note = Note.read(path, "3_Characters/Strahd von Zarovich.html")
        page, record = process_note(note, table, {"4_Items": False}, config)

        soup = BeautifulSoup(page, "html.parser")
        assert soup.find("h1").text == "Strahd von Zarovich"
        assert soup.find("link", rel="stylesheet")["href"] == "../styles.css"
        assert "4_Items" not in page
        assert soup.select_one("article a")["href"] == "../2_Locations/Castle%20Ravenloft.html"

        assert record.title == "Strahd von Zarovich"
        assert record.category == "Characters"
        assert record.aliases == ["The Devil", "Lord of Barovia"]
        assert record.tags == ["vampire"]
        assert "vampire lord" in record.content
        assert "<" not in record.content

    def test_map_note(self, tmp_path: Path, config):
        path = tmp_path / "_Map.md"
        path.write_text(textwrap.dedent("""\
            ---
            type: map
            ---
            ignored body
        """), encoding="utf-8")
        note = Note.read(path, "2_Locations/_Map.html")
        page, record = process_note(note, {}, {}, config)

        assert "Map data not found." in page
        assert "ignored body" not in page
        assert '<span class="property-key">Type:</span>' in page
        assert record.title == config.map_title
        assert record.content == config.map_description
        assert record.category == "Locations"
