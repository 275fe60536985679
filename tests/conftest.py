import textwrap
from pathlib import Path

import pytest

from campaign_site.config import SiteConfig


def write_note(root: Path, relpath: str, content: str = "") -> Path:
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    """Small campaign vault with linked notes across several folders."""
    root = tmp_path / "vault"
    write_note(root, "1_SessionNotes/2_a.md", """\
        ---
        date: 2024-01-07
        ---
        We met [[Strahd von Zarovich]] at [[Castle Ravenloft#The Great Hall|the hall]].
    """)
    write_note(root, "1_SessionNotes/10_b.md", "Later session.\n")
    write_note(root, "1_SessionNotes/c.md", "Unnumbered note.\n")
    write_note(root, "3_Characters/Strahd von Zarovich.md", """\
        ---
        aliases:
          - The Devil
          - Lord of Barovia
        tags: vampire
        ---
        # Strahd

        Strahd von Zarovich is the vampire lord.

        ![[strahd.jpg|center|300]]

        ## Lair Actions

        He rules from [[Castle Ravenloft]].
    """)
    write_note(root, "3_Characters/Allies/Ireena Kolyana.md", "Ally of the party. See [[Unwritten Place]].\n")
    (root / "3_Characters/Empty/Nested").mkdir(parents=True)
    write_note(root, "2_Locations/Castle Ravenloft.md", "## The Great Hall\n\nA vast hall.\n")
    (root / "_images").mkdir(parents=True)
    (root / "_images" / "strahd.jpg").write_bytes(b"\xff\xd8fakejpeg")
    return root


@pytest.fixture()
def config(vault: Path, tmp_path: Path) -> SiteConfig:
    return SiteConfig(source_root=vault, output_root=tmp_path / "site")
