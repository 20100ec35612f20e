"""Gallery index and the contact sheet."""

from __future__ import annotations

import pytest

from gallery.catalog import ARTWORKS, create_sketch, get_artwork, render_contact_sheet
from gallery.sketches.botanical import BotanicalSketch
from gallery.sketches.wfc import WFCSketch


def test_sixteen_artworks_in_gallery_order() -> None:
    assert [a.index for a in ARTWORKS] == list(range(16))
    assert [a.title for a in ARTWORKS] == [
        "Fluid Dynamics",
        "Crystalline Growth",
        "Harmonic Waves",
        "Botanical Dreams",
        "Digital Rain",
        "Fractal Clouds",
        "Circuit Poetry",
        "Chromatic Symphony",
        "Sacred Geometry",
        "Cosmic Nebula",
        "Urban Sketches",
        "Emergent Patterns",
        "Quantum Entanglement",
        "Geometric Tessellations",
        "StringArt Portraits",
        "Prismatic Crystals",
    ]


def test_slugs_are_unique() -> None:
    slugs = [a.slug for a in ARTWORKS]
    assert len(set(slugs)) == len(slugs)


def test_lookup_by_slug_index_or_digit_string() -> None:
    assert get_artwork("botanical").sketch_cls is BotanicalSketch
    assert get_artwork(3) is get_artwork("3") is get_artwork("botanical")
    assert get_artwork(11).sketch_cls is WFCSketch


@pytest.mark.parametrize("bad", ["mandelbrot", 16, "-1", ""])
def test_unknown_artwork_raises(bad) -> None:
    with pytest.raises(ValueError, match="Available"):
        get_artwork(bad)


def test_to_dict() -> None:
    assert ARTWORKS[0].to_dict() == {"index": 0, "slug": "flow", "title": "Fluid Dynamics"}


def test_create_sketch_passes_size_seed_and_config() -> None:
    s = create_sketch("crystals", 200, 100, seed=9, config={"max_crystals": 7})

    assert (s.width, s.height) == (200, 100)
    assert s.seed == 9
    assert s.max_crystals == 7


def test_contact_sheet_tiles_every_artwork() -> None:
    sheet = render_contact_sheet(frames=2, thumb_size=48, cols=4, seed=1)

    cell = 48 + 4 * 2 + 18
    assert sheet.size == (4 * cell + 4, 4 * cell + 4)
    assert sheet.mode == "RGB"
