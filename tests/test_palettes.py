"""Colour conversion and named palettes."""

from __future__ import annotations

import pytest

from gallery.art.palettes import (
    CIRCUIT_PALETTES,
    CITYSCAPE_PALETTES,
    get_circuit_palette,
    hex_to_rgb,
    hsb,
    lerp_color,
    with_alpha,
)


def test_hsb_primaries() -> None:
    assert hsb(0, 100, 100) == (255, 0, 0, 255)
    assert hsb(120, 100, 100, 0.5) == (0, 255, 0, 128)
    assert hsb(0, 0, 0) == (0, 0, 0, 255)


def test_hex_and_alpha_helpers() -> None:
    assert hex_to_rgb("#5ee7df") == (0x5E, 0xE7, 0xDF)
    assert with_alpha((1, 2, 3, 255), 0.0) == (1, 2, 3, 0)
    assert lerp_color((0, 0, 0, 0), (200, 100, 50, 255), 0.5) == (100, 50, 25, 128)


def test_circuit_palettes_resolve_every_role() -> None:
    for name in CIRCUIT_PALETTES:
        palette = get_circuit_palette(name)
        assert {"bg", "energy", "wire", "node", "letter"} <= set(palette)


def test_unknown_circuit_palette_lists_choices() -> None:
    with pytest.raises(ValueError, match="cyberpunk"):
        get_circuit_palette("sepia")


def test_nine_cityscape_palettes() -> None:
    assert len(CITYSCAPE_PALETTES) == 9
    assert all({"name", "sky", "building", "window", "detail"} <= set(p) for p in CITYSCAPE_PALETTES)
