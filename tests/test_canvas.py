"""Canvas primitives, fades and degenerate geometry."""

from __future__ import annotations

import numpy as np
import pytest

from gallery.art.compositor import composite_layer, trail_alpha
from gallery.core.canvas import Canvas



def test_circle_paints_its_centre() -> None:
    canvas = Canvas(20, 20)

    canvas.circle(10, 10, 8, fill=(255, 0, 0, 255))

    assert canvas.image.getpixel((10, 10)) == (255, 0, 0)
    assert canvas.image.getpixel((0, 0)) == (0, 0, 0)


def test_background_alpha_zero_keeps_previous_frame() -> None:
    canvas = Canvas(8, 8, background=(10, 20, 30))

    canvas.background((255, 255, 255), 0.0)

    assert canvas.image.getpixel((4, 4)) == (10, 20, 30)


def test_background_partial_alpha_fades_toward_colour() -> None:
    canvas = Canvas(8, 8, background=(0, 0, 0))

    canvas.background((200, 200, 200), 0.5)

    r, g, b = canvas.image.getpixel((3, 3))
    assert 95 <= r <= 105 and r == g == b


def test_degenerate_shapes_are_skipped() -> None:
    canvas = Canvas(8, 8)

    canvas.circle(4, 4, 0, fill=(255, 255, 255, 255))
    canvas.ellipse(4, 4, -3, 2, fill=(255, 255, 255, 255))
    canvas.rect(2, 2, 0, 5, fill=(255, 255, 255, 255))
    canvas.polygon([(0, 0), (1, 1)], fill=(255, 255, 255, 255))
    canvas.polyline([(0, 0)], (255, 255, 255, 255))

    assert canvas.to_array().max() == 0.0


def test_rect_with_negative_size_is_normalised() -> None:
    canvas = Canvas(10, 10)

    canvas.rect(8, 8, -6, -6, fill=(0, 255, 0, 255))

    assert canvas.image.getpixel((5, 5)) == (0, 255, 0)


def test_resize_and_export_shapes() -> None:
    canvas = Canvas(10, 10)

    canvas.resize(30, 12)

    assert (canvas.width, canvas.height) == (30, 12)
    assert canvas.to_array().shape == (12, 30, 3)
    assert canvas.to_image().size == (30, 12)


def test_vertical_gradient_runs_top_to_bottom() -> None:
    canvas = Canvas(4, 50)

    canvas.vertical_gradient((0, 0, 0), (250, 250, 250))

    column = canvas.to_array()[:, 0, 0]
    assert column[0] == 0.0
    assert column[-1] == pytest.approx(250 / 255)
    assert np.all(np.diff(column) >= 0)


def test_screen_blend_with_black_layer_is_identity() -> None:
    canvas = Canvas(6, 6, background=(100, 50, 20))
    before = canvas.to_array()

    composite_layer(canvas, Canvas(6, 6), blend="screen")

    np.testing.assert_allclose(canvas.to_array(), before, atol=1 / 255)


def test_unknown_blend_mode_raises() -> None:
    with pytest.raises(ValueError, match="Available"):
        composite_layer(Canvas(2, 2), Canvas(2, 2), blend="dodge")


def test_trail_alpha_ladders_wrap() -> None:
    assert trail_alpha("flow", 0) == 1.0
    assert trail_alpha("flow", 4) == 0.0
    assert trail_alpha("flow", 6) == 0.5
    assert trail_alpha("waves", 5) == 0.0
    with pytest.raises(ValueError):
        trail_alpha("nebula", 0)
