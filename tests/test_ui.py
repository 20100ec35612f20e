"""Button bar layout and press/release capture."""

from __future__ import annotations

import pytest

from gallery.core.canvas import Canvas
from gallery.core.ui import ButtonBar


def _bar() -> ButtonBar:
    return ButtonBar.layout_right(400, ["a", "b"], size=40, margin=10)


def test_layout_runs_left_to_right_against_the_right_edge() -> None:
    bar = _bar()

    assert [b.name for b in bar.buttons] == ["a", "b"]
    assert bar.get("b").x == 350
    assert bar.get("a").x == 300
    assert bar.get("a").label == "A"


def test_gap_pushes_earlier_buttons_left() -> None:
    bar = ButtonBar.layout_right(400, ["a", "b"], size=40, margin=10, gaps={"b": 6})

    assert bar.get("a").x == 294


def test_release_fires_only_on_the_pressed_button() -> None:
    bar = _bar()

    assert bar.press(320, 30)
    assert bar.release(370, 30) is None
    assert bar.pressed is None

    assert bar.press(320, 30)
    assert bar.release(321, 31) == "a"


def test_release_without_press_does_nothing() -> None:
    bar = _bar()

    assert not bar.press(10, 300)
    assert bar.release(320, 30) is None


def test_edges_are_outside() -> None:
    bar = _bar()

    assert not bar.get("a").contains(300, 30)
    assert not bar.get("a").contains(320, 50)
    assert bar.get("a").contains(300.5, 49.5)


def test_unknown_button_lists_names() -> None:
    with pytest.raises(ValueError, match="Available"):
        _bar().get("z")


def test_draw_calls_icon_hooks() -> None:
    seen = []

    _bar().draw(Canvas(400, 60), icons={"b": lambda canvas, button: seen.append(button.name)})

    assert seen == ["b"]
