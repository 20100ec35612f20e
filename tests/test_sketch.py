"""Frame loop, pointer state and the per-entity error guard."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from gallery.core.sketch import KeyEvent, PointerEvent, Sketch


class Recorder(Sketch):
    def setup(self) -> None:
        self.calls = []
        self.items = [1, 2, 3, 4]

    def update(self) -> None:
        self.calls.append("update")

    def draw(self, canvas) -> None:
        self.calls.append("draw")

    def on_mouse_press(self, x, y) -> None:
        self.calls.append(("press", x, y))

    def on_mouse_release(self, x, y) -> None:
        self.calls.append(("release", x, y))

    def on_key(self, key) -> None:
        self.calls.append(("key", key))


def test_step_advances_the_simulated_clock() -> None:
    s = Recorder(40, 30, seed=1)

    canvas = s.step(3)

    assert canvas is s.canvas
    assert s.frame_count == 3
    assert s.millis == pytest.approx(3 * 1000 / 60)
    assert s.calls == ["update", "draw"] * 3


def test_step_with_zero_frames_is_noop() -> None:
    s = Recorder(40, 30)

    s.step(0)

    assert s.frame_count == 0 and s.calls == []


def test_pointer_state_tracks_previous_position() -> None:
    s = Recorder(40, 30)

    s.mouse_press(5, 6)
    s.mouse_drag(7, 8)

    np.testing.assert_array_equal(s.mouse, [7, 8])
    np.testing.assert_array_equal(s.pmouse, [5, 6])
    assert s.mouse_is_pressed and s.moved

    s.mouse_release(7, 8)
    s.step()

    assert not s.mouse_is_pressed and not s.moved
    np.testing.assert_array_equal(s.pmouse, s.mouse)


def test_click_is_press_then_release() -> None:
    s = Recorder(40, 30)

    s.click(3, 4)

    assert s.calls == [("press", 3, 4), ("release", 3, 4)]


def test_dispatch_routes_events() -> None:
    s = Recorder(40, 30)

    s.dispatch(PointerEvent("press", 1, 2))
    s.dispatch(KeyEvent("x"))
    s.dispatch(PointerEvent("click", 5, 6))

    assert s.calls == [("press", 1, 2), ("key", "x"), ("press", 5, 6), ("release", 5, 6)]
    with pytest.raises(ValueError, match="Available"):
        s.dispatch(PointerEvent("hover", 0, 0))


def test_keep_alive_drops_failing_entity_and_keeps_rest(caplog) -> None:
    s = Recorder(40, 30)

    def touch(n: int) -> None:
        if n == 3:
            raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="gallery"):
        survivors = s.keep_alive(s.items, touch)

    assert survivors is s.items
    assert s.items == [1, 2, 4]
    assert s.dropped == 1
    assert any("dropping int" in r.getMessage() for r in caplog.records)


def test_resize_reruns_setup_by_default() -> None:
    s = Recorder(40, 30)
    s.items.clear()

    s.resize(64, 48)

    assert (s.width, s.height) == (64, 48)
    assert s.canvas.image.size == (64, 48)
    assert s.items == [1, 2, 3, 4]


def test_seeded_sketches_share_random_streams() -> None:
    a, b = Recorder(10, 10, seed=9), Recorder(10, 10, seed=9)

    assert [a.random(5) for _ in range(3)] == [b.random(5) for _ in range(3)]
    assert a.noise(0.3, 0.7) == b.noise(0.3, 0.7)
    assert 2 <= a.random(2, 3) <= 3


def test_snapshot_includes_clock_and_stats() -> None:
    s = Recorder(10, 10)
    s.step(2)
    snap = s.snapshot()

    assert snap["title"] == "Untitled"
    assert snap["stats"] == {}
    assert snap["frame_count"] == 2
    assert {"frame_count", "millis", "frame_rate", "dropped", "width", "height"} <= set(snap)
