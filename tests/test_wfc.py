"""Wave function collapse: completion, rule consistency and recovery."""

from __future__ import annotations

import logging
import random

import numpy as np
import pytest

from gallery.sketches.wfc import WFCSketch
from gallery.wfc import PATTERNS, WaveFunctionCollapse, compatibility


def test_compatibility_is_symmetric() -> None:
    m = compatibility()
    idx = {p: i for i, p in enumerate(PATTERNS)}

    np.testing.assert_array_equal(m, m.T)
    assert not m[idx["empty"], idx["empty"]]
    assert m[idx["empty"], idx["curve"]]
    assert m[idx["dot"], idx["line"]]
    assert not m[idx["curve"], idx["line"]]


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_grid_reaches_full_collapse(seed: int) -> None:
    wfc = WaveFunctionCollapse(10, 8, rng=random.Random(seed))
    wfc.start()

    assert wfc.run()
    assert wfc.is_complete()
    assert all(v in PATTERNS for column in wfc.values() for v in column)
    assert wfc.violations() == []


def test_start_collapses_one_cell_and_prunes_neighbours() -> None:
    wfc = WaveFunctionCollapse(5, 5, rng=random.Random(5))

    wfc.start()

    assert int(wfc.collapsed.sum()) == 1
    assert wfc.entropy[~wfc.collapsed].min() < len(PATTERNS)


def test_lowest_entropy_cell_is_picked() -> None:
    wfc = WaveFunctionCollapse(6, 6, rng=random.Random(8))
    wfc.start()

    x, y = wfc.find_lowest_entropy()

    open_entropy = wfc.entropy[~wfc.collapsed]
    assert wfc.entropy[x, y] == open_entropy.min()
    assert not wfc.collapsed[x, y]


def test_step_reports_completion() -> None:
    wfc = WaveFunctionCollapse(1, 1, rng=random.Random(0))
    wfc.start()

    assert wfc.is_complete()
    assert not wfc.step()
    assert wfc.values()[0][0] in PATTERNS


def test_contradictions_restart_then_fall_back(caplog) -> None:
    # no pair of patterns may touch, so every collapse contradicts its neighbours
    wfc = WaveFunctionCollapse(3, 3, rng=random.Random(1), patterns=("a", "b"),
                               rules={"a": ("b",), "b": ()}, max_restarts=2, fallback="a")

    with caplog.at_level(logging.INFO, logger="gallery"):
        wfc.start()
        assert wfc.run()

    assert wfc.restarts == 2
    assert wfc.fallbacks > 0
    assert wfc.forced.any()
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_unknown_fallback_or_rule_raises() -> None:
    with pytest.raises(ValueError, match="Available"):
        WaveFunctionCollapse(2, 2, fallback="lava")
    with pytest.raises(ValueError, match="Unknown pattern"):
        WaveFunctionCollapse(2, 2, rules={"empty": ("lava",)})


def test_sketch_grid_size_and_steps_per_frame() -> None:
    s = WFCSketch(170, 90, seed=2)

    assert (s.wfc.cols, s.wfc.rows) == (4, 2)
    s.step()
    assert s.wfc.steps == 5

    s.step(20)
    assert s.describe()["complete"]


def test_sketch_press_starts_a_new_pattern() -> None:
    s = WFCSketch(120, 120, seed=4)
    s.step(10)
    old = s.wfc

    s.click(10, 10)

    assert s.wfc is not old
    assert int(s.wfc.collapsed.sum()) == 1


def test_tiny_canvas_still_has_one_cell() -> None:
    s = WFCSketch(20, 20, seed=0)

    assert (s.wfc.cols, s.wfc.rows) == (1, 1)
    assert s.wfc.is_complete()
