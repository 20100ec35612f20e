"""Vector helpers on single vectors and batches."""

from __future__ import annotations

import math

import numpy as np

from gallery.core.vectors import (
    constrain,
    from_angle,
    heading,
    limit,
    magnitude,
    map_range,
    normalize,
    random2d,
    rotate,
    set_mag,
)


def test_limit_caps_long_vectors_only() -> None:
    v = np.array([[3.0, 4.0], [0.3, 0.4], [0.0, 0.0]])

    out = limit(v, 1.0)

    np.testing.assert_allclose(magnitude(out), [1.0, 0.5, 0.0])
    np.testing.assert_allclose(out[0], [0.6, 0.8])


def test_set_mag_handles_zero_vector() -> None:
    out = set_mag(np.array([[0.0, 0.0], [0.0, 2.0]]), np.array([5.0, 3.0]))

    np.testing.assert_allclose(out, [[0.0, 0.0], [0.0, 3.0]])


def test_normalize_single_vector() -> None:
    out = normalize(np.array([10.0, 0.0]))

    np.testing.assert_allclose(out, [1.0, 0.0])
    assert magnitude(out) == 1.0


def test_from_angle_and_heading_agree() -> None:
    angles = np.array([0.0, 0.5, -2.0, 3.0])

    np.testing.assert_allclose(heading(from_angle(angles, 2.0)), angles)
    np.testing.assert_allclose(magnitude(from_angle(angles, 2.0)), 2.0)


def test_rotate_quarter_turn() -> None:
    np.testing.assert_allclose(rotate(np.array([1.0, 0.0]), math.pi / 2), [0.0, 1.0], atol=1e-12)


def test_random2d_is_unit_length() -> None:
    rng = np.random.default_rng(0)

    np.testing.assert_allclose(magnitude(random2d(rng, 32)), 1.0)


def test_map_range_does_not_clamp() -> None:
    assert map_range(5, 0, 10, 0, 100) == 50
    assert map_range(20, 0, 10, 0, 100) == 200
    assert map_range(3, 2, 2, 7, 9) == 7


def test_constrain_scalar_and_array() -> None:
    assert constrain(12, 0, 10) == 10
    np.testing.assert_array_equal(constrain(np.array([-1, 5, 11]), 0, 10), [0, 5, 10])
