"""Perlin noise range, determinism and lattice behaviour."""

from __future__ import annotations

import numpy as np

from gallery.core.noise import PerlinNoise


def test_noise_stays_in_unit_interval() -> None:
    noise = PerlinNoise(7)
    xs = np.linspace(-20.0, 20.0, 400)
    values = noise(xs, xs * 0.37, xs * 1.3)

    assert values.shape == xs.shape
    assert values.min() >= 0.0
    assert values.max() <= 1.0


def test_noise_is_half_on_integer_lattice() -> None:
    noise = PerlinNoise(3)
    grid = np.arange(-3.0, 4.0)

    np.testing.assert_allclose(noise(grid, grid[::-1], 2.0), 0.5)
    assert noise(5, 9, 11) == 0.5


def test_same_seed_gives_same_field() -> None:
    xs = np.linspace(0.0, 5.0, 50)

    np.testing.assert_array_equal(PerlinNoise(42)(xs, 0.3), PerlinNoise(42)(xs, 0.3))
    assert not np.array_equal(PerlinNoise(1)(xs, 0.3), PerlinNoise(2)(xs, 0.3))


def test_scalar_input_returns_float() -> None:
    value = PerlinNoise(0).noise(0.25, 0.5)

    assert isinstance(value, float)


def test_noise_is_continuous() -> None:
    noise = PerlinNoise(11)
    xs = np.linspace(0.0, 4.0, 4001)
    steps = np.abs(np.diff(noise(xs, 1.7, 0.2)))

    assert steps.max() < 0.01
