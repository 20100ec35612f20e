"""Seeded improved Perlin noise, vectorized over numpy arrays.

Returns values in [0, 1] (the convention the sketches were written
against), so ``noise(...) * TWO_PI`` style angle lookups work directly.
Integer lattice points always map to exactly 0.5.
"""

from __future__ import annotations

import numpy as np

# Edge-midpoint gradients of a cube (Ken Perlin's improved noise).
_GRAD3 = np.array([
    [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
    [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
    [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
], dtype=np.float64)


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(t: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def _grad(h: np.ndarray, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    g = _GRAD3[h % 12]
    return g[..., 0] * x + g[..., 1] * y + g[..., 2] * z


class PerlinNoise:
    """3-D gradient noise with a permutation table drawn from ``seed``."""

    def __init__(self, seed: int | None = None):
        rng = np.random.default_rng(seed)
        perm = rng.permutation(256).astype(np.int64)
        self._perm = np.concatenate([perm, perm])

    def noise(self, x, y=0.0, z=0.0):
        """Sample the field. Scalars in -> float out, arrays in -> array out."""
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            np.asarray(z, dtype=np.float64),
        )
        xf, yf, zf = np.floor(x), np.floor(y), np.floor(z)
        xi = xf.astype(np.int64) & 255
        yi = yf.astype(np.int64) & 255
        zi = zf.astype(np.int64) & 255
        x = x - xf
        y = y - yf
        z = z - zf
        u, v, w = _fade(x), _fade(y), _fade(z)

        p = self._perm
        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        n = _lerp(
            w,
            _lerp(
                v,
                _lerp(u, _grad(p[aa], x, y, z), _grad(p[ba], x - 1, y, z)),
                _lerp(u, _grad(p[ab], x, y - 1, z), _grad(p[bb], x - 1, y - 1, z)),
            ),
            _lerp(
                v,
                _lerp(u, _grad(p[aa + 1], x, y, z - 1), _grad(p[ba + 1], x - 1, y, z - 1)),
                _lerp(u, _grad(p[ab + 1], x, y - 1, z - 1), _grad(p[bb + 1], x - 1, y - 1, z - 1)),
            ),
        )
        out = np.clip((n + 1.0) * 0.5, 0.0, 1.0)
        if out.ndim == 0:
            return float(out)
        return out

    __call__ = noise
