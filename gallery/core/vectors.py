"""2-D vector helpers on numpy arrays.

Every function accepts a single vector of shape ``(2,)`` or a batch of
shape ``(N, 2)`` and returns the same shape.  Scalar helpers follow the
usual creative-coding semantics (``map_range`` does not clamp).
"""

from __future__ import annotations

import math

import numpy as np

TWO_PI = math.pi * 2.0
HALF_PI = math.pi / 2.0


def lerp(a, b, t):
    return a + (b - a) * t


def constrain(v, lo, hi):
    if isinstance(v, np.ndarray):
        return np.clip(v, lo, hi)
    return max(lo, min(hi, v))


def map_range(v, in_lo, in_hi, out_lo, out_hi):
    if in_hi == in_lo:
        return out_lo
    return out_lo + (v - in_lo) * (out_hi - out_lo) / (in_hi - in_lo)


def vec(x: float = 0.0, y: float = 0.0) -> np.ndarray:
    return np.array([x, y], dtype=np.float64)


def from_angle(angle, length=1.0) -> np.ndarray:
    angle = np.asarray(angle, dtype=np.float64)
    length = np.asarray(length, dtype=np.float64)
    return np.stack([np.cos(angle) * length, np.sin(angle) * length], axis=-1)


def magnitude(v: np.ndarray):
    m = np.linalg.norm(v, axis=-1)
    if np.ndim(m) == 0:
        return float(m)
    return m


def set_mag(v: np.ndarray, mag) -> np.ndarray:
    m = np.linalg.norm(v, axis=-1, keepdims=True)
    safe = np.where(m > 0.0, m, 1.0)
    out = v / safe * np.asarray(mag, dtype=np.float64)[..., None]
    return np.where(m > 0.0, out, 0.0)


def normalize(v: np.ndarray) -> np.ndarray:
    return set_mag(v, 1.0)


def limit(v: np.ndarray, max_mag: float) -> np.ndarray:
    """Scale down vectors longer than ``max_mag``; shorter ones pass through."""
    m = np.linalg.norm(v, axis=-1, keepdims=True)
    scale = np.where(m > max_mag, max_mag / np.where(m > 0.0, m, 1.0), 1.0)
    return v * scale


def rotate(v: np.ndarray, angle) -> np.ndarray:
    angle = np.asarray(angle, dtype=np.float64)
    c, s = np.cos(angle), np.sin(angle)
    x, y = v[..., 0], v[..., 1]
    return np.stack([x * c - y * s, x * s + y * c], axis=-1)


def heading(v: np.ndarray):
    h = np.arctan2(v[..., 1], v[..., 0])
    if np.ndim(h) == 0:
        return float(h)
    return h


def random2d(rng: np.random.Generator, n: int | None = None) -> np.ndarray:
    """Unit vectors with uniformly random direction."""
    if n is None:
        return from_angle(rng.uniform(0.0, TWO_PI))
    return from_angle(rng.uniform(0.0, TWO_PI, size=n))


def dist(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)
