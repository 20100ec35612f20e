"""Colour helpers and the named palettes used across the gallery.

Colours handed to the canvas are (R, G, B, A) int tuples in [0, 255].
``hsb`` takes hue in degrees, saturation/brightness in [0, 100] and an
alpha in [0, 1].
"""

from __future__ import annotations

import colorsys

RGBA = tuple[int, int, int, int]


def hex_to_rgb(h: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' to an (r, g, b) int triple."""
    h = h.lstrip("#")
    return tuple(int(h[i : i + 2], 16) for i in (0, 2, 4))


def rgba(r: float, g: float, b: float, alpha: float = 1.0) -> RGBA:
    a = max(0.0, min(1.0, alpha))
    return (max(0, min(255, int(round(r)))),
            max(0, min(255, int(round(g)))),
            max(0, min(255, int(round(b)))),
            int(round(a * 255)))


def hsb(h: float, s: float, b: float, alpha: float = 1.0) -> RGBA:
    r, g, bl = colorsys.hsv_to_rgb(
        (h % 360.0) / 360.0,
        max(0.0, min(100.0, s)) / 100.0,
        max(0.0, min(100.0, b)) / 100.0,
    )
    return rgba(r * 255, g * 255, bl * 255, alpha)


def gray(v: float, alpha: float = 1.0) -> RGBA:
    return rgba(v, v, v, alpha)


def with_alpha(color: RGBA, alpha: float) -> RGBA:
    return color[0], color[1], color[2], int(round(max(0.0, min(1.0, alpha)) * 255))


def lerp_color(c1: RGBA, c2: RGBA, t: float) -> RGBA:
    t = max(0.0, min(1.0, t))
    return tuple(int(round(a + (b - a) * t)) for a, b in zip(c1, c2))


# --- Fluid Dynamics brush colours (HSB) ---
FLOW_COLORS = [
    {"name": "red", "h": 0, "s": 100, "b": 100},
    {"name": "yellow", "h": 60, "s": 100, "b": 100},
    {"name": "green", "h": 120, "s": 100, "b": 100},
    {"name": "blue", "h": 240, "s": 100, "b": 100},
    {"name": "magenta", "h": 300, "s": 100, "b": 100},
    {"name": "black", "h": 0, "s": 0, "b": 0},
    {"name": "white", "h": 0, "s": 0, "b": 100},
]

# --- Circuit Poetry palettes: bg, node, letter, wire, energy (HSB) ---
CIRCUIT_PALETTES = {
    "cyberpunk": [(295, 80, 80), (200, 90, 80), (60, 100, 95), (330, 100, 60), (180, 30, 90)],
    "pastel": [(320, 20, 100), (200, 30, 100), (60, 20, 100), (120, 15, 100), (30, 15, 100)],
    "warm": [(20, 90, 100), (35, 80, 100), (10, 80, 80), (50, 70, 90), (5, 90, 90)],
    "cool": [(200, 60, 90), (210, 40, 80), (190, 30, 70), (220, 60, 95), (160, 40, 80)],
    "monochrome": [(0, 0, 15), (0, 0, 40), (0, 0, 70), (0, 0, 100), (200, 10, 80)],
}
CIRCUIT_ROLES = ("bg", "node", "letter", "wire", "energy")

# --- Urban Sketches cityscape palettes (RGB) ---
CITYSCAPE_PALETTES = [
    {"name": "twilight", "sky": (30, 34, 80), "building": (30, 20, 30), "window": (255, 230, 180), "detail": (70, 60, 90)},
    {"name": "neon_night", "sky": (20, 10, 50), "building": (10, 10, 30), "window": (0, 255, 180), "detail": (255, 0, 160)},
    {"name": "dawn", "sky": (255, 180, 140), "building": (80, 80, 100), "window": (255, 255, 200), "detail": (200, 120, 80)},
    {"name": "blue_hour", "sky": (30, 60, 120), "building": (40, 50, 80), "window": (255, 220, 140), "detail": (60, 90, 140)},
    {"name": "golden_glow", "sky": (255, 230, 120), "building": (120, 100, 40), "window": (255, 255, 160), "detail": (200, 180, 80)},
    {"name": "rainy_evening", "sky": (60, 80, 110), "building": (30, 40, 60), "window": (180, 220, 255), "detail": (120, 140, 180)},
    {"name": "sunset_pop", "sky": (255, 120, 120), "building": (100, 40, 60), "window": (255, 255, 180), "detail": (255, 180, 80)},
    {"name": "urban_jungle", "sky": (80, 130, 100), "building": (60, 80, 60), "window": (220, 255, 200), "detail": (80, 140, 80)},
    {"name": "midnight", "sky": (10, 10, 30), "building": (30, 30, 60), "window": (180, 220, 255), "detail": (60, 80, 140)},
]

# --- Geometric Tessellations fold colours ---
ORIGAMI_COLORS = {
    "valley": [hex_to_rgb("#5ee7df"), hex_to_rgb("#b490ca"), hex_to_rgb("#f3e7e9")],
    "mountain": [hex_to_rgb("#f7971e"), hex_to_rgb("#ffd200")],
    "waterbomb": [hex_to_rgb("#43cea2"), hex_to_rgb("#185a9d"), hex_to_rgb("#ffaf7b"), hex_to_rgb("#ffd452")],
    "twist": [hex_to_rgb("#ff61a6"), hex_to_rgb("#6dd5ed")],
}


def get_circuit_palette(name: str) -> dict[str, RGBA]:
    """Return a circuit palette as a role -> colour mapping."""
    if name not in CIRCUIT_PALETTES:
        raise ValueError(f"Unknown palette: {name!r}. Available: {list(CIRCUIT_PALETTES.keys())}")
    return {role: hsb(*c) for role, c in zip(CIRCUIT_ROLES, CIRCUIT_PALETTES[name])}
