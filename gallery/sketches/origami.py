"""Geometric Tessellations: a scrolling grid of animated paper folds."""

from __future__ import annotations

import math

import numpy as np

from gallery.art.palettes import ORIGAMI_COLORS, gray, lerp_color, rgba
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import HALF_PI, TWO_PI, lerp, map_range

PATTERNS = ("valley", "mountain", "waterbomb", "twist")
TILE_SIZE = 80
SCROLL_SPEED = 0.5
SHADOWS = {
    "valley": (60, 80, 120, 50),
    "mountain": (120, 80, 40, 60),
    "waterbomb": (30, 60, 40, 50),
    "twist": (60, 0, 60, 40),
}


class OrigamiTile:
    def __init__(self, pattern: str, fold_speed: float, rotation: float):
        if pattern not in PATTERNS:
            raise ValueError(f"Unknown fold pattern: {pattern!r}. Available: {list(PATTERNS)}")
        self.pattern = pattern
        self.fold = 0.0
        self.target_fold = 1.0
        self.fold_speed = fold_speed
        self.rotation = rotation

    def update(self) -> None:
        self.fold = lerp(self.fold, self.target_fold, self.fold_speed)

    # ------------------------------------------------------------------
    # Drawing, in tile-local coordinates rotated by ``rotation``
    # ------------------------------------------------------------------

    def _place(self, cx: float, cy: float, pts) -> list[tuple[float, float]]:
        c, s = math.cos(self.rotation), math.sin(self.rotation)
        return [(cx + x * c - y * s, cy + x * s + y * c) for x, y in pts]

    def draw(self, canvas: Canvas, cx: float, cy: float, size: float) -> None:
        half = size / 2
        sx, sy = self._place(cx, cy, [(0, half * 0.9)])[0]
        canvas.ellipse(sx, sy, size * 0.85, size * 0.25, fill=SHADOWS[self.pattern])
        getattr(self, f"_draw_{self.pattern}")(canvas, cx, cy, half)

    def _draw_valley(self, canvas: Canvas, cx: float, cy: float, half: float) -> None:
        c0, c1, c2 = ORIGAMI_COLORS["valley"]
        h1 = map_range(self.fold, 0, 1, 0, half)
        h2 = -h1
        left = [(-half, -half), (0, -half + h1), (0, half + h2), (-half, half)]
        right = [(0, -half + h1), (half, -half), (half, half), (0, half + h2)]
        canvas.polygon(self._place(cx, cy, left), fill=lerp_color(c0, c1, self.fold))
        canvas.polygon(self._place(cx, cy, right), fill=lerp_color(c1, c2, self.fold))
        (x1, y1), (x2, y2) = self._place(cx, cy, [(0, -half + h1), (0, half + h2)])
        canvas.line(x1, y1, x2, y2, gray(255, 180 / 255), width=2)

    def _draw_mountain(self, canvas: Canvas, cx: float, cy: float, half: float) -> None:
        c0, c1 = ORIGAMI_COLORS["mountain"]
        left = [(-half, -half), (0, -half), (0, 0), (-half, half)]
        right = [(half, -half), (0, -half), (0, 0), (half, half)]
        canvas.polygon(self._place(cx, cy, left), fill=lerp_color(c0, c1, self.fold))
        canvas.polygon(self._place(cx, cy, right), fill=lerp_color(c1, c0, self.fold))
        px, py = self._place(cx, cy, [(0, map_range(self.fold, 0, 1, 0, half) * 0.8)])[0]
        canvas.circle(px, py, 8, fill=gray(255, 180 / 255))

    def _draw_waterbomb(self, canvas: Canvas, cx: float, cy: float, half: float) -> None:
        colors = ORIGAMI_COLORS["waterbomb"]
        center = map_range(self.fold, 0, 1, 0, -half / 2)
        for i in range(4):
            a = i * HALF_PI
            c, s = math.cos(a), math.sin(a)
            tri = [(x * c - y * s, x * s + y * c) for x, y in ((0, 0), (half, 0), (0, center))]
            fill = lerp_color(colors[i], colors[(i + 1) % 4], self.fold)
            canvas.polygon(self._place(cx, cy, tri), fill=fill)
        px, py = self._place(cx, cy, [(0, center)])[0]
        canvas.circle(px, py, 8, fill=gray(255, 220 / 255))

    def _draw_twist(self, canvas: Canvas, cx: float, cy: float, half: float) -> None:
        c0, c1 = ORIGAMI_COLORS["twist"]
        twist = map_range(self.fold, 0, 1, 0, math.pi / 3) * self.fold
        a = np.arange(0.0, TWO_PI * 2, 0.1)
        r = a / (TWO_PI * 2) * half
        spiral = list(zip(np.cos(a + twist) * r, np.sin(a + twist) * r))
        canvas.polyline(self._place(cx, cy, spiral), lerp_color(c0, c1, self.fold), width=2.5)
        canvas.circle(cx, cy, 6, fill=gray(255, 80 / 255))


class OrigamiSketch(Sketch):
    title = "Geometric Tessellations"

    def setup(self) -> None:
        self.tile_size: int = self.config.get("tile_size", TILE_SIZE)
        self.regenerate()

    def regenerate(self) -> None:
        self.cols = math.ceil(self.width / self.tile_size) + 1
        self.rows = math.ceil(self.height / self.tile_size) + 1
        self.offset = 0.0
        self.recycled = 0
        self.tiles = [[self._tile(self.noise(i * 0.5, j * 0.5)) for j in range(self.rows)]
                      for i in range(self.cols)]

    def _tile(self, n: float) -> OrigamiTile:
        pattern = PATTERNS[min(len(PATTERNS) - 1, int(n * len(PATTERNS)))]
        return OrigamiTile(pattern, self.random(0.02, 0.04), self.random(TWO_PI))

    def update(self) -> None:
        for column in self.tiles:
            self.keep_alive(column, OrigamiTile.update)

        self.offset += SCROLL_SPEED
        if self.offset > self.tile_size:
            self.offset = 0.0
            self.recycled += 1
            for i, column in enumerate(self.tiles):
                del column[0]
                column.append(self._tile(self.noise(i * 0.5, self.frame_count * 0.1)))

    def draw(self, canvas: Canvas) -> None:
        t = self.millis * 0.0002
        top = rgba(140 + 80 * math.sin(t), 180 + 40 * math.cos(t), 255 - 40 * math.sin(t))
        bottom = rgba(255 - 20 * math.cos(t), 210 + 30 * math.sin(t), 180 + 40 * math.cos(t))
        canvas.vertical_gradient(lerp_color(top, gray(255), 40 / 255),
                                 lerp_color(bottom, gray(255), 40 / 255))
        for i, column in enumerate(self.tiles):
            for j, tile in enumerate(column):
                tile.draw(canvas, i * self.tile_size - self.offset, j * self.tile_size - self.offset,
                          self.tile_size)

    def on_mouse_press(self, x: float, y: float) -> None:
        self.regenerate()

    def describe(self) -> dict:
        counts = {p: 0 for p in PATTERNS}
        for column in self.tiles:
            for tile in column:
                counts[tile.pattern] += 1
        return {
            "cols": self.cols,
            "rows": self.rows,
            "offset": self.offset,
            "recycled_rows": self.recycled,
            "patterns": counts,
        }
