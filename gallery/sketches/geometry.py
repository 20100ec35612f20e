"""Sacred Geometry: a golden-angle spiral with rotating flower layers."""

from __future__ import annotations

import math

import numpy as np

from gallery.art.palettes import hsb, with_alpha
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI, map_range

PHI = (1 + math.sqrt(5)) / 2
POINT_COUNT = 50
NEIGHBOURS = 6
SYMMETRY = 6
MAX_DRAWN_CONNECTIONS = 200


def _rot(pts: np.ndarray, angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return pts @ np.array([[c, s], [-s, c]])


class GeometrySketch(Sketch):
    title = "Sacred Geometry"
    background_color = hsb(0, 0, 10)[:3]

    def setup(self) -> None:
        self.regenerate()

    def regenerate(self) -> None:
        self.time = 0.0
        self.rotation_speed = 0.005
        self.layers = int(self.random(3, 7))
        self.base_radius = min(self.width, self.height) * self.random(0.22, 0.36)
        self.mandala = self.random() > 0.5
        base_hue = self.random(360)
        self.primary = hsb(base_hue, 80, 90)
        self.secondary = hsb((base_hue + 180) % 360, 70, 80)
        self.accent = hsb((base_hue + 120) % 360, 90, 70)
        self.points = self._spiral()
        self.connections = self._connect(self.points)

    def _spiral(self) -> np.ndarray:
        i = np.arange(POINT_COUNT, dtype=np.float64)
        angle = i * TWO_PI * PHI
        radius = self.base_radius * np.sqrt(i) / 13 + np.sin(self.time + i * 0.2) * 8
        return np.stack([np.cos(angle) * radius, np.sin(angle) * radius], axis=1)

    def _connect(self, pts: np.ndarray) -> list[dict]:
        """Link each point to its nearest neighbours that lie within 0.2 x base radius."""
        d = np.linalg.norm(pts[:, None, :] - pts[None, :, :], axis=-1)
        np.fill_diagonal(d, np.inf)
        limit = self.base_radius * 0.2
        conns = []
        for a in range(len(pts)):
            for b in np.argsort(d[a])[:NEIGHBOURS]:
                if d[a, b] < limit:
                    conns.append({"a": a, "b": int(b), "life": 255.0,
                                  "weight": map_range(d[a, b], 0, limit, 2, 0.5)})
        return conns

    def update(self) -> None:
        self.time += 1.0 / self.target_fps
        for c in self.connections:
            c["life"] = 255 * (0.5 + 0.5 * math.sin(self.time + c["a"] * 0.1))
        if self.random() < 0.001:
            self.mandala = not self.mandala

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _flower(self, canvas: Canvas, cx: float, cy: float, radius: float,
                petals: int, turn: float) -> None:
        t = np.arange(0.0, 1.0001, 0.1)
        petal = radius * 0.5 * (1 - t)
        shape = np.stack([np.cos(math.pi * t) * petal, np.sin(math.pi * t) * petal * 0.5], axis=1)
        for i in range(petals):
            pts = _rot(shape, TWO_PI * i / petals + self.time * self.rotation_speed + turn)
            canvas.polyline([(cx + x, cy + y) for x, y in pts], self.primary)

    def draw(self, canvas: Canvas) -> None:
        canvas.background(self.background_color, 20 / 255)
        cx, cy = self.width / 2, self.height / 2
        for i in range(min(4, self.layers)):
            turn = self.time * self.rotation_speed + i * TWO_PI / self.layers
            size = self.base_radius * (1 - i / self.layers)
            self._flower(canvas, cx, cy, size, 5 + i * 2, turn)
            a = np.arange(5) * TWO_PI / 5 + turn
            canvas.polyline(list(zip(cx + np.cos(a) * size * 0.8, cy + np.sin(a) * size * 0.8)),
                            self.secondary, closed=True)

        mirrors = (1.0, -1.0) if self.mandala else (1.0,)
        for k in range(SYMMETRY):
            turned = _rot(self.points, self.time * 0.7 + k * math.pi / 3)
            for m in mirrors:
                pts = turned * np.array([1.0, m]) + np.array([cx, cy])
                for c in self.connections[:MAX_DRAWN_CONNECTIONS]:
                    a, b = pts[c["a"]], pts[c["b"]]
                    canvas.line(a[0], a[1], b[0], b[1], with_alpha(self.secondary, c["life"] / 255),
                                width=c["weight"])
                for x, y in pts:
                    canvas.circle(x, y, 6, fill=self.accent)

    def on_mouse_press(self, x: float, y: float) -> None:
        self.regenerate()

    def describe(self) -> dict:
        return {
            "points": len(self.points),
            "connections": len(self.connections),
            "layers": self.layers,
            "mandala": self.mandala,
        }
