"""Emergent Patterns: a tile grid filled in by wave function collapse."""

from __future__ import annotations

import numpy as np

from gallery.art.palettes import gray
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import HALF_PI
from gallery.wfc import WaveFunctionCollapse

TILE_SIZE = 40
STEPS_PER_FRAME = 5
INK = gray(40)


class WFCSketch(Sketch):
    title = "Emergent Patterns"
    background_color = (255, 255, 255)

    def setup(self) -> None:
        cfg = self.config
        self.tile_size: int = cfg.get("tile_size", TILE_SIZE)
        self.steps_per_frame: int = cfg.get("steps_per_frame", STEPS_PER_FRAME)
        self.max_restarts: int = cfg.get("max_restarts", 10)
        self.new_pattern()

    def new_pattern(self) -> None:
        self.wfc = WaveFunctionCollapse(
            self.width // self.tile_size,
            self.height // self.tile_size,
            rng=self.rng,
            max_restarts=self.max_restarts,
        )
        self.wfc.start()
        self.generating = True

    def update(self) -> None:
        if self.generating and not self.wfc.is_complete():
            for _ in range(self.steps_per_frame):
                if not self.wfc.step():
                    break

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _draw_tile(self, canvas: Canvas, pattern: str, x0: float, y0: float) -> None:
        s = self.tile_size
        pad = s * 0.1
        inner = s - pad * 2
        mid = s / 2
        if pattern == "empty":
            canvas.rect(x0, y0, s, s, fill=gray(240))
        elif pattern == "dot":
            canvas.circle(x0 + mid, y0 + mid, inner / 2, fill=INK)
        elif pattern == "line":
            canvas.line(x0 + pad, y0 + mid, x0 + s - pad, y0 + mid, INK, width=3)
        elif pattern == "corner":
            canvas.polyline([(x0 + pad, y0 + mid), (x0 + pad, y0 + pad), (x0 + mid, y0 + pad)], INK, width=3)
        elif pattern == "cross":
            canvas.line(x0 + mid, y0 + pad, x0 + mid, y0 + s - pad, INK, width=3)
            canvas.line(x0 + pad, y0 + mid, x0 + s - pad, y0 + mid, INK, width=3)
        elif pattern == "curve":
            a = np.linspace(0.0, HALF_PI, 12)
            r = inner / 2
            canvas.polyline(list(zip(x0 + pad + np.cos(a) * r, y0 + pad + np.sin(a) * r)), INK, width=3)

    def draw(self, canvas: Canvas) -> None:
        canvas.background((255, 255, 255))
        s = self.tile_size
        entropy = self.wfc.entropy
        for x, column in enumerate(self.wfc.values()):
            for y, pattern in enumerate(column):
                if pattern is None:
                    alpha = min(255, int(entropy[x, y]) * 30)
                    canvas.rect(x * s, y * s, s, s, outline=gray(200, alpha / 255))
                else:
                    self._draw_tile(canvas, pattern, x * s, y * s)

    def on_mouse_press(self, x: float, y: float) -> None:
        self.new_pattern()

    def describe(self) -> dict:
        total = self.wfc.cols * self.wfc.rows
        done = int(self.wfc.collapsed.sum())
        return {
            "cols": self.wfc.cols,
            "rows": self.wfc.rows,
            "collapsed": done,
            "progress": round(done / total, 3) if total else 1.0,
            "complete": self.wfc.is_complete(),
            "restarts": self.wfc.restarts,
            "fallbacks": self.wfc.fallbacks,
        }
