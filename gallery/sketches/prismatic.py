"""Prismatic Crystals: a rosette of breathing polygons.

Crystal bodies are drawn on an off-screen layer and screened onto the
fading canvas; the inner facets go on a second layer that is overlaid
through its own luminance.
"""

from __future__ import annotations

import math

import numpy as np

from gallery.art.compositor import composite_layer, luminance_mask
from gallery.art.palettes import gray, hsb
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI

CRYSTAL_COUNT = 48
MIN_VERTICES, MAX_VERTICES = 4, 7


class Prism:
    def __init__(self, sketch: Sketch, index: int, count: int, outer: float):
        r = sketch.random
        angle = index * TWO_PI / count
        radius = outer * (0.7 + 0.3 * math.sin(index * 1.7))
        self.index = index
        self.cx = math.cos(angle) * radius
        self.cy = math.sin(angle) * radius
        self.vertices = int(r(MIN_VERTICES, MAX_VERTICES + 1))
        self.angles = np.arange(self.vertices) * TWO_PI / self.vertices
        self.base_hue = math.degrees(angle) % 360
        self.phase = r(TWO_PI)
        self.phase_speed = r(0.01, 0.025)
        self.rotation = r(TWO_PI)
        self.rotation_speed = r(-0.008, 0.008)
        self.size = r(36, 72)

    def update(self) -> None:
        self.rotation += self.rotation_speed
        self.phase += self.phase_speed

    @property
    def hue(self) -> float:
        return (self.base_hue + 60 * math.sin(self.phase)) % 360

    @property
    def scale(self) -> float:
        return 1 + 0.13 * math.sin(self.phase * 1.4 + self.index * 0.8)

    def outline(self, ox: float, oy: float, inner: bool = False) -> list[tuple[float, float]]:
        a = self.angles
        if inner:
            r = self.size * 0.55 * (1 + 0.08 * np.cos(self.phase + a * 3))
        else:
            r = self.size * (0.94 + 0.12 * np.sin(self.phase + a * 2))
        r = r * self.scale
        a = a + self.rotation
        return list(zip(ox + self.cx + np.cos(a) * r, oy + self.cy + np.sin(a) * r))


class PrismaticSketch(Sketch):
    title = "Prismatic Crystals"

    def setup(self) -> None:
        self.count: int = self.config.get("crystals", CRYSTAL_COUNT)
        self.body = Canvas(self.width, self.height)
        self.facets = Canvas(self.width, self.height)
        self.regenerate()

    def regenerate(self) -> None:
        outer = min(self.width, self.height) * 0.36
        self.prisms = [Prism(self, i, self.count, outer) for i in range(self.count)]
        self.canvas.background((0, 0, 0))

    def update(self) -> None:
        self.keep_alive(self.prisms, Prism.update)

    def draw(self, canvas: Canvas) -> None:
        canvas.background((0, 0, 0), 0.1)
        self.body.background((0, 0, 0))
        self.facets.background((0, 0, 0))
        ox, oy = self.width / 2, self.height / 2
        for p in self.prisms:
            hue = p.hue
            shape = p.outline(ox, oy)
            self.body.polygon(shape, fill=hsb(hue, 80, 65, 0.82))
            self.body.polyline(shape, hsb((hue + 30) % 360, 80, 40, 0.7), width=2, closed=True)
            self.facets.polyline(p.outline(ox, oy, inner=True), hsb((hue + 180) % 360, 60, 80, 0.35),
                                 width=1.1, closed=True)
        composite_layer(canvas, self.body, blend="screen")
        composite_layer(canvas, self.facets, opacity=0.8, blend="overlay", mask=luminance_mask(self.facets))

        pulse = 24 + 5 * math.sin(self.frame_count * 0.05)
        canvas.circle(ox, 15, pulse, fill=gray(255, 90 / 255))
        canvas.circle(ox, 15, 12, fill=gray(255, 180 / 255))

    def on_mouse_press(self, x: float, y: float) -> None:
        self.regenerate()

    def describe(self) -> dict:
        return {
            "crystals": len(self.prisms),
            "vertices": sorted({p.vertices for p in self.prisms}),
        }
