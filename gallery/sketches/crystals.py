"""Crystalline Growth: faceted crystals that grow and vanish at full size."""

from __future__ import annotations

import math

from gallery.art.palettes import gray, hsb
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.ui import ButtonBar
from gallery.core.vectors import TWO_PI, map_range

SPAWN_INTERVAL_MS = 500.0


class Crystal:
    def __init__(self, sketch: Sketch, x: float, y: float):
        r = sketch.random
        self.x, self.y = x, y
        self.size = r(20, 40)
        self.growth_rate = r(0.2, 0.5)
        self.max_size = r(100, 200)
        self.hue = r(180, 240)
        self.alpha = r(0.6, 0.8)
        facets = int(r(5, 8))
        # sorted so the outline never self-intersects
        self.angles = sorted(r(TWO_PI) for _ in range(facets))

    def grow(self) -> None:
        if self.size < self.max_size:
            self.size += self.growth_rate

    @property
    def done(self) -> bool:
        return self.size >= self.max_size

    def outline(self, shade: float, dx: float = 0.0, dy: float = 0.0) -> list[tuple[float, float]]:
        return [(self.x + math.cos(a) * self.size * shade + dx,
                 self.y + math.sin(a) * self.size * shade + dy) for a in self.angles]

    def draw(self, canvas: Canvas) -> None:
        canvas.polygon(self.outline(0.9, 2, 2), fill=gray(0, 0.08))
        for i in range(3):
            shade = map_range(i, 0, 2, 0.7, 1.0)
            sat = map_range(shade, 0.7, 1.0, 40, 80)
            bright = map_range(shade, 0.7, 1.0, 80, 100)
            canvas.polygon(self.outline(shade), fill=hsb(self.hue, sat, bright, self.alpha))


class CrystalsSketch(Sketch):
    title = "Crystalline Growth"
    background_color = hsb(220, 30, 15)[:3]

    def setup(self) -> None:
        self.max_crystals: int = self.config.get("max_crystals", 100)
        self.ui = ButtonBar.layout_right(self.width, ["reset"], labels={"reset": "R"})
        self.reset()

    def reset(self) -> None:
        self.crystals: list[Crystal] = []
        self.last_spawn = self.millis
        self.canvas.background(self.background_color)

    def resized(self) -> None:
        self.ui = ButtonBar.layout_right(self.width, ["reset"], labels={"reset": "R"})
        self.canvas.background(self.background_color)

    def spawn(self, x: float, y: float) -> bool:
        if len(self.crystals) >= self.max_crystals:
            return False
        self.crystals.append(Crystal(self, x, y))
        return True

    def update(self) -> None:
        if self.millis - self.last_spawn > SPAWN_INTERVAL_MS:
            if self.spawn(self.random(self.width), self.random(self.height)):
                self.last_spawn = self.millis
        self.keep_alive(self.crystals, Crystal.grow)
        self.crystals[:] = [c for c in self.crystals if not c.done]

    def draw(self, canvas: Canvas) -> None:
        canvas.background(self.background_color, 0.05)
        for c in self.crystals:
            c.draw(canvas)
        self.ui.draw(canvas)

    def on_mouse_press(self, x: float, y: float) -> None:
        self.ui.press(x, y)

    def on_mouse_release(self, x: float, y: float) -> None:
        if self.ui.release(x, y) == "reset":
            self.reset()
        elif 0 <= x <= self.width and 0 <= y <= self.height:
            self.spawn(x, y)

    def describe(self) -> dict:
        return {"crystals": len(self.crystals), "max_crystals": self.max_crystals}
