"""Digital Rain: falling glyph columns over a dark gradient."""

from __future__ import annotations

import logging
import math

from gallery.art.palettes import hsb, with_alpha
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import map_range

logger = logging.getLogger(__name__)

GLYPHS = [
    "㊅", "㊈", "㊉", "㊊", "㊋", "㊌", "㊍", "㊎",
    "⚡", "☯", "⚛", "⚕", "⚚",
    "⠋", "⠛", "⠟", "⠿", "⡿",
    "⣿", "⢿", "⣻", "⣽", "⣾",
    "漢", "字", "한", "글",
    "∞", "∑", "∆", "∇", "∏",
]
GLYPH_STEP = 20
SPACING = 30
LOW_FPS = 40.0


class RainDrop:
    def __init__(self, sketch: Sketch, x: float, y: float):
        self.sketch = sketch
        self.x, self.y = x, y
        self.speed = sketch.random(5, 15)
        self.chars: list[str] = []
        self.max_length = int(sketch.random(5, 20))
        self.change_rate = sketch.random(0.1, 0.3)
        self.offset = sketch.random(1000)
        self.gradient = self._gradient()

    def _gradient(self):
        base = self.sketch.random(360)
        n = max(2, self.max_length)
        return [hsb(base, 80, map_range(i, 0, n - 1, 100, 20), map_range(i, 0, n - 1, 1.0, 0.2))
                for i in range(n)]

    def recycle(self) -> None:
        self.y = self.sketch.random(-100, 0)
        self.chars = []
        self.max_length = int(self.sketch.random(5, 20))
        self.gradient = self._gradient()

    @property
    def off_screen(self) -> bool:
        return self.y - len(self.chars) * GLYPH_STEP > self.sketch.height

    def update(self) -> None:
        sk = self.sketch
        self.y += self.speed
        if sk.frame_count % 2 == 0 and len(self.chars) < self.max_length:
            self.chars.append(sk.choice(GLYPHS))
        if self.chars and sk.random() < self.change_rate:
            i = int(sk.random(len(self.chars)))
            if i > 0:
                self.chars[i] = sk.choice(GLYPHS)
        if len(self.chars) > self.max_length:
            del self.chars[self.max_length:]
        if self.off_screen:
            self.recycle()

    def draw(self, canvas: Canvas, bloom: float) -> None:
        sk = self.sketch
        for i, ch in enumerate(self.chars):
            y = self.y - i * GLYPH_STEP
            if not 0 < y < sk.height:
                continue
            color = self.gradient[min(i, len(self.gradient) - 1)]
            x = self.x + math.sin(sk.frame_count * 0.02 + self.offset + i * 0.5) * 5
            if i == 0 and bloom > 0:
                canvas.circle(x, y, bloom * 2, fill=with_alpha(color, 0.15))
            canvas.text(x, y, ch, fill=color, size=16)


class RainSketch(Sketch):
    title = "Digital Rain"

    def setup(self) -> None:
        self.low_fps: float = self.config.get("low_fps", LOW_FPS)
        self.bg = Canvas(self.width, self.height)
        top, bottom = hsb(200, 60, 10), hsb(220, 30, 35)
        self.bg.vertical_gradient(top, bottom)
        self.max_drops = self.width // SPACING + 8
        self.drops: list[RainDrop] = [
            RainDrop(self, x, self.random(-500, 0))
            for x in range(SPACING, self.width - SPACING, SPACING)
        ]

    @property
    def degraded(self) -> bool:
        return self.frame_rate < self.low_fps

    def update(self) -> None:
        if self.frame_count % 120 == 0:
            logger.debug("Digital Rain frame rate: %.1f", self.frame_rate)
        if self.degraded and len(self.drops) > int(self.max_drops * 0.7):
            self.drops.pop(0)
        max_len = 10 if self.degraded else 20
        for d in self.drops:
            d.max_length = max_len
        self.keep_alive(self.drops, RainDrop.update)
        target = int(self.max_drops * 0.7) if self.degraded else self.max_drops
        while len(self.drops) < target:
            x = self.random(SPACING, max(SPACING + 1, self.width - SPACING))
            self.drops.append(RainDrop(self, x, self.random(-500, 0)))

    def draw(self, canvas: Canvas) -> None:
        canvas.paste(self.bg)
        bloom = 7 if self.degraded else 15
        for d in self.drops:
            d.draw(canvas, bloom)

    def describe(self) -> dict:
        return {"drops": len(self.drops), "max_drops": self.max_drops, "degraded": self.degraded}
