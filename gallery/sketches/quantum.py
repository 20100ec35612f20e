"""Quantum Entanglement: six particle pairs with mirrored spin."""

from __future__ import annotations

import math

import numpy as np

from gallery.art.palettes import hsb
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI, limit, magnitude, map_range, normalize, random2d, vec

PAIRS = 6
MAX_SPEED = 5.0
MAX_HISTORY = 50
TETHER = 300.0
TETHER_PULL = 0.1
DASH = 5.0


class QuantumParticle:
    def __init__(self, sketch: Sketch, x: float, y: float):
        r = sketch.random
        self.pos = vec(x, y)
        self.vel = random2d(sketch.np_rng) * r(2, 4)
        self.acc = np.zeros(2)
        self.partner: QuantumParticle | None = None
        self.radius = r(4, 8)
        self.spin_phase = r(TWO_PI)
        self.spin_speed = r(0.02, 0.05)
        self.hue = r(360)
        self.history: list[tuple[float, float]] = []

    def apply_force(self, force: np.ndarray) -> None:
        self.acc = self.acc + force

    def update(self, width: int, height: int) -> None:
        self.vel = limit(self.vel + self.acc, MAX_SPEED)
        self.pos = self.pos + self.vel
        self.acc = np.zeros(2)
        self.spin_phase += self.spin_speed

        self.history.append((float(self.pos[0]), float(self.pos[1])))
        del self.history[:-MAX_HISTORY]

        x, y = self.pos
        if x < 0:
            self.pos[0] = width
        elif x > width:
            self.pos[0] = 0
        if y < 0:
            self.pos[1] = height
        elif y > height:
            self.pos[1] = 0

        if self.partner is not None:
            self.partner.spin_phase = self.spin_phase + math.pi
            if magnitude(self.partner.pos - self.pos) > TETHER:
                self.apply_force(normalize(self.partner.pos - self.pos) * TETHER_PULL)

    def draw(self, canvas: Canvas) -> None:
        n = len(self.history)
        for i in range(1, n):
            (x0, y0), (x1, y1) = self.history[i - 1], self.history[i]
            if abs(x1 - x0) > canvas.width / 2 or abs(y1 - y0) > canvas.height / 2:
                continue
            canvas.line(x0, y0, x1, y1, hsb(self.hue, 80, 100, map_range(i, 0, n, 0, 1)))

        cx, cy = self.pos
        angles = np.arange(0.0, TWO_PI, 0.1)
        for i in range(3):
            r = self.radius * (2 + i) + np.sin(angles * 8 + self.spin_phase) * 2
            ring = list(zip(cx + np.cos(angles) * r, cy + np.sin(angles) * r))
            canvas.polyline(ring, hsb(self.hue, 80, 100, (100 - i * 30) / 255), closed=True)
        canvas.circle(cx, cy, self.radius * 2, fill=hsb(self.hue, 80, 100))

        if self.partner is None:
            return
        px, py = self.partner.pos
        d = magnitude(self.partner.pos - self.pos)
        alpha = max(0.0, map_range(d, 0, TETHER, 1, 0))
        color = hsb(self.hue, 80, 100, alpha)
        steps = int(d // DASH)
        for k in range(0, steps, 2):
            t0, t1 = k * DASH / d, min(1.0, (k + 1) * DASH / d)
            canvas.line(cx + (px - cx) * t0, cy + (py - cy) * t0,
                        cx + (px - cx) * t1, cy + (py - cy) * t1, color)
        interference = map_range(math.sin(self.spin_phase * 2), -1, 1, 0, 1)
        canvas.circle((cx + px) / 2, (cy + py) / 2, d * 0.2,
                      outline=hsb(self.hue, 80, 100, alpha * interference), width=2)


class QuantumSketch(Sketch):
    title = "Quantum Entanglement"

    def setup(self) -> None:
        self.pair_count: int = self.config.get("pairs", PAIRS)
        self.regenerate()

    def regenerate(self) -> None:
        self.pairs: list[tuple[QuantumParticle, QuantumParticle]] = []
        for _ in range(self.pair_count):
            x1, y1 = self.random(self.width), self.random(self.height)
            p1 = QuantumParticle(self, x1, y1)
            p2 = QuantumParticle(self, x1 + self.random(-100, 100), y1 + self.random(-100, 100))
            p1.partner, p2.partner = p2, p1
            self.pairs.append((p1, p2))
        self.canvas.background((0, 0, 0))

    def _advance(self, pair: tuple[QuantumParticle, QuantumParticle]) -> None:
        for p in pair:
            p.update(self.width, self.height)

    def update(self) -> None:
        self.keep_alive(self.pairs, self._advance)

    def draw(self, canvas: Canvas) -> None:
        canvas.background((0, 0, 0), 20 / 255)
        for pair in self.pairs:
            for p in pair:
                p.draw(canvas)

    def on_mouse_press(self, x: float, y: float) -> None:
        self.regenerate()

    def describe(self) -> dict:
        spread = [magnitude(b.pos - a.pos) for a, b in self.pairs]
        return {
            "pairs": len(self.pairs),
            "max_separation": round(max(spread), 2) if spread else 0.0,
        }
