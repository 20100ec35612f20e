"""Botanical Dreams: an L-system tree grown a few branches per frame.

Finished branches are painted once into a static buffer with watercolour
blobs and leaf clusters; only the branches still growing are redrawn.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from gallery.art.palettes import hsb, lerp_color
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI, from_angle, heading, lerp, map_range

logger = logging.getLogger(__name__)

BASE_RULES = ["FF", "F[+F]F", "F[-F]F", "F[+F][-F]F"]
EXTRA_RULES = ["F[+F][-F][++F][--F]F", "F[+F][++F][-F][--F]F", "F[+F]F[-F][+++F]", "F[-F]F[+F][---F]"]
RULES = BASE_RULES + EXTRA_RULES
CURVE_SEGMENTS = 12
MAX_GENERATION = 14
MIN_PARENT_LENGTH = 10.0


def ellipse_points(cx: float, cy: float, rx: float, ry: float, rot: float, n: int = 16):
    t = np.linspace(0.0, TWO_PI, n, endpoint=False)
    x, y = np.cos(t) * rx, np.sin(t) * ry
    c, s = math.cos(rot), math.sin(rot)
    return list(zip(cx + x * c - y * s, cy + x * s + y * c))


class Branch:
    def __init__(self, sketch: "BotanicalSketch", start: np.ndarray, direction: np.ndarray,
                 length: float, generation: int = 0):
        r = sketch.random
        self.sketch = sketch
        self.start = start
        self.dir = direction
        self.len = length
        self.end = start + direction * length
        self.generation = generation
        self.hue = r(90, 140) + generation * 3 + r(-8, 8)
        self.sat = r(40, 80) + generation * 2
        self.alpha = r(180, 220) / 255
        self.thickness = max(0.5, map_range(length, 2, 120, 1.2, 13) * (1 - generation * 0.07))
        self.growing = True
        self.current_len = 0.0
        self.growth_speed = r(1.2, 3.2) * 0.96 ** generation
        self.curve_seed = r(1000)
        self.blobs: list[dict] = []
        self.leaves: list[dict] = []

    def curve_points(self, length: float | None = None) -> list[tuple[float, float]]:
        sk = self.sketch
        l = self.current_len if length is None else length
        ground = sk.height * 0.93
        t = np.linspace(0.0, 1.0, CURVE_SEGMENTS + 1)
        n = sk.noise(self.curve_seed + t * 2, self.generation * 0.2)
        bend = map_range(n, 0, 1, -math.pi / 7, math.pi / 7) * (1 - t) * 0.8
        wind = np.sin(sk.frame_count * 0.01 + self.curve_seed + t * 2) * (0.2 + 0.1 * self.generation)
        angle = heading(self.dir) + bend + wind
        spread = t * (1 - t) * (1 + 0.5 * self.generation)
        x = self.start[0] + self.dir[0] * l * t + np.sin(angle) * 10 * spread
        y = self.start[1] + self.dir[1] * l * t + np.cos(angle) * 5 * spread
        y = np.minimum(y, ground)
        return list(zip(x.tolist(), y.tolist()))

    def grow(self) -> None:
        if not self.growing:
            return
        self.current_len = min(self.current_len + self.growth_speed, self.len)
        if self.current_len >= self.len:
            self.growing = False
            self._add_watercolor()

    def _add_watercolor(self) -> None:
        r = self.sketch.random
        pts = self.curve_points()
        for _ in range(int(r(3, 6)) + self.generation):
            pos = pts[int(r(0.3, 0.8) * (len(pts) - 1))]
            self.blobs.append({
                "pos": pos,
                "size": r(12, 38) * 0.92 ** self.generation,
                "alpha": min(1.0, (r(30, 60) + self.generation * 4) / 255),
                "offset": r(TWO_PI),
                "noise_scale": r(0.015, 0.04),
            })
        if self.generation > 2 and self.len < 30:
            tip = pts[-1]
            for _ in range(int(r(5, 13))):
                a = r(TWO_PI)
                rad = r(13, 32) * 0.96 ** self.generation
                self.leaves.append({
                    "x": tip[0] + math.cos(a) * rad * 0.5,
                    "y": tip[1] + math.sin(a) * rad * 0.5,
                    "r": rad,
                    "squash": r(0.5, 0.8),
                    "rot": a + r(-0.5, 0.5),
                    "col": hsb(self.hue + r(-18, 18), min(100, self.sat + r(10, 30)),
                               r(65, 100), r(110, 210) / 255),
                })

    def _stroke(self, canvas: Canvas, pts) -> None:
        c_start = hsb(self.hue, self.sat, 30, self.alpha)
        c_end = hsb(self.hue - 18, self.sat - 10, 20, self.alpha * 0.7)
        for i in range(1, len(pts)):
            t = i / (len(pts) - 1)
            thick = lerp(self.thickness, max(1.0, self.thickness * 0.3), t)
            canvas.line(*pts[i - 1], *pts[i], lerp_color(c_start, c_end, t), width=thick)

    def paint(self, buffer: Canvas) -> None:
        sk = self.sketch
        for blob in self.blobs:
            a = np.arange(0.0, TWO_PI, 0.15)
            xoff = np.cos(a + blob["offset"]) * blob["noise_scale"]
            yoff = np.sin(a + blob["offset"]) * blob["noise_scale"]
            rad = blob["size"] + sk.noise(xoff, yoff, sk.frame_count * 0.01) * 10
            cx, cy = blob["pos"]
            outline = list(zip((cx + np.cos(a) * rad).tolist(), (cy + np.sin(a) * rad).tolist()))
            fill = hsb(self.hue + sk.random(-10, 10), self.sat + sk.random(-10, 10), 90, blob["alpha"])
            buffer.polygon(outline, fill=fill)
        self._stroke(buffer, self.curve_points(self.len))
        for leaf in self.leaves:
            buffer.polygon(ellipse_points(leaf["x"], leaf["y"], leaf["r"] * 0.45,
                                          leaf["r"] * leaf["squash"] * 0.5, leaf["rot"]),
                           fill=leaf["col"])

    def draw(self, canvas: Canvas) -> None:
        if self.current_len > 0:
            self._stroke(canvas, self.curve_points())


class BotanicalSketch(Sketch):
    title = "Botanical Dreams"
    background_color = hsb(45, 10, 98)[:3]

    def setup(self) -> None:
        cfg = self.config
        self.batch_size: int = cfg.get("batch_size", 10)
        self.max_branches: int = cfg.get("max_branches", 4000)
        self.angle = math.pi / 6
        self.length_reduction = 0.78
        self.static = Canvas(self.width, self.height, self.background_color)
        self.regrow()

    def regrow(self) -> None:
        self._paint_background(self.static)
        self.branches_total = 0
        self.capped = False
        self.queue: list[Branch] = []
        ground = self.height * 0.93
        self.add_branch(np.array([self.width / 2, ground]), np.array([0.0, -1.0]),
                        self.random(220, 320), 0)

    def resized(self) -> None:
        self.static = Canvas(self.width, self.height, self.background_color)
        self.regrow()

    def _paint_background(self, gfx: Canvas) -> None:
        c1, c2 = hsb(45, 10, 98), hsb(70, 20, 85)
        gfx.background(c2)
        r_max = max(self.width, self.height) * 0.7
        steps = 48
        for i in range(steps, 0, -1):
            r = r_max * i / steps
            gfx.circle(self.width / 2, self.height * 0.7, r * 2, fill=lerp_color(c1, c2, i / steps))
        ground = self.height * 0.93
        gfx.ellipse(self.width / 2, ground + 40, self.width * 1.2, 90, fill=hsb(60, 20, 70, 180 / 255))
        gfx.ellipse(self.width / 2, ground + 15, 180, 32, fill=hsb(45, 20, 30, 60 / 255))

    def add_branch(self, start, direction, length: float, generation: int) -> Branch | None:
        if self.branches_total >= self.max_branches:
            if not self.capped:
                logger.info("Botanical Dreams: branch cap of %d reached", self.max_branches)
                self.capped = True
            return None
        branch = Branch(self, start, direction, length, generation)
        self.queue.append(branch)
        self.branches_total += 1
        return branch

    def _spawn_children(self, branch: Branch) -> None:
        if branch.generation >= MAX_GENERATION or branch.len <= MIN_PARENT_LENGTH:
            return
        if self.random() >= 0.97:
            return
        rule = self.choice(RULES)
        new_len = branch.len * (self.length_reduction + self.random(-0.06, 0.09))
        delta = self.angle * self.random(0.55, 1.65)
        if self.random() < 0.25:
            delta *= self.random(1.2, 1.7)
        pos, direction = branch.end.copy(), branch.dir.copy()
        stack: list[tuple[np.ndarray, np.ndarray]] = []
        for ch in rule:
            if ch == "F":
                child = self.add_branch(pos.copy(), direction.copy(), new_len, branch.generation + 1)
                if child is None:
                    return
                pos = child.end.copy()
            elif ch == "+":
                direction = from_angle(heading(direction) + delta * self.random(0.85, 1.35))
            elif ch == "-":
                direction = from_angle(heading(direction) - delta * self.random(0.85, 1.35))
            elif ch == "[":
                stack.append((pos.copy(), direction.copy()))
            elif ch == "]" and stack:
                pos, direction = stack.pop()

    def _grow(self, branch: Branch) -> None:
        branch.grow()
        if not branch.growing:
            branch.paint(self.static)
            self._spawn_children(branch)

    def update(self) -> None:
        n = self.batch_size
        batch = self.keep_alive(self.queue[:n], self._grow)
        # children spawned this frame were appended past the batch
        self.queue[:] = [b for b in batch if b.growing] + self.queue[n:]

    def draw(self, canvas: Canvas) -> None:
        canvas.paste(self.static)
        for b in self.queue:
            b.draw(canvas)

    def on_mouse_press(self, x: float, y: float) -> None:
        self.regrow()

    def describe(self) -> dict:
        return {
            "branches": self.branches_total,
            "growing": len(self.queue),
            "max_branches": self.max_branches,
        }
