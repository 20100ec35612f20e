"""Cosmic Nebula: a particle cloud pulled around by short-lived attractors.

Particles are held as one numpy batch (positions, velocities, masses and a
rolling trail buffer) so the whole cloud is stepped with array ops.
"""

from __future__ import annotations

import logging

import numpy as np

from gallery.art.palettes import hsb, lerp_color, with_alpha
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI, dist, from_angle, limit, map_range, random2d, set_mag, vec

logger = logging.getLogger(__name__)

MAX_ATTRACTORS = 8
NUM_PARTICLES = 200
ATTRACTOR_MASS = (50.0, 150.0)
ATTRACTOR_LIFESPAN = (300.0, 600.0)
HISTORY = (10, 30)
PARTICLE_MASS = (0.1, 2.0)
PARTICLE_ALPHA = (150.0, 200.0)
MAX_SPEED = 15.0
DIST_CLAMP = (5.0, 25.0)
PICK_MARGIN = 8.0
TRIPLE_CLICK_MS = 1000.0


class Attractor:
    def __init__(self, x: float, y: float, mass: float, hue: float, lifespan: float):
        self.pos = vec(x, y)
        self.mass = mass
        self.r = float(np.sqrt(mass) * 2)
        self.hue = hue
        self.lifespan = lifespan
        self.dragging = False
        self.drag_offset = np.zeros(2)

    @property
    def active(self) -> bool:
        return self.lifespan > 0

    def tick(self) -> None:
        self.lifespan -= 1

    def force_on(self, pos: np.ndarray, mass: np.ndarray) -> np.ndarray:
        """Pull on every particle: m1*m2/d^2 along the separation, d clamped."""
        diff = self.pos - pos
        d = np.clip(np.linalg.norm(diff, axis=1), *DIST_CLAMP)
        return set_mag(diff, self.mass * mass / (d * d))


class NebulaSketch(Sketch):
    title = "Cosmic Nebula"

    def setup(self) -> None:
        cfg = self.config
        self.num_particles: int = cfg.get("num_particles", NUM_PARTICLES)
        self.max_attractors: int = cfg.get("max_attractors", MAX_ATTRACTORS)
        self.infinite_trails = False
        self.click_times: list[float] = []
        self.dragging: Attractor | None = None
        self.reset()

    def reset(self) -> None:
        n, rng = self.num_particles, self.np_rng
        self.pos = np.column_stack([rng.uniform(0, self.width, n), rng.uniform(0, self.height, n)])
        self.vel = random2d(rng, n) * rng.uniform(0.5, 2.0, n)[:, None]
        self.mass = rng.uniform(*PARTICLE_MASS, n)
        self.max_history = rng.integers(HISTORY[0], HISTORY[1], n)
        self.hue = rng.uniform(0, 360, n)
        self.alpha = rng.uniform(*PARTICLE_ALPHA, n) / 255
        self.trail = np.repeat(self.pos[None, :, :], HISTORY[1], axis=0)
        self.trail_len = 0
        self.attractors: list[Attractor] = []
        self.canvas.background((0, 0, 0))

    def resized(self) -> None:
        self.canvas.background((0, 0, 0))
        self.pos[:, 0] = np.clip(self.pos[:, 0], 0, self.width)
        self.pos[:, 1] = np.clip(self.pos[:, 1], 0, self.height)

    @property
    def particle_count(self) -> int:
        return len(self.pos)

    # ------------------------------------------------------------------
    # Attractors
    # ------------------------------------------------------------------

    def add_attractor(self, x: float, y: float) -> Attractor | None:
        if len(self.attractors) >= self.max_attractors:
            return None
        a = Attractor(x, y, self.random(*ATTRACTOR_MASS), self.random(360), self.random(*ATTRACTOR_LIFESPAN))
        self.attractors.append(a)
        return a

    def attractor_at(self, x: float, y: float) -> Attractor | None:
        for a in self.attractors:
            if dist(x, y, a.pos[0], a.pos[1]) < a.r + PICK_MARGIN:
                return a
        return None

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def _drop_invalid(self) -> None:
        ok = np.all(np.isfinite(self.pos), axis=1) & np.all(np.isfinite(self.vel), axis=1)
        if ok.all():
            return
        logger.warning("Cosmic Nebula: dropping %d particle(s) with non-finite state", int((~ok).sum()))
        self.dropped += int((~ok).sum())
        for name in ("pos", "vel", "mass", "max_history", "hue", "alpha"):
            setattr(self, name, getattr(self, name)[ok])
        self.trail = self.trail[:, ok, :]

    def update(self) -> None:
        if self.random() < 0.01:
            self.add_attractor(self.random(self.width), self.random(self.height))

        self.keep_alive(self.attractors, Attractor.tick)
        self.attractors[:] = [a for a in self.attractors if a.active]
        if self.dragging is not None and self.dragging not in self.attractors:
            self.dragging = None

        acc = np.zeros_like(self.pos)
        for a in self.attractors:
            acc += a.force_on(self.pos, self.mass) / self.mass[:, None]
        angle = self.noise(self.pos[:, 0] * 0.002, self.pos[:, 1] * 0.002, self.frame_count * 0.002) * TWO_PI * 2
        acc += from_angle(angle) * 0.1 / self.mass[:, None]

        self.vel = limit(self.vel + acc, MAX_SPEED)
        self.pos = self.pos + self.vel
        self._drop_invalid()

        self.trail = np.roll(self.trail, -1, axis=0)
        self.trail[-1] = self.pos
        self.trail_len = min(self.trail_len + 1, HISTORY[1])

        self.pos[:, 0] = np.where(self.pos[:, 0] > self.width, 0, self.pos[:, 0])
        self.pos[:, 0] = np.where(self.pos[:, 0] < 0, self.width, self.pos[:, 0])
        self.pos[:, 1] = np.where(self.pos[:, 1] > self.height, 0, self.pos[:, 1])
        self.pos[:, 1] = np.where(self.pos[:, 1] < 0, self.height, self.pos[:, 1])

    def draw(self, canvas: Canvas) -> None:
        canvas.background((0, 0, 0), 0.0 if self.infinite_trails else 20 / 255)
        for y in range(0, self.height, 24):
            c = lerp_color(hsb(220, 20, 14, 12 / 255), hsb(260, 24, 20, 8 / 255), y / self.height)
            canvas.line(0, y, self.width, y, c)

        half = min(self.width, self.height) / 2
        for i in range(self.particle_count):
            base = hsb(self.hue[i], 80, 100)
            head = self.pos[i]
            for a in self.attractors:
                if np.hypot(*(head - a.pos)) < a.r * 2:
                    base = lerp_color(base, hsb(a.hue, 80, 100), 0.6)
            n = min(self.trail_len, int(self.max_history[i]))
            pts = self.trail[HISTORY[1] - n:, i, :]
            for k in range(1, n):
                p0, p1 = pts[k - 1], pts[k]
                if abs(p1[0] - p0[0]) > half or abs(p1[1] - p0[1]) > half:
                    continue
                canvas.line(p0[0], p0[1], p1[0], p1[1], with_alpha(base, map_range(k, 0, n, 0, self.alpha[i])),
                            width=map_range(k, 0, n, 0.5, 2))
            canvas.circle(head[0], head[1], self.mass[i] * 2, fill=with_alpha(base, self.alpha[i]))

        for a in self.attractors:
            alpha = min(1.0, map_range(a.lifespan, 0, ATTRACTOR_LIFESPAN[0], 0, 1))
            canvas.circle(a.pos[0], a.pos[1], a.r * 2, fill=hsb(a.hue, 80, 100, alpha))
            if a.dragging:
                canvas.circle(a.pos[0], a.pos[1], a.r * 2 + 8, outline=hsb(0, 0, 100, 200 / 255), width=2)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_mouse_press(self, x: float, y: float) -> None:
        now = self.millis
        self.click_times = [t for t in self.click_times + [now] if now - t < TRIPLE_CLICK_MS]
        if len(self.click_times) >= 3:
            self.infinite_trails = not self.infinite_trails
            self.click_times = []

        picked = self.attractor_at(x, y)
        if picked is not None:
            picked.dragging = True
            picked.drag_offset = np.array([x, y]) - picked.pos
            self.dragging = picked
            return
        self.add_attractor(x, y)

    def on_mouse_drag(self, x: float, y: float) -> None:
        if self.dragging is not None:
            self.dragging.pos = np.array([x, y]) - self.dragging.drag_offset

    def on_mouse_release(self, x: float, y: float) -> None:
        if self.dragging is not None:
            self.dragging.dragging = False
            self.dragging = None

    def describe(self) -> dict:
        return {
            "particles": self.particle_count,
            "attractors": len(self.attractors),
            "max_attractors": self.max_attractors,
            "infinite_trails": self.infinite_trails,
        }
