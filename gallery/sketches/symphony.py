"""Chromatic Symphony: harmonic oscillators that shed coloured particles."""

from __future__ import annotations

import math

import numpy as np

from gallery.art.palettes import gray, hsb, with_alpha
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI, constrain, from_angle, map_range, rotate

HARMONICS = (1, 1.5, 2, 2.5, 3, 4)
MODES = (
    "Straight Right",
    "Upward Arc",
    "Downward Arc",
    "Wavy Sine",
    "Fan Spread",
    "Spiral",
    "Bounce",
    "Center Out",
)
BOUNCE, CENTER_OUT, STRAIGHT = 6, 7, 0
GRAVITY = (0.0, -0.03, 0.09, 0.0, 0.0, 0.0, 0.07, 0.0)
MAX_HISTORY = 150
NEXT_KEYS = ("ArrowRight", "right")
PREV_KEYS = ("ArrowLeft", "left")


class Oscillator:
    def __init__(self, frequency: float, amplitude: float, phase: float, color):
        self.frequency = frequency
        self.amplitude = amplitude
        self.phase = phase
        self.color = color
        self.history: list[float] = []

    def update(self, t: float) -> None:
        self.history.insert(0, math.sin(t * self.frequency + self.phase) * self.amplitude)
        del self.history[MAX_HISTORY:]

    def draw(self, canvas: Canvas, x0: float, y0: float) -> None:
        n = len(self.history)
        for i in range(1, n):
            alpha = map_range(i, 0, n, 1, 0)
            canvas.line(x0 + (i - 1) * 2, y0 + self.history[i - 1], x0 + i * 2, y0 + self.history[i],
                        with_alpha(self.color, alpha), width=3 * (1 - i / n))


class Particle:
    def __init__(self, pos: np.ndarray, vel: np.ndarray, color, size: float):
        self.pos = pos
        self.vel = vel
        self.color = color
        self.life = 255.0
        self.size = size
        self.bounced = False


class SymphonySketch(Sketch):
    title = "Chromatic Symphony"

    def setup(self) -> None:
        self.max_particles: int = self.config.get("max_particles", 100)
        self.playing = True
        self.regenerate()

    def regenerate(self) -> None:
        self.time = 0.0
        self.mode = self.config.get("mode", BOUNCE)
        self.base_freq = self.random(0.05, 0.1)
        base_hue = self.random(360)
        self.oscillators = [
            Oscillator(self.base_freq * h, 50 - i * 5, self.random(TWO_PI),
                       hsb((base_hue + i * 360 / len(HARMONICS)) % 360, 80, 90))
            for i, h in enumerate(HARMONICS)
        ]
        self.particles: list[Particle] = []

    @property
    def mode_name(self) -> str:
        return MODES[self.mode]

    def next_mode(self) -> None:
        self.mode = (self.mode + 1) % len(MODES)

    def prev_mode(self) -> None:
        self.mode = (self.mode - 1) % len(MODES)

    # ------------------------------------------------------------------
    # Particles
    # ------------------------------------------------------------------

    def add_particle(self, y: float, color) -> bool:
        if len(self.particles) >= self.max_particles:
            return False
        r, m = self.random, self.mode
        if m == 0:
            pos, vel = (0, y), (r(2.2, 3.5), r(-0.2, 0.2))
        elif m == 1:
            pos, vel = (0, y + r(-30, 30)), (r(2.0, 2.8), r(-2.5, -0.5))
        elif m == 2:
            pos, vel = (0, y + r(-30, 30)), (r(2.0, 2.8), r(0.5, 2.5))
        elif m == 3:
            pos, vel = (0, y), (r(2.0, 2.5), math.sin(self.frame_count * 0.15 + r(TWO_PI)) * 0.5)
        elif m == 4:
            pos, vel = (0, y), from_angle(r(-math.pi / 12, math.pi / 12), r(2.0, 3.2))
        elif m == 5:
            ang = self.frame_count * 0.05 + r(TWO_PI)
            pos, vel = (0, y), (2.0 + math.cos(ang) * 1.5, math.sin(ang) * 0.5)
        elif m == BOUNCE:
            pos, vel = (0, constrain(y, 50, self.height - 50)), (r(2.0, 2.8), r(-2, 2))
        else:
            pos, vel = (self.width / 2, self.height / 2), from_angle(r(-math.pi / 3, math.pi / 3), r(2.0, 3.2))
        self.particles.append(Particle(np.array(pos, dtype=np.float64), np.array(vel, dtype=np.float64),
                                       color, r(4, 8)))
        return True

    def _move(self, p: Particle) -> None:
        m = self.mode
        p.pos = p.pos + p.vel
        p.life -= 0.35
        p.vel = p.vel + np.array([0.0, GRAVITY[m]])
        wobble = 0.008 if m == STRAIGHT else 0.04
        p.vel = rotate(p.vel, self.noise(p.pos[0] * 0.01, p.pos[1] * 0.01, self.frame_count * 0.01) * wobble)
        if m != CENTER_OUT:
            p.vel[0] = max(p.vel[0], 0.6)
        if m == BOUNCE:
            y = p.pos[1]
            if (y < 10 or y > self.height - 10) and not p.bounced:
                p.vel[1] *= -1
                p.bounced = True
            elif 10 <= y <= self.height - 10:
                p.bounced = False

    def _alive(self, p: Particle) -> bool:
        if p.life <= 0:
            return False
        if self.mode == CENTER_OUT:
            x, y = p.pos
            return -20 <= x <= self.width + 20 and -20 <= y <= self.height + 20
        return True

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def update(self) -> None:
        if not self.playing:
            return
        self.time += 1.0 / self.target_fps
        for osc in self.oscillators:
            osc.update(self.time)
            if self.random() < 0.1:
                y = osc.history[int(self.random(len(osc.history)))]
                self.add_particle(self.height / 2 + y, osc.color)
        self.keep_alive(self.particles, self._move)
        self.particles[:] = [p for p in self.particles if self._alive(p)]

    def draw(self, canvas: Canvas) -> None:
        if self.playing:
            canvas.background((0, 0, 0), 20 / 255)
            canvas.line(0, self.height / 2, self.width, self.height / 2, gray(255, 30 / 255))
            for osc in self.oscillators:
                osc.draw(canvas, 50, self.height / 2)
            for p in self.particles:
                canvas.circle(p.pos[0], p.pos[1], p.size, fill=with_alpha(p.color, p.life / 255))
        canvas.rect(self.width - 260, 12, 250, 30, fill=gray(0))
        canvas.text(self.width - 30, 20, f"Mode: {self.mode_name}", fill=gray(255), size=18, anchor="ra")

    def on_mouse_press(self, x: float, y: float) -> None:
        self.playing = not self.playing
        if self.playing:
            self.regenerate()

    def on_key(self, key: str) -> None:
        if key in NEXT_KEYS:
            self.next_mode()
        elif key in PREV_KEYS:
            self.prev_mode()

    def describe(self) -> dict:
        return {
            "mode": self.mode_name,
            "playing": self.playing,
            "particles": len(self.particles),
            "max_particles": self.max_particles,
        }
