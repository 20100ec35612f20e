"""Harmonic Waves: stacked sine waves with a drifting rainbow hue."""

from __future__ import annotations

import math

from gallery.art.compositor import TRAIL_LADDERS, trail_alpha
from gallery.art.palettes import hsb
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.ui import ButtonBar
from gallery.core.vectors import TWO_PI, constrain, map_range

MIN_WAVES, MAX_WAVES = 1, 30
MIN_SPEED, MAX_SPEED = 0.1, 3.0
MIN_AMP, MAX_AMP = 0.2, 3.0
MIN_THICKNESS, MAX_THICKNESS = 1, 10

BUTTONS = ["speed_less", "speed_more", "stroke_less", "stroke_more", "amp_less",
           "amp_more", "waves_less", "waves_more", "trail", "reset"]
LABELS = {"speed_less": "S-", "speed_more": "S+", "stroke_less": "T-", "stroke_more": "T+",
          "amp_less": "I-", "amp_more": "I+", "waves_less": "W-", "waves_more": "W+",
          "trail": "~", "reset": "R"}
GAPS = {"trail": 6, "waves_less": 6, "amp_less": 6}


class Wave:
    def __init__(self, base_y: float, amplitude: float, frequency: float,
                 base_speed: float, phase: float):
        self.base_y = base_y
        self.amplitude = amplitude
        self.frequency = frequency
        self.base_speed = base_speed
        self.phase = phase
        self.points: list[tuple[float, float]] = []

    def update(self, width: int, speed_multiplier: float) -> None:
        self.phase += self.base_speed * speed_multiplier
        self.points = [
            (x, self.base_y + math.sin(self.phase + (x * self.frequency / width) * TWO_PI) * self.amplitude)
            for x in range(0, width + 1, 10)
        ]


class WavesSketch(Sketch):
    title = "Harmonic Waves"

    def setup(self) -> None:
        cfg = self.config
        self.num_waves: int = constrain(cfg.get("num_waves", 10), MIN_WAVES, MAX_WAVES)
        self.speed_multiplier: float = 1.0
        self.amplitude_multiplier: float = 1.0
        self.thickness: int = 2
        self.trail_mode: int = cfg.get("trail_mode", 3)
        self.ui = ButtonBar.layout_right(self.width, BUTTONS, size=44, margin=12,
                                         gaps=GAPS, labels=LABELS)
        self.reset()

    def resized(self) -> None:
        self.ui = ButtonBar.layout_right(self.width, BUTTONS, size=44, margin=12,
                                         gaps=GAPS, labels=LABELS)
        self.reset()

    def reset(self) -> None:
        self.hue_offset = 0.0
        self.canvas.background(self.background_color)
        h = self.height
        self.waves: list[Wave] = []
        for i in range(self.num_waves):
            if self.num_waves == 1:
                base_y = h * 0.5
            else:
                base_y = map_range(i, 0, self.num_waves - 1, h * 0.25, h * 0.75)
            self.waves.append(Wave(
                base_y,
                self.random(h * 0.02, h * 0.1) * self.amplitude_multiplier,
                self.random(0.3, 1.5),
                self.random(0.005, 0.02),
                self.random(TWO_PI),
            ))

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def set_num_waves(self, n: int) -> None:
        self.num_waves = constrain(int(n), MIN_WAVES, MAX_WAVES)
        self.reset()

    def set_speed(self, v: float) -> None:
        self.speed_multiplier = round(constrain(v, MIN_SPEED, MAX_SPEED), 2)

    def set_amplitude(self, v: float) -> None:
        new = round(constrain(v, MIN_AMP, MAX_AMP), 2)
        ratio = new / self.amplitude_multiplier
        for w in self.waves:
            w.amplitude *= ratio
        self.amplitude_multiplier = new

    def set_thickness(self, v: int) -> None:
        self.thickness = constrain(int(v), MIN_THICKNESS, MAX_THICKNESS)

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def update(self) -> None:
        self.hue_offset += 0.5
        self.keep_alive(self.waves, lambda w: w.update(self.width, self.speed_multiplier))

    def draw(self, canvas: Canvas) -> None:
        canvas.background(self.background_color, trail_alpha("waves", self.trail_mode))
        for i, w in enumerate(self.waves):
            hue = (i * 360 / self.num_waves + self.hue_offset) % 360
            canvas.polyline(w.points, hsb(hue, 80, 95, 0.75), width=self.thickness)
        self.ui.draw(canvas)

    def on_mouse_press(self, x: float, y: float) -> None:
        self.ui.press(x, y)

    def on_mouse_release(self, x: float, y: float) -> None:
        action = self.ui.release(x, y)
        if action == "reset":
            self.reset()
        elif action == "trail":
            self.trail_mode = (self.trail_mode + 1) % len(TRAIL_LADDERS["waves"])
        elif action == "waves_more":
            self.set_num_waves(self.num_waves + 1)
        elif action == "waves_less":
            self.set_num_waves(self.num_waves - 1)
        elif action == "amp_more":
            self.set_amplitude(self.amplitude_multiplier + 0.1)
        elif action == "amp_less":
            self.set_amplitude(self.amplitude_multiplier - 0.1)
        elif action == "stroke_more":
            self.set_thickness(self.thickness + 1)
        elif action == "stroke_less":
            self.set_thickness(self.thickness - 1)
        elif action == "speed_more":
            self.set_speed(self.speed_multiplier + 0.1)
        elif action == "speed_less":
            self.set_speed(self.speed_multiplier - 0.1)

    def describe(self) -> dict:
        return {
            "waves": len(self.waves),
            "speed": self.speed_multiplier,
            "amplitude": self.amplitude_multiplier,
            "thickness": self.thickness,
            "trail_alpha": trail_alpha("waves", self.trail_mode),
        }
