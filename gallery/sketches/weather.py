"""Fractal Clouds: a procedural skyscape with wind, lightning and rain.

A day/night cycle drives the sky gradient, sun, moon and stars.  Fast
vertical pointer motion turns on rain; drops splash into ripples above the
foreground hills.
"""

from __future__ import annotations

import math
import random

import numpy as np

from gallery.art.palettes import hsb, lerp_color, with_alpha
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI, constrain, lerp, rotate


CLOUD_TYPES = ("puff", "wisp", "cumulonimbus")
MAX_LIGHTNING_DEPTH = 4
RAIN_TRIGGER_PX = 5.0
GROUND_OFFSET = 36
STAR_SEED = 42


class Cloud:
    def __init__(self, sketch: "WeatherSketch", x: float, y: float):
        r = sketch.random
        self.sketch = sketch
        self.x, self.y = x, y
        self.size = r(90, 240)
        self.detail = r(0.003, 0.012)
        self.speed = r(0.2, 0.6) * (0.7 + 0.6 * abs(sketch.wind_dir))
        self.offset = r(1000)
        self.alpha = r(120, 220) / 255
        self.kind = sketch.choice(CLOUD_TYPES)
        self.tilt = r(-math.pi / 8, math.pi / 8)
        self.stretch = r(0.8, 1.4)
        self.bolts: list[tuple[np.ndarray, np.ndarray, float]] = []
        self.flash_timer = 0
        self.sheet = False

    @property
    def flashing(self) -> bool:
        return self.flash_timer > 0

    def update(self) -> None:
        sk = self.sketch
        self.x += self.speed * sk.wind_dir * sk.wind_speed * (1.2 if self.kind == "wisp" else 1.0)
        if self.x > sk.width + self.size:
            self.x = -self.size
        if self.x < -self.size:
            self.x = sk.width + self.size

        chance = 0.003 if self.kind == "cumulonimbus" else 0.0005
        if not self.flashing and sk.random() < chance:
            self.strike()
        elif self.flashing:
            self.flash_timer -= 1

    def strike(self) -> None:
        r = self.sketch.random
        self.flash_timer = int(r(8, 16))
        self.bolts = []
        self.sheet = self.kind == "cumulonimbus" and r() < 0.15
        start = np.array([self.x + r(self.size), self.y + self.size / 3])
        self._branch(start, np.array([r(-1, 1), 1.0]), 0)
        if self.kind == "cumulonimbus" and r() < 0.3:
            for _ in range(int(r(1, 3))):
                self._branch(start, np.array([r(-1, 1), 1.0]), 0)

    def _branch(self, start: np.ndarray, direction: np.ndarray, depth: int) -> None:
        if depth > MAX_LIGHTNING_DEPTH:
            return
        r = self.sketch.random
        length = r(20, 50) * (1 - depth / 5)
        end = start + direction * length
        self.bolts.append((start.copy(), end.copy(), r(150, 255) / 255))
        if r() < 0.6:
            self._branch(end, rotate(direction, r(-math.pi / 4, math.pi / 4)), depth + 1)

    def _layer_colors(self, t: float):
        if self.kind == "cumulonimbus":
            return lerp_color(hsb(210, 10, 100), hsb(220, 18, 30), t)
        if self.kind == "wisp":
            return lerp_color(hsb(210, 5, 100), hsb(210, 10, 70), t)
        return lerp_color(hsb(210, 10, 100), hsb(220, 30, 60), t)

    def draw(self, canvas: Canvas) -> None:
        sk = self.sketch
        fc = sk.frame_count
        a = np.arange(0.0, TWO_PI, 0.1)
        for i in range(5):
            size = self.size * (1 - i / 5) * (self.stretch if self.kind == "wisp" else 1.0)
            alpha = self.alpha * (1 - i / 5)
            xoff = (np.cos(a) + 1) / 2 * self.detail
            yoff = (np.sin(a) + 1) / 2 * self.detail
            rad = size * (0.7 + sk.noise(xoff + self.offset, yoff + self.offset, fc * 0.001 + i * 0.1) * 0.3)
            x = self.x + np.cos(a + self.tilt) * rad + i * 6 * math.sin(fc * 0.002 + self.offset)
            y = self.y + np.sin(a + self.tilt) * rad + i * 2 * math.cos(fc * 0.001 + self.offset)
            if self.kind == "wisp":
                x = x + 20 * np.sin(a) * self.stretch
            if self.kind == "cumulonimbus":
                y = y - 10 * np.sin(a) ** 6
            canvas.polygon(list(zip(x.tolist(), y.tolist())),
                           fill=with_alpha(self._layer_colors(i / 5), alpha))

        if self.flashing:
            wash = 60 if self.sheet else 30
            canvas.rect(0, 0, sk.width, sk.height, fill=(220, 230, 255, wash))
            weight = 3 if self.kind == "cumulonimbus" else 2
            for start, end, alpha in self.bolts:
                canvas.line(start[0], start[1], end[0], end[1],
                            (200, 220, 255, int(alpha * 255)), width=weight)


class Raindrop:
    def __init__(self, sketch: "WeatherSketch"):
        r = sketch.random
        self.sketch = sketch
        angle = r(-math.pi / 16, math.pi / 16) + sketch.wind_dir * sketch.wind_speed * 0.12
        self.length = r(10, 22)
        self.x = r(sketch.width)
        self.y = r(sketch.height / 2, sketch.height / 2 + 100)
        self.speed = r(8, 16) + sketch.wind_speed * 0.7
        self.alpha = r(100, 200) / 255
        self.wind_x = math.tan(angle) * self.length * 0.7
        self.splashed = False
        self.ripples = 0
        self.ripple_radius = 0.0

    @property
    def finished(self) -> bool:
        if self.splashed:
            return self.ripple_radius > 30
        return self.y > self.sketch.height + 10

    def update(self) -> None:
        h = self.sketch.height
        self.x += self.wind_x
        self.y += self.speed
        if not self.splashed and self.y + self.length > h - GROUND_OFFSET:
            self.splashed = True
            self.ripples = int(self.sketch.random(2, 5))
            self.ripple_radius = 0.0
        if self.splashed:
            self.ripple_radius += 1.7

    def draw(self, canvas: Canvas) -> None:
        if not self.splashed:
            canvas.line(self.x, self.y, self.x + self.wind_x, self.y + self.length,
                        (200, 220, 255, int(self.alpha * 255)), width=1.4)
            return
        ground = self.sketch.height - GROUND_OFFSET
        for j in range(self.ripples):
            canvas.ellipse(self.x + self.wind_x, ground, self.ripple_radius + j * 5, 7 + j * 2,
                           outline=(200, 220, 255, 80))


class WeatherSketch(Sketch):
    title = "Fractal Clouds"

    def setup(self) -> None:
        self.low_fps: float = self.config.get("low_fps", 40.0)
        self.wind_speed = 1.0
        self.wind_dir = 1.0
        self.sky_phase = 0.0
        self.time_of_day = self.config.get("time_of_day", 0.0)
        self.weather = "clear"
        self.last_mouse_y = float(self.mouse[1])
        self.max_clouds = 9
        self.max_raindrops = 300
        self.raindrops: list[Raindrop] = []
        self.clouds: list[Cloud] = []
        for i in range(8):
            y = self.random(self.height / 4, self.height / 2)
            if i % 4 == 0:
                y -= 40
            self.clouds.append(Cloud(self, self.random(self.width), y))
        self._place_stars()

    def _place_stars(self) -> None:
        star_rng = random.Random(STAR_SEED)
        self.stars = [
            (star_rng.uniform(0, self.width), star_rng.uniform(0, self.height * 0.7),
             star_rng.uniform(1, 2.6), star_rng.uniform(120, 200) / 255)
            for _ in range(120)
        ]

    # ------------------------------------------------------------------
    # Sky
    # ------------------------------------------------------------------

    @property
    def day_amount(self) -> float:
        return constrain((math.cos(self.time_of_day) + 1) / 2, 0.0, 1.0)

    def sky_colors(self):
        p, day = self.sky_phase, self.day_amount
        if self.weather == "storm":
            top = lerp_color(hsb(220, 40, 18 + 12 * math.sin(p)), hsb(210, 40, 10), 1 - day)
            bottom = lerp_color(hsb(220, 30, 35 + 10 * math.sin(p)), hsb(210, 20, 30), 1 - day)
        elif day < 0.15:
            top = hsb(240, 30, 8 + 8 * math.sin(p))
            bottom = hsb(220, 20, 18 + 6 * math.sin(p))
        else:
            top = hsb(200, 40, 90 + 8 * math.sin(p))
            bottom = hsb(210, 20, 60 + 10 * math.sin(p))
        return top, bottom

    def _draw_sun_moon(self, canvas: Canvas) -> None:
        amt, c = self.day_amount, math.cos(self.time_of_day)
        w, h = self.width, self.height
        if amt > 0.15:
            sx, sy = lerp(w * 0.12, w * 0.88, amt), h * 0.18 - 0.13 * h * c
            canvas.circle(sx, sy, 140, fill=hsb(55, 60, 100, 120 / 255))
            canvas.circle(sx, sy, 80, fill=hsb(55, 100, 100, 170 / 255))
        if amt < 0.85:
            mx, my = lerp(w * 0.88, w * 0.12, amt), h * 0.18 + 0.13 * h * c
            canvas.circle(mx, my, 100, fill=hsb(210, 5, 100, 80 / 255))
            canvas.circle(mx, my, 60, fill=hsb(210, 10, 100, 120 / 255))

    def _draw_foreground(self, canvas: Canvas) -> None:
        xs = np.arange(0, self.width + 1, 18, dtype=np.float64)
        ys = self.height - 40 - 28 * self.noise(xs * 0.012, self.frame_count * 0.004)
        pts = [(0.0, float(self.height))] + list(zip(xs.tolist(), ys.tolist())) \
            + [(float(self.width), float(self.height))]
        canvas.polygon(pts, fill=hsb(140, 30, 15, 250 / 255))

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def update(self) -> None:
        self.sky_phase += 0.005
        self.time_of_day = (self.time_of_day + 0.0007) % TWO_PI

        fc = self.frame_count
        self.wind_speed = lerp(self.wind_speed, 1 + self.noise(fc * 0.002) * 3, 0.02)
        target_dir = 1.0 if math.sin(self.time_of_day + self.noise(fc * 0.001)) > 0 else -1.0
        self.wind_dir = lerp(self.wind_dir, target_dir, 0.01)

        mouse_y = float(self.mouse[1])
        self.weather = "rain" if abs(mouse_y - self.last_mouse_y) > RAIN_TRIGGER_PX else "clear"
        self.last_mouse_y = mouse_y

        degraded = self.frame_rate < self.low_fps
        self.max_clouds = 4 if degraded else 9
        self.max_raindrops = 120 if degraded else 300
        if len(self.clouds) > self.max_clouds:
            del self.clouds[self.max_clouds:]

        self.keep_alive(self.clouds, Cloud.update)

        if self.weather == "rain" and len(self.raindrops) < self.max_raindrops and self.random() < 0.4:
            self.raindrops.append(Raindrop(self))
        self.keep_alive(self.raindrops, Raindrop.update)
        self.raindrops[:] = [d for d in self.raindrops if not d.finished]
        if self.weather == "rain" and len(self.raindrops) > self.max_raindrops // 2:
            self.weather = "storm"

    def draw(self, canvas: Canvas) -> None:
        top, bottom = self.sky_colors()
        canvas.vertical_gradient(top, bottom)
        self._draw_sun_moon(canvas)
        if math.cos(self.time_of_day) < -0.2:
            for x, y, s, a in self.stars:
                canvas.circle(x, y, s, fill=hsb(220, 10, 100, a))
        if self.weather != "clear":
            for d in self.raindrops:
                d.draw(canvas)
        for c in self.clouds:
            c.draw(canvas)
        self._draw_foreground(canvas)

    def describe(self) -> dict:
        return {
            "weather": self.weather,
            "clouds": len(self.clouds),
            "raindrops": len(self.raindrops),
            "lightning": sum(1 for c in self.clouds if c.flashing),
            "time_of_day": round(self.time_of_day, 4),
            "wind_speed": round(self.wind_speed, 3),
        }
