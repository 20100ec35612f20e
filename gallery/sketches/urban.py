"""Urban Sketches: a procedural skyline with power lines and passing birds.

Keys 1-9 pick a palette; a press regenerates the scene.
"""

from __future__ import annotations

import math

from gallery.art.palettes import CITYSCAPE_PALETTES, gray, lerp_color
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import lerp

BUILDING_STYLES = ("modern", "classic", "industrial")


def _c(rgb, alpha: float = 255):
    return int(rgb[0]), int(rgb[1]), int(rgb[2]), int(alpha)


class Building:
    def __init__(self, sketch: Sketch, x: float, y: float, w: float, h: float):
        r = sketch.random
        self.x, self.y, self.w, self.h = x, y, w, h
        self.style = sketch.choice(BUILDING_STYLES)
        rows, cols = int(r(3, 8)), int(r(2, 5))
        win_w = w / (cols * 2)
        win_h = h / (rows * 1.5)
        self.windows = [
            (x + w * 0.2 + j * win_w * 2, y + h * 0.15 + i * win_h * 1.5, win_w, win_h, r() > 0.18)
            for i in range(rows) for j in range(cols)
        ]
        self.antenna = r(20, 50) if r() < 0.4 else None
        self.water_tower = (x + r(10, max(10.0, w - 10)), r(8, 16)) if r() < 0.2 else None

    def draw(self, canvas: Canvas, palette: dict) -> None:
        canvas.rect(self.x, self.y, self.w, self.h, fill=_c(palette["building"], 220),
                    outline=_c(palette["detail"], 60), radius=3)
        for wx, wy, ww, wh, lit in self.windows:
            fill = _c(palette["window"], 210) if lit else _c(palette["building"], 60)
            canvas.rect(wx, wy, ww, wh, fill=fill, radius=2)
        if self.antenna is not None:
            cx = self.x + self.w / 2
            canvas.line(cx, self.y, cx, self.y - self.antenna, _c(palette["detail"], 180), width=2)
        if self.water_tower is not None:
            tx, tr = self.water_tower
            canvas.ellipse(tx, self.y, tr, tr * 1.5, fill=_c(palette["detail"], 160))


class UrbanSketch(Sketch):
    title = "Urban Sketches"

    def setup(self) -> None:
        start = self.config.get("palette", int(self.random(len(CITYSCAPE_PALETTES))))
        self.set_palette(start)

    def set_palette(self, which: int | str) -> None:
        if isinstance(which, str):
            names = [p["name"] for p in CITYSCAPE_PALETTES]
            if which not in names:
                raise ValueError(f"Unknown palette: {which!r}. Available: {names}")
            which = names.index(which)
        if not 0 <= which < len(CITYSCAPE_PALETTES):
            raise ValueError(f"Unknown palette: {which!r}. Available: 0..{len(CITYSCAPE_PALETTES) - 1}")
        self.palette_index = which
        self.palette = CITYSCAPE_PALETTES[which]
        self.generate()

    def generate(self) -> None:
        w, h = self.width, self.height
        self.buildings: list[Building] = []
        x = 0.0
        while x < w:
            bw = self.random(50, 150)
            bh = self.random(100, h * 0.8)
            self.buildings.append(Building(self, x, h - bh, bw, bh))
            x += bw + self.random(-10, 10)

        n_poles = max(4, w // 180)
        spacing = w / (n_poles - 1)
        self.poles = [(i * spacing, h - self.random(180, 260)) for i in range(n_poles)]
        self.power_lines = [
            (p1, p2, self.random(20, 40)) for p1, p2 in zip(self.poles, self.poles[1:])
        ]
        self.birds: list[dict] = []

        self.static = Canvas(w, h)
        sky = self.palette["sky"]
        for y in range(0, h, 2):
            col = lerp_color(_c(sky), (20, 20, 40, 255), y / h * 0.5)
            self.static.line(0, y, w, y, col, width=2)
        for b in self.buildings:
            b.draw(self.static, self.palette)
        for px, py in self.poles:
            self.static.line(px, py, px, h, gray(40), width=3)

    def resized(self) -> None:
        self.generate()

    def _fly(self, bird: dict) -> None:
        bird["x"] += bird["speed"]

    def update(self) -> None:
        if self.random() < 0.02:
            self.birds.append({"x": -20.0, "y": self.random(self.height * 0.3, self.height * 0.6),
                               "speed": self.random(2, 4)})
        self.keep_alive(self.birds, self._fly)
        self.birds[:] = [b for b in self.birds if b["x"] <= self.width + 20]

    def draw(self, canvas: Canvas) -> None:
        canvas.paste(self.static)
        for (x1, y1), (x2, y2), droop in self.power_lines:
            for i in range(3):
                pts = []
                for k in range(11):
                    t = k / 10
                    y = lerp(y1, y2, t) + i * 10 + math.sin(t * math.pi) * droop + self.random(-1, 1)
                    pts.append((lerp(x1, x2, t), y))
                canvas.polyline(pts, gray(40))
        for b in self.birds:
            for _ in range(2):
                o = self.random(-1, 1)
                bx, by = b["x"] + o, b["y"] + o
                canvas.polyline([(bx - 5, by), (bx, by - 3), (bx + 5, by)], gray(40))

    def on_mouse_press(self, x: float, y: float) -> None:
        self.generate()

    def on_key(self, key: str) -> None:
        if len(key) == 1 and "1" <= key <= "9":
            self.set_palette(int(key) - 1)

    def describe(self) -> dict:
        return {
            "palette": self.palette["name"],
            "buildings": len(self.buildings),
            "poles": len(self.poles),
            "birds": len(self.birds),
        }
