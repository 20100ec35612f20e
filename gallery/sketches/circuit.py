"""Circuit Poetry: a glyph grid where energy pulses between wired cells.

Cell energy decays each frame and spreads to non-empty 4-neighbours.
Random node activations draw short-lived wavy wires.
"""

from __future__ import annotations

import math

import numpy as np

from gallery.art.palettes import CIRCUIT_PALETTES, get_circuit_palette, hsb, lerp_color, with_alpha
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI, dist, lerp

WORDS = [
    "dream", "flow", "pulse", "echo", "sync", "wave", "node", "path",
    "data", "time", "space", "light", "spark", "code", "loop", "link", "core", "trace", "glow", "shift",
]
SYMBOLS = list("⊕⊗⊙◊○□△▽∑≡≜∿∩∫⨀⧫◆◇✦✧✩✪✫✬✭✮★☆☀☁☯☢☣☮☾☽✶✹✺✻✼✽✾✿❀❁❂❃❄❅❆❇❈❉❊❋☘☙☼☄")
CELL_TYPES = ["node", "power", "switch", "glitch", "empty", "empty", "empty"]
DECAY = 0.95
SPREAD = 0.7
ENERGY_FLOOR = 1e-3
NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Connection:
    def __init__(self, start: tuple[int, int], end: tuple[int, int], life: float, offset: float):
        self.start = start
        self.end = end
        self.life = life
        self.offset = offset


class CircuitSketch(Sketch):
    title = "Circuit Poetry"

    def setup(self) -> None:
        self.palette_name: str = self.config.get("palette") or self.choice(list(CIRCUIT_PALETTES))
        self.regenerate(self.palette_name)

    def regenerate(self, palette: str | None = None) -> None:
        self.palette_name = palette or self.choice(list(CIRCUIT_PALETTES))
        self.palette = get_circuit_palette(self.palette_name)
        self.circle_size = 420 * self.random(0.85, 1.15)
        self.cell_size = int(self.random(32, 54))
        self.off_x = int(self.random(-10, 10))
        self.off_y = int(self.random(-10, 10))
        self.cols = max(1, math.ceil((self.width - self.off_x * 2) / self.cell_size))
        self.rows = max(1, math.ceil((self.height - self.off_y * 2) / self.cell_size))

        self.types = np.array([[self.choice(CELL_TYPES) for _ in range(self.rows)]
                               for _ in range(self.cols)], dtype=object)
        self.content = np.array([[self.choice(SYMBOLS) for _ in range(self.rows)]
                                 for _ in range(self.cols)], dtype=object)
        self.energy = np.zeros((self.cols, self.rows))
        self.connections: list[Connection] = []
        self._lay_words()
        self.canvas.background(self.palette["bg"])

    def _lay_words(self) -> None:
        for word in WORDS:
            n = len(word)
            if self.random() < 0.5:
                if n > self.cols:
                    continue
                x = int(self.random(self.cols - n + 1)) if self.cols > n else 0
                y = int(self.random(self.rows))
                cells = [(x + i, y) for i in range(n)]
            else:
                if n > self.rows:
                    continue
                x = int(self.random(self.cols))
                y = min(int(self.random(self.rows)), self.rows - n)
                cells = [(x, y + i) for i in range(n)]
            for (cx, cy), ch in zip(cells, word):
                self.types[cx, cy] = "letter"
                self.content[cx, cy] = ch

    # ------------------------------------------------------------------
    # Energy
    # ------------------------------------------------------------------

    def neighbours(self, x: int, y: int) -> list[tuple[int, int]]:
        return [(x + dx, y + dy) for dx, dy in NEIGHBOURS
                if 0 <= x + dx < self.cols and 0 <= y + dy < self.rows]

    def propagate(self) -> None:
        e = self.energy * DECAY
        e[e < ENERGY_FLOOR] = 0.0
        spread = np.zeros_like(e)
        spread[1:, :] = np.maximum(spread[1:, :], e[:-1, :])
        spread[:-1, :] = np.maximum(spread[:-1, :], e[1:, :])
        spread[:, 1:] = np.maximum(spread[:, 1:], e[:, :-1])
        spread[:, :-1] = np.maximum(spread[:, :-1], e[:, 1:])
        live = self.types != "empty"
        self.energy = np.where(live, np.maximum(e, spread * SPREAD), e)

    def activate(self, x: int, y: int) -> bool:
        if self.types[x, y] != "node":
            return False
        self.energy[x, y] = 1.0
        for nx, ny in self.neighbours(x, y):
            if self.types[nx, ny] != "empty" and self.random() < 0.5:
                self.connections.append(Connection((x, y), (nx, ny), self.random(30, 60), self.random(TWO_PI)))
        return True

    def _age(self, conn: Connection) -> None:
        conn.life -= 1

    def update(self) -> None:
        self.propagate()
        self.keep_alive(self.connections, self._age)
        self.connections[:] = [c for c in self.connections if c.life > 0]
        if self.random() < 0.05:
            self.activate(int(self.random(self.cols)), int(self.random(self.rows)))

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def cell_center(self, i: int, j: int) -> tuple[float, float]:
        return (i * self.cell_size + self.cell_size / 2 + self.off_x,
                j * self.cell_size + self.cell_size / 2 + self.off_y)

    def draw(self, canvas: Canvas) -> None:
        pal, fc = self.palette, self.frame_count
        for i in range(0, 40, 4):
            r = self.circle_size * i / 40
            t = math.sin(fc * 0.003 + i) * 0.5 + 0.5
            canvas.circle(self.width / 2, self.height / 2, r, fill=with_alpha(lerp_color(pal["bg"], pal["energy"], t), 0.03))

        for i in range(self.cols):
            for j in range(self.rows):
                kind = self.types[i, j]
                if kind == "empty":
                    continue
                x, y = self.cell_center(i, j)
                e = float(self.energy[i, j])
                if e > 0.1:
                    glow = lerp_color(pal["energy"], (255, 255, 255, 255), 0.5 + 0.5 * math.sin(fc * 0.04 + i + j))
                    canvas.circle(x, y, e * 26 + (12 if kind == "power" else 0), fill=with_alpha(glow, 0.55))
                base = {"power": pal["energy"], "switch": pal["wire"], "glitch": hsb(0, 100, 100)}.get(kind, pal["node"])
                color = lerp_color(base, pal["letter"], e)
                if kind == "glitch":
                    color = hsb(self.random(360), 100, 100)
                canvas.text(x, y, self.content[i, j], fill=color, size=20 if kind == "node" else 16)

        for conn in self.connections:
            x1, y1 = self.cell_center(*conn.start)
            x2, y2 = self.cell_center(*conn.end)
            d = dist(x1, y1, x2, y2) or 1.0
            thick = 1.5 + 2.5 * self.noise(conn.offset + fc * 0.01)
            pts = []
            for k in range(11):
                t = k / 10
                off = math.sin(t * math.pi + fc * 0.1 + conn.offset) * 5
                pts.append((lerp(x1, x2, t) + off * (y2 - y1) / d, lerp(y1, y2, t) - off * (x2 - x1) / d))
            canvas.polyline(pts, pal["wire"], width=thick)

    def on_mouse_press(self, x: float, y: float) -> None:
        self.regenerate()

    def describe(self) -> dict:
        return {
            "palette": self.palette_name,
            "cols": self.cols,
            "rows": self.rows,
            "energized": int(np.count_nonzero(self.energy > 0.1)),
            "connections": len(self.connections),
        }
