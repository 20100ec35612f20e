"""StringArt Portraits: faces woven from strings stretched between pegs.

Each facial feature is a ring (or rectangle, or arc) of pegs.  String ``i``
joins peg ``i % n`` to peg ``floor(i * k) % n`` for the feature's
multiplier ``k``; the strings are revealed progressively as the animation
advances.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from gallery.art.palettes import gray, hsb
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.vectors import TWO_PI

logger = logging.getLogger(__name__)

ANCHOR_POINTS = 120
LAYOUTS = ("circle", "rectangle")

FACE_RANGES = {
    "head_size": (0.6, 0.8),
    "eye_spacing": (0.28, 0.38),
    "eye_size": (0.12, 0.18),
    "nose_length": (0.3, 0.45),
    "mouth_width": (0.32, 0.48),
    "mouth_curve": (0.05, 0.25),
}

# feature -> (multiplier, base iterations, alpha, hue offset, stroke weight)
PATTERNS = {
    "head": (2.0, 60, 0.4, 0, 1.0),
    "eyes": (2.5, 36, 0.5, 60, 0.8),
    "nose": (1.8, 24, 0.6, 120, 0.6),
    "mouth": (3.2, 40, 0.5, 180, 0.7),
    "hair": (1.3, 80, 0.35, 240, 0.5),
}

DURATIONS = (0.6, 1.0, 1.5)
SPEEDS = (0.005, 0.015, 0.03)


# ------------------------------------------------------------------
# Peg layouts
# ------------------------------------------------------------------

def _edge(n: int, start: tuple[float, float], end: tuple[float, float],
          idx: range, denom: int) -> list[tuple[float, float]]:
    denom = max(1, denom)
    return [(start[0] + (end[0] - start[0]) * i / denom,
             start[1] + (end[1] - start[1]) * i / denom) for i in idx]


def create_peg_layout(layout: str, count: int, cx: float = 0.0, cy: float = 0.0,
                      radius: float = 1.0, width: float = 1.0, height: float = 1.0) -> np.ndarray:
    """Return an (N, 2) array of peg positions.

    ``circle`` spaces ``count`` pegs evenly around a circle.  ``rectangle``
    walks the perimeter clockwise from the top-left corner, sharing the
    pegs between edges in proportion to their length; each corner appears
    exactly once.
    """
    if layout == "circle":
        a = np.arange(count) * TWO_PI / count
        return np.stack([cx + np.cos(a) * radius, cy + np.sin(a) * radius], axis=1)
    if layout == "rectangle":
        perimeter = 2 * (width + height)
        horizontal = math.ceil(count * width / perimeter)
        vertical = math.ceil(count * height / perimeter)
        left, right = cx - width / 2, cx + width / 2
        top, bottom = cy - height / 2, cy + height / 2
        pegs = (
            _edge(horizontal, (left, top), (right, top), range(horizontal), horizontal - 1)
            + _edge(vertical, (right, top), (right, bottom), range(1, vertical), vertical)
            + _edge(horizontal, (right, bottom), (left, bottom), range(horizontal - 1), horizontal - 1)
            + _edge(vertical, (left, bottom), (left, top), range(vertical - 1), vertical - 1)
        )
        return np.array(pegs, dtype=np.float64).reshape(-1, 2)
    raise ValueError(f"Unknown peg layout: {layout!r}. Available: {list(LAYOUTS)}")


def string_pairs(n_pegs: int, multiplier: float, count: int) -> np.ndarray:
    """Peg index pairs for the first ``count`` strings, shape (count, 2)."""
    i = np.arange(max(0, int(count)))
    return np.stack([i % n_pegs, np.floor(i * multiplier).astype(int) % n_pegs], axis=1)


def _cycle(options: tuple, current):
    return options[(options.index(current) + 1) % len(options)] if current in options else options[0]


# ------------------------------------------------------------------
# Sketch
# ------------------------------------------------------------------

class StringArtSketch(Sketch):
    title = "StringArt Portraits"

    def setup(self) -> None:
        self.anim_speed: float = self.config.get("anim_speed", SPEEDS[1])
        self.pattern_duration: float = self.config.get("pattern_duration", DURATIONS[1])
        self.new_face()
        self.canvas.background((0, 0, 0))

    def _rand(self, key: str) -> float:
        return self.random(*FACE_RANGES[key])

    def _mouth_curve(self) -> float:
        return self._rand("mouth_curve") * (-1 if self.random() > 0.7 else 1)

    def new_face(self) -> None:
        self.face = {
            "head_size": self._rand("head_size") * min(self.width, self.height),
            "eye_spacing": self._rand("eye_spacing"),
            "eye_size": self._rand("eye_size"),
            "nose_length": self._rand("nose_length"),
            "mouth_width": self._rand("mouth_width"),
            "mouth_curve": self._mouth_curve(),
            "rect_aspect": self.random(0.7, 1.3),
        }
        self.layouts = {
            "head": "rectangle" if self.random() < 0.35 else "circle",
            "mouth": "circle",
            "hair": "circle",
        }
        self.compute_pegs()
        self.progress = 0.0
        self.base_hue = self.random(360)

    def compute_pegs(self) -> None:
        f = self.face
        size = f["head_size"]
        head_r = size / 2
        if self.layouts["head"] == "circle":
            head = create_peg_layout("circle", ANCHOR_POINTS, radius=head_r)
        else:
            head = create_peg_layout("rectangle", ANCHOR_POINTS, width=size * f["rect_aspect"], height=size)

        eye_r = size * f["eye_size"] / 2
        eye_y = -size * 0.1
        eye_x = size * f["eye_spacing"]
        left_eye = create_peg_layout("circle", ANCHOR_POINTS // 2, -eye_x, eye_y, radius=eye_r)
        right_eye = create_peg_layout("circle", ANCHOR_POINTS // 2, eye_x, eye_y, radius=eye_r)

        nose_top = eye_y + eye_r * 1.2
        nose_bottom = nose_top + f["nose_length"] * size
        nose_w = size * 0.25
        n = ANCHOR_POINTS // 8
        t = np.arange(n) / max(1, n - 1)
        nose = np.concatenate([
            np.stack([-nose_w * 0.4 + t * nose_w * 0.8, np.full(n, nose_top)], axis=1),
            np.stack([-nose_w * 0.8 + t * nose_w * 1.6, np.full(n, nose_bottom)], axis=1),
        ])

        mouth_y = size * 0.3
        mouth_w = size * f["mouth_width"]
        mouth_h = size * 0.12
        half = ANCHOR_POINTS // 2
        if self.layouts["mouth"] == "rectangle":
            mouth = create_peg_layout("rectangle", half, 0.0, mouth_y, width=mouth_w, height=mouth_h)
        else:
            a = math.pi + np.arange(half) / (half - 1) * math.pi
            mouth = np.stack([np.cos(a) * mouth_w / 2, mouth_y + np.sin(a) * mouth_h * f["mouth_curve"]], axis=1)

        if self.layouts["hair"] == "circle":
            count = math.ceil(ANCHOR_POINTS * 0.7)
            a = math.pi + np.arange(count) * math.pi / (ANCHOR_POINTS * 0.35)
            r = head_r * (1 + self.np_rng.uniform(-0.15, 0.15, count))
            hair = np.stack([np.cos(a) * r, np.sin(a) * r], axis=1)
        else:
            spikes = []
            for i in range(7):
                spike_h = head_r * 0.4 * (1 + self.random(-0.3, 0.3))
                spikes.append(create_peg_layout("rectangle", 8, (i - 3) * head_r * 0.3, -head_r - spike_h / 2,
                                                width=head_r * 0.15, height=spike_h))
            hair = np.concatenate(spikes)

        self.pegs = {
            "head": [head],
            "eyes": [left_eye, right_eye],
            "nose": [nose],
            "mouth": [mouth],
            "hair": [hair],
        }

    def _reshape(self) -> None:
        self.compute_pegs()
        self.progress = 0.0

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def strings_drawn(self, feature: str) -> int:
        iterations = PATTERNS[feature][1]
        return int(math.floor(math.floor(iterations * self.pattern_duration) * self.progress))

    def update(self) -> None:
        self.progress = min(self.progress + self.anim_speed, 1.0)
        self.base_hue = (self.base_hue + 0.2) % 360

    def draw(self, canvas: Canvas) -> None:
        canvas.background((0, 0, 0), 0.15)
        ox, oy = self.width / 2, self.height / 2
        for feature, (mult, _, alpha, hue_offset, weight) in PATTERNS.items():
            count = self.strings_drawn(feature)
            for pegs in self.pegs[feature]:
                if len(pegs) == 0:
                    continue
                for i, (a, b) in enumerate(string_pairs(len(pegs), mult, count)):
                    p1, p2 = pegs[a], pegs[b]
                    canvas.line(ox + p1[0], oy + p1[1], ox + p2[0], oy + p2[1],
                                hsb((self.base_hue + hue_offset + i * 3) % 360, 80, 90, alpha), width=weight)

        pulse = 24 + 5 * math.sin(self.frame_count * 0.05)
        canvas.circle(ox, 15, pulse, fill=gray(255, 60 / 255))
        canvas.circle(ox, 15, 12, fill=gray(255, 120 / 255))

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_mouse_press(self, x: float, y: float) -> None:
        self.new_face()

    def on_key(self, key: str) -> None:
        k = key.lower()
        if k == "e":
            self.face["eye_size"] = self._rand("eye_size")
            self.face["eye_spacing"] = self._rand("eye_spacing")
            self._reshape()
        elif k == "m":
            self.face["mouth_width"] = self._rand("mouth_width")
            self.face["mouth_curve"] = self._mouth_curve()
            self.layouts["mouth"] = _cycle(LAYOUTS, self.layouts["mouth"])
            self._reshape()
        elif k == "h":
            self.layouts["hair"] = _cycle(LAYOUTS, self.layouts["hair"])
            self._reshape()
        elif k == "c":
            self.base_hue = self.random(360)
        elif k == "l":
            self.layouts["head"] = _cycle(LAYOUTS, self.layouts["head"])
            if self.layouts["head"] == "rectangle":
                self.face["rect_aspect"] = self.random(0.7, 1.3)
            self._reshape()
        elif k == "d":
            self.pattern_duration = _cycle(DURATIONS, self.pattern_duration)
            self.progress = 0.0
            logger.info("String art: pattern detail %.1f", self.pattern_duration)
        elif k == "s":
            self.anim_speed = _cycle(SPEEDS, self.anim_speed)
            self.progress = 0.0
            logger.info("String art: animation speed %.3f", self.anim_speed)
        elif k == " ":
            self.new_face()

    def describe(self) -> dict:
        return {
            "layouts": dict(self.layouts),
            "pegs": {name: sum(len(p) for p in group) for name, group in self.pegs.items()},
            "progress": round(self.progress, 3),
            "pattern_duration": self.pattern_duration,
            "anim_speed": self.anim_speed,
        }
