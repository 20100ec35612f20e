"""Sketch base class and the frame loop every artwork runs under.

A sketch owns its entities and a :class:`Canvas`.  The host drives it with
``step()`` and the pointer/key methods; subclasses override the hooks
(``setup``, ``update``, ``draw``, ``on_*``).  Clock and pointer state mirror
what a browser sketch would see: ``frame_count``, ``millis``, ``mouse``,
``pmouse`` and ``mouse_is_pressed``.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

import numpy as np

from gallery.core.canvas import Canvas
from gallery.core.noise import PerlinNoise
from gallery import config as gallery_config

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PointerEvent:
    kind: str  # "press" | "drag" | "release" | "move" | "click"
    x: float
    y: float


@dataclass
class KeyEvent:
    key: str


class Sketch:
    title: str = "Untitled"
    background_color: tuple = (0, 0, 0)

    def __init__(self, width: int, height: int, seed: int | None = None,
                 config: dict | None = None):
        cfg = config or {}
        self.config = cfg
        self.seed = seed
        self.target_fps: float = cfg.get("target_fps", gallery_config.TARGET_FPS)

        self.rng = random.Random(seed)
        self.np_rng = np.random.default_rng(seed)
        self.noise = PerlinNoise(seed)

        self.canvas = Canvas(width, height, self.background_color)
        self.width = self.canvas.width
        self.height = self.canvas.height

        self.frame_count: int = 0
        self.millis: float = 0.0
        self.frame_rate: float = float(self.target_fps)
        self._last_tick: float | None = None

        self.mouse = np.zeros(2)
        self.pmouse = np.zeros(2)
        self.moved: bool = False
        self.mouse_is_pressed: bool = False
        self.dropped: int = 0

        self.setup()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def setup(self) -> None:
        pass

    def update(self) -> None:
        pass

    def draw(self, canvas: Canvas) -> None:
        pass

    def resized(self) -> None:
        self.setup()

    def on_mouse_press(self, x: float, y: float) -> None:
        pass

    def on_mouse_drag(self, x: float, y: float) -> None:
        pass

    def on_mouse_release(self, x: float, y: float) -> None:
        pass

    def on_mouse_move(self, x: float, y: float) -> None:
        pass

    def on_key(self, key: str) -> None:
        pass

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def step(self, frames: int = 1) -> Canvas:
        """Advance ``frames`` frames, each one update followed by a draw."""
        for _ in range(max(0, int(frames))):
            self._tick()
            self.update()
            self.draw(self.canvas)
            self.frame_count += 1
            self.millis += 1000.0 / self.target_fps
            self.pmouse = self.mouse.copy()
            self.moved = False
        return self.canvas

    def _tick(self) -> None:
        now = time.perf_counter()
        if self._last_tick is not None:
            elapsed = now - self._last_tick
            if elapsed > 0:
                self.frame_rate = 0.9 * self.frame_rate + 0.1 * (1.0 / elapsed)
        self._last_tick = now

    def _pointer(self, x: float, y: float) -> None:
        self.pmouse = self.mouse.copy()
        self.mouse = np.array([float(x), float(y)])
        self.moved = True

    def mouse_press(self, x: float, y: float) -> None:
        self._pointer(x, y)
        self.mouse_is_pressed = True
        self.on_mouse_press(x, y)

    def mouse_drag(self, x: float, y: float) -> None:
        self._pointer(x, y)
        self.mouse_is_pressed = True
        self.on_mouse_drag(x, y)

    def mouse_release(self, x: float, y: float) -> None:
        self._pointer(x, y)
        self.mouse_is_pressed = False
        self.on_mouse_release(x, y)

    def mouse_move(self, x: float, y: float) -> None:
        self._pointer(x, y)
        self.on_mouse_move(x, y)

    def click(self, x: float, y: float) -> None:
        self.mouse_press(x, y)
        self.mouse_release(x, y)

    def key_press(self, key: str) -> None:
        self.on_key(key)

    def dispatch(self, event: PointerEvent | KeyEvent) -> None:
        if isinstance(event, KeyEvent):
            self.key_press(event.key)
            return
        handler = {
            "press": self.mouse_press,
            "drag": self.mouse_drag,
            "release": self.mouse_release,
            "move": self.mouse_move,
            "click": self.click,
        }.get(event.kind)
        if handler is None:
            raise ValueError(f"Unknown pointer event: {event.kind!r}. "
                             f"Available: ['press', 'drag', 'release', 'move', 'click']")
        handler(event.x, event.y)

    def resize(self, width: int, height: int) -> None:
        self.canvas.resize(width, height)
        self.width = self.canvas.width
        self.height = self.canvas.height
        self.resized()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def random(self, a: float = 1.0, b: float | None = None) -> float:
        """``random(hi)`` or ``random(lo, hi)``."""
        if b is None:
            return self.rng.uniform(0.0, a)
        return self.rng.uniform(a, b)

    def choice(self, seq):
        return self.rng.choice(seq)

    def keep_alive(self, entities: list[T], fn: Callable[[T], object]) -> list[T]:
        """Run ``fn`` on every entity; a raising entity is logged and dropped.

        Mutates ``entities`` in place and returns it.
        """
        survivors = []
        for entity in entities:
            try:
                fn(entity)
            except Exception:
                logger.exception("%s: dropping %s after error",
                                 type(self).__name__, type(entity).__name__)
                self.dropped += 1
                continue
            survivors.append(entity)
        entities[:] = survivors
        return entities

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def describe(self) -> dict:
        return {}

    def snapshot(self) -> dict:
        return {
            "title": self.title,
            "width": self.width,
            "height": self.height,
            "frame_count": self.frame_count,
            "millis": self.millis,
            "frame_rate": round(self.frame_rate, 2),
            "dropped": self.dropped,
            "stats": self.describe(),
        }
