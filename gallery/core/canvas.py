"""Raster canvas the sketches paint into.

A Pillow RGB image with an RGBA draw context, so every primitive is
alpha-blended onto what is already there.  ``background`` with a partial
alpha washes the previous frame toward a colour, which is how the trail
effects are produced.
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from gallery.art.palettes import RGBA


Point = tuple[float, float]


@lru_cache(maxsize=16)
def _font(size: int) -> ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


def _rgb(color) -> tuple[int, int, int]:
    return int(color[0]), int(color[1]), int(color[2])


def _width(w: float) -> int:
    return max(1, int(round(w)))


class Canvas:
    def __init__(self, width: int, height: int, background: tuple = (0, 0, 0)):
        self._bg = _rgb(background)
        self.image = Image.new("RGB", (max(1, int(width)), max(1, int(height))), self._bg)
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def resize(self, width: int, height: int) -> None:
        self.image = Image.new("RGB", (max(1, int(width)), max(1, int(height))), self._bg)
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    # ------------------------------------------------------------------
    # Full-frame operations
    # ------------------------------------------------------------------

    def background(self, color, alpha: float = 1.0) -> None:
        """Clear (alpha 1), fade toward ``color`` (0 < alpha < 1) or no-op (alpha 0)."""
        if alpha <= 0.0:
            return
        solid = Image.new("RGB", self.image.size, _rgb(color))
        if alpha >= 1.0:
            self.image.paste(solid)
        else:
            self.image.paste(Image.blend(self.image, solid, float(alpha)))

    def vertical_gradient(self, top, bottom, y0: int = 0, y1: int | None = None) -> None:
        y1 = self.height if y1 is None else y1
        rows = max(1, y1 - y0)
        t = np.linspace(0.0, 1.0, rows)[:, None]
        top_arr = np.asarray(_rgb(top), dtype=np.float64)
        bot_arr = np.asarray(_rgb(bottom), dtype=np.float64)
        band = top_arr * (1.0 - t) + bot_arr * t
        strip = np.repeat(band[:, None, :], self.width, axis=1).astype(np.uint8)
        self.image.paste(Image.fromarray(strip, "RGB"), (0, int(y0)))

    def paste(self, other: Canvas) -> None:
        if other.image.size != self.image.size:
            self.image.paste(other.image.resize(self.image.size))
        else:
            self.image.paste(other.image)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def ellipse(self, cx: float, cy: float, w: float, h: float,
                fill: RGBA | None = None, outline: RGBA | None = None,
                width: float = 1) -> None:
        if w <= 0 or h <= 0:
            return
        box = [cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2]
        self._draw.ellipse(box, fill=fill, outline=outline, width=_width(width))

    def circle(self, cx: float, cy: float, d: float,
               fill: RGBA | None = None, outline: RGBA | None = None,
               width: float = 1) -> None:
        self.ellipse(cx, cy, d, d, fill=fill, outline=outline, width=width)

    def line(self, x1: float, y1: float, x2: float, y2: float,
             color: RGBA, width: float = 1) -> None:
        self._draw.line([(x1, y1), (x2, y2)], fill=color, width=_width(width))

    def polyline(self, points: list[Point], color: RGBA, width: float = 1,
                 closed: bool = False) -> None:
        if len(points) < 2:
            return
        pts = [(float(x), float(y)) for x, y in points]
        if closed:
            pts.append(pts[0])
        self._draw.line(pts, fill=color, width=_width(width), joint="curve")

    def polygon(self, points: list[Point], fill: RGBA | None = None,
                outline: RGBA | None = None) -> None:
        if len(points) < 3:
            return
        self._draw.polygon([(float(x), float(y)) for x, y in points],
                           fill=fill, outline=outline)

    def rect(self, x: float, y: float, w: float, h: float,
             fill: RGBA | None = None, outline: RGBA | None = None,
             radius: float = 0, width: float = 1) -> None:
        x0, x1 = sorted((x, x + w))
        y0, y1 = sorted((y, y + h))
        if x1 - x0 < 1e-9 or y1 - y0 < 1e-9:
            return
        if radius > 0:
            r = min(radius, (x1 - x0) / 2, (y1 - y0) / 2)
            self._draw.rounded_rectangle([x0, y0, x1, y1], radius=r, fill=fill,
                                         outline=outline, width=_width(width))
        else:
            self._draw.rectangle([x0, y0, x1, y1], fill=fill, outline=outline,
                                 width=_width(width))

    def text(self, x: float, y: float, s: str, fill: RGBA, size: int = 16,
             anchor: str = "mm") -> None:
        self._draw.text((x, y), s, fill=fill, font=_font(int(size)), anchor=anchor)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_image(self) -> Image.Image:
        return self.image.copy()

    def to_array(self) -> np.ndarray:
        """(H, W, 3) float array in [0, 1]."""
        return np.asarray(self.image, dtype=np.float64) / 255.0
