"""Shared on-canvas button bar.

Press captures a button; the action fires on release only if the pointer
is still over that same button.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from gallery.art.palettes import gray
from gallery.core.canvas import Canvas


@dataclass
class Button:
    name: str
    x: float
    y: float
    w: float
    h: float
    label: str = ""
    radius: float = 5.0

    def contains(self, px: float, py: float) -> bool:
        return self.x < px < self.x + self.w and self.y < py < self.y + self.h

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.w / 2, self.y + self.h / 2


class ButtonBar:
    def __init__(self, buttons: list[Button] | None = None):
        self.buttons: list[Button] = buttons or []
        self.pressed: Button | None = None

    @classmethod
    def layout_right(cls, width: float, names: list[str], size: float = 40,
                     margin: float = 10, gaps: dict[str, float] | None = None,
                     labels: dict[str, str] | None = None) -> ButtonBar:
        """A row of square buttons flush against the top-right corner.

        ``names`` run left to right.  ``gaps`` adds extra space to the left
        of the named button, for visually grouping the row.
        """
        gaps = gaps or {}
        labels = labels or {}
        x = width - margin - size
        buttons = []
        for name in reversed(names):
            buttons.append(Button(name, x, margin, size, size, labels.get(name, name[:1].upper())))
            x -= size + margin + gaps.get(name, 0.0)
        buttons.reverse()
        return cls(buttons)

    def get(self, name: str) -> Button:
        for b in self.buttons:
            if b.name == name:
                return b
        raise ValueError(f"Unknown button: {name!r}. Available: {[b.name for b in self.buttons]}")

    def hit(self, x: float, y: float) -> Button | None:
        for b in self.buttons:
            if b.contains(x, y):
                return b
        return None

    def press(self, x: float, y: float) -> bool:
        """Capture the button under the pointer. Returns True if one was hit."""
        self.pressed = self.hit(x, y)
        return self.pressed is not None

    def release(self, x: float, y: float) -> str | None:
        target = self.pressed
        self.pressed = None
        if target is not None and target.contains(x, y):
            return target.name
        return None

    def draw(self, canvas: Canvas,
             icons: dict[str, Callable[[Canvas, Button], None]] | None = None) -> None:
        icons = icons or {}
        for b in self.buttons:
            r = b.radius
            canvas.rect(b.x, b.y, b.w, b.h, fill=gray(230), radius=r)
            canvas.rect(b.x + 1, b.y + 1, b.w - 2, b.h - 2, fill=gray(245), radius=r - 1)
            # bevel
            canvas.rect(b.x + r / 2, b.y + b.h - 3, b.w - r, 3, fill=gray(200), radius=r / 3)
            canvas.rect(b.x + b.w - 3, b.y + r / 2, 3, b.h - r, fill=gray(200), radius=r / 3)
            if b is self.pressed:
                canvas.rect(b.x, b.y, b.w, b.h, fill=gray(0, 0.12), radius=r)
            icon = icons.get(b.name)
            if icon is not None:
                icon(canvas, b)
            elif b.label:
                cx, cy = b.center
                canvas.text(cx, cy, b.label, fill=gray(50), size=14)
