"""Frame compositing.

Blend an off-screen layer onto a canvas with a blend mode and opacity,
and the trail-alpha ladders the particle sketches step through.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from gallery.core.canvas import Canvas

# Background wash alpha per trail mode; 0 keeps every previous frame.
TRAIL_LADDERS: dict[str, list[float]] = {
    "flow": [1.0, 0.5, 0.2, 0.05, 0.0],
    "waves": [1.0, 0.5, 0.2, 0.08, 0.03, 0.0],
}

BLEND_MODES = ("normal", "multiply", "screen", "overlay")


def trail_alpha(ladder: str, mode: int) -> float:
    if ladder not in TRAIL_LADDERS:
        raise ValueError(f"Unknown trail ladder: {ladder!r}. Available: {list(TRAIL_LADDERS.keys())}")
    steps = TRAIL_LADDERS[ladder]
    return steps[mode % len(steps)]


def composite_layer(
    canvas: Canvas,
    layer: Canvas,
    opacity: float = 1.0,
    blend: str = "normal",
    mask: np.ndarray | None = None,
) -> None:
    """Composite ``layer`` onto ``canvas`` in place.

    Args:
        canvas: Destination, modified in place.
        layer: Source canvas; resized if its size differs.
        opacity: Overall opacity in [0, 1].
        blend: "normal", "multiply", "screen" or "overlay".
        mask: Optional (H, W) per-pixel alpha in [0, 1].
    """
    if blend not in BLEND_MODES:
        raise ValueError(f"Unknown blend mode: {blend!r}. Available: {list(BLEND_MODES)}")
    base = canvas.to_array()
    top_img = layer.image
    if top_img.size != canvas.image.size:
        top_img = top_img.resize(canvas.image.size)
    top = np.asarray(top_img, dtype=np.float64) / 255.0

    if mask is None:
        alpha = np.full(base.shape[:2] + (1,), float(opacity))
    else:
        alpha = np.clip(mask, 0.0, 1.0)[..., None] * float(opacity)

    blended = _blend(base, top, blend)
    out = np.clip(base * (1.0 - alpha) + blended * alpha, 0.0, 1.0)
    canvas.image.paste(Image.fromarray((out * 255.0).round().astype(np.uint8), "RGB"))


def luminance_mask(layer: Canvas) -> np.ndarray:
    """Per-pixel brightness of ``layer`` as an alpha mask."""
    return np.mean(layer.to_array(), axis=2)


def _blend(base: np.ndarray, top: np.ndarray, mode: str) -> np.ndarray:
    """Apply a blend mode between base and top layers."""
    if mode == "normal":
        return top
    elif mode == "multiply":
        return base * top
    elif mode == "screen":
        return 1.0 - (1.0 - base) * (1.0 - top)
    elif mode == "overlay":
        # Overlay: multiply where base < 0.5, screen where base >= 0.5
        return np.where(
            base < 0.5,
            2.0 * base * top,
            1.0 - 2.0 * (1.0 - base) * (1.0 - top),
        )
    else:
        return top
