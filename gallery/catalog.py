"""The gallery index: every artwork in display order."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import Image, ImageDraw

from gallery import config as gallery_config
from gallery.core.sketch import Sketch
from gallery.sketches.botanical import BotanicalSketch
from gallery.sketches.circuit import CircuitSketch
from gallery.sketches.crystals import CrystalsSketch
from gallery.sketches.flow import FlowSketch
from gallery.sketches.geometry import GeometrySketch
from gallery.sketches.nebula import NebulaSketch
from gallery.sketches.origami import OrigamiSketch
from gallery.sketches.prismatic import PrismaticSketch
from gallery.sketches.quantum import QuantumSketch
from gallery.sketches.rain import RainSketch
from gallery.sketches.stringart import StringArtSketch
from gallery.sketches.symphony import SymphonySketch
from gallery.sketches.urban import UrbanSketch
from gallery.sketches.waves import WavesSketch
from gallery.sketches.weather import WeatherSketch
from gallery.sketches.wfc import WFCSketch


@dataclass(frozen=True)
class Artwork:
    index: int
    slug: str
    sketch_cls: type[Sketch]

    @property
    def title(self) -> str:
        return self.sketch_cls.title

    def to_dict(self) -> dict:
        return {"index": self.index, "slug": self.slug, "title": self.title}


ARTWORKS: list[Artwork] = [
    Artwork(i, slug, cls)
    for i, (slug, cls) in enumerate([
        ("flow", FlowSketch),
        ("crystals", CrystalsSketch),
        ("waves", WavesSketch),
        ("botanical", BotanicalSketch),
        ("rain", RainSketch),
        ("weather", WeatherSketch),
        ("circuit", CircuitSketch),
        ("symphony", SymphonySketch),
        ("geometry", GeometrySketch),
        ("nebula", NebulaSketch),
        ("urban", UrbanSketch),
        ("wfc", WFCSketch),
        ("quantum", QuantumSketch),
        ("origami", OrigamiSketch),
        ("stringart", StringArtSketch),
        ("prismatic", PrismaticSketch),
    ])
]

_BY_SLUG = {a.slug: a for a in ARTWORKS}


def get_artwork(slug_or_index: str | int) -> Artwork:
    """Look an artwork up by slug or by its position in the gallery."""
    if isinstance(slug_or_index, int) or (isinstance(slug_or_index, str) and slug_or_index.isdigit()):
        i = int(slug_or_index)
        if 0 <= i < len(ARTWORKS):
            return ARTWORKS[i]
    elif slug_or_index in _BY_SLUG:
        return _BY_SLUG[slug_or_index]
    raise ValueError(f"Unknown artwork: {slug_or_index!r}. Available: {list(_BY_SLUG.keys())}")


def create_sketch(slug_or_index: str | int, width: int = gallery_config.DEFAULT_WIDTH,
                  height: int = gallery_config.DEFAULT_HEIGHT, seed: int | None = None,
                  config: dict | None = None) -> Sketch:
    return get_artwork(slug_or_index).sketch_cls(width, height, seed=seed, config=config)


def render_contact_sheet(frames: int = 30, thumb_size: int = gallery_config.THUMB_SIZE,
                         cols: int = 4, seed: int | None = None) -> Image.Image:
    """Step every artwork ``frames`` frames and tile the results with labels."""
    n = len(ARTWORKS)
    rows = (n + cols - 1) // cols
    padding = 4
    label_h = 18
    cell = thumb_size + padding * 2 + label_h
    sheet = Image.new("RGB", (cols * cell + padding, rows * cell + padding), (30, 30, 30))
    draw = ImageDraw.Draw(sheet)

    for art in ARTWORKS:
        row, col = divmod(art.index, cols)
        sketch = art.sketch_cls(thumb_size, thumb_size, seed=seed)
        img = sketch.step(frames).to_image()
        x = col * cell + padding
        y = row * cell + padding + label_h
        sheet.paste(img, (x, y))
        draw.text((x + 2, y - label_h + 2), f"#{art.index} {art.title}", fill=(180, 180, 180))
    return sheet
