"""Generative Gallery -- Web API Server.

Keeps one live sketch in memory and lets a client pick an artwork, step
it, forward pointer/key/resize events and pull frames back as base64 PNG.

Launch:
    python -m gallery.server
    # or: uvicorn gallery.server:app --reload
"""

from __future__ import annotations

import base64
import io
import logging
import zipfile
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from gallery import config
from gallery.catalog import ARTWORKS, create_sketch, get_artwork
from gallery.core.sketch import KeyEvent, PointerEvent, Sketch
from gallery.game2048 import Board2048
from gallery.logging_config import setup_logging

logger = logging.getLogger(__name__)

MAX_FRAMES_PER_REQUEST = 600
MAX_CANVAS = 4096


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield


app = FastAPI(title="Generative Gallery", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Application state
# ---------------------------------------------------------------------------

class AppState:
    def __init__(self):
        self.slug: str = ARTWORKS[0].slug
        self.width: int = config.DEFAULT_WIDTH
        self.height: int = config.DEFAULT_HEIGHT
        self.seed: int | None = None
        self.sketch_config: dict = {}
        self.sketch: Sketch | None = None
        self.board: Board2048 | None = None

    def initialize(self):
        self.sketch = create_sketch(self.slug, self.width, self.height, seed=self.seed,
                                    config=self.sketch_config)
        logger.info("Loaded %s (%dx%d, seed=%s)", self.sketch.title, self.width, self.height, self.seed)

    def ensure(self) -> Sketch:
        if self.sketch is None:
            self.initialize()
        return self.sketch

    def select(self, sketch: str | int, width: int | None, height: int | None,
               seed: int | None, sketch_config: dict | None):
        """Build the new sketch first; state only changes once it exists."""
        art = get_artwork(sketch)
        width = width or self.width
        height = height or self.height
        sketch_config = sketch_config or {}
        built = create_sketch(art.slug, width, height, seed=seed, config=sketch_config)
        self.slug, self.width, self.height = art.slug, width, height
        self.seed, self.sketch_config = seed, sketch_config
        self.sketch = built
        logger.info("Loaded %s (%dx%d, seed=%s)", built.title, width, height, seed)

    def get_state_payload(self, with_frame: bool = True) -> dict:
        sketch = self.ensure()
        payload = {"slug": self.slug, "seed": self.seed, **sketch.snapshot()}
        if with_frame:
            payload["frame"] = _image_to_base64(sketch.canvas.to_image())
        return payload

    # ---- Export ----

    def export_frame(self) -> tuple[str, str]:
        sketch = self.ensure()
        config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        path = config.OUTPUT_DIR / f"{self.slug}_{sketch.frame_count:05d}.png"
        img = sketch.canvas.to_image()
        img.save(path)
        return str(path), _image_to_base64(img)

    def export_frames_zip(self, frames: int, every: int) -> io.BytesIO:
        """Step the live sketch and return every ``every``-th frame zipped in memory."""
        sketch = self.ensure()
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
            for _ in range(frames):
                sketch.step()
                if sketch.frame_count % every == 0:
                    img_buf = io.BytesIO()
                    sketch.canvas.to_image().save(img_buf, format="PNG")
                    zf.writestr(f"{self.slug}_{sketch.frame_count:05d}.png", img_buf.getvalue())
        buf.seek(0)
        return buf


state = AppState()


def _image_to_base64(img) -> str:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class SelectRequest(BaseModel):
    sketch: str | int
    width: int | None = None
    height: int | None = None
    seed: int | None = None
    config: dict | None = None

class StepRequest(BaseModel):
    frames: int = 1

class PointerRequest(BaseModel):
    kind: str
    x: float
    y: float

class KeyRequest(BaseModel):
    key: str

class ResizeRequest(BaseModel):
    width: int
    height: int


def _bad_size(width: int | None, height: int | None) -> bool:
    return any(v is not None and not (1 <= v <= MAX_CANVAS) for v in (width, height))


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------

@app.get("/api/sketches")
def api_sketches():
    return JSONResponse({"sketches": [a.to_dict() for a in ARTWORKS], "current": state.slug})


@app.get("/api/state")
def api_state():
    return JSONResponse(state.get_state_payload())


@app.post("/api/select")
def api_select(req: SelectRequest):
    if _bad_size(req.width, req.height):
        return JSONResponse({"error": f"Canvas size must be within 1..{MAX_CANVAS}"}, status_code=400)
    try:
        state.select(req.sketch, req.width, req.height, req.seed, req.config)
    except (ValueError, TypeError, ZeroDivisionError) as e:
        return JSONResponse({"error": f"Cannot build sketch: {e}"}, status_code=400)
    return JSONResponse(state.get_state_payload())


@app.post("/api/step")
def api_step(req: StepRequest):
    if not (1 <= req.frames <= MAX_FRAMES_PER_REQUEST):
        return JSONResponse({"error": f"frames must be within 1..{MAX_FRAMES_PER_REQUEST}"}, status_code=400)
    state.ensure().step(req.frames)
    return JSONResponse(state.get_state_payload())


@app.post("/api/pointer")
def api_pointer(req: PointerRequest):
    try:
        state.ensure().dispatch(PointerEvent(req.kind, req.x, req.y))
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    return JSONResponse(state.get_state_payload(with_frame=False))


@app.post("/api/key")
def api_key(req: KeyRequest):
    if not req.key:
        return JSONResponse({"error": "Empty key"}, status_code=400)
    state.ensure().dispatch(KeyEvent(req.key))
    return JSONResponse(state.get_state_payload(with_frame=False))


@app.post("/api/resize")
def api_resize(req: ResizeRequest):
    if _bad_size(req.width, req.height):
        return JSONResponse({"error": f"Canvas size must be within 1..{MAX_CANVAS}"}, status_code=400)
    state.width, state.height = req.width, req.height
    state.ensure().resize(req.width, req.height)
    return JSONResponse(state.get_state_payload())


@app.post("/api/export")
def api_export():
    path, b64 = state.export_frame()
    return JSONResponse({"path": path, "image": b64})


@app.get("/api/export_frames")
def api_export_frames(frames: int = 30, every: int = 1):
    if not (1 <= frames <= MAX_FRAMES_PER_REQUEST) or every < 1:
        return JSONResponse({"error": f"frames must be within 1..{MAX_FRAMES_PER_REQUEST} and every >= 1"},
                            status_code=400)
    buf = state.export_frames_zip(frames, every)
    return StreamingResponse(
        buf,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={state.slug}_frames.zip"},
    )


@app.post("/api/2048/new")
def api_2048_new():
    state.board = Board2048()
    state.board.init()
    return JSONResponse(state.board.to_dict())


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn
    state.initialize()
    print("Starting server at http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
