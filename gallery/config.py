"""Global constants and output paths.

Everything here can be overridden per sketch through its ``config`` dict;
these are only the defaults the CLI and the web service start from.
"""

import os
from pathlib import Path

OUTPUT_DIR: Path = Path(os.environ.get("GALLERY_OUTPUT_DIR", "output"))

DEFAULT_WIDTH: int = 800
DEFAULT_HEIGHT: int = 600
TARGET_FPS: float = 60.0
THUMB_SIZE: int = 320
GIF_FRAME_MS: int = 33
