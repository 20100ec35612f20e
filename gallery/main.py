#!/usr/bin/env python3
"""Generative Gallery -- CLI Interface.

Renders a sketch headlessly:
1. Steps the chosen artwork for a number of frames
2. Saves every Nth frame as PNG (or the whole run as an animated GIF)
3. Optionally drops into an interactive loop that forwards clicks, drags,
   keys and resizes to the live sketch

Usage:
    python -m gallery.main --list
    python -m gallery.main --sketch flow --frames 120 --every 30
    python -m gallery.main --sketch wfc --interactive
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from gallery import config
from gallery.catalog import ARTWORKS, create_sketch, get_artwork, render_contact_sheet
from gallery.core.sketch import Sketch
from gallery.game2048 import Board2048
from gallery.logging_config import setup_logging

logger = logging.getLogger(__name__)

KEY_ALIASES = {"space": " ", "left": "ArrowLeft", "right": "ArrowRight", "up": "ArrowUp", "down": "ArrowDown"}


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Generative Gallery: headless sketch renderer")
    p.add_argument("--list", action="store_true", help="List the artworks and exit")
    p.add_argument("--sketch", default="flow", help="Artwork slug or index (default: flow)")
    p.add_argument("--frames", type=int, default=60, help="Frames to render (default: 60)")
    p.add_argument("--every", type=int, default=0,
                   help="Save a PNG every N frames (default: 0 = last frame only)")
    p.add_argument("--width", type=int, default=config.DEFAULT_WIDTH, help="Canvas width (default: 800)")
    p.add_argument("--height", type=int, default=config.DEFAULT_HEIGHT, help="Canvas height (default: 600)")
    p.add_argument("--seed", type=int, default=None, help="Random seed (default: none)")
    p.add_argument("--gif", action="store_true", help="Also write the run as an animated GIF")
    p.add_argument("--output", type=Path, default=config.OUTPUT_DIR, help="Output directory")
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    p.add_argument("--interactive", action="store_true", help="Drive the sketch from a prompt after rendering")
    p.add_argument("--contact-sheet", action="store_true", help="Render every artwork into one grid image")
    p.add_argument("--board2048", action="store_true", help="Print a freshly seeded 2048 board and exit")
    return p.parse_args(argv)


def _list_artworks() -> None:
    for art in ARTWORKS:
        print(f"  [{art.index:2d}] {art.slug:<10} {art.title}")


def _save(sketch: Sketch, slug: str, out_dir: Path) -> Path:
    path = out_dir / f"{slug}_{sketch.frame_count:05d}.png"
    sketch.canvas.to_image().save(path)
    return path


def render(sketch: Sketch, slug: str, frames: int, every: int, out_dir: Path, gif: bool) -> list[Path]:
    """Step ``frames`` frames, saving PNGs and optionally a GIF; return written paths."""
    written = []
    gif_frames = []
    for _ in range(frames):
        sketch.step()
        if gif:
            gif_frames.append(sketch.canvas.to_image())
        if every and sketch.frame_count % every == 0:
            written.append(_save(sketch, slug, out_dir))
    if not every or sketch.frame_count % every:
        written.append(_save(sketch, slug, out_dir))
    if gif and gif_frames:
        gif_path = out_dir / f"{slug}.gif"
        gif_frames[0].save(gif_path, save_all=True, append_images=gif_frames[1:],
                           duration=config.GIF_FRAME_MS, loop=0)
        written.append(gif_path)
    logger.info("%s: rendered %d frame(s), dropped %d entit%s", sketch.title, frames,
                sketch.dropped, "y" if sketch.dropped == 1 else "ies")
    return written


def _interactive(sketch: Sketch, slug: str, out_dir: Path) -> None:
    while True:
        path = _save(sketch, slug, out_dir)
        print(f"Frame {sketch.frame_count} -- saved to: {path}")
        stats = sketch.describe()
        if stats:
            print("  " + "  ".join(f"{k}={v}" for k, v in stats.items()))
        print()

        print("Commands:")
        print("  n [k]      -- Step k frames (default 1)")
        print("  c x y      -- Click at (x, y)")
        print("  d x y      -- Drag the pointer to (x, y)")
        print("  k key      -- Press a key (e.g. 'k r', 'k space', 'k right')")
        print("  z w h      -- Resize the canvas")
        print("  e          -- Export the current frame")
        print("  q          -- Quit")
        print()

        try:
            user_input = input("Sketch> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break

        if not user_input:
            continue
        parts = user_input.split()
        cmd = parts[0].lower()

        if cmd == "q":
            print("Exiting.")
            break

        try:
            if cmd == "n":
                sketch.step(int(parts[1]) if len(parts) > 1 else 1)
            elif cmd == "c":
                sketch.click(float(parts[1]), float(parts[2]))
                sketch.step()
            elif cmd == "d":
                sketch.mouse_drag(float(parts[1]), float(parts[2]))
                sketch.step()
            elif cmd == "k":
                key = parts[1] if len(parts) > 1 else "space"
                sketch.key_press(KEY_ALIASES.get(key, key))
                sketch.step()
            elif cmd == "z":
                sketch.resize(int(parts[1]), int(parts[2]))
                sketch.step()
            elif cmd == "e":
                path = out_dir / f"{slug}_export_{sketch.frame_count:05d}.png"
                sketch.canvas.to_image().save(path)
                print(f"  Exported to: {path}")
            else:
                print(f"  Unknown command: {cmd!r}")
        except (ValueError, IndexError) as e:
            print(f"  Error: {e}")


def main(argv=None):
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    if args.list:
        _list_artworks()
        return
    if args.board2048:
        board = Board2048()
        board.init()
        print(board)
        return

    args.output.mkdir(parents=True, exist_ok=True)

    if args.contact_sheet:
        path = args.output / "contact_sheet.png"
        render_contact_sheet(frames=args.frames, seed=args.seed).save(path)
        print(f"Contact sheet saved to: {path}")
        return

    try:
        art = get_artwork(args.sketch)
    except ValueError as e:
        print(f"Error: {e}")
        raise SystemExit(2)

    sketch = create_sketch(art.slug, args.width, args.height, seed=args.seed)
    print(f"=== {art.title} ===")
    print(f"Canvas: {sketch.width}x{sketch.height} | Frames: {args.frames} | Seed: {args.seed}")
    print()

    for path in render(sketch, art.slug, args.frames, args.every, args.output, args.gif):
        print(f"  Saved: {path}")
    print()

    if args.interactive:
        _interactive(sketch, art.slug, args.output)


if __name__ == "__main__":
    main()
