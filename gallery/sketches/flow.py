"""Fluid Dynamics: paint particles into a switchable flow field.

Press to drop a held cluster on a brush ring, drag to paint more, release
to throw them.  Four buttons cycle flow mode, brush size, colour and trail
length.
"""

from __future__ import annotations

import math

import numpy as np

from gallery.art.compositor import trail_alpha
from gallery.art.palettes import FLOW_COLORS, gray, hsb
from gallery.core.canvas import Canvas
from gallery.core.sketch import Sketch
from gallery.core.ui import Button, ButtonBar
from gallery.core.vectors import TWO_PI, constrain, from_angle, lerp, limit, map_range, random2d


FLOW_MODES = ("perlin", "circular", "gravity", "repel", "wave", "chaos")
POINTER_MODES = ("gravity", "repel")
TIME_MODES = ("perlin", "wave", "chaos")
BRUSH_SIZES = (24, 150, 400)
PARTICLE_LIFETIME_MS = 30000.0
CLICK_INTERVAL_MS = 500.0
RIPPLE_STAGGER_MS = 10.0
RIPPLE_LENGTH_MS = 200.0


class FlowField:
    def __init__(self, width: int, height: int, scl: int = 20):
        self.scl = scl
        self.cols = max(1, width // scl)
        self.rows = max(1, height // scl)
        self.zoff = 0.0
        self.field = np.zeros((self.rows, self.cols, 2))

    def calculate(self, mode: str, noise, pointer: np.ndarray, center: tuple[float, float],
                  np_rng: np.random.Generator) -> None:
        x = np.arange(self.cols, dtype=np.float64)[None, :]
        y = np.arange(self.rows, dtype=np.float64)[:, None]
        px = x * self.scl + self.scl / 2
        py = y * self.scl + self.scl / 2
        mag = 1.0
        if mode == "perlin":
            angle = noise(x * 0.1, y * 0.1, self.zoff) * TWO_PI * 4
        elif mode == "circular":
            angle = np.arctan2(py - center[1], px - center[0]) + math.pi / 2
        elif mode == "gravity":
            angle = np.arctan2(pointer[1] - py, pointer[0] - px)
        elif mode == "repel":
            angle = np.arctan2(pointer[1] - py, pointer[0] - px) + math.pi
        elif mode == "wave":
            angle = np.sin(x * 0.1 + self.zoff) * np.cos(y * 0.1) * math.pi
        elif mode == "chaos":
            angle = noise(x * 0.1, y * 0.1, self.zoff) * TWO_PI * 8
            mag = np_rng.uniform(0.5, 2.0, size=(self.rows, self.cols))
        else:
            raise ValueError(f"Unknown flow mode: {mode!r}. Available: {list(FLOW_MODES)}")
        angle = np.broadcast_to(angle, (self.rows, self.cols))
        self.field = from_angle(angle, mag)

    def update(self, mode: str, noise, pointer, center, np_rng) -> None:
        self.zoff += 0.01
        if mode in TIME_MODES or mode in POINTER_MODES:
            self.calculate(mode, noise, pointer, center, np_rng)

    def lookup(self, pos: np.ndarray) -> np.ndarray:
        col = constrain(int(pos[0] // self.scl), 0, self.cols - 1)
        row = constrain(int(pos[1] // self.scl), 0, self.rows - 1)
        return self.field[row, col].copy()


class FlowParticle:
    def __init__(self, x: float, y: float, color: dict, base_size: float, birth: float):
        self.pos = np.array([x, y], dtype=np.float64)
        self.vel = np.zeros(2)
        self.acc = np.zeros(2)
        self.max_speed = 2.0
        self.h, self.s, self.b = color["h"], color["s"], color["b"]
        self.base_size = base_size
        self.size = base_size
        self.alpha = 0.0
        self.target_alpha = 0.6
        self.birth = birth
        self.held = False
        self.hold_offset = np.zeros(2)
        self.ripple_at: float | None = None


class Cluster:
    def __init__(self, x: float, y: float, birth: float):
        self.center = np.array([x, y], dtype=np.float64)
        self.particles: list[FlowParticle] = []
        self.size_multiplier = 1.0
        self.cohesion = 1.0
        self.birth = birth


class FlowSketch(Sketch):
    title = "Fluid Dynamics"
    background_color = (242, 242, 242)

    def setup(self) -> None:
        cfg = self.config
        self.max_particles: int = cfg.get("max_particles", 500)
        self.initial_particles: int = cfg.get("initial_particles", 200)
        self.flow_mode: str = cfg.get("flow_mode", "perlin")
        if self.flow_mode not in FLOW_MODES:
            raise ValueError(f"Unknown flow mode: {self.flow_mode!r}. Available: {list(FLOW_MODES)}")
        self.brush_size: int = cfg.get("brush_size", BRUSH_SIZES[0])
        self.color_index: int = 0
        self.trail_mode: int = cfg.get("trail_mode", 1)

        self.particles: list[FlowParticle] = []
        self.clusters: list[Cluster] = []
        self.holding = False
        self.hold_start = 0.0
        self.last_click = -CLICK_INTERVAL_MS * 2
        self.click_count = 0

        self.field = FlowField(self.width, self.height)
        self._recalculate_field()
        self.ui = ButtonBar.layout_right(
            self.width, ["flow", "brush", "color", "trail"],
            labels={"flow": "F", "brush": "B", "color": "", "trail": "T"},
        )
        for _ in range(min(self.initial_particles, self.max_particles)):
            self.particles.append(self._new_particle(self.random(self.width), self.random(self.height)))
        self.canvas.background(self.background_color)

    def resized(self) -> None:
        self.field = FlowField(self.width, self.height)
        self._recalculate_field()
        self.ui = ButtonBar.layout_right(self.width, [b.name for b in self.ui.buttons],
                                         labels={b.name: b.label for b in self.ui.buttons})
        self.canvas.background(self.background_color)

    # ------------------------------------------------------------------
    # Field & particles
    # ------------------------------------------------------------------

    @property
    def color(self) -> dict:
        return FLOW_COLORS[self.color_index]

    def set_flow_mode(self, mode: str) -> None:
        if mode not in FLOW_MODES:
            raise ValueError(f"Unknown flow mode: {mode!r}. Available: {list(FLOW_MODES)}")
        self.flow_mode = mode
        self._recalculate_field()

    def _recalculate_field(self) -> None:
        self.field.calculate(self.flow_mode, self.noise, self.mouse,
                             (self.width / 2, self.height / 2), self.np_rng)

    def _new_particle(self, x: float, y: float) -> FlowParticle:
        return FlowParticle(x, y, self.color, self.random(8, 16), self.millis)

    def _follow(self, p: FlowParticle) -> None:
        force = self.field.lookup(p.pos)
        if self.flow_mode in POINTER_MODES:
            d = float(np.hypot(*(p.pos - self.mouse)))
            force = force * map_range(d, 0, 100, 0.5, 0.1)
        elif self.flow_mode == "chaos":
            force = force + random2d(self.np_rng) * 0.2
        p.acc += force

    def _advance(self, p: FlowParticle) -> None:
        self._follow(p)
        if p.held:
            target = self.mouse + p.hold_offset + limit(self.field.lookup(p.pos), 2.0)
            target[0] = constrain(target[0], 0, self.width)
            target[1] = constrain(target[1], 0, self.height)
            p.pos = lerp(p.pos, target, 0.3)
            p.vel[:] = 0.0
            p.acc[:] = 0.0
        else:
            p.vel = limit(p.vel + p.acc, p.max_speed)
            p.pos = p.pos + p.vel
            p.acc[:] = 0.0
        if not np.all(np.isfinite(p.pos)):
            raise FloatingPointError(f"particle left the plane at {p.pos}")
        p.alpha = lerp(p.alpha, p.target_alpha, 0.1)

        if p.pos[0] < 0:
            p.pos[0] = self.width
        if p.pos[0] > self.width:
            p.pos[0] = 0
        if p.pos[1] < 0:
            p.pos[1] = self.height
        if p.pos[1] > self.height:
            p.pos[1] = 0

        if p.ripple_at is not None:
            if self.millis >= p.ripple_at + RIPPLE_LENGTH_MS:
                p.size = p.base_size
                p.ripple_at = None
            elif self.millis >= p.ripple_at:
                p.size = p.base_size * 2

    def _alive(self, p: FlowParticle) -> bool:
        return self.millis - p.birth < PARTICLE_LIFETIME_MS

    def _update_cluster(self, c: Cluster) -> None:
        c.particles = [p for p in c.particles if id(p) in self._live]
        if c.particles:
            c.center = np.mean([p.pos for p in c.particles], axis=0)
        for p in c.particles:
            p.acc += (c.center - p.pos) * 0.001 * c.cohesion
            if p.ripple_at is None:
                p.size = p.base_size * c.size_multiplier

    def _spawn_ring(self, cluster: Cluster | None) -> int:
        spawned = 0
        for i in range(8):
            if len(self.particles) >= self.max_particles:
                break
            angle = (TWO_PI / 8) * i + self.random(-0.2, 0.2)
            radius = self.random(self.brush_size * 0.4, self.brush_size * 0.6)
            x = constrain(self.mouse[0] + math.cos(angle) * radius, 0, self.width)
            y = constrain(self.mouse[1] + math.sin(angle) * radius, 0, self.height)
            p = self._new_particle(x, y)
            self.particles.append(p)
            if cluster is not None:
                cluster.particles.append(p)
            p.held = True
            p.hold_offset = p.pos - self.mouse
            spawned += 1
        return spawned

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def update(self) -> None:
        self.field.update(self.flow_mode, self.noise, self.mouse,
                          (self.width / 2, self.height / 2), self.np_rng)
        while len(self.particles) > self.max_particles:
            self.particles.pop(0)

        self.keep_alive(self.particles, self._advance)
        self.particles[:] = [p for p in self.particles if self._alive(p)]
        self._live = {id(p) for p in self.particles}

        self.keep_alive(self.clusters, self._update_cluster)
        self.clusters[:] = [c for c in self.clusters if c.particles]

        if self.holding and self.mouse_is_pressed and self.clusters \
                and 0 <= self.mouse[0] <= self.width and 0 <= self.mouse[1] <= self.height:
            held_for = self.millis - self.hold_start
            self.clusters[-1].size_multiplier = map_range(math.sin(held_for * 0.002), -1, 1, 0.5, 1.5)

    def draw(self, canvas: Canvas) -> None:
        canvas.background(self.background_color, trail_alpha("flow", self.trail_mode))
        for p in self.particles:
            canvas.circle(p.pos[0], p.pos[1], p.size, fill=hsb(p.h, p.s, p.b, p.alpha))
        self.ui.draw(canvas, icons={"color": self._draw_color_icon, "brush": self._draw_brush_icon})

    def _draw_color_icon(self, canvas: Canvas, b: Button) -> None:
        cx, cy = b.center
        c = self.color
        canvas.rect(cx - 10, cy - 10, 20, 20, fill=hsb(c["h"], c["s"], c["b"]), radius=3)

    def _draw_brush_icon(self, canvas: Canvas, b: Button) -> None:
        cx, cy = b.center
        canvas.circle(cx, cy, map_range(self.brush_size, 24, 400, 8, 20), fill=gray(50))

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_mouse_press(self, x: float, y: float) -> None:
        if self.ui.press(x, y):
            return
        self.holding = True
        self.hold_start = self.millis
        if not (0 <= x <= self.width and 0 <= y <= self.height):
            return
        cluster = Cluster(x, y, self.millis)
        self.clusters.append(cluster)
        if self.millis - self.last_click < CLICK_INTERVAL_MS:
            self.click_count = min(self.click_count + 1, 5)
            cluster.cohesion = map_range(self.click_count, 0, 5, 1, 5)
        else:
            self.click_count = 0
        self.last_click = self.millis
        self._spawn_ring(cluster)

    def on_mouse_drag(self, x: float, y: float) -> None:
        if self.ui.pressed is not None:
            return
        if self.frame_count % 6 == 0 and 0 <= x <= self.width and 0 <= y <= self.height:
            self._spawn_ring(self.clusters[-1] if self.clusters else None)

    def on_mouse_release(self, x: float, y: float) -> None:
        action = self.ui.release(x, y)
        self.holding = False
        if action == "flow":
            self.set_flow_mode(FLOW_MODES[(FLOW_MODES.index(self.flow_mode) + 1) % len(FLOW_MODES)])
        elif action == "brush":
            i = BRUSH_SIZES.index(self.brush_size) if self.brush_size in BRUSH_SIZES else -1
            self.brush_size = BRUSH_SIZES[(i + 1) % len(BRUSH_SIZES)]
        elif action == "color":
            self.color_index = (self.color_index + 1) % len(FLOW_COLORS)
        elif action == "trail":
            self.trail_mode = (self.trail_mode + 1) % 5
        else:
            throw = (self.mouse - self.pmouse) * 0.5
            for p in self.particles:
                if p.held:
                    p.held = False
                    p.vel = throw.copy()

    def on_key(self, key: str) -> None:
        if key == " ":
            for i, p in enumerate(self.particles):
                p.ripple_at = self.millis + i * RIPPLE_STAGGER_MS
        elif key in ("r", "R"):
            for p in self.particles:
                p.vel = random2d(self.np_rng) * self.random(1, 3)

    def describe(self) -> dict:
        return {
            "particles": len(self.particles),
            "max_particles": self.max_particles,
            "clusters": len(self.clusters),
            "flow_mode": self.flow_mode,
            "brush_size": self.brush_size,
            "color": self.color["name"],
            "trail_alpha": trail_alpha("flow", self.trail_mode),
        }
