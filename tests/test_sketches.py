"""Every artwork survives the event loop; caps and layouts hold."""

from __future__ import annotations

import math

import numpy as np
import pytest

from gallery.catalog import ARTWORKS, create_sketch
from gallery.sketches.botanical import BotanicalSketch
from gallery.sketches.circuit import CircuitSketch
from gallery.sketches.crystals import CrystalsSketch
from gallery.sketches.flow import FLOW_MODES, PARTICLE_LIFETIME_MS, FlowSketch
from gallery.sketches.geometry import GeometrySketch
from gallery.sketches.nebula import NebulaSketch
from gallery.sketches.origami import OrigamiSketch
from gallery.sketches.prismatic import PrismaticSketch
from gallery.sketches.quantum import QuantumSketch
from gallery.sketches.rain import RainSketch
from gallery.sketches.stringart import StringArtSketch, create_peg_layout, string_pairs
from gallery.sketches.symphony import BOUNCE, MODES, SymphonySketch
from gallery.sketches.urban import UrbanSketch
from gallery.sketches.waves import WavesSketch
from gallery.sketches.weather import MAX_LIGHTNING_DEPTH, WeatherSketch

KEYS = [" ", "r", "1", "ArrowRight", "ArrowLeft", "e", "m", "h", "l", "c", "d", "s"]


@pytest.mark.parametrize("slug", [a.slug for a in ARTWORKS])
def test_artwork_survives_events_and_resize(slug: str) -> None:
    s = create_sketch(slug, 160, 120, seed=3)

    s.step(3)
    s.mouse_press(80, 60)
    s.step()
    s.mouse_drag(90, 70)
    s.step()
    s.mouse_release(90, 70)
    for key in KEYS:
        s.key_press(key)
    s.step(2)
    s.resize(120, 90)
    s.step(2)

    assert s.canvas.image.size == (120, 90)
    assert s.frame_count == 9
    snap = s.snapshot()
    assert snap["title"] == s.title
    assert isinstance(snap["stats"], dict) and snap["stats"]


def test_flow_particles_never_exceed_cap() -> None:
    s = FlowSketch(200, 150, seed=1, config={"max_particles": 20, "initial_particles": 50})
    assert len(s.particles) == 20

    for i in range(10):
        s.mouse_press(100, 120)
        s.mouse_drag(100 + i, 110)
        s.step()
        s.mouse_release(100 + i, 110)
        assert len(s.particles) <= 20


def test_flow_clusters_only_track_live_particles() -> None:
    s = FlowSketch(200, 150, seed=1, config={"initial_particles": 4})
    s.mouse_press(100, 75)
    cluster = s.clusters[-1]
    assert len(cluster.particles) == 8

    s.particles.remove(cluster.particles[0])
    cluster.particles[1].birth = s.millis - PARTICLE_LIFETIME_MS
    s.step()

    assert len(cluster.particles) == 6
    assert all(p in s.particles for p in cluster.particles)
    assert len(s.particles) == 4 + 6


def test_flow_button_cycles_mode_only_on_same_button() -> None:
    s = FlowSketch(400, 300, seed=1)
    flow = s.ui.get("flow")
    x, y = flow.center

    s.mouse_press(x, y)
    s.mouse_release(x, y)
    assert s.flow_mode == FLOW_MODES[1]

    s.mouse_press(x, y)
    s.mouse_release(*s.ui.get("trail").center)
    assert s.flow_mode == FLOW_MODES[1]


def test_flow_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError, match="Available"):
        FlowSketch(100, 100, config={"flow_mode": "vortex"})


def test_symphony_particle_cap() -> None:
    s = SymphonySketch(200, 150, seed=2, config={"max_particles": 5})

    for _ in range(60):
        s.step()
        assert len(s.particles) <= 5


def test_symphony_arrow_keys_cycle_modes() -> None:
    s = SymphonySketch(200, 150, seed=2)
    start = s.mode

    s.key_press("ArrowRight")
    assert s.mode == (start + 1) % len(MODES)
    s.key_press("left")
    s.key_press("left")
    assert s.mode == (start - 1) % len(MODES)


def test_symphony_click_toggles_playback() -> None:
    s = SymphonySketch(200, 150, seed=2)

    s.click(50, 50)
    assert not s.playing
    s.click(50, 50)
    assert s.playing and s.particles == []


def test_symphony_resume_returns_to_bounce_mode() -> None:
    s = SymphonySketch(200, 150, seed=2)
    s.key_press("ArrowRight")
    assert s.mode == BOUNCE + 1

    s.click(50, 50)
    s.click(50, 50)

    assert s.playing
    assert s.mode == BOUNCE


def test_crystal_cap_holds_under_clicks() -> None:
    s = CrystalsSketch(300, 200, seed=5, config={"max_crystals": 3})

    for i in range(8):
        s.click(20 + i * 10, 150)
        s.step(40)
        assert len(s.crystals) <= 3


def test_nebula_attractor_cap_and_triple_click() -> None:
    s = NebulaSketch(300, 200, seed=6, config={"num_particles": 40, "max_attractors": 2})

    for x in (20, 120, 220):
        s.click(x, 100)
        assert len(s.attractors) <= 2
    assert s.infinite_trails

    s.step(5)
    assert len(s.attractors) <= 2
    assert s.pos.shape == (40, 2)
    assert np.isfinite(s.pos).all()


def test_nebula_drops_non_finite_particles() -> None:
    s = NebulaSketch(100, 100, seed=0, config={"num_particles": 10})
    s.vel[3] = np.nan

    s.step()

    assert s.particle_count == 9
    assert s.dropped == 1


def test_botanical_respects_branch_cap() -> None:
    s = BotanicalSketch(200, 200, seed=4, config={"max_branches": 40})

    s.step(120)

    assert s.describe()["branches"] <= 40


def test_urban_palette_keys() -> None:
    s = UrbanSketch(300, 200, seed=1)

    s.key_press("3")
    assert s.palette_index == 2
    s.key_press("x")
    assert s.palette_index == 2
    with pytest.raises(ValueError, match="Available"):
        s.set_palette("sepia")


def test_origami_scroll_recycles_rows() -> None:
    s = OrigamiSketch(160, 160, seed=1, config={"tile_size": 40})
    rows = s.rows

    s.step(90)

    assert s.recycled == 1
    assert all(len(column) == rows for column in s.tiles)


def test_rectangle_pegs_have_no_duplicate_corners() -> None:
    pegs = create_peg_layout("rectangle", 120, width=100, height=60)

    unique = np.unique(np.round(pegs, 9), axis=0)
    assert len(unique) == len(pegs)
    for corner in ([-50, -30], [50, -30], [50, 30], [-50, 30]):
        assert np.sum(np.all(np.isclose(pegs, corner), axis=1)) == 1


def test_circle_pegs_sit_on_radius() -> None:
    pegs = create_peg_layout("circle", 24, cx=5, cy=-5, radius=10)

    assert pegs.shape == (24, 2)
    np.testing.assert_allclose(np.hypot(pegs[:, 0] - 5, pegs[:, 1] + 5), 10)


def test_unknown_layout_raises() -> None:
    with pytest.raises(ValueError, match="Available"):
        create_peg_layout("hexagon", 10)


def test_string_pairs_follow_multiplier() -> None:
    pairs = string_pairs(10, 2.5, 5)

    np.testing.assert_array_equal(pairs, [[0, 0], [1, 2], [2, 5], [3, 7], [4, 0]])


def test_strings_are_revealed_progressively() -> None:
    s = StringArtSketch(200, 200, seed=1)
    assert s.strings_drawn("head") == 0

    s.step(10)
    partial = s.strings_drawn("head")
    s.step(100)

    assert 0 < partial < s.strings_drawn("head") == 60


def test_stringart_detail_key_cycles() -> None:
    s = StringArtSketch(200, 200, seed=1)

    seen = []
    for _ in range(3):
        s.key_press("d")
        seen.append(s.pattern_duration)

    assert seen == [1.5, 0.6, 1.0]


def test_rain_tops_up_to_full_column_count() -> None:
    s = RainSketch(300, 200, seed=1, config={"low_fps": 0.0})
    assert len(s.drops) < s.max_drops

    s.step()

    assert len(s.drops) == s.max_drops == 18


def test_rain_tops_up_to_seventy_percent_when_degraded() -> None:
    s = RainSketch(300, 200, seed=1, config={"low_fps": 1e9})

    s.step()

    assert s.describe()["degraded"]
    assert len(s.drops) == int(18 * 0.7)


def test_waves_parameters_clamp_to_ranges() -> None:
    s = WavesSketch(800, 600, seed=1)

    s.set_num_waves(0)
    assert len(s.waves) == 1
    s.set_num_waves(99)
    assert len(s.waves) == 30
    s.set_speed(0.0)
    assert s.speed_multiplier == 0.1
    s.set_speed(9.0)
    assert s.speed_multiplier == 3.0
    s.set_thickness(0)
    assert s.thickness == 1
    s.set_thickness(50)
    assert s.thickness == 10
    s.set_amplitude(0.0)
    assert s.amplitude_multiplier == 0.2
    s.set_amplitude(9.0)
    assert s.amplitude_multiplier == 3.0


def test_waves_amplitude_button_scales_live_waves() -> None:
    s = WavesSketch(800, 600, seed=1)
    before = [w.amplitude for w in s.waves]

    s.click(*s.ui.get("amp_more").center)

    assert s.amplitude_multiplier == 1.1
    np.testing.assert_allclose([w.amplitude for w in s.waves], np.array(before) * 1.1)


def test_circuit_energy_decays_and_spreads_to_live_cells() -> None:
    s = CircuitSketch(200, 200, seed=1)
    s.cols, s.rows = 4, 1
    s.types = np.array([["letter"], ["node"], ["empty"], ["power"]], dtype=object)
    s.energy = np.array([[0.0], [1.0], [0.5], [0.0]])

    s.propagate()

    np.testing.assert_allclose(s.energy[:, 0], [0.95 * 0.7, 0.95, 0.5 * 0.95, 0.5 * 0.95 * 0.7])


def test_circuit_empty_cells_do_not_receive_energy() -> None:
    s = CircuitSketch(200, 200, seed=1)
    s.cols, s.rows = 3, 1
    s.types = np.array([["node"], ["empty"], ["node"]], dtype=object)
    s.energy = np.array([[1.0], [0.0], [0.0]])

    for _ in range(3):
        s.propagate()

    assert s.energy[1, 0] == 0.0
    assert s.energy[2, 0] == 0.0


def test_weather_lightning_depth_is_bounded(monkeypatch) -> None:
    s = WeatherSketch(400, 300, seed=1)
    cloud = s.clouds[0]
    cloud.kind = "puff"
    # lower bound everywhere, so every branch forks again
    monkeypatch.setattr(s, "random", lambda a=1.0, b=None: 0.0 if b is None else a)

    cloud.strike()

    assert len(cloud.bolts) == MAX_LIGHTNING_DEPTH + 1
    assert cloud.flashing


def test_weather_fast_vertical_motion_switches_to_rain() -> None:
    s = WeatherSketch(400, 300, seed=1)
    s.mouse_move(50, 20)
    s.step()
    assert s.weather == "rain"

    s.step()
    assert s.weather == "clear"

    s.mouse_move(50, 24)
    s.step()
    assert s.weather == "clear"


def test_quantum_partners_hold_opposite_spin() -> None:
    s = QuantumSketch(400, 300, seed=1)

    s.step(10)

    for a, b in s.pairs:
        assert a.spin_phase - b.spin_phase == pytest.approx(math.pi)


def test_quantum_distant_partner_pulls_back() -> None:
    s = QuantumSketch(600, 400, seed=1)
    a, b = s.pairs[0]
    a.pos, b.pos = np.array([50.0, 50.0]), np.array([450.0, 50.0])
    a.vel = np.zeros(2)

    a.update(600, 400)
    np.testing.assert_allclose(a.acc, [0.1, 0.0])

    b.pos = np.array([100.0, 50.0])
    a.update(600, 400)
    np.testing.assert_allclose(a.vel, [0.1, 0.0])
    np.testing.assert_allclose(a.acc, [0.0, 0.0])


def test_quantum_speed_is_limited() -> None:
    s = QuantumSketch(400, 300, seed=1)
    s.pairs[0][0].vel = np.array([40.0, -30.0])

    s.step(30)

    for pair in s.pairs:
        for p in pair:
            assert np.hypot(*p.vel) <= 5.0 + 1e-9


def test_geometry_links_are_short_and_few() -> None:
    s = GeometrySketch(600, 600, seed=4)
    pts = s.points
    limit = s.base_radius * 0.2

    assert len(pts) == 50
    assert s.connections
    per_point = {}
    for c in s.connections:
        assert np.hypot(*(pts[c["a"]] - pts[c["b"]])) < limit
        per_point[c["a"]] = per_point.get(c["a"], 0) + 1
    assert max(per_point.values()) <= 6


def test_prismatic_crystal_count() -> None:
    assert PrismaticSketch(300, 300, seed=1).describe()["crystals"] == 48
    assert len(PrismaticSketch(300, 300, seed=1, config={"crystals": 12}).prisms) == 12
