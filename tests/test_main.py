"""CLI entry point."""

from __future__ import annotations

import pytest

from gallery import main as cli


def test_list(capsys) -> None:
    cli.main(["--list"])

    out = capsys.readouterr().out
    assert "[ 0] flow" in out
    assert "[15] prismatic" in out


def test_render_last_frame_and_gif(tmp_path) -> None:
    cli.main(["--sketch", "wfc", "--frames", "3", "--width", "80", "--height", "80",
              "--seed", "1", "--gif", "--output", str(tmp_path)])

    assert sorted(p.name for p in tmp_path.iterdir()) == ["wfc.gif", "wfc_00003.png"]


def test_render_every_nth_frame(tmp_path) -> None:
    cli.main(["--sketch", "12", "--frames", "4", "--every", "2", "--width", "80", "--height", "60",
              "--seed", "2", "--output", str(tmp_path)])

    assert sorted(p.name for p in tmp_path.iterdir()) == ["quantum_00002.png", "quantum_00004.png"]


def test_unknown_sketch_exits(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["--sketch", "mandelbrot", "--output", str(tmp_path)])

    assert exc.value.code == 2
    assert "Available" in capsys.readouterr().out


def test_board2048(capsys) -> None:
    cli.main(["--board2048"])

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 4


def test_interactive_loop(tmp_path, monkeypatch, capsys) -> None:
    commands = iter(["n 2", "c 10 10", "k right", "z 60 40", "bogus", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(commands))

    cli.main(["--sketch", "symphony", "--frames", "1", "--width", "80", "--height", "60",
              "--output", str(tmp_path), "--interactive"])

    out = capsys.readouterr().out
    assert "Unknown command: 'bogus'" in out
    assert "Exiting." in out
    assert (tmp_path / "symphony_00006.png").exists()
