"""2048 board seeding."""

from __future__ import annotations

import random

from gallery.game2048 import SIZE, Board2048


def test_init_places_two_tiles() -> None:
    board = Board2048(random.Random(0))
    board.init()

    tiles = [v for v in board.cells if v is not None]
    assert len(tiles) == 2
    assert set(tiles) <= {2, 4}
    assert board.score == 0


def test_init_clears_previous_board() -> None:
    board = Board2048(random.Random(1))
    for _ in range(10):
        board.generate_tile()

    board.init()

    assert len(board.empty_cells()) == SIZE * SIZE - 2


def test_generate_tile_until_full() -> None:
    board = Board2048(random.Random(2))
    board.init()

    placed = {board.generate_tile() for _ in range(SIZE * SIZE - 2)}

    assert None not in placed
    assert board.empty_cells() == []
    assert board.generate_tile() is None


def test_to_dict_and_str() -> None:
    board = Board2048(random.Random(3))
    board.init()

    d = board.to_dict()
    assert d["size"] == SIZE and d["score"] == 0
    assert d["cells"] == board.cells and d["cells"] is not board.cells
    lines = str(board).splitlines()
    assert len(lines) == SIZE
    assert sum(line.split().count(".") for line in lines) == SIZE * SIZE - 2
