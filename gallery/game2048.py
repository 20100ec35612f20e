"""2048 board stub: a 4x4 board that can only be seeded with tiles."""

from __future__ import annotations

import random

SIZE = 4
FOUR_CHANCE = 0.1


class Board2048:
    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()
        self.cells: list[int | None] = [None] * (SIZE * SIZE)
        self.score = 0

    def init(self) -> None:
        """Clear the board and place the two opening tiles."""
        self.cells = [None] * (SIZE * SIZE)
        self.score = 0
        self.generate_tile()
        self.generate_tile()

    def empty_cells(self) -> list[int]:
        return [i for i, v in enumerate(self.cells) if v is None]

    def generate_tile(self) -> int | None:
        """Put a 2 (or, one time in ten, a 4) in a random empty cell.

        Returns the cell index, or None when the board is full.
        """
        empty = self.empty_cells()
        if not empty:
            return None
        index = self.rng.choice(empty)
        self.cells[index] = 4 if self.rng.random() < FOUR_CHANCE else 2
        return index

    def rows(self) -> list[list[int | None]]:
        return [self.cells[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]

    def to_dict(self) -> dict:
        return {"size": SIZE, "score": self.score, "cells": list(self.cells)}

    def __str__(self) -> str:
        return "\n".join(" ".join(f"{v or '.':>4}" for v in row) for row in self.rows())
