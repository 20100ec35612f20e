"""Wave function collapse over a small tile grid.

Every cell starts with all patterns as options.  Each step collapses the
uncollapsed cell with the fewest options to one of them and propagates the
reduction to its 4-neighbours until nothing changes.  A cell left with no
options is a contradiction: the grid restarts, and once the restart budget
is spent the contradicted cells are filled with a fallback pattern instead.
"""

from __future__ import annotations

import logging
import random

import numpy as np

logger = logging.getLogger(__name__)

PATTERNS = ("empty", "dot", "line", "corner", "cross", "curve")

# Patterns allowed next to the keyed (centre) pattern.
RULES = {
    "empty": ("dot", "line", "corner", "cross", "curve"),
    "dot": ("empty", "line", "corner"),
    "line": ("empty", "dot", "cross"),
    "corner": ("empty", "dot", "cross"),
    "cross": ("empty", "line", "corner"),
    "curve": ("empty", "line", "corner"),
}

NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def compatibility(patterns=PATTERNS, rules=RULES) -> np.ndarray:
    """Boolean (P, P) matrix: ``m[a, b]`` when a and b may sit side by side.

    A pair is allowed only when each pattern's rule lists the other, so the
    matrix is symmetric.
    """
    index = {p: i for i, p in enumerate(patterns)}
    allowed = np.zeros((len(patterns), len(patterns)), dtype=bool)
    for centre, neighbours in rules.items():
        if centre not in index:
            raise ValueError(f"Unknown pattern in rules: {centre!r}. Available: {list(patterns)}")
        for n in neighbours:
            if n not in index:
                raise ValueError(f"Unknown pattern in rules: {n!r}. Available: {list(patterns)}")
            allowed[index[centre], index[n]] = True
    return allowed & allowed.T


class WaveFunctionCollapse:
    def __init__(
        self,
        cols: int,
        rows: int,
        rng: random.Random | None = None,
        patterns: tuple[str, ...] = PATTERNS,
        rules: dict | None = None,
        max_restarts: int = 10,
        fallback: str = "empty",
    ):
        if fallback not in patterns:
            raise ValueError(f"Unknown fallback pattern: {fallback!r}. Available: {list(patterns)}")
        self.cols = max(1, int(cols))
        self.rows = max(1, int(rows))
        self.rng = rng or random.Random()
        self.patterns = tuple(patterns)
        self.compat = compatibility(self.patterns, RULES if rules is None else rules)
        self.max_restarts = max_restarts
        self.fallback = self.patterns.index(fallback)

        self.restarts = 0
        self.fallbacks = 0
        self.steps = 0
        self.reset()

    # ------------------------------------------------------------------
    # Grid state
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.options = np.ones((self.cols, self.rows, len(self.patterns)), dtype=bool)
        self.collapsed = np.zeros((self.cols, self.rows), dtype=bool)
        self.forced = np.zeros((self.cols, self.rows), dtype=bool)
        self.stack: list[tuple[int, int]] = []

    @property
    def entropy(self) -> np.ndarray:
        """Remaining option count per cell, shape (cols, rows)."""
        return self.options.sum(axis=2)

    def neighbours(self, x: int, y: int) -> list[tuple[int, int]]:
        return [(x + dx, y + dy) for dx, dy in NEIGHBOURS
                if 0 <= x + dx < self.cols and 0 <= y + dy < self.rows]

    def is_complete(self) -> bool:
        return bool(self.collapsed.all())

    def values(self) -> list[list[str | None]]:
        """Pattern name per cell (``None`` while uncollapsed), indexed [x][y]."""
        out = []
        for x in range(self.cols):
            column = []
            for y in range(self.rows):
                if self.collapsed[x, y]:
                    column.append(self.patterns[int(np.argmax(self.options[x, y]))])
                else:
                    column.append(None)
            out.append(column)
        return out

    def violations(self) -> list[tuple[tuple[int, int], tuple[int, int]]]:
        """Adjacent collapsed pairs the rules forbid, ignoring fallback cells."""
        bad = []
        value = np.argmax(self.options, axis=2)
        for x in range(self.cols):
            for y in range(self.rows):
                if not self.collapsed[x, y] or self.forced[x, y]:
                    continue
                for nx, ny in ((x + 1, y), (x, y + 1)):
                    if nx >= self.cols or ny >= self.rows:
                        continue
                    if not self.collapsed[nx, ny] or self.forced[nx, ny]:
                        continue
                    if not self.compat[value[x, y], value[nx, ny]]:
                        bad.append(((x, y), (nx, ny)))
        return bad

    # ------------------------------------------------------------------
    # Algorithm
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Clear the grid, collapse one random cell and propagate."""
        self.reset()
        x, y = self.rng.randrange(self.cols), self.rng.randrange(self.rows)
        self.collapse(x, y)
        self._settle()

    def find_lowest_entropy(self) -> tuple[int, int] | None:
        ent = self.entropy
        open_cells = ~self.collapsed & (ent > 0)
        if not open_cells.any():
            return None
        lowest = ent[open_cells].min()
        candidates = np.argwhere(open_cells & (ent == lowest))
        x, y = candidates[self.rng.randrange(len(candidates))]
        return int(x), int(y)

    def collapse(self, x: int, y: int) -> str:
        choices = np.flatnonzero(self.options[x, y])
        if len(choices) == 0:
            raise ValueError(f"Cell ({x}, {y}) has no options left")
        v = int(choices[self.rng.randrange(len(choices))])
        self.options[x, y] = False
        self.options[x, y, v] = True
        self.collapsed[x, y] = True
        self.stack.append((x, y))
        return self.patterns[v]

    def propagate(self) -> list[tuple[int, int]]:
        """Drain the stack; return the cells left with no options."""
        contradictions = []
        while self.stack:
            x, y = self.stack.pop()
            supported = self.compat[self.options[x, y]].any(axis=0)
            for nx, ny in self.neighbours(x, y):
                if self.collapsed[nx, ny]:
                    continue
                current = self.options[nx, ny]
                reduced = current & supported
                if np.array_equal(reduced, current):
                    continue
                self.options[nx, ny] = reduced
                if reduced.any():
                    self.stack.append((nx, ny))
                elif (nx, ny) not in contradictions:
                    contradictions.append((nx, ny))
        return contradictions

    def _force(self, x: int, y: int) -> None:
        self.options[x, y] = False
        self.options[x, y, self.fallback] = True
        self.collapsed[x, y] = True
        self.forced[x, y] = True
        self.fallbacks += 1

    def _settle(self) -> None:
        contradictions = self.propagate()
        if not contradictions:
            return
        if self.restarts < self.max_restarts:
            self.restarts += 1
            logger.info("WFC contradiction at %s, restart %d/%d",
                        contradictions[0], self.restarts, self.max_restarts)
            self.start()
            return
        for x, y in contradictions:
            self._force(x, y)
        logger.warning("WFC: %d contradicted cell(s) after %d restarts, filled with %r",
                       len(contradictions), self.restarts, self.patterns[self.fallback])

    def step(self) -> bool:
        """Collapse one cell (or restart); False once the grid is complete."""
        if self.is_complete():
            return False
        cell = self.find_lowest_entropy()
        if cell is None:
            return False
        self.collapse(*cell)
        self._settle()
        self.steps += 1
        return True

    def run(self, max_steps: int | None = None) -> bool:
        """Step until complete or ``max_steps`` is reached; return completeness."""
        if max_steps is None:
            max_steps = self.cols * self.rows * (self.max_restarts + 1)
        for _ in range(max_steps):
            if not self.step():
                break
        return self.is_complete()
