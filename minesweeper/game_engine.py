from __future__ import annotations

import logging
import random
import time
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger("minesweeper")

# Ground-truth cell values: "M" or a digit "0".."8".
MINE = "M"

# Visibility cell values.
HIDDEN = "H"
FLAGGED = "F"
REVEALED = "R"

# Returned by every lookup outside the grid.
INVALID = "?"

PLAYING = "playing"
WON = "won"
LOST = "lost"
ABORTED = "aborted"


def index(row: int, col: int, width: int) -> int:
    return row * width + col


def coords(idx: int, width: int) -> Tuple[int, int]:
    return divmod(idx, width)


def _neighbors(r: int, c: int, w: int, h: int) -> Iterator[Tuple[int, int]]:
    for nr in range(max(0, r - 1), min(h, r + 2)):
        for nc in range(max(0, c - 1), min(w, c + 2)):
            if nr == r and nc == c:
                continue
            yield nr, nc


def _validate_dimensions(height: int, width: int, num_mines: int) -> None:
    if height <= 0 or width <= 0:
        raise ValueError("invalid_dimensions")
    if num_mines < 0:
        raise ValueError("invalid mine count")
    if num_mines >= height * width:
        raise ValueError("too_many_mines_for_board")


class Grid:
    """Fixed-size row-major grid.

    Reads outside the grid return ``INVALID`` and writes outside it are
    dropped, so callers never index past the edge.
    """

    def __init__(self, height: int, width: int, fill: str) -> None:
        self.height = height
        self.width = width
        self._cells: List[str] = [fill] * (height * width)

    def is_valid(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get(self, row: int, col: int) -> str:
        if not self.is_valid(row, col):
            return INVALID
        return self._cells[index(row, col, self.width)]

    def set(self, row: int, col: int, value: str) -> None:
        if self.is_valid(row, col):
            self._cells[index(row, col, self.width)] = value


class Board:
    """Minesweeper game state: ground truth, player visibility, cursor and outcome.

    The board is mutated one call at a time by the session loop and never
    touches the terminal. Once the outcome leaves ``PLAYING`` every mutating
    call is a no-op.
    """

    def __init__(
        self,
        height: int,
        width: int,
        num_mines: int,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        _validate_dimensions(height, width, num_mines)
        self.height = height
        self.width = width
        self.num_mines = num_mines
        self.rng = rng if rng is not None else random.Random()
        self._clock = clock
        self.cursor_row = 0
        self.cursor_col = 0
        self.rerolls = 0
        self.initialize()

    @classmethod
    def from_layout(
        cls,
        rows: Sequence[str],
        clock: Callable[[], float] = time.monotonic,
    ) -> "Board":
        """Build a board from a fixed mine layout, one string per row, ``M`` marking mines."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        if any(len(r) != width for r in rows):
            raise ValueError("ragged_layout")
        num_mines = sum(r.count(MINE) for r in rows)
        board = cls(height, width, num_mines, rng=random.Random(0), clock=clock)
        board.truth_grid = Grid(height, width, "0")
        for r, line in enumerate(rows):
            for c, ch in enumerate(line):
                if ch == MINE:
                    board.truth_grid.set(r, c, MINE)
        board._compute_counts()
        return board

    def initialize(self) -> None:
        self.truth_grid = Grid(self.height, self.width, "0")
        self.visible_grid = Grid(self.height, self.width, HIDDEN)
        self.revealed_total = 0
        self.flags_total = 0
        self.outcome = PLAYING
        self._place_mines()
        self._compute_counts()
        self.start_time = self._clock()

    def _place_mines(self) -> None:
        n = self.height * self.width
        if self.num_mines * 2 > n:
            # Dense boards: rejection sampling would spin on collisions.
            for i in self.rng.sample(range(n), self.num_mines):
                r, c = coords(i, self.width)
                self.truth_grid.set(r, c, MINE)
            return
        placed = 0
        while placed < self.num_mines:
            r = self.rng.randrange(self.height)
            c = self.rng.randrange(self.width)
            if self.truth_grid.get(r, c) != MINE:
                self.truth_grid.set(r, c, MINE)
                placed += 1

    def _compute_counts(self) -> None:
        for r in range(self.height):
            for c in range(self.width):
                if self.truth_grid.get(r, c) == MINE:
                    continue
                cnt = sum(
                    1 for nr, nc in _neighbors(r, c, self.width, self.height)
                    if self.truth_grid.get(nr, nc) == MINE
                )
                self.truth_grid.set(r, c, str(cnt))

    def truth(self, row: int, col: int) -> str:
        return self.truth_grid.get(row, col)

    def visibility(self, row: int, col: int) -> str:
        return self.visible_grid.get(row, col)

    def is_valid(self, row: int, col: int) -> bool:
        return self.truth_grid.is_valid(row, col)

    def is_done(self) -> bool:
        return self.outcome != PLAYING

    @property
    def cursor(self) -> Tuple[int, int]:
        return self.cursor_row, self.cursor_col

    def max_reveal(self) -> int:
        return self.height * self.width - self.num_mines

    def move_cursor(self, d_row: int, d_col: int) -> None:
        if self.is_done():
            return
        row = self.cursor_row + d_row
        col = self.cursor_col + d_col
        if self.is_valid(row, col):
            self.cursor_row = row
            self.cursor_col = col

    def toggle_flag(self) -> None:
        if self.is_done():
            return
        r, c = self.cursor
        state = self.visible_grid.get(r, c)
        if state == HIDDEN:
            self.visible_grid.set(r, c, FLAGGED)
            self.flags_total += 1
        elif state == FLAGGED:
            self.visible_grid.set(r, c, HIDDEN)
            self.flags_total -= 1

    def reveal(self) -> None:
        if self.is_done():
            return
        r, c = self.cursor
        if self.revealed_total == 0 and self.visible_grid.get(r, c) != FLAGGED:
            rerolls = 0
            while self.truth_grid.get(r, c) == MINE:
                rerolls += 1
                self.initialize()
            self.rerolls = rerolls
            if rerolls:
                logger.info(f"[minesweeper] first move re-rolled board rerolls={rerolls} row={r} col={c}")
            self.start_time = self._clock()
        self._flood_reveal(r, c)

    def _flood_reveal(self, row: int, col: int) -> None:
        # Depth-first worklist; a cell is marked before its neighbours are pushed.
        stack = [(row, col)]
        seen = {(row, col)}
        while stack:
            if self.is_done():
                return
            r, c = stack.pop()
            state = self.visible_grid.get(r, c)
            if state == FLAGGED:
                continue
            if state != REVEALED:
                self.visible_grid.set(r, c, REVEALED)
                self.revealed_total += 1
            value = self.truth_grid.get(r, c)
            if value == MINE:
                self.outcome = LOST
                logger.info(f"[minesweeper] game lost row={r} col={c} revealed_total={self.revealed_total}")
                return
            if self.revealed_total >= self.max_reveal():
                self.outcome = WON
                logger.info(f"[minesweeper] game won elapsed_ms={self.elapsed_time()}")
                return
            if value == "0":
                for nr, nc in _neighbors(r, c, self.width, self.height):
                    if (nr, nc) in seen or self.visible_grid.get(nr, nc) == REVEALED:
                        continue
                    seen.add((nr, nc))
                    stack.append((nr, nc))

    def quit(self) -> None:
        if not self.is_done():
            self.outcome = ABORTED
            logger.info(f"[minesweeper] game aborted revealed_total={self.revealed_total}")

    def status(self) -> str:
        if self.outcome == LOST:
            return "Lose"
        if self.outcome == WON:
            return "Win"
        if self.outcome == ABORTED:
            return "Aborted"
        return "Playing"

    def elapsed_time(self) -> int:
        if self.revealed_total == 0:
            return 0
        return int((self._clock() - self.start_time) * 1000)
