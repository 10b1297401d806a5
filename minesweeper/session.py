from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional, Tuple

from .game_engine import Board

logger = logging.getLogger("minesweeper")

MOVES: Dict[str, Tuple[int, int]] = {
    "down": (1, 0),
    "up": (-1, 0),
    "left": (0, -1),
    "right": (0, 1),
}

# Character keys; the terminal adapter adds its own arrow-key codes.
DEFAULT_KEYMAP: Dict[int, str] = {
    ord("j"): "down",
    ord("k"): "up",
    ord("h"): "left",
    ord("l"): "right",
    ord(" "): "reveal",
    ord("f"): "flag",
    ord("q"): "quit",
}


class Session:
    """Polls for one key at a time, applies it to the board and redraws.

    ``poll`` blocks for at most the poll timeout and returns ``None`` (or a
    negative key code) when no key arrived; ``render`` is called after every
    iteration so the clock keeps ticking on screen.
    """

    def __init__(
        self,
        board: Board,
        poll: Callable[[], Optional[int]],
        render: Callable[[Board], None],
        keymap: Optional[Mapping[int, str]] = None,
    ) -> None:
        self.board = board
        self.poll = poll
        self.render = render
        self.keymap = dict(DEFAULT_KEYMAP if keymap is None else keymap)
        self.iterations = 0

    def dispatch(self, key: Optional[int]) -> Optional[str]:
        if key is None or key < 0:
            return None
        action = self.keymap.get(key)
        if action is None:
            return None
        if action in MOVES:
            self.board.move_cursor(*MOVES[action])
        elif action == "reveal":
            self.board.reveal()
        elif action == "flag":
            self.board.toggle_flag()
        elif action == "quit":
            self.board.quit()
        else:
            return None
        return action

    def step(self) -> None:
        try:
            key = self.poll()
        except KeyboardInterrupt:
            self.board.quit()
        else:
            self.dispatch(key)
        self.iterations += 1
        self.render(self.board)

    def run(self) -> str:
        self.render(self.board)
        while not self.board.is_done():
            self.step()
        logger.info(
            f"[minesweeper] session finished status={self.board.status()} "
            f"elapsed_ms={self.board.elapsed_time()} iterations={self.iterations}"
        )
        return self.board.status()
