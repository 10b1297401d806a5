from __future__ import annotations

import curses
from typing import Dict, Optional

from minesweeper.game_engine import Board, LOST
from minesweeper.render import HELP_LINES, color_for, score_lines, to_client_view
from minesweeper.session import DEFAULT_KEYMAP

SCORE_HEIGHT = 11
SCORE_WIDTH = 31
FIELD_TOP = 12
LEFT = 1

DIGIT_COLORS = {
    1: curses.COLOR_BLUE,
    2: curses.COLOR_GREEN,
    3: curses.COLOR_RED,
    4: curses.COLOR_MAGENTA,
    5: curses.COLOR_RED,
    6: curses.COLOR_CYAN,
    7: curses.COLOR_WHITE,
    8: curses.COLOR_WHITE,
}


def keymap() -> Dict[int, str]:
    keys = dict(DEFAULT_KEYMAP)
    keys.update({
        curses.KEY_DOWN: "down",
        curses.KEY_UP: "up",
        curses.KEY_LEFT: "left",
        curses.KEY_RIGHT: "right",
    })
    return keys


def init_colors() -> None:
    curses.start_color()
    for pair, fg in DIGIT_COLORS.items():
        curses.init_pair(pair, fg, curses.COLOR_BLACK)


class TerminalView:
    """Draws the score panel and mine field, and reads keys from the field window."""

    def __init__(self, score_win, field_win, use_colors: bool = False) -> None:
        self.score_win = score_win
        self.field_win = field_win
        self.use_colors = use_colors

    def poll(self) -> Optional[int]:
        key = self.field_win.getch()
        if key == -1:
            return None
        return key

    def _attr(self, pair: Optional[int]) -> int:
        if pair is None or not self.use_colors:
            return curses.A_NORMAL
        return curses.color_pair(pair)

    def render(self, board: Board) -> None:
        self.render_score(board)
        self.render_field(board)

    def render_score(self, board: Board) -> None:
        for y, line in enumerate(HELP_LINES, start=1):
            self.score_win.addstr(y, 0, line)
        for y, line in enumerate(score_lines(board), start=len(HELP_LINES) + 2):
            self.score_win.move(y, 0)
            self.score_win.clrtoeol()
            self.score_win.addstr(y, 0, line)
        self.score_win.refresh()

    def render_field(self, board: Board) -> None:
        lost = board.outcome == LOST
        for r, row in enumerate(to_client_view(board)):
            for c, glyph in enumerate(row):
                pair = color_for(board.truth(r, c), board.visibility(r, c), (r, c) == board.cursor, lost)
                self.field_win.addstr(r, c, glyph, self._attr(pair))
        self.field_win.move(*board.cursor)
        self.field_win.refresh()


def create_view(stdscr, board: Board, poll_ms: int, colors: bool = True) -> TerminalView:
    curses.cbreak()
    curses.noecho()
    use_colors = colors and curses.has_colors()
    if use_colors:
        init_colors()
    stdscr.refresh()
    score_win = curses.newwin(SCORE_HEIGHT, SCORE_WIDTH, 1, LEFT)
    # One spare column so writing the last cell never scrolls the window.
    field_win = curses.newwin(board.height, board.width + 1, FIELD_TOP, LEFT)
    field_win.keypad(True)
    field_win.timeout(poll_ms)
    return TerminalView(score_win, field_win, use_colors=use_colors)
