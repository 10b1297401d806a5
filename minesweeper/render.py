from __future__ import annotations

from typing import List, Optional

from .game_engine import Board, FLAGGED, LOST, MINE, REVEALED

FLAG_GLYPH = "F"
MINE_GLYPH = "*"
WRONG_FLAG_GLYPH = "X"
HIDDEN_GLYPH = "."
BLANK_GLYPH = " "

HELP_LINES = [
    "         Minesweeper",
    "",
    " [h] Move Left   [l] Move Right",
    " [j] Move Down   [k] Move Up",
    " [f] Flag Mine   [q] Quit",
    " [space] Reveal",
]

# Colour pair used to highlight the mine that ended the game.
FATAL_MINE_COLOR = 3


def glyph_for(truth: str, visibility: str, lost: bool = False) -> str:
    if lost:
        if truth == MINE and visibility != FLAGGED:
            return MINE_GLYPH
        if truth != MINE and visibility == FLAGGED:
            return WRONG_FLAG_GLYPH
    if visibility == FLAGGED:
        return FLAG_GLYPH
    if visibility == REVEALED:
        if truth == MINE:
            return MINE_GLYPH
        if truth == "0":
            return BLANK_GLYPH
        return truth
    return HIDDEN_GLYPH


def color_for(truth: str, visibility: str, is_cursor: bool = False, lost: bool = False) -> Optional[int]:
    """Colour pair number for a cell, or None for the default attribute.

    Revealed digits use the pair matching their value; the unflagged mine under
    the cursor of a lost game uses ``FATAL_MINE_COLOR``.
    """
    if lost and is_cursor and truth == MINE and visibility != FLAGGED:
        return FATAL_MINE_COLOR
    if visibility == REVEALED and truth.isdigit() and truth != "0":
        return int(truth)
    return None


def to_client_view(board: Board) -> List[List[str]]:
    lost = board.outcome == LOST
    view: List[List[str]] = []
    for r in range(board.height):
        row: List[str] = []
        for c in range(board.width):
            row.append(glyph_for(board.truth(r, c), board.visibility(r, c), lost=lost))
        view.append(row)
    return view


def score_lines(board: Board) -> List[str]:
    return [
        f"Flags: {board.flags_total:2d} / {board.num_mines:2d}  Status: {board.status()}",
        f"Time: {board.elapsed_time()} ms",
    ]
