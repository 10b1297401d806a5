import curses

from app.terminal import TerminalView, keymap
from minesweeper.game_engine import Board
from minesweeper.render import HELP_LINES


class FakeWindow:
    def __init__(self, keys=()):
        self.keys = list(keys)
        self.cells = {}
        self.cursor = None
        self.refreshes = 0

    def addstr(self, y, x, text, attr=0):
        self.cells[(y, x)] = text

    def move(self, y, x):
        self.cursor = (y, x)

    def clrtoeol(self):
        pass

    def refresh(self):
        self.refreshes += 1

    def getch(self):
        return self.keys.pop(0) if self.keys else -1


def make_view(keys=()):
    score, field = FakeWindow(), FakeWindow(keys)
    return TerminalView(score, field), score, field


def make_board():
    return Board.from_layout([
        "M..",
        "...",
        "...",
    ])


def test_poll_maps_timeout_to_none():
    view, _, _ = make_view([ord("j")])
    assert view.poll() == ord("j")
    assert view.poll() is None


def test_render_draws_field_and_score():
    view, score, field = make_view()
    b = make_board()
    b.move_cursor(2, 2)
    b.reveal()
    view.render(b)
    assert field.cells[(2, 2)] == " "
    assert field.cells[(0, 1)] == "1"
    assert field.cells[(0, 0)] == "."
    assert field.cursor == (2, 2)
    assert score.cells[(1, 0)] == HELP_LINES[0]
    assert score.cells[(8, 0)].startswith("Flags:  0 /  1  Status: Win")
    assert field.refreshes == 1 and score.refreshes == 1


def test_keymap_has_arrows_and_vi_keys():
    keys = keymap()
    assert keys[curses.KEY_UP] == "up"
    assert keys[ord("k")] == "up"
    assert keys[ord(" ")] == "reveal"
    assert keys[ord("q")] == "quit"
