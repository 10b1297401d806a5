from minesweeper.game_engine import ABORTED, LOST, WON, Board
from minesweeper.session import Session


def make_session(board, keys):
    script = list(keys)
    frames = []

    def poll():
        if not script:
            return ord("q")
        key = script.pop(0)
        if isinstance(key, BaseException):
            raise key
        return key

    def render(b):
        frames.append((b.cursor, b.revealed_total, b.status()))

    return Session(board, poll=poll, render=render), frames


def make_board():
    return Board.from_layout([
        "M...",
        "....",
        "....",
        "...M",
    ])


def test_quit_key_ends_loop():
    s, frames = make_session(make_board(), [ord("q")])
    assert s.run() == "Aborted"
    assert s.board.outcome == ABORTED
    # initial draw plus one per iteration
    assert len(frames) == 2


def test_timeouts_and_unknown_keys_still_render():
    s, frames = make_session(make_board(), [None, -1, ord("z"), ord("q")])
    s.run()
    assert s.iterations == 4
    assert len(frames) == 5
    assert all(f[0] == (0, 0) for f in frames)


def test_vi_keys_move_cursor_and_reveal():
    s, frames = make_session(make_board(), [ord("l"), ord(" "), ord("h"), ord(" ")])
    assert s.run() == "Lose"
    assert s.board.outcome == LOST
    assert frames[1][0] == (0, 1)
    assert frames[2][1] == 1
    assert frames[-1][2] == "Lose"


def test_flag_key_toggles():
    s, _ = make_session(make_board(), [ord("j"), ord("f")])
    s.step()
    s.step()
    assert s.board.cursor == (1, 0)
    assert s.board.flags_total == 1


def test_one_action_per_iteration_until_win():
    b = Board.from_layout([
        "...",
        "...",
        "..M",
    ])
    s, frames = make_session(b, [ord(" "), ord("q")])
    assert s.run() == "Win"
    assert b.outcome == WON
    assert s.iterations == 1


def test_keyboard_interrupt_quits():
    s, _ = make_session(make_board(), [KeyboardInterrupt()])
    assert s.run() == "Aborted"


def test_custom_keymap():
    b = make_board()
    s = Session(b, poll=lambda: None, render=lambda _b: None, keymap={258: "down"})
    assert s.dispatch(258) == "down"
    assert s.dispatch(ord("j")) is None
    assert b.cursor == (1, 0)
