import argparse
import curses
import logging
import random
import sys
from typing import Callable, List, Optional

from pydantic import ValidationError

from minesweeper.config import BoardConfig, Settings, get_preset, load_settings
from minesweeper.game_engine import Board
from minesweeper.session import Session

from app.terminal import create_view, keymap

logger = logging.getLogger("minesweeper")

USAGE_EPILOG = """\
    -b    Beginner       8 x 8  grid with 10 mines
    -i    Intermediate  16 x 16 grid with 40 mines
    -e    Expert        16 x 30 grid with 99 mines
"""


class UsageParser(argparse.ArgumentParser):
    """Prints the preset table along with any usage error."""

    def error(self, message):
        self.print_usage(sys.stderr)
        sys.stderr.write(USAGE_EPILOG)
        self.exit(2, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = UsageParser(
        prog="minesweeper",
        usage="%(prog)s [-b|-i|-e] [--seed N]",
        description="Minesweeper in the terminal.",
        epilog=USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("-b", "--beginner", dest="preset", action="store_const", const="beginner")
    group.add_argument("-i", "--intermediate", dest="preset", action="store_const", const="intermediate")
    group.add_argument("-e", "--expert", dest="preset", action="store_const", const="expert")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed; defaults to MINESWEEPER_SEED or OS entropy")
    return parser


def configure_logging(settings: Settings) -> None:
    # curses owns the terminal, so log to a file or nowhere.
    if settings.log_file:
        logging.basicConfig(
            filename=settings.log_file,
            level=getattr(logging, settings.log_level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    else:
        logger.addHandler(logging.NullHandler())


def play(stdscr, config: BoardConfig, settings: Settings) -> str:
    board = Board(config.height, config.width, config.mines, rng=random.Random(settings.seed))
    view = create_view(stdscr, board, settings.poll_ms, colors=settings.colors)
    session = Session(board, poll=view.poll, render=view.render, keymap=keymap())
    return session.run()


def run_game(config: BoardConfig, settings: Settings) -> str:
    return curses.wrapper(play, config, settings)


def main(argv: Optional[List[str]] = None, run: Callable[[BoardConfig, Settings], str] = run_game) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)
    try:
        settings = load_settings()
        config = get_preset(args.preset)
    except (ValueError, ValidationError) as e:
        print(f"minesweeper: configuration error: {e}", file=sys.stderr)
        return 1
    if args.seed is not None:
        settings = settings.model_copy(update={"seed": args.seed})
    configure_logging(settings)
    logger.info(
        f"[minesweeper] session start preset={args.preset or 'beginner'} "
        f"height={config.height} width={config.width} mines={config.mines} "
        f"seed={settings.seed if settings.seed is not None else '-'} poll_ms={settings.poll_ms}"
    )
    status = run(config, settings)
    print(f"Status: {status}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
