import argparse
import json
import logging
import sys

from taksim.analyzer import Analyzer
from taksim.core import BLACK, CAPSTONE, DEFAULT_SIZE, FLAT, STANDING, WHITE, Square, Stone
from taksim.errors import MoveError, NotationError
from taksim.game import TakGame
from taksim.notation import FILES, format_result, format_tps, parse_ptn_moves, parse_tps
from taksim.simulator import run_selfplay, summarize

logger = logging.getLogger(__name__)

# stacks print bottom first, upper case for standing stones and capstones
PIECE_CHARS = {
    Stone(WHITE, FLAT): "w",
    Stone(WHITE, STANDING): "W",
    Stone(WHITE, CAPSTONE): "C",
    Stone(BLACK, FLAT): "b",
    Stone(BLACK, STANDING): "B",
    Stone(BLACK, CAPSTONE): "K",
}


def piece_char(stone):
    return PIECE_CHARS[stone]


def format_board(state):
    board = state.board
    n = board.size
    cells = {
        square: "".join(piece_char(s) for s in board.stack(square)) or "."
        for square in board.squares()
    }
    width = max(len(cell) for cell in cells.values())

    lines = ["   " + " ".join(f.center(width) for f in FILES[:n])]
    for y in reversed(range(n)):
        row = " ".join(cells[Square(x, y)].center(width) for x in range(n))
        lines.append(f"{y + 1:2d} {row}")
    lines.append("")
    for player in (WHITE, BLACK):
        flats, caps = state.reserves(player)
        lines.append(f"{player.name.title()}: stones={flats}, caps={caps}")
    lines.append(f"To move: {state.to_move.name.title()}")
    return "\n".join(lines)


def cmd_selfplay(args):
    records = run_selfplay(
        args.games,
        size=args.size,
        seed=args.seed,
        max_plies=args.max_plies,
        workers=args.workers,
        progress=not args.quiet,
    )
    if args.out:
        with open(args.out, "w") as f:
            for record in records:
                f.write(json.dumps(record.as_dict()) + "\n")
        print(f"wrote {len(records)} games to {args.out}")
    print(json.dumps(summarize(records), indent=2, sort_keys=True))
    return 0


def cmd_replay(args):
    text = args.moves
    if args.file:
        with open(args.file) as f:
            text = f.read()

    try:
        if args.tps:
            game = TakGame.from_state(parse_tps(args.tps))
        else:
            game = TakGame(args.size)
        moves = parse_ptn_moves(text or "")
    except (NotationError, ValueError) as e:
        print("Input error:", e)
        return 2

    for i, move in enumerate(moves):
        try:
            game.submit_move(move)
        except MoveError as e:
            print(f"Illegal move #{i + 1} ({type(e).__name__}):", e)
            return 1
        if args.show:
            print(format_board(game.current_state()))
            print()

    state = game.current_state()
    print(format_board(state))
    print()
    print("TPS:", format_tps(state))
    print("Result:", format_result(game.outcome), f"({game.outcome})")
    if args.stats:
        print(json.dumps(Analyzer(state).summary(), indent=2))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="taksim")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="logging level (default WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("selfplay", help="play random-vs-random games")
    sp.add_argument("--games", type=int, default=10)
    sp.add_argument("--size", type=int, default=DEFAULT_SIZE)
    sp.add_argument("--seed", type=int, default=0)
    sp.add_argument(
        "--max-plies",
        type=int,
        default=1000,
        help="stop a game unfinished after this many plies",
    )
    sp.add_argument("--workers", type=int, default=1)
    sp.add_argument("--out", default="", help="write games as JSON lines here")
    sp.add_argument("--quiet", action="store_true", help="no progress bar")
    sp.set_defaults(func=cmd_selfplay)

    rp = sub.add_parser("replay", help="replay a PTN move list")
    rp.add_argument("moves", nargs="?", default="", help="PTN moves, space separated")
    rp.add_argument("--file", default="", help="read moves from this file")
    rp.add_argument("--size", type=int, default=DEFAULT_SIZE)
    rp.add_argument("--tps", default="", help="start from this TPS position")
    rp.add_argument("--show", action="store_true", help="print the board after every move")
    rp.add_argument("--stats", action="store_true", help="print board statistics")
    rp.set_defaults(func=cmd_replay)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug("running %s", args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
