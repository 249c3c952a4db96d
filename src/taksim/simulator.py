import logging
import multiprocessing as mp

from tqdm import tqdm

from taksim.agents import RESIGN, RandomAgent
from taksim.core import BLACK, DEFAULT_SIZE, WHITE
from taksim.errors import MoveError
from taksim.game import TakGame
from taksim.notation import format_result

logger = logging.getLogger(__name__)

MAX_RETRIES = 3


class MatchRecord:
    def __init__(self, size, outcome, moves, white="", black="", positions=None):
        self.size = size
        self.outcome = outcome
        self.moves = moves
        self.white = white
        self.black = black
        # (state, player to move) pairs, only when recorded
        self.positions = positions or []

    @property
    def plies(self):
        return len(self.moves)

    def as_dict(self):
        return {
            "size": self.size,
            "white": self.white,
            "black": self.black,
            "result": format_result(self.outcome),
            "plies": self.plies,
            "moves": self.moves,
        }


def play_match(
    white,
    black,
    size=DEFAULT_SIZE,
    max_plies=None,
    record_positions=False,
    stones_per_player=None,
    caps_per_player=None,
):
    """Drive two agents through one game and return its ``MatchRecord``.

    An agent that keeps answering with illegal moves forfeits by
    resignation after ``MAX_RETRIES`` attempts. A game cut off by
    ``max_plies`` is returned with an ongoing outcome.
    """
    game = TakGame(size, stones_per_player, caps_per_player)
    agents = {WHITE: white, BLACK: black}
    positions = []

    while not game.is_over:
        if max_plies is not None and game.current_state().ply >= max_plies:
            logger.debug("stopping game at ply limit %d", max_plies)
            break
        player = game.to_move
        agent = agents[player]
        state = game.current_state()
        if record_positions:
            positions.append((state, player))

        for _ in range(MAX_RETRIES):
            move = agent.choose_move(state)
            if move is RESIGN:
                game.resign(player)
                break
            try:
                game.submit_move(move)
                break
            except MoveError as e:
                logger.warning(
                    "%s (%s) tried an illegal move %r: %s",
                    agent.name,
                    player.name,
                    move,
                    e,
                )
        else:
            game.resign(player)

    return MatchRecord(
        size,
        game.outcome,
        game.ptn_moves(),
        white=white.name,
        black=black.name,
        positions=positions,
    )


def _play_random_game(args):
    size, seed, max_plies, record_positions = args
    white = RandomAgent(seed=seed * 2)
    black = RandomAgent(seed=seed * 2 + 1)
    return play_match(
        white, black, size, max_plies=max_plies, record_positions=record_positions
    )


def run_selfplay(
    games,
    size=DEFAULT_SIZE,
    seed=0,
    max_plies=None,
    workers=1,
    record_positions=False,
    progress=True,
):
    """Play ``games`` independent random-vs-random games.

    With ``workers > 1`` games are spread over a process pool; each game is
    seeded from ``seed`` and its index, so results do not depend on the
    worker count.
    """
    tasks = [(size, seed + i, max_plies, record_positions) for i in range(games)]
    if workers > 1:
        with mp.Pool(workers) as pool:
            records = list(
                tqdm(
                    pool.imap(_play_random_game, tasks),
                    total=games,
                    disable=not progress,
                )
            )
    else:
        records = [
            _play_random_game(t) for t in tqdm(tasks, disable=not progress)
        ]

    summary = summarize(records)
    logger.info("self-play finished: %s", summary)
    return records


def summarize(records):
    summary = {}
    for record in records:
        key = format_result(record.outcome)
        summary[key] = summary.get(key, 0) + 1
    return summary
