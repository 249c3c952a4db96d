import pytest

from taksim.agents import RESIGN, Agent, RandomAgent, ScriptedAgent
from taksim.core import BLACK, WHITE, Square, TakState
from taksim.moves import Place
from taksim.outcome import ONGOING, Outcome, OutcomeKind
from taksim.simulator import MAX_RETRIES, MatchRecord, play_match, run_selfplay, summarize


class Stubborn(Agent):
    """Keeps trying to place on a1."""

    name = "stubborn"

    def __init__(self):
        self.calls = 0

    def choose_move(self, state):
        self.calls += 1
        return Place(Square(0, 0))


class TestAgents:
    def test_random_agent_is_reproducible(self):
        state = TakState(5)
        a = RandomAgent(seed=7).choose_move(state)
        b = RandomAgent(seed=7).choose_move(state)
        assert a == b

    def test_scripted_agent_runs_out(self):
        agent = ScriptedAgent(["a1", "b1"])
        state = TakState(3)
        assert agent.choose_move(state) == Place(Square(0, 0))
        assert agent.choose_move(state) == Place(Square(1, 0))
        assert agent.choose_move(state) is RESIGN

    def test_base_agent(self):
        with pytest.raises(NotImplementedError):
            Agent().choose_move(TakState(3))


class TestPlayMatch:
    def test_scripted_road(self):
        record = play_match(
            ScriptedAgent(["a1", "a3", "b3"]), ScriptedAgent(["c3", "b1"]), size=3
        )
        assert record.outcome == Outcome(OutcomeKind.ROAD, WHITE)
        assert record.moves == ["a1", "c3", "a3", "b1", "b3"]
        assert record.plies == 5

    def test_illegal_moves_forfeit(self):
        stubborn = Stubborn()
        record = play_match(ScriptedAgent(["c3", "b2"]), stubborn, size=3)
        assert record.outcome == Outcome(OutcomeKind.RESIGNATION, WHITE)
        # a1 is legal once, then occupied
        assert stubborn.calls == 1 + MAX_RETRIES
        assert record.moves == ["c3", "a1", "b2"]

    def test_script_exhausted_resigns(self):
        record = play_match(ScriptedAgent(["a1"]), ScriptedAgent([]), size=3)
        assert record.outcome == Outcome(OutcomeKind.RESIGNATION, WHITE)

    def test_max_plies(self):
        record = play_match(RandomAgent(1), RandomAgent(2), size=5, max_plies=4)
        assert record.outcome == ONGOING
        assert record.plies == 4

    def test_records_positions(self):
        record = play_match(
            RandomAgent(1), RandomAgent(2), size=4, max_plies=6, record_positions=True
        )
        assert len(record.positions) == record.plies
        assert [p for _, p in record.positions[:2]] == [WHITE, BLACK]
        assert record.positions[0][0].ply == 0

    def test_random_game_finishes(self):
        record = play_match(RandomAgent(3), RandomAgent(4), size=3)
        assert record.outcome.is_over

    def test_as_dict(self):
        record = MatchRecord(3, Outcome(OutcomeKind.FLAT, BLACK), ["a1"], "x", "y")
        assert record.as_dict() == {
            "size": 3,
            "white": "x",
            "black": "y",
            "result": "0-F",
            "plies": 1,
            "moves": ["a1"],
        }


class TestSelfplay:
    def test_runs_and_summarizes(self):
        records = run_selfplay(4, size=3, seed=5, progress=False)
        assert len(records) == 4
        assert all(r.outcome.is_over for r in records)
        assert sum(summarize(records).values()) == 4

    def test_reproducible(self):
        a = run_selfplay(2, size=4, seed=9, max_plies=30, progress=False)
        b = run_selfplay(2, size=4, seed=9, max_plies=30, progress=False)
        assert [r.moves for r in a] == [r.moves for r in b]

    def test_summarize(self):
        records = [
            MatchRecord(3, Outcome(OutcomeKind.ROAD, WHITE), []),
            MatchRecord(3, Outcome(OutcomeKind.ROAD, WHITE), []),
            MatchRecord(3, ONGOING, []),
        ]
        assert summarize(records) == {"R-0": 2, "0-0": 1}
