import pytest

from taksim.core import BLACK, FLAT, WHITE, Square, Stone
from taksim.errors import CellOccupied, GameAlreadyOver, NotationError
from taksim.game import TakGame
from taksim.moves import Place
from taksim.notation import parse_tps
from taksim.outcome import ONGOING, Outcome, OutcomeKind


class TestTakGame:
    def test_opening_move_places_opponent_stone(self, game5):
        outcome = game5.submit_move(Place(Square(0, 0), FLAT))
        state = game5.current_state()
        assert outcome == ONGOING
        assert state.board.stack(Square(0, 0)) == [Stone(BLACK, FLAT)]
        assert state.reserves(BLACK).flats == 20
        assert state.reserves(WHITE).flats == 21

    def test_snapshots_are_not_mutated(self, game5):
        before = game5.current_state()
        game5.submit_ptn("a1")
        assert before.ply == 0
        assert before.board.is_empty(Square(0, 0))
        assert game5.current_state() is not before

    def test_road_win_ends_game(self, game3):
        for text in ["a1", "c3", "a3", "b1"]:
            assert game3.submit_ptn(text) == ONGOING
        assert game3.submit_ptn("b3") == Outcome(OutcomeKind.ROAD, WHITE)
        assert game3.is_over
        with pytest.raises(GameAlreadyOver):
            game3.submit_ptn("c1")
        with pytest.raises(GameAlreadyOver):
            game3.resign(BLACK)

    def test_rejected_move_keeps_state(self, game5):
        game5.submit_ptn("a1")
        state = game5.current_state()
        with pytest.raises(CellOccupied):
            game5.submit_ptn("a1")
        assert game5.current_state() is state

    def test_bad_notation(self, game5):
        with pytest.raises(NotationError):
            game5.submit_ptn("z9")

    def test_history(self, game5):
        for text in ["a1", "e5", "Cc3", "c4", "c3+"]:
            game5.submit_ptn(text)
        assert game5.ptn_moves() == ["a1", "e5", "Cc3", "c4", "c3+"]
        assert len(game5.history) == 5

    def test_legal_moves_follow_state(self, game5):
        assert len(list(game5.legal_moves())) == 25
        game5.submit_ptn("a1")
        assert len(list(game5.legal_moves())) == 24

    def test_resign(self, game5):
        game5.submit_ptn("a1")
        assert game5.resign(BLACK) == Outcome(OutcomeKind.RESIGNATION, WHITE)
        assert list(game5.legal_moves()) == []

    def test_from_state(self):
        game = TakGame.from_state(parse_tps("x3/x3/1,1,x 1 3"))
        assert game.to_move == WHITE
        assert game.submit_ptn("c1") == Outcome(OutcomeKind.ROAD, WHITE)

    def test_reserve_override(self):
        game = TakGame(4, stones_per_player=5, caps_per_player=1)
        assert game.current_state().reserves(WHITE) == (5, 1)
        assert game.size == 4

    def test_rejects_reserve_without_opening_flat(self):
        with pytest.raises(ValueError):
            TakGame(5, stones_per_player=0, caps_per_player=1)
