import numpy as np
import pytest
import torch

from taksim.core import BLACK, MAX_SIZE, WHITE, TakState
from taksim.encoder import PLANES, encode_planes, encode_positions, encode_state_value_input
from taksim.notation import parse_tps
from taksim.outcome import Outcome, OutcomeKind


class TestEncoder:
    def test_shape_and_padding(self):
        x = encode_planes(TakState(5), WHITE)
        assert x.shape == (PLANES, MAX_SIZE, MAX_SIZE)
        assert x.dtype == np.float32
        assert x[9, 0, 0] == pytest.approx(5 / 8)
        assert x[8].sum() == MAX_SIZE * MAX_SIZE

    def test_perspective(self):
        state = parse_tps("x3/x,12C,x/1S,x,2 1 4", caps_per_player=1)
        own = encode_planes(state, WHITE, pad=3)
        other = encode_planes(state, BLACK, pad=3)
        assert own[1, 0, 0] == 1.0
        assert other[4, 0, 0] == 1.0
        assert own[5, 1, 1] == 1.0
        assert own[6, 1, 1] == pytest.approx(2 / 8)
        assert other[8].sum() == 0.0

    def test_too_small_pad(self):
        with pytest.raises(ValueError):
            encode_planes(TakState(5), WHITE, pad=4)

    def test_tensor(self):
        t = encode_state_value_input(TakState(4), BLACK)
        assert isinstance(t, torch.Tensor)
        assert t.shape == (PLANES, MAX_SIZE, MAX_SIZE)

    def test_positions(self):
        state = TakState(3)
        positions = [(state, WHITE), (state, BLACK)]
        X, Y = encode_positions(positions, Outcome(OutcomeKind.ROAD, BLACK), pad=3)
        assert X.shape == (2, PLANES, 3, 3)
        assert Y.tolist() == [-1.0, 1.0]
