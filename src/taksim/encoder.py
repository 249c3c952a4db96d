"""Input planes for external learning agents.

A convenience for agents that learn from self-play; the rules engine never
imports this module and nothing here is part of its contract.
"""

import numpy as np
import torch

from taksim.core import CAPSTONE, FLAT, MAX_SIZE, STANDING, Square

PLANES = 10
_KIND_OFFSET = {FLAT: 0, STANDING: 1, CAPSTONE: 2}


def encode_planes(state, player, pad=MAX_SIZE):
    """Board planes from ``player``'s point of view, zero padded to ``pad``.

    0-2  own flat / standing / capstone on top
    3-5  opponent flat / standing / capstone on top
    6    stack height / 8
    7    own stones left in reserve / 60
    8    1 if ``player`` is to move
    9    board size / 8
    """
    n = state.size
    if pad < n:
        raise ValueError(f"Cannot pad a {n}x{n} board to {pad}")
    x = np.zeros((PLANES, pad, pad), dtype=np.float32)

    x[8, :, :] = 1.0 if state.to_move == player else 0.0
    x[9, :, :] = float(n) / 8.0

    for yy in range(n):
        for xx in range(n):
            square = Square(xx, yy)
            top = state.board.top(square)
            if top is None:
                continue
            base = 0 if top.owner == player else 3
            x[base + _KIND_OFFSET[top.kind], yy, xx] = 1.0
            h = state.board.height(square)
            x[6, yy, xx] = min(h, 8) / 8.0

    x[7, :, :] = (state.stones_remaining[player] + state.caps_remaining[player]) / 60.0
    return x


def encode_state_value_input(state, player, pad=MAX_SIZE, device="cpu"):
    return torch.from_numpy(encode_planes(state, player, pad=pad)).to(device)


def encode_positions(positions, outcome, pad=MAX_SIZE):
    """Stack recorded ``(state, player)`` pairs into training arrays.

    Targets are the final result from the point of view of the player to
    move: 1 win, -1 loss, 0 draw or unfinished.
    """
    X = np.zeros((len(positions), PLANES, pad, pad), dtype=np.float32)
    Y = np.zeros((len(positions),), dtype=np.float32)
    for i, (state, player) in enumerate(positions):
        X[i] = encode_planes(state, player, pad=pad)
        Y[i] = outcome.value_for(player)
    return X, Y
