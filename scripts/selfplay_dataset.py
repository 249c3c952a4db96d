#!/usr/bin/env python3
"""Play random self-play games and write them as a sharded memmap dataset.

Writes X_<i>.dat / Y_<i>.dat shards (planes and value targets) and a
meta.json describing them. This is tooling for external learning agents
built on taksim.encoder, not part of the rules engine.

Usage: python scripts/selfplay_dataset.py --games 200 --out-dir selfplay --shards 4
"""
import argparse
import json
import logging
import os
import random

import numpy as np

from taksim.encoder import PLANES, encode_positions
from taksim.simulator import run_selfplay

logger = logging.getLogger("selfplay_dataset")


def build(out_dir, games, size, shards, samples_per_game, seed, workers, max_plies):
    os.makedirs(out_dir, exist_ok=True)
    records = run_selfplay(
        games,
        size=size,
        seed=seed,
        max_plies=max_plies,
        workers=workers,
        record_positions=True,
    )

    xs = []
    ys = []
    for game_id, record in enumerate(records):
        if not record.positions:
            continue
        X, Y = encode_positions(record.positions, record.outcome)
        per_game_rng = random.Random(seed + game_id)
        idxs = list(range(len(X)))
        per_game_rng.shuffle(idxs)
        idxs = idxs[:samples_per_game]
        xs.append(X[idxs])
        ys.append(Y[idxs])

    if not xs:
        raise RuntimeError("self-play produced no positions")
    X_all = np.concatenate(xs)
    Y_all = np.concatenate(ys)
    total = len(X_all)
    pad = X_all.shape[-1]

    shard_files = []
    bounds = np.linspace(0, total, shards + 1, dtype=int)
    for i in range(shards):
        start, end = int(bounds[i]), int(bounds[i + 1])
        sz = end - start
        xf = f"X_{i}.dat"
        yf = f"Y_{i}.dat"
        if sz > 0:
            X = np.memmap(
                os.path.join(out_dir, xf),
                dtype=np.float32,
                mode="w+",
                shape=(sz, PLANES, pad, pad),
            )
            Y = np.memmap(
                os.path.join(out_dir, yf), dtype=np.float32, mode="w+", shape=(sz,)
            )
            X[:] = X_all[start:end]
            Y[:] = Y_all[start:end]
            X.flush()
            Y.flush()
        shard_files.append({"X": xf, "Y": yf, "size": sz})

    meta = {
        "total_samples": total,
        "dtype": "float32",
        "shape": [PLANES, pad, pad],
        "board_size": size,
        "games": games,
        "samples_per_game": samples_per_game,
        "seed": seed,
        "shards": shard_files,
    }
    with open(os.path.join(out_dir, "meta.json"), "w") as f:
        json.dump(meta, f, indent=2)

    logger.info("wrote %d samples in %d shards to %s", total, shards, out_dir)
    return meta


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--out-dir", required=True)
    ap.add_argument("--games", type=int, default=100)
    ap.add_argument("--size", type=int, default=5)
    ap.add_argument("--shards", type=int, default=1)
    ap.add_argument("--samples-per-game", type=int, default=24)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument(
        "--workers",
        type=int,
        default=1,
        help="number of parallel worker processes used for self-play",
    )
    ap.add_argument("--max-plies", type=int, default=400)
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    meta = build(
        args.out_dir,
        args.games,
        args.size,
        max(1, args.shards),
        args.samples_per_game,
        args.seed,
        max(1, args.workers),
        args.max_plies,
    )
    print("self-play dataset done, wrote", meta["total_samples"], "samples")


if __name__ == "__main__":
    main()
