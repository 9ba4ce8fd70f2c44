#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from ttt_arena.arena import ArenaArgs, run_matches
from ttt_arena.board import Board, Mark
from ttt_arena.solver import best_move, clear_cache
from ttt_arena.tracking import log_metrics, log_params, maybe_mlflow_run


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    half = 1.96 * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    seeds: int = 10
    games: int = 200
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def main() -> int:
    ap = argparse.ArgumentParser(description="Time the solver and the arena")
    ap.add_argument("--seeds", type=int, default=Config.seeds)
    ap.add_argument("--games", type=int, default=Config.games)
    ap.add_argument("--tracking", choices=["none", "mlflow"], default=Config.tracking)
    ns = ap.parse_args()
    cfg = Config(seeds=ns.seeds, games=ns.games, tracking=ns.tracking)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir):
        log_params({"seeds": cfg.seeds, "games": cfg.games})
        cold_times: List[float] = []
        arena_times: List[float] = []
        corner = Board.from_string("100000000")
        for s in range(cfg.seeds):
            clear_cache()
            t0 = time.perf_counter()
            best_move(corner, Mark.O)
            cold_times.append(time.perf_counter() - t0)
            t1 = time.perf_counter()
            run_matches(ArenaArgs(games=cfg.games, x_policy="random", o_policy="mixed", seed=s))
            arena_times.append(time.perf_counter() - t1)
        m_cold, h_cold = ci95(cold_times)
        m_arena, h_arena = ci95(arena_times)
        log_metrics({
            "cold_best_move_mean_s": m_cold,
            "cold_best_move_ci95_half_s": h_cold,
            "arena_mean_s": m_arena,
            "arena_ci95_half_s": h_arena,
        })
        print(f"cold best_move: mean={m_cold:.4f}s ± {h_cold:.4f}s (95% CI, N={cfg.seeds})")
        print(f"arena {cfg.games} games: mean={m_arena:.4f}s ± {h_arena:.4f}s (95% CI, N={cfg.seeds})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
