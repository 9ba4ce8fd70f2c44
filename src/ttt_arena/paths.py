"""Centralized path helpers for the stats file and arena output.

Environment-first, falling back to a `.ttt_arena` directory under the CWD so
nothing is written under site-packages when installed as a library.
"""

from __future__ import annotations

import os
from pathlib import Path


def state_dir() -> Path:
    """Order: env var TTT_ARENA_HOME -> ./.ttt_arena"""
    env = os.getenv("TTT_ARENA_HOME")
    if env:
        return Path(env)
    return Path.cwd() / ".ttt_arena"


def stats_path() -> Path:
    p = os.getenv("TTT_ARENA_STATS")
    return Path(p) if p else state_dir() / "stats.json"


def runs_dir() -> Path:
    p = os.getenv("TTT_ARENA_RUNS")
    return Path(p) if p else state_dir() / "runs"

