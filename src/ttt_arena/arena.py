"""
Self-play arena: pit two policies against each other and export the games.

Both sides are driven by the same policy selector; the X side searches with X
as the maximizing mark. Results are written as CSV by default, Parquet when
pandas and pyarrow are installed, plus a manifest.json describing the run.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from .board import Board, Mark
from .policy import Difficulty, choose_move
from .rules import Outcome, Status, outcome
from .tracking import log_artifact, log_metrics, log_params, maybe_mlflow_run

ARENA_FORMAT_VERSION = "1.0.0"
FORMATS = ("csv", "parquet", "both")


@dataclass
class ArenaArgs:
    games: int = 100
    x_policy: str = "random"
    o_policy: str = "optimal"
    seed: Optional[int] = None
    out: Optional[Path] = None
    format: str = "csv"  # one of: "csv", "parquet", "both"
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


@dataclass
class GameRecord:
    game: int
    moves: List[int]
    outcome: Outcome

    def to_row(self) -> Dict[str, Any]:
        if self.outcome.status is Status.WIN:
            result = str(self.outcome.winner).lower()
        else:
            result = self.outcome.status.value
        return {
            "game": self.game,
            "moves": " ".join(map(str, self.moves)),
            "plies": len(self.moves),
            "result": result,
        }


@dataclass
class ArenaSummary:
    x_policy: Difficulty
    o_policy: Difficulty
    records: List[GameRecord] = field(default_factory=list)

    def _count(self, status: Status, winner: Optional[Mark] = None) -> int:
        return sum(1 for r in self.records
                   if r.outcome.status is status and r.outcome.winner is winner)

    @property
    def games(self) -> int:
        return len(self.records)

    @property
    def x_wins(self) -> int:
        return self._count(Status.WIN, Mark.X)

    @property
    def o_wins(self) -> int:
        return self._count(Status.WIN, Mark.O)

    @property
    def draws(self) -> int:
        return self._count(Status.DRAW)

    def metrics(self) -> Dict[str, float]:
        n = max(1, self.games)
        return {
            "games": float(self.games),
            "x_win_rate": self.x_wins / n,
            "o_win_rate": self.o_wins / n,
            "draw_rate": self.draws / n,
            "mean_plies": float(np.mean([len(r.moves) for r in self.records])) if self.records else 0.0,
        }


def play_game(
    x_policy: Union[Difficulty, str],
    o_policy: Union[Difficulty, str],
    rng: np.random.Generator,
) -> Tuple[List[int], Outcome]:
    policies = {Mark.X: Difficulty.parse(x_policy), Mark.O: Difficulty.parse(o_policy)}
    board = Board()
    mark = Mark.X
    moves: List[int] = []
    result = outcome(board)
    while not result.is_over:
        mv = choose_move(board, policies[mark], rng=rng, mark=mark)
        board.place(mv, mark)
        moves.append(mv)
        result = outcome(board)
        mark = mark.opponent
    return moves, result


def run_matches(args: ArenaArgs) -> ArenaSummary:
    if args.games < 0:
        raise ValueError(f"games must be non-negative, got {args.games}")
    fmt = (args.format or "csv").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {args.format}")
    summary = ArenaSummary(Difficulty.parse(args.x_policy), Difficulty.parse(args.o_policy))
    rng = np.random.default_rng(args.seed)
    with maybe_mlflow_run(args.tracking == "mlflow", run_name="arena", log_dir=args.log_dir):
        log_params({
            "games": args.games,
            "x_policy": summary.x_policy.value,
            "o_policy": summary.o_policy.value,
            "seed": args.seed,
        })
        for g in range(args.games):
            moves, result = play_game(summary.x_policy, summary.o_policy, rng)
            summary.records.append(GameRecord(g, moves, result))
        metrics = summary.metrics()
        logging.info(
            "Arena %s (X) vs %s (O): %d games, X=%d O=%d draw=%d",
            summary.x_policy.value, summary.o_policy.value,
            summary.games, summary.x_wins, summary.o_wins, summary.draws,
        )
        log_metrics(metrics)
        if args.out is not None:
            out = export_records(summary.records, Path(args.out), fmt, args=args)
            log_artifact(out / "manifest.json")
    return summary


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def export_records(
    records: List[GameRecord],
    out: Path,
    fmt: str = "csv",
    args: Optional[ArenaArgs] = None,
) -> Path:
    fmt = (fmt or "csv").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {fmt}")
    rows = [r.to_row() for r in sorted(records, key=lambda r: r.game)]
    csv_path = out / "arena_games.csv"
    parquet_path = out / "arena_games.parquet"

    have_parquet = (importlib.util.find_spec('pandas') is not None
                    and importlib.util.find_spec('pyarrow') is not None)
    msg = ("Parquet dependencies not available (install pandas and pyarrow). "
           "Use pip install .[parquet] to enable parquet support.")
    if fmt == "parquet" and not have_parquet:
        # fail before writing anything
        raise RuntimeError(msg)

    out.mkdir(parents=True, exist_ok=True)
    wrote_csv = False
    wrote_parquet = False
    if fmt in {"csv", "both"}:
        with csv_path.open('w', newline='') as f:
            w = csv.DictWriter(f, fieldnames=["game", "moves", "plies", "result"])
            w.writeheader()
            w.writerows(rows)
        wrote_csv = True
        logging.info("Wrote CSV: %s (%d rows)", csv_path, len(rows))
    if fmt in {"parquet", "both"}:
        if have_parquet:
            import pandas as pd  # type: ignore

            pd.DataFrame(rows, columns=["game", "moves", "plies", "result"]).to_parquet(parquet_path)
            wrote_parquet = True
            logging.info("Wrote Parquet: %s", parquet_path)
        else:
            logging.warning("%s Proceeding with CSV only; manifest will record parquet_written=false.", msg)

    files = {
        "games_csv": str(csv_path) if wrote_csv else None,
        "games_parquet": str(parquet_path) if wrote_parquet else None,
    }
    manifest = {
        "format_version": ARENA_FORMAT_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {
            "games": args.games,
            "x_policy": Difficulty.parse(args.x_policy).value,
            "o_policy": Difficulty.parse(args.o_policy).value,
            "seed": args.seed,
            "format": fmt,
        } if args is not None else None,
        "python_version": sys.version.split(" ")[0],
        "numpy_version": np.__version__,
        "row_count": len(rows),
        "files": files,
        "checksums": {k: _sha256_file(Path(p)) for k, p in files.items() if p is not None},
        "parquet_written": wrote_parquet,
    }
    (out / "manifest.json").write_text(json.dumps(manifest, indent=2))
    return out
