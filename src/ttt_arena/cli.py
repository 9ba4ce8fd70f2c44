from __future__ import annotations

import argparse
import csv
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import numpy as np

from .arena import FORMATS, ArenaArgs, run_matches
from .board import Board, Mark
from .errors import ArenaError, InvalidBoardError
from .policy import Difficulty, choose_move
from .render import render_board, scoreboard, status_line
from .paths import runs_dir
from .rules import current_player, is_valid_state, legal_moves
from .session import GameMode, GameSession
from .solver import best_move, score_moves
from .stats import StatsStore

BOARD_HELP = "Board string, 9 chars of 0/1/2 or X/O/. e.g. 100020000 (omit with --stdin)"
DIFFICULTY_CHOICES = ["random", "mixed", "optimal", "easy", "medium", "hard"]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt-arena", description="Tic-tac-toe with automated opponents")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--seed", type=int, default=None, help="Seed for the random policies")

    # interactive game
    p_play = sub.add_parser("play", help="Play in the terminal (keys 1-9, r=reset, m <mode>=switch mode, c=clear stats, q=quit)")
    p_play.add_argument(
        "--mode",
        choices=[m.value for m in GameMode],
        default=GameMode.PVCH.value,
        help="pvp, pvec (CPU easy), pvcm (CPU medium), pvch (CPU hard, default)",
    )
    p_play.add_argument("--delay", type=float, default=0.6, help="Seconds the CPU 'thinks' (default: 0.6)")
    p_play.add_argument("--stats-file", type=Path, default=None, help="Override the stats file location")

    # one-shot queries
    p_best = sub.add_parser("best-move", help="Perfect-play move for a board")
    p_best.add_argument("--board", help=BOARD_HELP)
    p_best.add_argument("--mark", choices=["X", "O"], default=None, help="Side to move (default: derived from the board, X first)")
    p_best.add_argument("--stdin", action="store_true", help="Read many boards from stdin and stream CSV output")

    p_choose = sub.add_parser("choose", help="Move chosen by a difficulty policy")
    p_choose.add_argument("--board", help=BOARD_HELP)
    p_choose.add_argument("--difficulty", required=True, help=f"One of {', '.join(DIFFICULTY_CHOICES)}")
    p_choose.add_argument("--mark", choices=["X", "O"], default=None, help="Side to move (default: derived from the board, X first)")
    p_choose.add_argument("--stdin", action="store_true", help="Read many boards from stdin and stream CSV output")

    p_score = sub.add_parser("score", help="Minimax score of every legal move")
    p_score.add_argument("--board", help=BOARD_HELP)
    p_score.add_argument("--mark", choices=["X", "O"], default=None, help="Side to move (default: derived from the board, X first)")
    p_score.add_argument("--stdin", action="store_true", help="Read many boards from stdin and stream CSV output")

    # stats
    p_stats = sub.add_parser("stats", help="Show or clear the win/draw tally")
    p_stats.add_argument("--clear", action="store_true", help="Reset the tally to zero")
    p_stats.add_argument("--stats-file", type=Path, default=None, help="Override the stats file location")

    # self-play
    p_arena = sub.add_parser("arena", help="Pit two policies against each other")
    p_arena.add_argument("--games", type=int, default=100)
    p_arena.add_argument("--x-policy", default="random", help="Policy for X (default: random)")
    p_arena.add_argument("--o-policy", default="optimal", help="Policy for O (default: optimal)")
    p_arena.add_argument("--out", type=Path, default=None, help="Export directory (default: $TTT_ARENA_RUNS or ./.ttt_arena/runs)")
    p_arena.add_argument("--format", choices=list(FORMATS), default="csv",
                         help="Export format: csv (default), parquet, both")
    p_arena.add_argument("--tracking", choices=["none", "mlflow"], default="none",
                         help="Experiment tracking backend")
    p_arena.add_argument("--log-dir", type=Path, default=Path("runs"),
                         help="Directory for tracking logs/artifacts (for mlflow local backend)")

    return p


def _parse_board(raw: Optional[str]) -> Board:
    board = Board.from_string(raw or "")
    if not is_valid_state(board):
        raise InvalidBoardError("Board is not a valid reachable state.")
    return board


def _stream_boards():
    """Yield (raw, board) for each well-formed, reachable board on stdin."""
    for line in sys.stdin:
        raw = line.strip()
        if not raw:
            continue
        try:
            board = _parse_board(raw)
        except InvalidBoardError:
            continue
        if not legal_moves(board):
            continue
        yield raw, board


def _side_to_move(ns, board: Board) -> Mark:
    return Mark(ns.mark) if ns.mark else current_player(board)


def _cmd_best_move(ns) -> int:
    if ns.stdin:
        w = csv.writer(sys.stdout)
        w.writerow(["board", "mark", "best_move"])
        for raw, board in _stream_boards():
            mark = _side_to_move(ns, board)
            w.writerow([raw, mark.value, best_move(board, mark)])
        return 0
    board = _parse_board(ns.board)
    mark = _side_to_move(ns, board)
    logging.info("mark=%s best_move=%d", mark, best_move(board, mark))
    return 0


def _cmd_choose(ns, rng: np.random.Generator) -> int:
    level = Difficulty.parse(ns.difficulty)
    if ns.stdin:
        w = csv.writer(sys.stdout)
        w.writerow(["board", "difficulty", "move"])
        for raw, board in _stream_boards():
            mark = _side_to_move(ns, board)
            w.writerow([raw, level.value, choose_move(board, level, rng=rng, mark=mark)])
        return 0
    board = _parse_board(ns.board)
    mark = _side_to_move(ns, board)
    logging.info("difficulty=%s mark=%s move=%d", level.value, mark,
                 choose_move(board, level, rng=rng, mark=mark))
    return 0


def _format_scores(scores) -> str:
    return ' '.join(f"{i}:{s}" for i, s in enumerate(scores) if s is not None)


def _cmd_score(ns) -> int:
    if ns.stdin:
        w = csv.writer(sys.stdout)
        w.writerow(["board", "mark", "scores"])
        for raw, board in _stream_boards():
            mark = _side_to_move(ns, board)
            w.writerow([raw, mark.value, _format_scores(score_moves(board, mark))])
        return 0
    board = _parse_board(ns.board)
    mark = _side_to_move(ns, board)
    logging.info("mark=%s scores=%s", mark, _format_scores(score_moves(board, mark)))
    return 0


def _cmd_stats(ns) -> int:
    store = StatsStore(ns.stats_file)
    stats = store.clear() if ns.clear else store.load()
    print(scoreboard(stats))
    return 0


def _cmd_arena(ns) -> int:
    if ns.games < 0:
        logging.error("--games must be non-negative: %s", ns.games)
        return 2
    summary = run_matches(ArenaArgs(
        games=ns.games,
        x_policy=Difficulty.parse(ns.x_policy).value,
        o_policy=Difficulty.parse(ns.o_policy).value,
        seed=ns.seed,
        out=ns.out if ns.out is not None else runs_dir(),
        format=ns.format,
        tracking=ns.tracking,
        log_dir=ns.log_dir,
    ))
    print(f"games={summary.games} x_wins={summary.x_wins} o_wins={summary.o_wins} draws={summary.draws}")
    return 0


def _show(session: GameSession) -> None:
    print()
    print(render_board(session.board, session.winning_line()))
    print(status_line(session))
    if not session.active:
        print(scoreboard(session.stats))


def _cmd_play(ns, rng: np.random.Generator) -> int:
    session = GameSession(GameMode(ns.mode), store=StatsStore(ns.stats_file), rng=rng)
    print(f"{session.mode.label}. Keys 1-9 pick a cell (1 2 3 / 4 5 6 / 7 8 9), r resets, m <mode> switches mode, c clears stats, q quits.")
    _show(session)
    while True:
        if session.active and session.is_ai_turn():
            if ns.delay > 0:
                time.sleep(ns.delay)
            session.ai_move()
            _show(session)
            continue
        try:
            key = input("> ").strip().lower()
        except EOFError:
            break
        if key in ("q", "quit"):
            break
        if key in ("r", "esc", "reset"):
            session.reset()
            _show(session)
            continue
        if key.startswith("m ") or key == "m":
            choice = key[1:].strip()
            if choice not in [m.value for m in GameMode]:
                print("Modes: " + ", ".join(m.value for m in GameMode))
                continue
            session.change_mode(GameMode(choice))
            print(session.mode.label)
            _show(session)
            continue
        if key == "c":
            session.clear_stats()
            print(scoreboard(session.stats))
            _show(session)
            continue
        if len(key) != 1 or key not in "123456789":
            print("Enter 1-9, r, m <mode>, c or q.")
            continue
        try:
            session.play(int(key) - 1)
        except ArenaError as e:
            print(e)
            continue
        _show(session)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        from importlib.metadata import PackageNotFoundError, version as _ver

        try:
            print(_ver("ttt-arena"))
        except PackageNotFoundError:
            print("unknown")
        return 0

    rng = np.random.default_rng(ns.seed)
    try:
        if ns.cmd == "play":
            return _cmd_play(ns, rng)
        if ns.cmd == "best-move":
            return _cmd_best_move(ns)
        if ns.cmd == "choose":
            return _cmd_choose(ns, rng)
        if ns.cmd == "score":
            return _cmd_score(ns)
        if ns.cmd == "stats":
            return _cmd_stats(ns)
        if ns.cmd == "arena":
            return _cmd_arena(ns)
    except ArenaError as e:
        logging.error("%s", e)
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
