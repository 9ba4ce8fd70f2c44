from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from ttt_arena.cli import main


def _run_cli(args: list[str], cwd: Path, stdin: str | None = None) -> subprocess.CompletedProcess:
    exe = [sys.executable, "-m", "ttt_arena.cli"]
    return subprocess.run(exe + args, cwd=cwd, capture_output=True, text=True, input=stdin)


def test_cli_best_move_score_and_choose(tmp_path: Path):
    r = _run_cli(["best-move", "--board", "220110000", "--mark", "O"], cwd=tmp_path)
    assert r.returncode == 0
    assert "best_move=2" in r.stdout + r.stderr
    r = _run_cli(["score", "--board", "220110000", "--mark", "O"], cwd=tmp_path)
    assert r.returncode == 0
    assert "2:10" in r.stdout + r.stderr
    r = _run_cli(["--seed", "1", "choose", "--board", "220110000", "--difficulty", "hard", "--mark", "O"], cwd=tmp_path)
    assert r.returncode == 0
    assert "move=2" in r.stdout + r.stderr


def test_cli_stdin_streams_csv(tmp_path: Path):
    stdin = "000000000\nnot-a-board\n220110000\n112221121\n"
    r = _run_cli(["best-move", "--stdin", "--mark", "O"], cwd=tmp_path, stdin=stdin)
    assert r.returncode == 0
    lines = r.stdout.strip().splitlines()
    assert lines[0] == "board,mark,best_move"
    assert lines[1:] == ["000000000,O,4", "220110000,O,2"]


@pytest.mark.parametrize("bad", ["abc", "012345678", "0123456789", "12345678x"])
def test_cli_error_invalid_boards(tmp_path: Path, bad: str):
    r = _run_cli(["best-move", "--board", bad], cwd=tmp_path)
    assert r.returncode == 2
    r = _run_cli(["score", "--board", bad], cwd=tmp_path)
    assert r.returncode == 2


def test_cli_error_unreachable_full_and_difficulty(tmp_path: Path):
    assert _run_cli(["best-move", "--board", "111222111"], cwd=tmp_path).returncode == 2
    assert _run_cli(["best-move", "--board", "112221121"], cwd=tmp_path).returncode == 2
    r = _run_cli(["choose", "--board", "000000000", "--difficulty", "godlike"], cwd=tmp_path)
    assert r.returncode == 2
    assert "Unknown difficulty" in r.stderr


def test_cli_play_pvp_records_win(tmp_path: Path):
    stats_file = tmp_path / "stats.json"
    r = _run_cli(
        ["play", "--mode", "pvp", "--delay", "0", "--stats-file", str(stats_file)],
        cwd=tmp_path,
        stdin="1\n4\n2\n5\n3\nq\n",
    )
    assert r.returncode == 0
    assert "WINNER: X" in r.stdout
    assert "X: 1  O: 0  DRAW: 0" in r.stdout
    assert json.loads(stats_file.read_text())["tictactoe_stats"]["xWins"] == 1


def test_cli_play_against_cpu_until_eof(tmp_path: Path):
    r = _run_cli(
        ["--seed", "3", "play", "--mode", "pvch", "--delay", "0", "--stats-file", str(tmp_path / "s.json")],
        cwd=tmp_path,
        stdin="1\n",
    )
    assert r.returncode == 0
    # CPU answers a corner opening in the centre
    assert " 4 | O | 6 " in r.stdout
    assert "YOUR TURN (X)" in r.stdout


def test_cli_stats_show_and_clear(tmp_path: Path, capsys):
    stats_file = tmp_path / "stats.json"
    stats_file.write_text(json.dumps({"tictactoe_stats": {"xWins": 2, "oWins": 5, "draws": 1}}))
    assert main(["stats", "--stats-file", str(stats_file)]) == 0
    assert "X: 2  O: 5  DRAW: 1" in capsys.readouterr().out
    assert main(["stats", "--clear", "--stats-file", str(stats_file)]) == 0
    assert "X: 0  O: 0  DRAW: 0" in capsys.readouterr().out


def test_cli_arena_export(tmp_path: Path, capsys):
    out = tmp_path / "arena"
    assert main(["--seed", "4", "arena", "--games", "6", "--out", str(out)]) == 0
    assert "games=6 x_wins=0" in capsys.readouterr().out
    assert (out / "arena_games.csv").exists()
    assert (out / "manifest.json").exists()
    assert main(["arena", "--games", "-1"]) == 2


def test_cli_side_to_move_derived_from_board(tmp_path: Path):
    # equal counts: X to move, and X completes the middle row
    r = _run_cli(["best-move", "--board", "220110000"], cwd=tmp_path)
    assert r.returncode == 0
    assert "mark=X best_move=5" in r.stdout + r.stderr
    r = _run_cli(["best-move", "--stdin"], cwd=tmp_path, stdin="000000000\n100000000\n")
    assert r.returncode == 0
    assert r.stdout.strip().splitlines()[1:] == ["000000000,X,4", "100000000,O,4"]


def test_cli_arena_defaults_to_runs_dir(tmp_path: Path):
    runs = tmp_path / "runs"
    env = dict(os.environ, TTT_ARENA_RUNS=str(runs))
    r = subprocess.run(
        [sys.executable, "-m", "ttt_arena.cli", "--seed", "2", "arena", "--games", "2"],
        cwd=tmp_path, capture_output=True, text=True, env=env,
    )
    assert r.returncode == 0
    assert (runs / "arena_games.csv").exists()
    assert json.loads((runs / "manifest.json").read_text())["row_count"] == 2


def test_cli_play_switches_mode(tmp_path: Path):
    r = _run_cli(
        ["play", "--mode", "pvp", "--delay", "0", "--stats-file", str(tmp_path / "s.json")],
        cwd=tmp_path,
        stdin="m bogus\nm pvch\n1\nq\n",
    )
    assert r.returncode == 0
    assert "Modes: pvp, pvec, pvcm, pvch" in r.stdout
    assert "Player vs CPU (hard)" in r.stdout
    # the CPU now answers the corner opening in the centre
    assert " 4 | O | 6 " in r.stdout
