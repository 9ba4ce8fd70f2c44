import numpy as np
import pytest

from ttt_arena.board import Cell, Mark
from ttt_arena.errors import GameOverError, IllegalMoveError, NotYourTurnError
from ttt_arena.policy import Difficulty
from ttt_arena.render import render_board, scoreboard, status_line
from ttt_arena.rules import DRAW, Outcome, Status
from ttt_arena.session import GameMode, GameSession
from ttt_arena.stats import StatsStore


def test_mode_difficulties():
    assert GameMode.PVP.difficulty is None
    assert GameMode.PVEC.difficulty is Difficulty.RANDOM
    assert GameMode.PVCM.difficulty is Difficulty.MIXED
    assert GameMode.PVCH.difficulty is Difficulty.OPTIMAL


def test_pvp_alternates_and_reports_win(tmp_path):
    store = StatsStore(tmp_path / "stats.json")
    s = GameSession(GameMode.PVP, store=store)
    assert status_line(s) == "PLAYER X TURN"
    for idx in (0, 3, 1, 4):
        assert s.play(idx).status is Status.ONGOING
    assert s.current_player is Mark.X
    assert s.play(2) == Outcome.win(Mark.X)
    assert not s.active
    assert s.winning_line() == (0, 1, 2)
    assert status_line(s) == "WINNER: X"
    assert store.load().x_wins == 1
    assert "[X]|[X]|[X]" in render_board(s.board, s.winning_line())


def test_occupied_cell_keeps_turn():
    s = GameSession(GameMode.PVP)
    s.play(4)
    with pytest.raises(IllegalMoveError):
        s.play(4)
    assert s.current_player is Mark.O


def test_moves_refused_after_game_over():
    s = GameSession(GameMode.PVP)
    for idx in (0, 3, 1, 4, 2):
        s.play(idx)
    with pytest.raises(GameOverError):
        s.play(8)
    s.reset()
    assert s.active and s.current_player is Mark.X
    assert all(c is Cell.EMPTY for c in s.board)


def test_draw_is_tallied():
    s = GameSession(GameMode.PVP)
    # X O X / X O O / O X X
    for idx in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        res = s.play(idx)
    assert res == DRAW
    assert s.stats.draws == 1
    assert status_line(s) == "GAME DRAW!"


def test_human_input_refused_while_ai_pending():
    s = GameSession(GameMode.PVCH, rng=np.random.default_rng(0))
    assert status_line(s) == "YOUR TURN (X)"
    s.play(0)
    assert s.is_ai_turn()
    assert status_line(s) == "AI THINKING..."
    with pytest.raises(NotYourTurnError):
        s.play(1)
    mv = s.ai_move()
    assert s.board[mv] is Cell.O
    assert mv == 4
    with pytest.raises(NotYourTurnError):
        s.ai_move()


def test_hard_mode_is_never_beaten_by_random_human():
    rng = np.random.default_rng(5)
    s = GameSession(GameMode.PVCH, rng=np.random.default_rng(6))
    for _ in range(25):
        s.reset()
        while s.active:
            if s.is_ai_turn():
                s.ai_move()
            else:
                empty = [i for i, c in enumerate(s.board) if c is Cell.EMPTY]
                s.play(int(rng.choice(empty)))
    assert s.stats.x_wins == 0
    assert s.stats.games == 25


def test_change_mode_resets_and_clear_stats(tmp_path):
    store = StatsStore(tmp_path / "stats.json")
    s = GameSession(GameMode.PVP, store=store)
    for idx in (0, 3, 1, 4, 2):
        s.play(idx)
    s.change_mode(GameMode.PVEC)
    assert s.mode is GameMode.PVEC and s.active
    s.clear_stats()
    assert store.load().games == 0
    assert scoreboard(s.stats) == "X: 0  O: 0  DRAW: 0"


def test_stats_loaded_on_start(tmp_path):
    store = StatsStore(tmp_path / "stats.json")
    first = GameSession(GameMode.PVP, store=store)
    for idx in (0, 3, 1, 4, 2):
        first.play(idx)
    second = GameSession(GameMode.PVP, store=store)
    assert second.stats.x_wins == 1
