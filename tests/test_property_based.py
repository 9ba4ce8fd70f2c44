from typing import List

import pytest
try:
    from hypothesis import given, settings, strategies as st  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - test infra
    pytest.skip("Hypothesis not installed", allow_module_level=True)

from ttt_arena.board import Board, Mark
from ttt_arena.rules import WIN_LINES, evaluate, is_full, is_valid_state, legal_moves, outcome
from ttt_arena.solver import best_move, score_moves
from ttt_arena.symmetry import ALL_SYMS, apply_action_transform, transform_board


def play_prefix(order: List[int], plies: int) -> Board:
    """Alternate X/O along `order`, stopping early when the game ends."""
    b = Board()
    mark = Mark.X
    for idx in order[:plies]:
        if outcome(b).is_over:
            break
        b.place(idx, mark)
        mark = mark.opponent
    return b


boards = st.builds(play_prefix, st.permutations(list(range(9))), st.integers(min_value=0, max_value=9))


@given(boards)
def test_evaluate_matches_line_definition(b: Board):
    assert is_valid_state(b)
    for mark in Mark:
        expected = any(all(b[i].mark is mark for i in line) for line in WIN_LINES)
        assert evaluate(b, mark) == expected
    assert not (evaluate(b, Mark.X) and evaluate(b, Mark.O))


@given(boards)
def test_is_full_iff_no_legal_moves(b: Board):
    assert is_full(b) == (legal_moves(b) == [])
    assert legal_moves(b) == sorted(legal_moves(b))


@settings(max_examples=50, deadline=None)
@given(boards)
def test_best_move_is_legal_maximal_and_pure(b: Board):
    if not legal_moves(b):
        return
    before = b.key()
    mv = best_move(b, Mark.O)
    assert b.key() == before
    assert mv in legal_moves(b)
    scores = score_moves(b, Mark.O)
    top = max(s for s in scores if s is not None)
    if not b.is_empty():
        assert mv == min(i for i, s in enumerate(scores) if s == top)


@settings(max_examples=50, deadline=None)
@given(boards, st.sampled_from(ALL_SYMS))
def test_scores_permute_with_symmetry(b: Board, op: str):
    base = score_moves(b, Mark.O)
    ts = score_moves(transform_board(b, op), Mark.O)
    for i in range(9):
        assert ts[apply_action_transform(i, op)] == base[i]
