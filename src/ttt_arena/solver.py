"""
Exact minimax search with a tempo preference.

Scoring, from the perspective of the maximizing mark:
- maximizing mark has a line: +10 - depth  (prefer the fastest win)
- the other mark has a line:  -10 + depth  (prefer the slowest loss)
- full board, no line:          0
`depth` counts plies from the board handed to the top-level call.

Subtree values are memoised per (cells, side to move, maximizer) at depth 0.
Shifting a value by the depth of the node keeps its sign (a game lasts at
most 9 plies), so the offset preserves every comparison and the chosen move.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from .board import CENTER, Board, Cell, Mark
from .errors import NoLegalMovesError
from .rules import evaluate, is_full, legal_moves

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


def _shift(value: int, plies: int) -> int:
    if value > 0:
        return value - plies
    if value < 0:
        return value + plies
    return value


@lru_cache(maxsize=None)
def _node_value(cells: Tuple[Cell, ...], to_move: Mark, maximizer: Mark) -> int:
    if evaluate(cells, maximizer):
        return WIN_SCORE
    if evaluate(cells, maximizer.opponent):
        return LOSS_SCORE
    if is_full(cells):
        return DRAW_SCORE
    placed = Cell.of(to_move)
    scores = []
    for i in legal_moves(cells):
        child = cells[:i] + (placed,) + cells[i + 1:]
        scores.append(_shift(_node_value(child, to_move.opponent, maximizer), 1))
    return max(scores) if to_move is maximizer else min(scores)


def clear_cache() -> None:
    _node_value.cache_clear()


def minimax(board: Sequence[Cell], depth: int, maximizing: bool, mark: Mark = Mark.O) -> int:
    """Value of `board` for the maximizing `mark`.

    `maximizing` tells whose turn it is: `mark` when True, its opponent otherwise.
    Terminal boards (including the root) are scored directly.

    `depth` plus the number of empty cells may not exceed 9: a game lasts at
    most 9 plies, and past that the offset cached value would cross zero.
    """
    cells = tuple(board)
    if depth < 0 or depth + sum(1 for c in cells if c is Cell.EMPTY) > len(cells):
        raise ValueError(f"depth {depth} is not reachable from a board with these empty cells")
    to_move = mark if maximizing else mark.opponent
    return _shift(_node_value(cells, to_move, mark), depth)


def position_value(board: Sequence[Cell], to_move: Mark, mark: Mark = Mark.O) -> int:
    return minimax(board, 0, to_move is mark, mark)


def score_moves(board: Sequence[Cell], mark: Mark = Mark.O) -> List[Optional[int]]:
    """Score of every cell for `mark` to play there; None for occupied cells."""
    scratch = Board(board)
    scores: List[Optional[int]] = [None] * len(scratch)
    for i in legal_moves(scratch):
        scratch.place(i, mark)
        scores[i] = minimax(scratch, 0, False, mark)
        scratch.clear(i)
    return scores


def best_move(board: Sequence[Cell], mark: Mark = Mark.O) -> int:
    """Lowest-index move with the strictly greatest score for `mark`."""
    moves = legal_moves(board)
    if not moves:
        raise NoLegalMovesError("best_move called on a full board")
    if len(moves) == len(board):
        return CENTER
    best_score: Optional[int] = None
    move = -1
    for i, score in enumerate(score_moves(board, mark)):
        if score is None:
            continue
        if best_score is None or score > best_score:
            best_score = score
            move = i
    logging.debug("best_move mark=%s move=%d score=%s cache=%s",
                  mark, move, best_score, _node_value.cache_info())
    return move
