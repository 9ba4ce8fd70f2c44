"""
Game rules: win lines, winner/draw checks, legal moves, validity.

Notes:
- Every function takes any 9-long sequence of Cell, so a Board and its key()
  tuple are interchangeable (the solver caches on tuples).
- X always starts. Valid states have equal counts (X to move) or one extra X.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .board import Cell, Mark

WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)


class Status(str, Enum):
    ONGOING = 'ongoing'
    WIN = 'win'
    DRAW = 'draw'


@dataclass(frozen=True)
class Outcome:
    status: Status
    winner: Optional[Mark] = None

    @classmethod
    def win(cls, mark: Mark) -> 'Outcome':
        return cls(Status.WIN, mark)

    @property
    def is_over(self) -> bool:
        return self.status is not Status.ONGOING

    def __str__(self) -> str:
        if self.status is Status.WIN:
            return f"win:{self.winner}"
        return self.status.value


ONGOING = Outcome(Status.ONGOING)
DRAW = Outcome(Status.DRAW)


def evaluate(board: Sequence[Cell], mark: Mark) -> bool:
    """Does `mark` hold a completed line?"""
    return winning_line(board, mark) is not None


def winning_line(board: Sequence[Cell], mark: Mark) -> Optional[Tuple[int, int, int]]:
    cell = Cell.of(mark)
    for line in WIN_LINES:
        a, b, c = line
        if board[a] is cell and board[b] is cell and board[c] is cell:
            return line
    return None


def is_full(board: Sequence[Cell]) -> bool:
    return all(c is not Cell.EMPTY for c in board)


def legal_moves(board: Sequence[Cell]) -> List[int]:
    return [i for i, c in enumerate(board) if c is Cell.EMPTY]


def winner(board: Sequence[Cell]) -> Optional[Mark]:
    for mark in (Mark.X, Mark.O):
        if evaluate(board, mark):
            return mark
    return None


def outcome(board: Sequence[Cell]) -> Outcome:
    w = winner(board)
    if w is not None:
        return Outcome.win(w)
    if is_full(board):
        return DRAW
    return ONGOING


def piece_counts(board: Sequence[Cell]) -> Tuple[int, int]:
    return (sum(1 for c in board if c is Cell.X),
            sum(1 for c in board if c is Cell.O))


def current_player(board: Sequence[Cell]) -> Mark:
    x, o = piece_counts(board)
    return Mark.X if x == o else Mark.O


def is_valid_state(board: Sequence[Cell]) -> bool:
    """Is the board reachable under alternating play with X first?"""
    x_count, o_count = piece_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False
    x_won = evaluate(board, Mark.X)
    o_won = evaluate(board, Mark.O)
    if x_won and o_won:
        return False
    if x_won and x_count != o_count + 1:
        return False
    if o_won and x_count != o_count:
        return False
    return True
