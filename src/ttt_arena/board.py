"""
Board model: marks, cells and the 3x3 grid.

Notes:
- Cells are indexed 0..8 in row-major order (row0: 0,1,2; row1: 3,4,5; row2: 6,7,8).
- A cell is EMPTY or holds exactly one mark; there is no third mark and no None.
- The numeric text form follows the usual convention 0=empty, 1=X, 2=O.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import IllegalMoveError, InvalidBoardError

SIZE = 9
CENTER = 4


class Mark(str, Enum):
    X = 'X'
    O = 'O'

    @property
    def opponent(self) -> 'Mark':
        return Mark.O if self is Mark.X else Mark.X

    def __str__(self) -> str:
        return self.value


class Cell(Enum):
    EMPTY = '.'
    X = 'X'
    O = 'O'

    @property
    def mark(self) -> Optional[Mark]:
        if self is Cell.EMPTY:
            return None
        return Mark(self.value)

    @classmethod
    def of(cls, mark: Mark) -> 'Cell':
        return cls(Mark(mark).value)

    @property
    def digit(self) -> str:
        return _DIGITS[self]


_DIGITS = {Cell.EMPTY: '0', Cell.X: '1', Cell.O: '2'}
_PARSE = {
    '0': Cell.EMPTY, '.': Cell.EMPTY, '-': Cell.EMPTY, '_': Cell.EMPTY, ' ': Cell.EMPTY,
    '1': Cell.X, 'X': Cell.X, 'x': Cell.X,
    '2': Cell.O, 'O': Cell.O, 'o': Cell.O,
}


class Board:
    """Mutable 3x3 grid; the only mutation is placing a mark on an empty cell."""

    __slots__ = ('_cells',)

    def __init__(self, cells: Optional[Iterable[Cell]] = None):
        if cells is None:
            self._cells: List[Cell] = [Cell.EMPTY] * SIZE
        else:
            self._cells = [Cell(c) for c in cells]
            if len(self._cells) != SIZE:
                raise InvalidBoardError(f"A board has {SIZE} cells, got {len(self._cells)}")

    @classmethod
    def from_string(cls, text: str) -> 'Board':
        """Parse 9 characters of 0/1/2 or X/O/. (also - and _ for empty)."""
        raw = text.strip()
        if len(raw) != SIZE or any(c not in _PARSE for c in raw):
            raise InvalidBoardError(
                f"Invalid board string {text!r}. Must be 9 chars of 0/1/2 or X/O/."
            )
        return cls(_PARSE[c] for c in raw)

    def serialize(self) -> str:
        return ''.join(c.digit for c in self._cells)

    def key(self) -> Tuple[Cell, ...]:
        return tuple(self._cells)

    def copy(self) -> 'Board':
        b = Board.__new__(Board)
        b._cells = self._cells[:]
        return b

    def is_empty(self) -> bool:
        return all(c is Cell.EMPTY for c in self._cells)

    def count(self, mark: Mark) -> int:
        return self._cells.count(Cell.of(mark))

    def place(self, index: int, mark: Mark) -> None:
        if not 0 <= index < SIZE:
            raise IllegalMoveError(f"Cell index out of range: {index}")
        if self._cells[index] is not Cell.EMPTY:
            raise IllegalMoveError(f"Cell {index} is already taken by {self._cells[index].value}")
        self._cells[index] = Cell.of(mark)

    def clear(self, index: int) -> None:
        """Undo a speculative placement (search backtracking)."""
        self._cells[index] = Cell.EMPTY

    def __getitem__(self, index: int) -> Cell:
        return self._cells[index]

    def __len__(self) -> int:
        return SIZE

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Board):
            return self._cells == other._cells
        return NotImplemented

    # mutable; use key() for dict/cache lookups
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board('{''.join(c.value for c in self._cells)}')"
