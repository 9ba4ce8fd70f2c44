"""
Dihedral symmetries of the 3x3 grid.
Notes:
- 8 symmetries: identity, three rotations, two flips, two diagonal reflections.
- A transform is stored as a source-index table: new[i] = old[SOURCES[kind][i]].
- Cell indices (moves) transform with the board; index maps are precomputed.
"""
from typing import Dict, List, Sequence, Tuple

from .board import Board, Cell

ALL_SYMS = ['id', 'rot90', 'rot180', 'rot270', 'hflip', 'vflip', 'd1', 'd2']

SOURCES: Dict[str, Tuple[int, ...]] = {
    'id': (0, 1, 2, 3, 4, 5, 6, 7, 8),
    'rot90': (6, 3, 0, 7, 4, 1, 8, 5, 2),
    'rot180': (8, 7, 6, 5, 4, 3, 2, 1, 0),
    'rot270': (2, 5, 8, 1, 4, 7, 0, 3, 6),
    'hflip': (2, 1, 0, 5, 4, 3, 8, 7, 6),
    'vflip': (6, 7, 8, 3, 4, 5, 0, 1, 2),
    'd1': (0, 3, 6, 1, 4, 7, 2, 5, 8),
    'd2': (8, 5, 2, 7, 4, 1, 6, 3, 0),
}

_INVERSE = {
    'id': 'id',
    'rot90': 'rot270',
    'rot180': 'rot180',
    'rot270': 'rot90',
    'hflip': 'hflip',
    'vflip': 'vflip',
    'd1': 'd1',
    'd2': 'd2',
}


def _check(kind: str) -> None:
    if kind not in SOURCES:
        raise ValueError(f"Unknown transformation: {kind}")


def transform_board(board: Sequence[Cell], kind: str) -> Board:
    _check(kind)
    return Board(board[j] for j in SOURCES[kind])


def sym_index_map(kind: str) -> List[int]:
    _check(kind)
    mapping = [0] * 9
    for new, old in enumerate(SOURCES[kind]):
        mapping[old] = new
    return mapping


SYMM_INDEX_MAPS = {k: sym_index_map(k) for k in ALL_SYMS}


def apply_action_transform(action: int, kind: str) -> int:
    _check(kind)
    return SYMM_INDEX_MAPS[kind][action]


def inverse(kind: str) -> str:
    _check(kind)
    return _INVERSE[kind]
