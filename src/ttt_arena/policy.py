"""
Opponent policies: uniform random, optimal, and a fair-coin mix of the two.

The probability that a difficulty defers to the exact solver is documented in
OPTIMAL_PROBABILITY. Randomness comes from a numpy Generator so tests and the
CLI can inject a seeded one.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional, Sequence, Union

import numpy as np

from .board import Cell, Mark
from .errors import InvalidDifficultyError, NoLegalMovesError
from .rules import legal_moves
from .solver import best_move


class Difficulty(str, Enum):
    RANDOM = 'random'
    MIXED = 'mixed'
    OPTIMAL = 'optimal'

    @classmethod
    def parse(cls, value: Union['Difficulty', str]) -> 'Difficulty':
        if isinstance(value, Difficulty):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _ALIASES:
                return _ALIASES[key]
        raise InvalidDifficultyError(
            f"Unknown difficulty {value!r}; expected one of "
            f"{', '.join(sorted(_ALIASES))}"
        )


_ALIASES: Dict[str, Difficulty] = {
    'random': Difficulty.RANDOM,
    'easy': Difficulty.RANDOM,
    'mixed': Difficulty.MIXED,
    'medium': Difficulty.MIXED,
    'optimal': Difficulty.OPTIMAL,
    'hard': Difficulty.OPTIMAL,
}

OPTIMAL_PROBABILITY: Dict[Difficulty, float] = {
    Difficulty.RANDOM: 0.0,
    Difficulty.MIXED: 0.5,
    Difficulty.OPTIMAL: 1.0,
}


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def random_move(board: Sequence[Cell], rng: Optional[np.random.Generator] = None) -> int:
    moves = legal_moves(board)
    if not moves:
        raise NoLegalMovesError("No legal move on a full board")
    return int(_rng(rng).choice(moves))


def choose_move(
    board: Sequence[Cell],
    difficulty: Union[Difficulty, str],
    rng: Optional[np.random.Generator] = None,
    mark: Mark = Mark.O,
) -> int:
    level = Difficulty.parse(difficulty)
    if not legal_moves(board):
        raise NoLegalMovesError("choose_move called on a full board")
    gen = _rng(rng)
    if level is Difficulty.RANDOM:
        mv = random_move(board, gen)
    elif level is Difficulty.OPTIMAL:
        mv = best_move(board, mark)
    else:
        if gen.random() < OPTIMAL_PROBABILITY[level]:
            mv = best_move(board, mark)
        else:
            mv = random_move(board, gen)
    logging.debug("choose_move difficulty=%s mark=%s -> %d", level.value, mark, mv)
    return mv
