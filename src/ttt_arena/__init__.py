"""ttt_arena package.

Tic-tac-toe decision engine (exact minimax, random and mixed opponents), a
terminal game session with a persisted tally, and a self-play arena.

Convenience imports are exposed for common workflows.
"""

from .board import Board, Cell, Mark
from .policy import Difficulty, choose_move, random_move
from .rules import Outcome, evaluate, is_full, legal_moves, outcome
from .solver import best_move, minimax, score_moves

__all__ = [
    "Board",
    "Cell",
    "Mark",
    "Outcome",
    "Difficulty",
    "legal_moves",
    "evaluate",
    "is_full",
    "outcome",
    "minimax",
    "score_moves",
    "best_move",
    "choose_move",
    "random_move",
]
