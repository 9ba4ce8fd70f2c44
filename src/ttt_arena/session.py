"""
Game session: turn order, game modes, automated moves and outcome reporting.

X (human) always starts. In the CPU modes the automated side plays O; while
it is O's turn the session refuses human input, so the board has one writer.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .board import Board, Mark
from .errors import GameOverError, NotYourTurnError
from .policy import Difficulty, choose_move
from .rules import ONGOING, Outcome, outcome, winning_line
from .stats import Stats, StatsStore

AI_MARK = Mark.O


class GameMode(str, Enum):
    PVP = 'pvp'
    PVEC = 'pvec'
    PVCM = 'pvcm'
    PVCH = 'pvch'

    @property
    def difficulty(self) -> Optional[Difficulty]:
        return _MODE_DIFFICULTY[self]

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]


_MODE_DIFFICULTY = {
    GameMode.PVP: None,
    GameMode.PVEC: Difficulty.RANDOM,
    GameMode.PVCM: Difficulty.MIXED,
    GameMode.PVCH: Difficulty.OPTIMAL,
}

_MODE_LABELS = {
    GameMode.PVP: "Player vs Player",
    GameMode.PVEC: "Player vs CPU (easy)",
    GameMode.PVCM: "Player vs CPU (medium)",
    GameMode.PVCH: "Player vs CPU (hard)",
}


class GameSession:
    def __init__(
        self,
        mode: GameMode = GameMode.PVP,
        store: Optional[StatsStore] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.mode = GameMode(mode)
        self.store = store
        self.stats = store.load() if store is not None else Stats()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.reset()

    def reset(self) -> None:
        self.board = Board()
        self.current_player = Mark.X
        self.outcome: Outcome = ONGOING

    def change_mode(self, mode: GameMode) -> None:
        self.mode = GameMode(mode)
        self.reset()

    @property
    def active(self) -> bool:
        return not self.outcome.is_over

    def is_ai_turn(self) -> bool:
        return self.mode is not GameMode.PVP and self.current_player is AI_MARK

    def play(self, index: int) -> Outcome:
        """Apply a human move for the current player."""
        if not self.active:
            raise GameOverError("The game is over; reset to play again")
        if self.is_ai_turn():
            raise NotYourTurnError("Waiting for the automated move")
        return self._apply(index, self.current_player)

    def ai_move(self) -> int:
        if not self.active:
            raise GameOverError("The game is over; reset to play again")
        if not self.is_ai_turn():
            raise NotYourTurnError("It is not the automated side's turn")
        mv = choose_move(self.board, self.mode.difficulty, rng=self.rng, mark=AI_MARK)
        self._apply(mv, AI_MARK)
        return mv

    def _apply(self, index: int, mark: Mark) -> Outcome:
        self.board.place(index, mark)
        self.outcome = outcome(self.board)
        if self.outcome.is_over:
            logging.info("Game over: %s", self.outcome)
            self.stats.record(self.outcome)
            if self.store is not None:
                self.store.save(self.stats)
        else:
            self.current_player = mark.opponent
        return self.outcome

    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        if self.outcome.winner is None:
            return None
        return winning_line(self.board, self.outcome.winner)

    def clear_stats(self) -> None:
        self.stats = self.store.clear() if self.store is not None else Stats()
        self.reset()
