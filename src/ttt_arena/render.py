"""Plain-text rendering of boards, status and the scoreboard."""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .board import Cell
from .rules import Status


def render_board(board: Sequence[Cell], highlight: Optional[Iterable[int]] = None) -> str:
    """Three rows; empty cells show their 1-9 key, highlighted cells are bracketed."""
    marked = set(highlight or ())
    rows = []
    for r in range(3):
        parts = []
        for i in range(r * 3, r * 3 + 3):
            c = board[i]
            text = str(i + 1) if c is Cell.EMPTY else c.value
            parts.append(f"[{text}]" if i in marked else f" {text} ")
        rows.append("|".join(parts))
    return "\n---+---+---\n".join(rows)


def status_line(session) -> str:
    out = session.outcome
    if out.status is Status.DRAW:
        return "GAME DRAW!"
    if out.status is Status.WIN:
        return f"WINNER: {out.winner}"
    if session.mode.difficulty is None:
        return f"PLAYER {session.current_player} TURN"
    if session.is_ai_turn():
        return "AI THINKING..."
    return f"YOUR TURN ({session.current_player})"


def scoreboard(stats) -> str:
    return f"X: {stats.x_wins}  O: {stats.o_wins}  DRAW: {stats.draws}"
