"""
Running win/loss/draw tally persisted as JSON.

The file holds a mapping; the tally lives under the fixed slot
STORAGE_KEY as {"xWins": int, "oWins": int, "draws": int}. Other keys in the
file are preserved on save.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .board import Mark
from .paths import stats_path
from .rules import Outcome, Status

STORAGE_KEY = "tictactoe_stats"


@dataclass
class Stats:
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome.status is Status.DRAW:
            self.draws += 1
        elif outcome.status is Status.WIN:
            if outcome.winner is Mark.X:
                self.x_wins += 1
            else:
                self.o_wins += 1

    @property
    def games(self) -> int:
        return self.x_wins + self.o_wins + self.draws

    def to_json(self) -> Dict[str, int]:
        return {"xWins": self.x_wins, "oWins": self.o_wins, "draws": self.draws}

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Stats":
        return cls(
            x_wins=int(data.get("xWins", 0)),
            o_wins=int(data.get("oWins", 0)),
            draws=int(data.get("draws", 0)),
        )


class StatsStore:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else stats_path()

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            doc = json.loads(self.path.read_text())
        except (OSError, ValueError) as e:
            logging.warning("Ignoring unreadable stats file %s: %s", self.path, e)
            return {}
        return doc if isinstance(doc, dict) else {}

    def load(self) -> Stats:
        slot = self._read_document().get(STORAGE_KEY)
        if not isinstance(slot, dict):
            return Stats()
        try:
            return Stats.from_json(slot)
        except (TypeError, ValueError) as e:
            logging.warning("Ignoring malformed stats slot in %s: %s", self.path, e)
            return Stats()

    def save(self, stats: Stats) -> None:
        doc = self._read_document()
        doc[STORAGE_KEY] = stats.to_json()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(doc, indent=2))
        logging.debug("Saved stats to %s: %s", self.path, doc[STORAGE_KEY])

    def clear(self) -> Stats:
        stats = Stats()
        self.save(stats)
        return stats
