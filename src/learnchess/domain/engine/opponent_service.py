from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

import chess

from src.learnchess.domain.engine.hints import MoveHint


@dataclass(frozen=True)
class MoveSuggestion:
    """Opponent result describing the chosen move."""

    move: chess.Move
    evaluation: float | None = None
    rationale: Sequence[str] | None = None


class OpponentService(Protocol):
    """Contract for the computer opponent as seen by game sessions."""

    def select_move(
        self,
        board: chess.Board,
        *,
        difficulty: str = "medium",
    ) -> MoveSuggestion:
        """Pick a legal move for the supplied board position."""

    def explain_moves(self, board: chess.Board) -> list[MoveHint[chess.Move]]:
        """Label every legal move with a teaching reason."""

    def review_move(self, board: chess.Board, move: chess.Move) -> str | None:
        """Return feedback for a human move played from ``board``, if any."""


__all__ = ["MoveSuggestion", "OpponentService"]
