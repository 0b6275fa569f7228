from __future__ import annotations

from typing import Generic, Mapping

from src.learnchess.domain.engine.rules import MoveT, PieceKind, PositionT, RulesEngine, Side

PIECE_VALUES: Mapping[PieceKind, int] = {
    PieceKind.pawn: 1,
    PieceKind.knight: 3,
    PieceKind.bishop: 3,
    PieceKind.rook: 5,
    PieceKind.queen: 9,
    PieceKind.king: 100,
}


class MaterialEvaluator(Generic[PositionT, MoveT]):
    """Signed material balance; positive favours white."""

    def __init__(
        self,
        rules: RulesEngine[PositionT, MoveT],
        piece_values: Mapping[PieceKind, int] | None = None,
    ) -> None:
        self._rules = rules
        self._values = dict(piece_values or PIECE_VALUES)

    def evaluate(self, position: PositionT) -> int:
        score = 0
        for kind, side in self._rules.pieces(position):
            score += side.sign * self._values[kind]
        return score

    def score_for(self, position: PositionT, side: Side) -> int:
        """Material balance seen from ``side``."""
        return side.sign * self.evaluate(position)


__all__ = ["MaterialEvaluator", "PIECE_VALUES"]
