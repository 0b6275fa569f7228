from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List

from src.learnchess.domain.engine.rules import MoveFacts, MoveT, PositionT, RulesEngine

CAPTURE_REASON = "captures an opponent's piece"
CHECK_REASON = "puts the king in check"
CENTER_REASON = "controls the center"
EN_PASSANT_REASON = "special en passant capture"
DEVELOPMENT_REASON = "develops your position"

CENTER_FILES = frozenset({"d", "e"})


@dataclass(frozen=True)
class MoveHint(Generic[MoveT]):
    move: MoveT
    reason: str


def classify(facts: MoveFacts) -> str:
    """Return the first matching reason for a move."""
    if facts.is_capture:
        return CAPTURE_REASON
    if facts.is_check:
        return CHECK_REASON
    if facts.to_file in CENTER_FILES:
        return CENTER_REASON
    # En passant is itself a capture, so this only fires for engines that
    # report the two flags independently.
    if facts.is_en_passant:
        return EN_PASSANT_REASON
    return DEVELOPMENT_REASON


class HintGenerator(Generic[PositionT, MoveT]):
    """Label each legal move with a single teaching reason."""

    def __init__(self, rules: RulesEngine[PositionT, MoveT]) -> None:
        self._rules = rules

    def explain_moves(self, position: PositionT) -> List[MoveHint[MoveT]]:
        return [
            MoveHint(move=move, reason=classify(self._rules.describe(position, move)))
            for move in self._rules.legal_moves(position)
        ]

    def first_hint(self, position: PositionT) -> MoveHint[MoveT] | None:
        hints = self.explain_moves(position)
        return hints[0] if hints else None


__all__ = [
    "CAPTURE_REASON",
    "CENTER_REASON",
    "CHECK_REASON",
    "DEVELOPMENT_REASON",
    "EN_PASSANT_REASON",
    "HintGenerator",
    "MoveHint",
    "classify",
]
