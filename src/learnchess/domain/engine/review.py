from __future__ import annotations

from src.learnchess.domain.engine.rules import MoveFacts


def review_move(facts: MoveFacts) -> str | None:
    """Flag a human move for review unless it is a plain capture.

    En passant and promotions, capturing or not, are flagged like quiet moves.
    """
    if facts.is_capture and not facts.is_en_passant and facts.promotion is None:
        return None
    return (
        f"You moved a {facts.piece.value} from {facts.from_square} to {facts.to_square}"
        " - review better options!"
    )


__all__ = ["review_move"]
