from __future__ import annotations

import random
from enum import Enum
from typing import Generic

from src.learnchess.domain.engine.evaluation import MaterialEvaluator
from src.learnchess.domain.engine.rules import MoveT, PositionT, RulesEngine

REPLY_WEIGHT = 0.5


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class NoLegalMovesError(RuntimeError):
    """Raised when a move is requested for a position without legal moves."""

    code = "no_legal_moves"


class MoveSelector(Generic[PositionT, MoveT]):
    """Pick the computer's move for a difficulty level.

    Easy plays a uniformly random legal move. Medium scores every move by the
    material balance after it, seen from the mover. Hard adds, for each
    opponent reply, half of the balance after that reply. Replies are summed
    rather than minimised, so moves that leave the opponent many quiet replies
    are favoured as well.

    Medium and Hard start from a random pick and only switch on a strictly
    better value, so equal candidates resolve to the pick or to the earliest
    better move in the engine's enumeration order.
    """

    def __init__(
        self,
        rules: RulesEngine[PositionT, MoveT],
        evaluator: MaterialEvaluator[PositionT, MoveT] | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._rules = rules
        self._evaluator = evaluator or MaterialEvaluator(rules)
        self._rng = rng or random.Random()

    def select_move(self, position: PositionT, difficulty: Difficulty | str) -> MoveT:
        difficulty = Difficulty(difficulty)
        moves = list(self._rules.legal_moves(position))
        if not moves:
            raise NoLegalMovesError("No legal moves available in this position.")

        pick = self._rng.choice(moves)
        if difficulty is Difficulty.easy:
            return pick

        lookahead = difficulty is Difficulty.hard
        best_move = pick
        best_value = self.move_value(position, pick, lookahead=lookahead)
        for move in moves:
            if move == pick:
                continue
            value = self.move_value(position, move, lookahead=lookahead)
            if value > best_value:
                best_move = move
                best_value = value
        return best_move

    def move_value(self, position: PositionT, move: MoveT, *, lookahead: bool = False) -> float:
        mover = self._rules.side_to_move(position)
        successor = self._rules.apply_move(position, move)
        value: float = -self._evaluator.score_for(successor, mover.opponent)
        if not lookahead:
            return value

        for reply in self._rules.legal_moves(successor):
            after_reply = self._rules.apply_move(successor, reply)
            value += REPLY_WEIGHT * self._evaluator.score_for(after_reply, mover)
        return value


__all__ = ["Difficulty", "MoveSelector", "NoLegalMovesError", "REPLY_WEIGHT"]
