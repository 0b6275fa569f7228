from __future__ import annotations

import random

import chess

from src.learnchess.domain.engine.evaluation import MaterialEvaluator
from src.learnchess.domain.engine.hints import HintGenerator, MoveHint, classify
from src.learnchess.domain.engine.opponent_service import MoveSuggestion, OpponentService
from src.learnchess.domain.engine.review import review_move
from src.learnchess.domain.engine.selection import Difficulty, MoveSelector, NoLegalMovesError
from src.learnchess.infrastructure.rules.python_chess_rules import PythonChessRules


class HeuristicOpponent(OpponentService):
    """Material-based computer opponent playing on python-chess boards."""

    def __init__(self, *, rng: random.Random | None = None, seed: int | None = None) -> None:
        self._rules = PythonChessRules()
        self._evaluator = MaterialEvaluator(self._rules)
        self._selector = MoveSelector(
            self._rules,
            self._evaluator,
            rng=rng or random.Random(seed),
        )
        self._hints = HintGenerator(self._rules)

    @property
    def rules(self) -> PythonChessRules:
        return self._rules

    def evaluate(self, board: chess.Board) -> int:
        return self._evaluator.evaluate(board)

    def select_move(
        self,
        board: chess.Board,
        *,
        difficulty: str = Difficulty.medium.value,
    ) -> MoveSuggestion:
        if self._rules.is_terminal(board):
            raise NoLegalMovesError(f"Game is already over: {board.result()}")

        move = self._selector.select_move(board, Difficulty(difficulty))
        successor = self._rules.apply_move(board, move)
        reason = classify(self._rules.describe(board, move))
        return MoveSuggestion(
            move=move,
            evaluation=float(self._evaluator.evaluate(successor)),
            rationale=[reason],
        )

    def explain_moves(self, board: chess.Board) -> list[MoveHint[chess.Move]]:
        return self._hints.explain_moves(board)

    def review_move(self, board: chess.Board, move: chess.Move) -> str | None:
        return review_move(self._rules.describe(board, move))


__all__ = ["HeuristicOpponent"]
