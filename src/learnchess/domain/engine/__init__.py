"""Move evaluation, selection and hinting over an abstract rules engine."""

from .evaluation import PIECE_VALUES, MaterialEvaluator
from .hints import HintGenerator, MoveHint, classify
from .opponent_service import MoveSuggestion, OpponentService
from .review import review_move
from .rules import MAXIMIZING_SIDE, MoveFacts, PieceKind, RulesEngine, Side
from .selection import Difficulty, MoveSelector, NoLegalMovesError

__all__ = [
    "Difficulty",
    "HintGenerator",
    "MAXIMIZING_SIDE",
    "MaterialEvaluator",
    "MoveFacts",
    "MoveHint",
    "MoveSelector",
    "MoveSuggestion",
    "NoLegalMovesError",
    "OpponentService",
    "PIECE_VALUES",
    "PieceKind",
    "RulesEngine",
    "Side",
    "classify",
    "review_move",
]
