from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterable, Protocol, Sequence, Tuple, TypeVar

PositionT = TypeVar("PositionT")
MoveT = TypeVar("MoveT")


class Side(str, Enum):
    white = "white"
    black = "black"

    @property
    def sign(self) -> int:
        """+1 for the maximizing side, -1 for the minimizing side."""
        return 1 if self is MAXIMIZING_SIDE else -1

    @property
    def opponent(self) -> "Side":
        return Side.black if self is Side.white else Side.white


MAXIMIZING_SIDE = Side.white


class PieceKind(str, Enum):
    pawn = "pawn"
    knight = "knight"
    bishop = "bishop"
    rook = "rook"
    queen = "queen"
    king = "king"


@dataclass(frozen=True)
class MoveFacts:
    """Classification of a single move in the position it is played from."""

    from_square: str
    to_square: str
    piece: PieceKind
    promotion: PieceKind | None = None
    is_capture: bool = False
    is_check: bool = False
    is_en_passant: bool = False

    @property
    def to_file(self) -> str:
        return self.to_square[0]


class RulesEngine(Protocol, Generic[PositionT, MoveT]):
    """Capability contract for the chess rules collaborator.

    Positions are treated as snapshots: ``apply_move`` must hand back a new
    position and leave its argument untouched.
    """

    def legal_moves(self, position: PositionT) -> Sequence[MoveT]:
        ...

    def apply_move(self, position: PositionT, move: MoveT) -> PositionT:
        ...

    def is_terminal(self, position: PositionT) -> bool:
        ...

    def side_to_move(self, position: PositionT) -> Side:
        ...

    def pieces(self, position: PositionT) -> Iterable[Tuple[PieceKind, Side]]:
        ...

    def describe(self, position: PositionT, move: MoveT) -> MoveFacts:
        ...


__all__ = [
    "MAXIMIZING_SIDE",
    "MoveFacts",
    "MoveT",
    "PieceKind",
    "PositionT",
    "RulesEngine",
    "Side",
]
