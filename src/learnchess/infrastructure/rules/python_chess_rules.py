from __future__ import annotations

from typing import Iterator, List, Tuple

import chess

from src.learnchess.domain.engine.rules import MoveFacts, PieceKind, RulesEngine, Side

_PIECE_KINDS: dict[chess.PieceType, PieceKind] = {
    chess.PAWN: PieceKind.pawn,
    chess.KNIGHT: PieceKind.knight,
    chess.BISHOP: PieceKind.bishop,
    chess.ROOK: PieceKind.rook,
    chess.QUEEN: PieceKind.queen,
    chess.KING: PieceKind.king,
}


def _side(color: chess.Color) -> Side:
    return Side.white if color == chess.WHITE else Side.black


class PythonChessRules(RulesEngine[chess.Board, chess.Move]):
    """Rules engine backed by python-chess boards."""

    def legal_moves(self, position: chess.Board) -> List[chess.Move]:
        return list(position.legal_moves)

    def apply_move(self, position: chess.Board, move: chess.Move) -> chess.Board:
        successor = position.copy(stack=False)
        successor.push(move)
        return successor

    def is_terminal(self, position: chess.Board) -> bool:
        return position.is_game_over()

    def side_to_move(self, position: chess.Board) -> Side:
        return _side(position.turn)

    def pieces(self, position: chess.Board) -> Iterator[Tuple[PieceKind, Side]]:
        for piece in position.piece_map().values():
            yield _PIECE_KINDS[piece.piece_type], _side(piece.color)

    def describe(self, position: chess.Board, move: chess.Move) -> MoveFacts:
        piece = position.piece_at(move.from_square)
        if piece is None:
            raise ValueError(f"No piece on {chess.square_name(move.from_square)} for move {move.uci()}.")
        return MoveFacts(
            from_square=chess.square_name(move.from_square),
            to_square=chess.square_name(move.to_square),
            piece=_PIECE_KINDS[piece.piece_type],
            promotion=_PIECE_KINDS[move.promotion] if move.promotion else None,
            is_capture=position.is_capture(move),
            is_check=position.gives_check(move),
            is_en_passant=position.is_en_passant(move),
        )


__all__ = ["PythonChessRules"]
