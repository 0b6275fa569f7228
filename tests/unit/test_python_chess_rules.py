from __future__ import annotations

from collections import Counter

import chess
import pytest

from src.learnchess.domain.engine.review import review_move
from src.learnchess.domain.engine.rules import PieceKind, Side
from src.learnchess.domain.engine.selection import NoLegalMovesError
from src.learnchess.infrastructure.rules import HeuristicOpponent, PythonChessRules


def test_apply_move_returns_new_position(rules: PythonChessRules) -> None:
    board = chess.Board()
    successor = rules.apply_move(board, chess.Move.from_uci("e2e4"))
    assert board.fen() == chess.STARTING_FEN
    assert successor.piece_at(chess.E4) == chess.Piece(chess.PAWN, chess.WHITE)
    assert rules.side_to_move(board) is Side.white
    assert rules.side_to_move(successor) is Side.black


def test_pieces_enumerates_starting_material(rules: PythonChessRules) -> None:
    counts = Counter(rules.pieces(chess.Board()))
    assert counts[(PieceKind.pawn, Side.white)] == 8
    assert counts[(PieceKind.knight, Side.black)] == 2
    assert counts[(PieceKind.king, Side.white)] == 1
    assert sum(counts.values()) == 32


def test_is_terminal_on_checkmate(rules: PythonChessRules) -> None:
    board = chess.Board("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3")
    assert rules.is_terminal(board)
    assert rules.legal_moves(board) == []
    assert not rules.is_terminal(chess.Board())


def test_describe_promotion_with_check(rules: PythonChessRules) -> None:
    board = chess.Board("k7/4P3/8/8/8/8/8/K7 w - - 0 1")
    facts = rules.describe(board, chess.Move.from_uci("e7e8q"))
    assert facts.from_square == "e7"
    assert facts.to_square == "e8"
    assert facts.to_file == "e"
    assert facts.piece is PieceKind.pawn
    assert facts.promotion is PieceKind.queen
    assert facts.is_check
    assert not facts.is_capture


def test_describe_rejects_empty_origin(rules: PythonChessRules) -> None:
    with pytest.raises(ValueError):
        rules.describe(chess.Board(), chess.Move.from_uci("e4e5"))


def test_review_flags_quiet_moves_only(rules: PythonChessRules) -> None:
    board = chess.Board("4k3/8/8/p7/8/8/8/R6K w - - 0 1")
    quiet = review_move(rules.describe(board, chess.Move.from_uci("a1b1")))
    capture = review_move(rules.describe(board, chess.Move.from_uci("a1a5")))
    assert quiet == "You moved a rook from a1 to b1 - review better options!"
    assert capture is None


@pytest.mark.parametrize(
    ("fen", "uci", "piece", "origin", "target"),
    [
        ("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 2", "e5d6", "pawn", "e5", "d6"),
        ("1r5k/P7/8/8/8/8/8/K7 w - - 0 1", "a7b8q", "pawn", "a7", "b8"),
    ],
)
def test_review_flags_en_passant_and_capture_promotion(
    rules: PythonChessRules, fen: str, uci: str, piece: str, origin: str, target: str
) -> None:
    board = chess.Board(fen)
    move = chess.Move.from_uci(uci)
    facts = rules.describe(board, move)
    assert facts.is_capture
    assert review_move(facts) == f"You moved a {piece} from {origin} to {target} - review better options!"


def test_opponent_refuses_finished_games() -> None:
    board = chess.Board("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3")
    with pytest.raises(NoLegalMovesError):
        HeuristicOpponent(seed=1).select_move(board, difficulty="easy")


def test_opponent_suggestion_reports_resulting_material() -> None:
    board = chess.Board("3q3k/8/8/8/8/8/8/K2R4 w - - 0 1")
    suggestion = HeuristicOpponent(seed=1).select_move(board, difficulty="medium")
    assert suggestion.move == chess.Move.from_uci("d1d8")
    assert suggestion.evaluation == 5.0
    assert board.fen() == "3q3k/8/8/8/8/8/8/K2R4 w - - 0 1"
