from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Protocol
from uuid import UUID, uuid4

import chess

from src.learnchess.domain.engine.hints import MoveHint
from src.learnchess.domain.engine.opponent_service import OpponentService
from src.learnchess.domain.engine.selection import Difficulty


class SessionStatus(str, Enum):
    in_progress = "in_progress"
    white_won = "white_won"
    black_won = "black_won"
    drawn = "drawn"
    aborted = "aborted"


class PlayerColor(str, Enum):
    white = "white"
    black = "black"


class MoveActor(str, Enum):
    human = "human"
    ai = "ai"


@dataclass
class MoveRecord:
    san: str
    uci: str
    actor: MoveActor
    timestamp: datetime
    evaluation: float | None = None
    rationale: List[str] = field(default_factory=list)
    feedback: str | None = None


@dataclass
class GameSession:
    id: UUID
    status: SessionStatus
    player_color: PlayerColor
    difficulty: Difficulty
    initial_fen: str
    current_fen: str
    moves: List[MoveRecord] = field(default_factory=list)
    evaluation: float | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    undo_count: int = 0
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def mistakes(self) -> List[MoveRecord]:
        return [move for move in self.moves if move.actor is MoveActor.human and move.feedback]

    @property
    def awaiting_opponent(self) -> bool:
        if self.status is not SessionStatus.in_progress:
            return False
        board = chess.Board(self.current_fen)
        return board.turn != _color_of(self.player_color)


class GameSessionRepository(Protocol):
    """Persistence contract for session entities."""

    def create(self, session: GameSession) -> GameSession:
        ...

    def get(self, session_id: UUID) -> GameSession | None:
        ...

    def save(self, session: GameSession) -> GameSession:
        ...


class SessionError(RuntimeError):
    """Base class for session-related domain errors."""

    code: str = "session_error"


class SessionNotFoundError(SessionError):
    code = "session_not_found"


class IllegalMoveError(SessionError):
    code = "illegal_move"


class SessionCompletedError(SessionError):
    code = "session_completed"


class NotOpponentTurnError(SessionError):
    code = "not_opponent_turn"


class UndoNotAvailableError(SessionError):
    code = "nothing_to_undo"


def _color_of(player_color: PlayerColor) -> chess.Color:
    return chess.WHITE if player_color is PlayerColor.white else chess.BLACK


class SessionManager:
    """Coordinate practice sessions: human moves, opponent replies and hints."""

    def __init__(
        self,
        repository: GameSessionRepository,
        opponent: OpponentService,
    ) -> None:
        self._repository = repository
        self._opponent = opponent

    def create_session(
        self,
        *,
        player_color: PlayerColor,
        difficulty: Difficulty,
        initial_fen: str | None = None,
    ) -> GameSession:
        try:
            board = chess.Board(initial_fen) if initial_fen else chess.Board()
        except ValueError as exc:
            raise IllegalMoveError(f"Invalid FEN: {initial_fen}") from exc
        if not board.is_valid():
            raise IllegalMoveError(f"Invalid FEN: {initial_fen} is not a legal position.")

        now = datetime.now(timezone.utc)
        session = GameSession(
            id=uuid4(),
            status=SessionStatus.in_progress,
            player_color=player_color,
            difficulty=difficulty,
            initial_fen=board.fen(),
            current_fen=board.fen(),
            moves=[],
            evaluation=None,
            started_at=now,
            updated_at=now,
        )
        self._sync_from_board(session, board)
        return self._repository.create(session)

    def get_session(self, session_id: UUID) -> GameSession:
        session = self._repository.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found.")
        return session

    def submit_move(self, session_id: UUID, uci: str) -> GameSession:
        session = self.get_session(session_id)
        if session.status is not SessionStatus.in_progress:
            raise SessionCompletedError(f"Session {session_id} already completed.")

        board = self._build_board(session)
        if board.turn != _color_of(session.player_color):
            raise IllegalMoveError("It is not the human player's turn.")

        try:
            move = chess.Move.from_uci(uci)
        except ValueError as exc:
            raise IllegalMoveError(f"Invalid UCI string: {uci}") from exc

        # Pawns reaching the last rank without a piece letter become queens.
        if (
            move.promotion is None
            and board.piece_type_at(move.from_square) == chess.PAWN
            and chess.square_rank(move.to_square) in (0, 7)
        ):
            move = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)

        if move not in board.legal_moves:
            raise IllegalMoveError(f"Move {uci} is not legal in the current position.")

        now = datetime.now(timezone.utc)
        san = board.san(move)
        feedback = self._opponent.review_move(board, move)
        board.push(move)
        session.moves.append(
            MoveRecord(
                san=san,
                uci=move.uci(),
                actor=MoveActor.human,
                timestamp=now,
                feedback=feedback,
            )
        )
        session.updated_at = now
        self._sync_from_board(session, board)
        return self._repository.save(session)

    def play_opponent_move(self, session_id: UUID) -> GameSession:
        session = self.get_session(session_id)
        if session.status is not SessionStatus.in_progress:
            raise SessionCompletedError(f"Session {session_id} already completed.")

        board = self._build_board(session)
        if board.turn == _color_of(session.player_color):
            raise NotOpponentTurnError("It is the human player's turn.")

        suggestion = self._opponent.select_move(
            board.copy(stack=False),
            difficulty=session.difficulty.value,
        )
        move = suggestion.move
        if move not in board.legal_moves:
            raise IllegalMoveError(f"Opponent proposed illegal move {move.uci()}.")

        now = datetime.now(timezone.utc)
        san = board.san(move)
        board.push(move)
        session.moves.append(
            MoveRecord(
                san=san,
                uci=move.uci(),
                actor=MoveActor.ai,
                timestamp=now,
                evaluation=suggestion.evaluation,
                rationale=list(suggestion.rationale or []),
            )
        )
        session.evaluation = suggestion.evaluation
        session.updated_at = now
        self._sync_from_board(session, board)
        return self._repository.save(session)

    def hints(self, session_id: UUID) -> list[MoveHint[chess.Move]]:
        session = self.get_session(session_id)
        if session.status is not SessionStatus.in_progress:
            return []
        return self._opponent.explain_moves(self._build_board(session))

    def undo_last(self, session_id: UUID) -> GameSession:
        session = self.get_session(session_id)
        if not session.moves:
            raise UndoNotAvailableError("No moves to undo.")

        expected_turn = _color_of(session.player_color)

        # Remove moves until it is once again the human player's turn.
        while session.moves:
            session.moves.pop()
            board = self._build_board(session)
            if board.turn == expected_turn or not session.moves:
                break

        session.undo_count += 1
        session.ended_at = None
        session.status = SessionStatus.in_progress
        session.updated_at = datetime.now(timezone.utc)
        session.evaluation = next(
            (move.evaluation for move in reversed(session.moves) if move.actor is MoveActor.ai),
            None,
        )

        board = self._build_board(session)
        self._sync_from_board(session, board)
        return self._repository.save(session)

    def resign(self, session_id: UUID) -> GameSession:
        session = self.get_session(session_id)
        if session.status is not SessionStatus.in_progress:
            return session

        now = datetime.now(timezone.utc)
        session.status = (
            SessionStatus.black_won if session.player_color is PlayerColor.white else SessionStatus.white_won
        )
        session.ended_at = now
        session.updated_at = now
        return self._repository.save(session)

    def _sync_from_board(self, session: GameSession, board: chess.Board) -> None:
        session.current_fen = board.fen()
        outcome = board.outcome(claim_draw=True)
        if outcome is None:
            session.status = SessionStatus.in_progress
            session.ended_at = None
            return

        if outcome.winner is None:
            session.status = SessionStatus.drawn
        elif outcome.winner == chess.WHITE:
            session.status = SessionStatus.white_won
        else:
            session.status = SessionStatus.black_won

        session.ended_at = session.ended_at or datetime.now(timezone.utc)

    def _build_board(self, session: GameSession) -> chess.Board:
        board = chess.Board(session.initial_fen)
        for move in session.moves:
            board.push(chess.Move.from_uci(move.uci))
        return board


__all__ = [
    "GameSession",
    "GameSessionRepository",
    "IllegalMoveError",
    "MoveActor",
    "MoveRecord",
    "NotOpponentTurnError",
    "PlayerColor",
    "SessionCompletedError",
    "SessionError",
    "SessionManager",
    "SessionNotFoundError",
    "SessionStatus",
    "UndoNotAvailableError",
]
