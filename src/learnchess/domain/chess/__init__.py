from .session_manager import (
    GameSession,
    GameSessionRepository,
    MoveActor,
    MoveRecord,
    NotOpponentTurnError,
    PlayerColor,
    SessionManager,
    SessionStatus,
    IllegalMoveError,
    SessionError,
    SessionNotFoundError,
    SessionCompletedError,
    UndoNotAvailableError,
)

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
