from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import Session

from src.learnchess.domain.chess import (
    GameSession,
    GameSessionRepository,
    MoveActor,
    MoveRecord,
    PlayerColor,
    SessionStatus,
)
from src.learnchess.domain.engine.selection import Difficulty
from src.learnchess.infrastructure.persistence.base import Base


class GameSessionRecord(Base):  # type: ignore[misc]
    __tablename__ = "game_sessions"

    id = Column(String(36), primary_key=True)
    status = Column(String(32), nullable=False)
    player_color = Column(String(8), nullable=False)
    difficulty = Column(String(16), nullable=False)
    initial_fen = Column(Text, nullable=False)
    current_fen = Column(Text, nullable=False)
    moves = Column(JSON, nullable=False, default=list)
    evaluation = Column(Float, nullable=True)
    undo_count = Column(Integer, nullable=False, default=0)
    metadata_payload = Column(JSON, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    ended_at = Column(DateTime(timezone=True), nullable=True)


def serialize_move(move: MoveRecord) -> dict[str, Any]:
    return {
        "san": move.san,
        "uci": move.uci,
        "actor": move.actor.value,
        "timestamp": move.timestamp.isoformat(),
        "evaluation": move.evaluation,
        "rationale": list(move.rationale),
        "feedback": move.feedback,
    }


def _deserialize_moves(items: Optional[Iterable[dict[str, Any]]]) -> List[MoveRecord]:
    if not items:
        return []
    records: List[MoveRecord] = []
    for item in items:
        records.append(
            MoveRecord(
                san=item["san"],
                uci=item["uci"],
                actor=MoveActor(item["actor"]),
                timestamp=datetime.fromisoformat(item["timestamp"]),
                evaluation=item.get("evaluation"),
                rationale=list(item.get("rationale") or []),
                feedback=item.get("feedback"),
            )
        )
    return records


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on round trips.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class SqlAlchemyGameSessionRepository(GameSessionRepository):
    """SQLAlchemy-backed repository for practice sessions."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, session_entity: GameSession) -> GameSession:
        record = GameSessionRecord(id=str(session_entity.id))
        self._apply(record, session_entity)
        self._session.add(record)
        self._session.flush()
        return self._to_entity(record)

    def get(self, session_id: UUID) -> GameSession | None:
        record = self._session.get(GameSessionRecord, str(session_id))
        return self._to_entity(record) if record else None

    def save(self, session_entity: GameSession) -> GameSession:
        record = self._session.get(GameSessionRecord, str(session_entity.id))
        if record is None:
            raise ValueError(f"Session {session_entity.id} not found.")
        self._apply(record, session_entity)
        self._session.flush()
        return self._to_entity(record)

    @staticmethod
    def _apply(record: GameSessionRecord, session_entity: GameSession) -> None:
        record.status = session_entity.status.value
        record.player_color = session_entity.player_color.value
        record.difficulty = session_entity.difficulty.value
        record.initial_fen = session_entity.initial_fen
        record.current_fen = session_entity.current_fen
        record.moves = [serialize_move(move) for move in session_entity.moves]
        record.evaluation = session_entity.evaluation
        record.undo_count = session_entity.undo_count
        record.metadata_payload = session_entity.metadata or {}
        record.started_at = session_entity.started_at
        record.updated_at = session_entity.updated_at
        record.ended_at = session_entity.ended_at

    @staticmethod
    def _to_entity(record: GameSessionRecord) -> GameSession:
        return GameSession(
            id=UUID(record.id),
            status=SessionStatus(record.status),
            player_color=PlayerColor(record.player_color),
            difficulty=Difficulty(record.difficulty),
            initial_fen=record.initial_fen,
            current_fen=record.current_fen,
            moves=_deserialize_moves(record.moves),
            evaluation=record.evaluation if record.evaluation is None else float(record.evaluation),
            undo_count=record.undo_count or 0,
            metadata=dict(record.metadata_payload or {}),
            started_at=_as_utc(record.started_at) or datetime.now(timezone.utc),
            updated_at=_as_utc(record.updated_at) or datetime.now(timezone.utc),
            ended_at=_as_utc(record.ended_at),
        )


class InMemoryGameSessionRepository(GameSessionRepository):
    """Dictionary-backed repository for ephemeral games."""

    def __init__(self) -> None:
        self._sessions: dict[UUID, GameSession] = {}

    def create(self, session: GameSession) -> GameSession:
        self._sessions[session.id] = session
        return session

    def get(self, session_id: UUID) -> GameSession | None:
        return self._sessions.get(session_id)

    def save(self, session: GameSession) -> GameSession:
        if session.id not in self._sessions:
            raise ValueError(f"Session {session.id} not found.")
        self._sessions[session.id] = session
        return session


__all__ = [
    "GameSessionRecord",
    "InMemoryGameSessionRepository",
    "SqlAlchemyGameSessionRepository",
    "serialize_move",
]
