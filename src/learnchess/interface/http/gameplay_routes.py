from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator
from uuid import UUID, uuid4

from flask import Blueprint, current_app, jsonify, request

from src.learnchess.domain.chess import (
    GameSession,
    IllegalMoveError,
    NotOpponentTurnError,
    PlayerColor,
    SessionCompletedError,
    SessionManager,
    SessionNotFoundError,
    UndoNotAvailableError,
)
from src.learnchess.domain.engine.selection import Difficulty
from src.learnchess.infrastructure.persistence.base import session_scope
from src.learnchess.infrastructure.persistence.game_session_repository import (
    SqlAlchemyGameSessionRepository,
    serialize_move,
)
from src.learnchess.interface.telemetry.logging import bind_trace, get_logger

gameplay_bp = Blueprint("gameplay", __name__)
logger = get_logger("learnchess.api.sessions")


@contextmanager
def _session_manager() -> Iterator[SessionManager]:
    factory = current_app.config["SESSION_FACTORY"]
    with session_scope(factory) as db_session:
        repository = SqlAlchemyGameSessionRepository(db_session)
        yield SessionManager(repository, current_app.extensions["opponent"])


def _serialize_session(session: GameSession, trace_id: str | None = None) -> dict[str, Any]:
    return {
        "id": str(session.id),
        "status": session.status.value,
        "playerColor": session.player_color.value,
        "difficulty": session.difficulty.value,
        "currentFen": session.current_fen,
        "moves": [serialize_move(move) for move in session.moves],
        "mistakes": [
            {"san": move.san, "uci": move.uci, "feedback": move.feedback}
            for move in session.mistakes
        ],
        "awaitingOpponent": session.awaiting_opponent,
        "opponentDelayMs": current_app.config["OPPONENT_DELAY_MS"],
        "undoCount": session.undo_count,
        "evaluation": session.evaluation,
        "startedAt": session.started_at.isoformat(),
        "updatedAt": session.updated_at.isoformat(),
        "endedAt": session.ended_at.isoformat() if session.ended_at else None,
        "traceId": trace_id,
    }


def _domain_error(code: str, message: str, status: int = 400, detail: Any | None = None):
    payload: dict[str, Any] = {"code": code, "message": message}
    if detail is not None:
        payload["detail"] = detail
    return jsonify(payload), status


def _trace_id() -> str:
    return request.headers.get("X-Trace-Id") or uuid4().hex


def _parse_session_id(session_id: str) -> UUID | None:
    try:
        return UUID(session_id)
    except ValueError:
        return None


def _invalid_session_id():
    return _domain_error("invalid_session_id", "sessionId must be a valid UUID.", status=400)


def _session_not_found(log: Any, session_id: str):
    log.warning("session_not_found", session_id=session_id)
    return _domain_error("session_not_found", "Session not found.", status=404)


@gameplay_bp.post("")
def create_session():
    payload = request.get_json(silent=True) or {}
    trace_id = _trace_id()
    log = bind_trace(logger, trace_id)

    try:
        player_color = PlayerColor(payload.get("playerColor", "white"))
    except ValueError:
        return _domain_error("invalid_color", "playerColor must be 'white' or 'black'.")

    try:
        difficulty = Difficulty(payload.get("difficulty", current_app.config["DEFAULT_DIFFICULTY"]))
    except ValueError:
        return _domain_error("invalid_difficulty", "difficulty must be 'easy', 'medium' or 'hard'.")

    initial_fen = payload.get("fen")
    if initial_fen is not None and not isinstance(initial_fen, str):
        return _domain_error("invalid_fen", "fen must be a string.")

    try:
        with _session_manager() as manager:
            session = manager.create_session(
                player_color=player_color,
                difficulty=difficulty,
                initial_fen=initial_fen,
            )
    except IllegalMoveError as exc:
        log.warning("invalid_fen_rejected", fen=initial_fen)
        return _domain_error("invalid_fen", str(exc))

    log.info(
        "session_created",
        session_id=str(session.id),
        player_color=player_color.value,
        difficulty=difficulty.value,
    )
    return jsonify(_serialize_session(session, trace_id=trace_id)), 201


@gameplay_bp.get("/<session_id>")
def get_session(session_id: str):
    trace_id = _trace_id()
    log = bind_trace(logger, trace_id, session_id=session_id)
    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _invalid_session_id()

    try:
        with _session_manager() as manager:
            session = manager.get_session(session_uuid)
    except SessionNotFoundError:
        return _session_not_found(log, session_id)

    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


@gameplay_bp.post("/<session_id>/moves")
def submit_move(session_id: str):
    payload = request.get_json(silent=True) or {}
    trace_id = _trace_id()
    log = bind_trace(logger, trace_id, session_id=session_id)
    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _invalid_session_id()

    uci = payload.get("uci")
    if not isinstance(uci, str):
        return _domain_error("invalid_move", "uci must be provided as a string.", status=400)

    try:
        with _session_manager() as manager:
            session = manager.submit_move(session_uuid, uci)
    except SessionNotFoundError:
        return _session_not_found(log, session_id)
    except IllegalMoveError as exc:
        log.warning("illegal_move_rejected", uci=uci, detail=str(exc))
        return _domain_error("illegal_move", str(exc), status=409)
    except SessionCompletedError as exc:
        log.warning("move_after_completion", reason=str(exc))
        return _domain_error("session_completed", "Session already completed.", status=409)

    log.info(
        "move_accepted",
        uci=uci,
        total_moves=len(session.moves),
        flagged=session.moves[-1].feedback is not None,
    )
    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


@gameplay_bp.post("/<session_id>/opponent-move")
def opponent_move(session_id: str):
    trace_id = _trace_id()
    log = bind_trace(logger, trace_id, session_id=session_id)
    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _invalid_session_id()

    try:
        with _session_manager() as manager:
            session = manager.play_opponent_move(session_uuid)
    except SessionNotFoundError:
        return _session_not_found(log, session_id)
    except NotOpponentTurnError as exc:
        log.warning("opponent_out_of_turn", reason=str(exc))
        return _domain_error(exc.code, str(exc), status=409)
    except IllegalMoveError as exc:
        log.warning("opponent_move_rejected", detail=str(exc))
        return _domain_error("illegal_move", str(exc), status=409)
    except SessionCompletedError as exc:
        log.warning("move_after_completion", reason=str(exc))
        return _domain_error("session_completed", "Session already completed.", status=409)

    last = session.moves[-1]
    log.info(
        "opponent_moved",
        uci=last.uci,
        difficulty=session.difficulty.value,
        evaluation=last.evaluation,
    )
    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


@gameplay_bp.get("/<session_id>/hints")
def move_hints(session_id: str):
    trace_id = _trace_id()
    log = bind_trace(logger, trace_id, session_id=session_id)
    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _invalid_session_id()

    try:
        with _session_manager() as manager:
            hints = manager.hints(session_uuid)
    except SessionNotFoundError:
        return _session_not_found(log, session_id)

    entries = [{"uci": hint.move.uci(), "reason": hint.reason} for hint in hints]
    log.info("hint_served", available=len(entries))
    return jsonify({"hint": entries[0] if entries else None, "hints": entries, "traceId": trace_id}), 200


@gameplay_bp.post("/<session_id>/undo")
def undo_move(session_id: str):
    trace_id = _trace_id()
    log = bind_trace(logger, trace_id, session_id=session_id)
    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _invalid_session_id()

    try:
        with _session_manager() as manager:
            session = manager.undo_last(session_uuid)
    except SessionNotFoundError:
        return _session_not_found(log, session_id)
    except UndoNotAvailableError as exc:
        log.warning("undo_unavailable", reason=str(exc))
        return _domain_error("undo_unavailable", str(exc), status=409)

    log.info("undo_applied", remaining_moves=len(session.moves))
    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


@gameplay_bp.post("/<session_id>/resign")
def resign_session(session_id: str):
    trace_id = _trace_id()
    log = bind_trace(logger, trace_id, session_id=session_id)
    session_uuid = _parse_session_id(session_id)
    if session_uuid is None:
        return _invalid_session_id()

    try:
        with _session_manager() as manager:
            session = manager.resign(session_uuid)
    except SessionNotFoundError:
        return _session_not_found(log, session_id)

    log.info("session_resigned", resulting_status=session.status.value)
    return jsonify(_serialize_session(session, trace_id=trace_id)), 200


__all__ = ["gameplay_bp"]
