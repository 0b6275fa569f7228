from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import chess

from src.learnchess.domain.engine import MoveSuggestion
from src.learnchess.domain.engine.hints import CAPTURE_REASON
from src.learnchess.infrastructure.rules import HeuristicOpponent

QUEEN_HANGS_FEN = "3q3k/8/8/8/8/8/8/K2R4 w - - 0 1"


def _create(client, **payload):
    body = {"playerColor": "white", "difficulty": "medium"}
    body.update(payload)
    response = client.post("/api/v1/sessions", json=body)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_healthcheck(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_create_session_as_white(client):
    payload = _create(client)
    assert UUID(payload["id"])
    assert payload["status"] == "in_progress"
    assert payload["playerColor"] == "white"
    assert payload["difficulty"] == "medium"
    assert payload["currentFen"] == chess.Board().fen()
    assert payload["moves"] == []
    assert payload["mistakes"] == []
    assert payload["awaitingOpponent"] is False
    assert payload["opponentDelayMs"] == 250
    assert payload["undoCount"] == 0
    assert isinstance(datetime.fromisoformat(payload["startedAt"]), datetime)


def test_trace_id_is_echoed(client):
    response = client.post(
        "/api/v1/sessions",
        json={"playerColor": "white"},
        headers={"X-Trace-Id": "trace-123"},
    )
    assert response.status_code == 201
    assert response.get_json()["traceId"] == "trace-123"


def test_difficulty_defaults_from_config(client):
    response = client.post("/api/v1/sessions", json={"playerColor": "white"})
    assert response.get_json()["difficulty"] == "medium"


def test_invalid_color_and_difficulty(client):
    bad_color = client.post("/api/v1/sessions", json={"playerColor": "green"})
    assert bad_color.status_code == 400
    assert bad_color.get_json()["code"] == "invalid_color"

    bad_level = client.post("/api/v1/sessions", json={"difficulty": "grandmaster"})
    assert bad_level.status_code == 400
    assert bad_level.get_json()["code"] == "invalid_difficulty"

    bad_fen = client.post("/api/v1/sessions", json={"fen": "not a fen"})
    assert bad_fen.status_code == 400
    assert bad_fen.get_json()["code"] == "invalid_fen"


def test_unreachable_fen_is_rejected(client):
    response = client.post("/api/v1/sessions", json={"fen": "k7/8/8/8/8/8/8/K6r b - - 0 1"})
    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_fen"


def test_create_session_as_black_then_request_opponent_opening(client):
    payload = _create(client, playerColor="black")
    assert payload["moves"] == []
    assert payload["awaitingOpponent"] is True

    response = client.post(f"/api/v1/sessions/{payload['id']}/opponent-move")
    assert response.status_code == 200
    state = response.get_json()
    ai_move = state["moves"][0]
    assert ai_move["actor"] == "ai"
    assert ai_move["san"]
    assert chess.Move.from_uci(ai_move["uci"]) in chess.Board().legal_moves
    assert state["awaitingOpponent"] is False


def test_submit_illegal_move_returns_conflict(client):
    session_id = _create(client)["id"]
    response = client.post(f"/api/v1/sessions/{session_id}/moves", json={"uci": "e7e5"})
    assert response.status_code == 409
    assert response.get_json()["code"] == "illegal_move"


def test_submit_move_requires_uci_string(client):
    session_id = _create(client)["id"]
    response = client.post(f"/api/v1/sessions/{session_id}/moves", json={"uci": 42})
    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_move"


def test_submit_legal_move_flags_mistake_and_awaits_opponent(client):
    session_id = _create(client)["id"]
    response = client.post(f"/api/v1/sessions/{session_id}/moves", json={"uci": "e2e4"})
    assert response.status_code == 200
    payload = response.get_json()
    assert len(payload["moves"]) == 1
    assert payload["moves"][0]["actor"] == "human"
    assert payload["awaitingOpponent"] is True
    assert payload["mistakes"] == [
        {
            "san": "e4",
            "uci": "e2e4",
            "feedback": "You moved a pawn from e2 to e4 - review better options!",
        }
    ]

    early = client.post(f"/api/v1/sessions/{session_id}/moves", json={"uci": "d2d4"})
    assert early.status_code == 409


def test_bare_promotion_is_played_as_queen(client):
    session_id = _create(client, fen="k7/4P3/8/8/8/8/8/K7 w - - 0 1")["id"]
    response = client.post(f"/api/v1/sessions/{session_id}/moves", json={"uci": "e7e8"})
    assert response.status_code == 200, response.get_json()
    last = response.get_json()["moves"][-1]
    assert last["uci"] == "e7e8q"
    assert last["san"] == "e8=Q+"


def test_opponent_move_out_of_turn_conflicts(client):
    session_id = _create(client)["id"]
    response = client.post(f"/api/v1/sessions/{session_id}/opponent-move")
    assert response.status_code == 409
    assert response.get_json()["code"] == "not_opponent_turn"


class _IllegalOpponent(HeuristicOpponent):
    def select_move(self, board, *, difficulty="medium"):
        return MoveSuggestion(move=chess.Move.from_uci("e2e5"))


def test_illegal_opponent_move_conflicts(app, client):
    app.extensions["opponent"] = _IllegalOpponent(seed=1)
    payload = _create(client, playerColor="black")
    response = client.post(f"/api/v1/sessions/{payload['id']}/opponent-move")
    assert response.status_code == 409
    assert response.get_json()["code"] == "illegal_move"

    state = client.get(f"/api/v1/sessions/{payload['id']}").get_json()
    assert state["moves"] == []


def test_opponent_captures_hanging_queen(client):
    payload = _create(client, playerColor="black", difficulty="hard", fen=QUEEN_HANGS_FEN)
    response = client.post(f"/api/v1/sessions/{payload['id']}/opponent-move")
    assert response.status_code == 200
    state = response.get_json()
    assert state["moves"][-1]["uci"] == "d1d8"
    assert state["moves"][-1]["rationale"] == [CAPTURE_REASON]
    assert state["evaluation"] == 5.0


def test_hints_endpoint(client):
    session_id = _create(client)["id"]
    response = client.get(f"/api/v1/sessions/{session_id}/hints")
    assert response.status_code == 200
    payload = response.get_json()
    assert len(payload["hints"]) == 20
    assert payload["hint"] == payload["hints"][0]
    assert all(entry["reason"] for entry in payload["hints"])


def test_get_session_returns_latest_state(client):
    session_id = _create(client)["id"]
    client.post(f"/api/v1/sessions/{session_id}/moves", json={"uci": "d2d4"})
    client.post(f"/api/v1/sessions/{session_id}/opponent-move")

    response = client.get(f"/api/v1/sessions/{session_id}")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["id"] == session_id
    assert [move["actor"] for move in payload["moves"]] == ["human", "ai"]


def test_unknown_and_malformed_session_ids(client):
    missing = client.get(f"/api/v1/sessions/{uuid4()}")
    assert missing.status_code == 404
    assert missing.get_json()["code"] == "session_not_found"

    malformed = client.post("/api/v1/sessions/not-a-uuid/undo")
    assert malformed.status_code == 400
    assert malformed.get_json()["code"] == "invalid_session_id"


def test_undo_rewinds_last_pair_of_moves(client):
    session_id = _create(client)["id"]
    client.post(f"/api/v1/sessions/{session_id}/moves", json={"uci": "g1f3"})
    client.post(f"/api/v1/sessions/{session_id}/opponent-move")

    undo = client.post(f"/api/v1/sessions/{session_id}/undo")
    assert undo.status_code == 200
    payload = undo.get_json()
    assert payload["moves"] == []
    assert payload["undoCount"] == 1
    assert payload["currentFen"] == chess.Board().fen()

    nothing = client.post(f"/api/v1/sessions/{session_id}/undo")
    assert nothing.status_code == 409
    assert nothing.get_json()["code"] == "undo_unavailable"


def test_resign_completes_game(client):
    session_id = _create(client)["id"]
    resign = client.post(f"/api/v1/sessions/{session_id}/resign")
    assert resign.status_code == 200
    payload = resign.get_json()
    assert payload["status"] == "black_won"
    assert payload["endedAt"] is not None

    after = client.post(f"/api/v1/sessions/{session_id}/moves", json={"uci": "e2e4"})
    assert after.status_code == 409
    assert after.get_json()["code"] == "session_completed"
