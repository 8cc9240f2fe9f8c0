"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

import time

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = (0.0, 0.0)


def _new_game(**payload):
    response = client.post("/api/game", json=payload)
    assert response.status_code == 200
    return response.json()


def test_create_game_and_first_move():
    payload = _new_game()
    assert payload["currentPlayer"] == "X"
    assert payload["difficulty"] == "hard"
    assert payload["phase"] == "awaiting_human"
    assert payload["board"] == [""] * 9
    assert payload["message"] == "Your turn (X)"
    assert payload["moveLog"] == []

    game_id = payload["id"]
    move_response = client.post(f"/api/game/{game_id}/move", json={"position": 4})
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["moveLog"][0] == {"player": "X", "position": 4}
    assert state["board"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["phase"] == "awaiting_computer"
    assert state["message"] == "Computer is thinking..."
    assert state["aiPending"] is True

    time.sleep(0.01)
    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    final_state = follow_up.json()
    assert final_state["currentPlayer"] == "X"
    assert final_state["phase"] == "awaiting_human"
    assert final_state["aiPending"] is False
    assert final_state["moveLog"][-1]["player"] == "O"
    assert final_state["lastMove"] == final_state["moveLog"][-1]


def test_invalid_move_rejected():
    game_id = _new_game(difficulty="easy")["id"]

    first_move = client.post(f"/api/game/{game_id}/move", json={"position": 0})
    assert first_move.status_code == 200

    # Attempting to play the same cell should fail.
    duplicate_move = client.post(f"/api/game/{game_id}/move", json={"position": 0})
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]


def test_out_of_range_position_rejected():
    game_id = _new_game()["id"]
    response = client.post(f"/api/game/{game_id}/move", json={"position": 9})
    assert response.status_code == 422


def test_rejects_unsupported_difficulty():
    response = client.post("/api/game", json={"difficulty": "impossible"})
    assert response.status_code == 422


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    response = client.post("/api/game/missing/move", json={"position": 0})
    assert response.status_code == 404


def test_hard_computer_never_loses_over_http():
    state = _new_game(difficulty="hard")
    game_id = state["id"]
    for _ in range(5):
        if state["phase"] == "game_over":
            break
        position = state["availableMoves"][0]
        response = client.post(f"/api/game/{game_id}/move", json={"position": position})
        assert response.status_code == 200
        state = client.get(f"/api/game/{game_id}").json()

    assert state["phase"] == "game_over"
    assert state["winner"] != "X"
    assert state["message"] in ("Computer wins!", "It is a draw.")
    if state["status"] == "won":
        line = state["winningLine"]
        assert [state["board"][i] for i in line] == ["O", "O", "O"]

    finished = client.post(f"/api/game/{game_id}/move", json={"position": 0})
    assert finished.status_code == 400
    assert finished.json()["detail"] == "Game already finished"


def test_reset_clears_board_and_switches_difficulty():
    game_id = _new_game(difficulty="hard")["id"]
    client.post(f"/api/game/{game_id}/move", json={"position": 0})

    response = client.post(f"/api/game/{game_id}/reset", json={"difficulty": "easy"})
    assert response.status_code == 200
    state = response.json()
    assert state["board"] == [""] * 9
    assert state["moveLog"] == []
    assert state["phase"] == "awaiting_human"
    assert state["difficulty"] == "easy"


def test_reset_without_body_keeps_difficulty():
    game_id = _new_game(difficulty="medium")["id"]
    response = client.post(f"/api/game/{game_id}/reset")
    assert response.status_code == 200
    assert response.json()["difficulty"] == "medium"


def test_change_difficulty_mid_game():
    game_id = _new_game(difficulty="easy")["id"]
    response = client.put(
        f"/api/game/{game_id}/difficulty", json={"difficulty": "hard"}
    )
    assert response.status_code == 200
    assert response.json()["difficulty"] == "hard"


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic-Tac-Toe" in response.text
    assert 'id="difficulty"' in response.text
