"""FastAPI-powered web UI for playing tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .ai import Difficulty
from .game import EMPTY, WON
from .match import Match, Phase

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active match and its move history."""

    match: Match
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe against the computer")


DEFAULT_DIFFICULTY = Difficulty.HARD
AI_THINK_DELAY: Tuple[float, float] = (0.4, 0.4)


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    difficulty: Difficulty = Field(
        default=DEFAULT_DIFFICULTY,
        description="How the computer picks its moves",
    )


class ResetRequest(BaseModel):
    difficulty: Optional[Difficulty] = None


class DifficultyRequest(BaseModel):
    difficulty: Difficulty


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    position: int = Field(ge=0, le=8)


def _create_session(difficulty: Difficulty) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(match=Match(difficulty=difficulty))
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s (difficulty=%s)", session_id, difficulty.value)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _log_outcome(game_id: str, match: Match) -> None:
    if match.phase is not Phase.GAME_OVER:
        return
    status = match.game.check_status()
    logger.info("Game %s finished: %s (winner=%s)", game_id, status.state, status.winner)


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            match = session.match
            if match.phase is not Phase.AWAITING_COMPUTER:
                return
            player = match.game.computer
            position = match.play_computer()
            if position is not None:
                session.move_log.append({"player": player, "position": position})
                logger.debug(
                    "Game %s: computer played %d (%s)",
                    game_id,
                    position,
                    match.difficulty.value,
                )
            _log_outcome(game_id, match)
        finally:
            session.ai_pending = False


def _status_message(session: GameSession) -> str:
    match = session.match
    game = match.game
    if match.phase is Phase.GAME_OVER:
        status = game.check_status()
        if status.state == WON:
            return "You win!" if status.winner == game.human else "Computer wins!"
        return "It is a draw."
    if match.phase is Phase.AWAITING_COMPUTER:
        return "Computer is thinking..."
    return f"Your turn ({game.human})"


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        match = session.match
        game = match.game
        status = game.check_status()
        line = game.winning_line()

        state: Dict[str, object] = {
            "id": game_id,
            "board": [c if c != EMPTY else "" for c in game.cells],
            "currentPlayer": game.current_player,
            "humanPlayer": game.human,
            "computerPlayer": game.computer,
            "difficulty": match.difficulty.value,
            "phase": match.phase.value,
            "status": status.state,
            "winner": status.winner,
            "winningLine": list(line) if line else None,
            "message": _status_message(session),
            "availableMoves": game.available_moves() if not game.over else [],
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    position: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        match = session.match
        if match.phase is Phase.GAME_OVER:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending or match.phase is Phase.AWAITING_COMPUTER:
            raise HTTPException(
                status_code=400, detail="Computer is completing its move"
            )

        player = match.game.human
        if not match.play_human(position):
            logger.debug("Game %s: rejected move at %d", game_id, position)
            raise HTTPException(
                status_code=400, detail="Move is not allowed on this turn"
            )

        session.move_log.append({"player": player, "position": position})
        _log_outcome(game_id, match)

        should_schedule_ai = match.phase is Phase.AWAITING_COMPUTER
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.position, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(
    game_id: str, request: Optional[ResetRequest] = None
) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        difficulty = request.difficulty if request else None
        session.match.reset(difficulty)
        session.move_log.clear()
        # A computer turn still sleeping finds AWAITING_HUMAN and does nothing
        session.ai_pending = False
    logger.info(
        "Reset game %s (difficulty=%s)", game_id, session.match.difficulty.value
    )
    return _serialize_session(game_id, session)


@app.put("/api/game/{game_id}/difficulty")
def set_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.match.difficulty = request.difficulty
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        width: min(420px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      .controls {
        display: flex;
        gap: 0.75rem;
        justify-content: center;
        margin-bottom: 1.25rem;
      }
      button,
      select {
        font-size: 1rem;
        padding: 0.5rem 0.9rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        font-family: inherit;
      }
      #status {
        min-height: 1.5rem;
        font-weight: 600;
        margin-bottom: 1rem;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
      }
      .cell {
        aspect-ratio: 1;
        border-radius: 12px;
        font-size: 2.5rem;
        font-weight: 700;
        background: #eef1ff;
      }
      .cell:disabled {
        cursor: default;
        color: #13203a;
      }
      .cell.winner {
        background: #ffe08a;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <div class=\"controls\">
        <label>
          Difficulty
          <select id=\"difficulty\">
            <option value=\"easy\">Easy</option>
            <option value=\"medium\">Medium</option>
            <option value=\"hard\" selected>Hard</option>
          </select>
        </label>
        <button id=\"reset-btn\" type=\"button\">Restart</button>
      </div>
      <div id=\"status\"></div>
      <div id=\"board\"></div>
    </main>
    <script>
      const statusDiv = document.getElementById('status');
      const boardElement = document.getElementById('board');
      const difficultySelect = document.getElementById('difficulty');
      const cells = [];
      let gameId = null;
      let pollTimer = null;

      for (let i = 0; i < 9; i += 1) {
        const cell = document.createElement('button');
        cell.className = 'cell';
        cell.type = 'button';
        cell.dataset.cellIndex = String(i);
        cell.addEventListener('click', () => play(i));
        boardElement.appendChild(cell);
        cells.push(cell);
      }

      async function api(path, method, body) {
        const response = await fetch(path, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body ? JSON.stringify(body) : undefined,
        });
        if (!response.ok) {
          const payload = await response.json().catch(() => ({}));
          throw new Error(payload.detail || response.statusText);
        }
        return response.json();
      }

      function render(state) {
        gameId = state.id;
        statusDiv.textContent = state.message;
        difficultySelect.value = state.difficulty;
        const winning = new Set(state.winningLine || []);
        const open = state.phase === 'awaiting_human';
        state.board.forEach((mark, index) => {
          const cell = cells[index];
          cell.textContent = mark;
          cell.disabled = !open || mark !== '';
          cell.classList.toggle('winner', winning.has(index));
        });
        clearTimeout(pollTimer);
        if (state.aiPending) {
          pollTimer = setTimeout(refresh, 150);
        }
      }

      async function refresh() {
        render(await api(`/api/game/${gameId}`, 'GET'));
      }

      async function play(index) {
        try {
          render(await api(`/api/game/${gameId}/move`, 'POST', { position: index }));
        } catch (err) {
          statusDiv.textContent = err.message;
        }
      }

      async function newGame() {
        render(await api('/api/game', 'POST', { difficulty: difficultySelect.value }));
      }

      document.getElementById('reset-btn').addEventListener('click', async () => {
        render(await api(`/api/game/${gameId}/reset`, 'POST', { difficulty: difficultySelect.value }));
      });

      difficultySelect.addEventListener('change', async () => {
        if (gameId) {
          render(await api(`/api/game/${gameId}/difficulty`, 'PUT', { difficulty: difficultySelect.value }));
        }
      });

      newGame();
    </script>
  </body>
</html>
"""
