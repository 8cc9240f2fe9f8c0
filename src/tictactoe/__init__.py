"""Tic-tac-toe package exposing game logic, the computer opponent, and the web application."""

from .ai import Difficulty, MoveSelector, select_move
from .game import GameStatus, TicTacToeGame
from .match import Match, Phase
from .ui import app

__all__ = [
    "Difficulty",
    "GameStatus",
    "Match",
    "MoveSelector",
    "Phase",
    "TicTacToeGame",
    "app",
    "select_move",
]
