"""Turn state machine for a human-versus-computer match."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import random

from .ai import Difficulty, select_move
from .game import TicTacToeGame


class Phase(str, Enum):
    AWAITING_HUMAN = "awaiting_human"
    AWAITING_COMPUTER = "awaiting_computer"
    GAME_OVER = "game_over"


@dataclass
class Match:
    game: TicTacToeGame = field(default_factory=TicTacToeGame)
    difficulty: Difficulty = Difficulty.HARD
    rng: random.Random = field(default_factory=random.Random, repr=False)
    phase: Phase = field(default=Phase.AWAITING_HUMAN, init=False)

    def __post_init__(self) -> None:
        self.difficulty = Difficulty(self.difficulty)
        self._sync_phase()

    def play_human(self, position: int) -> bool:
        """Apply the human's move; a rejected move leaves the phase untouched."""
        if self.phase is not Phase.AWAITING_HUMAN:
            return False
        if not self.game.apply_move(position, self.game.human):
            return False
        self._sync_phase()
        return True

    def play_computer(self) -> Optional[int]:
        """Select and apply the computer's move.

        Returns the chosen index, or None when it is not the computer's turn
        or no cell is left (the match then ends as a draw).
        """
        if self.phase is not Phase.AWAITING_COMPUTER:
            return None
        game = self.game
        position = select_move(
            game.cells, self.difficulty, game.computer, game.human, self.rng
        )
        if position is None:
            game.over = True
            self.phase = Phase.GAME_OVER
            return None
        game.apply_move(position, game.computer)
        self._sync_phase()
        return position

    def reset(self, difficulty: Optional[Difficulty] = None) -> None:
        if difficulty is not None:
            self.difficulty = Difficulty(difficulty)
        self.game.reset()
        self.phase = Phase.AWAITING_HUMAN

    def _sync_phase(self) -> None:
        if self.game.over:
            self.phase = Phase.GAME_OVER
        elif self.game.current_player == self.game.computer:
            self.phase = Phase.AWAITING_COMPUTER
        else:
            self.phase = Phase.AWAITING_HUMAN
