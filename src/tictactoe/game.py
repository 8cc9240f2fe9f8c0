"""Core rules for a single 3x3 tic-tac-toe game."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

EMPTY = " "
HUMAN: Player = "X"
COMPUTER: Player = "O"

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

IN_PROGRESS = "in_progress"
WON = "won"
DRAW = "draw"


# ---------- Board helpers ----------


def find_winning_line(
    cells: Sequence[str], player: Player
) -> Optional[Tuple[int, int, int]]:
    for line in WINNING_LINES:
        a, b, c = line
        if cells[a] == cells[b] == cells[c] == player:
            return line
    return None


def has_won(cells: Sequence[str], player: Player) -> bool:
    return find_winning_line(cells, player) is not None


def is_full(cells: Sequence[str]) -> bool:
    return all(c != EMPTY for c in cells)


def empty_cells(cells: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(cells) if c == EMPTY]


# ---------- Status ----------


@dataclass(frozen=True)
class GameStatus:
    """Outcome of a board: in progress, won by ``winner``, or drawn."""

    state: str = IN_PROGRESS
    winner: Optional[Player] = None

    @property
    def is_terminal(self) -> bool:
        return self.state != IN_PROGRESS


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    # Server-internal: 'X', 'O', or ' ' (space) for empty
    cells: List[str] = field(default_factory=lambda: [EMPTY] * 9)
    human: Player = HUMAN
    computer: Player = COMPUTER
    current_player: Player = HUMAN
    # Cached terminal flag; always equal to check_status().is_terminal
    over: bool = False

    def __post_init__(self) -> None:
        if self.human == self.computer:
            raise ValueError("Human and computer need distinct marks")
        if self.current_player not in (self.human, self.computer):
            self.current_player = self.human
        self.over = self.check_status().is_terminal

    # ---- API used by UI & AI ----

    def available_moves(self) -> List[int]:
        return empty_cells(self.cells)

    def is_full(self) -> bool:
        return is_full(self.cells)

    def apply_move(self, position: int, mark: Player) -> bool:
        """Place ``mark`` on ``position``; return False and change nothing if illegal."""
        if self.over:
            return False
        if mark not in (self.human, self.computer):
            return False
        if not isinstance(position, int) or not 0 <= position < 9:
            return False
        if self.cells[position] != EMPTY:
            return False

        self.cells[position] = mark
        self.over = self.check_status().is_terminal
        self.current_player = self.other(mark)
        return True

    def check_status(self) -> GameStatus:
        for player in (self.human, self.computer):
            if has_won(self.cells, player):
                return GameStatus(WON, player)
        if self.is_full():
            return GameStatus(DRAW)
        return GameStatus(IN_PROGRESS)

    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        status = self.check_status()
        if status.winner is None:
            return None
        return find_winning_line(self.cells, status.winner)

    def reset(self) -> None:
        self.cells = [EMPTY] * 9
        self.current_player = self.human
        self.over = False

    def other(self, player: Player) -> Player:
        return self.computer if player == self.human else self.human

    def clone(self) -> "TicTacToeGame":
        return TicTacToeGame(
            cells=self.cells.copy(),
            human=self.human,
            computer=self.computer,
            current_player=self.current_player,
        )
