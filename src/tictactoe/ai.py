"""Computer move selection: random play and exhaustive minimax search."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence
import math
import random

from .game import EMPTY, Player, empty_cells, has_won, is_full


WIN_SCORE = 10


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Probability that a medium computer plays a random move instead of searching
MEDIUM_RANDOM_RATE = 0.5


# ---------- Public API ----------


def select_move(
    board: Sequence[str],
    difficulty: Difficulty | str,
    computer: Player,
    opponent: Player,
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """Pick the computer's next cell index, or None when the board is full.

    ``rng`` defaults to the module-level generator; pass a seeded
    ``random.Random`` for reproducible easy/medium play.
    """

    level = Difficulty(difficulty)
    if computer == opponent:
        raise ValueError("Computer and opponent need distinct marks")

    cells = list(board)
    if not empty_cells(cells):
        return None

    chooser = rng if rng is not None else random
    if level is Difficulty.EASY:
        return random_move(cells, chooser)
    if level is Difficulty.MEDIUM and chooser.random() < MEDIUM_RANDOM_RATE:
        return random_move(cells, chooser)
    return best_move(cells, computer, opponent)


def random_move(board: Sequence[str], rng=random) -> Optional[int]:
    moves = empty_cells(board)
    if not moves:
        return None
    return moves[rng.randrange(len(moves))]


def best_move(board: Sequence[str], player: Player, opponent: Player) -> Optional[int]:
    """Optimal move for ``player``; ties go to the lowest index."""

    # Private copy: the search places and removes marks in place
    cells = list(board)
    best_score = -math.inf
    move: Optional[int] = None
    alpha = -math.inf

    for i in range(9):
        if cells[i] != EMPTY:
            continue
        cells[i] = player
        score = _minimax(cells, 0, False, player, opponent, alpha, math.inf)
        cells[i] = EMPTY
        # Strict comparison keeps the first maximal index
        if score > best_score:
            best_score, move = score, i
        alpha = max(alpha, best_score)

    return move


def score_moves(
    board: Sequence[str], player: Player, opponent: Player
) -> List[Optional[int]]:
    """Exact minimax score of every cell for ``player``; None for occupied cells."""

    cells = list(board)
    scores: List[Optional[int]] = [None] * 9
    for i in empty_cells(cells):
        cells[i] = player
        scores[i] = int(_minimax(cells, 0, False, player, opponent, -math.inf, math.inf))
        cells[i] = EMPTY
    return scores


# ---------- Core search ----------


def _minimax(
    cells: List[str],
    depth: int,
    maximizing: bool,
    player: Player,
    opponent: Player,
    alpha: float,
    beta: float,
) -> float:
    # Terminal/leaf
    if has_won(cells, player):
        return WIN_SCORE - depth
    if has_won(cells, opponent):
        return depth - WIN_SCORE
    if is_full(cells):
        return 0

    if maximizing:
        value = -math.inf
        for i in range(9):
            if cells[i] != EMPTY:
                continue
            cells[i] = player
            score = _minimax(cells, depth + 1, False, player, opponent, alpha, beta)
            cells[i] = EMPTY
            value = max(value, score)
            alpha = max(alpha, value)
            if alpha >= beta:
                break
    else:
        value = math.inf
        for i in range(9):
            if cells[i] != EMPTY:
                continue
            cells[i] = opponent
            score = _minimax(cells, depth + 1, True, player, opponent, alpha, beta)
            cells[i] = EMPTY
            value = min(value, score)
            beta = min(beta, value)
            if alpha >= beta:
                break
    return value


# ---------- Player object ----------


@dataclass
class MoveSelector:
    """Computer opponent bound to its mark, its opponent's mark and a difficulty.

    Public surface used by the match and the web layer:
      - MoveSelector(player="O", opponent="X", difficulty="hard")
      - choose(cells) -> cell index or None
    """

    player: Player
    opponent: Player
    difficulty: Difficulty = Difficulty.HARD
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        self.difficulty = Difficulty(self.difficulty)

    def choose(self, cells: Sequence[str]) -> Optional[int]:
        return select_move(cells, self.difficulty, self.player, self.opponent, self.rng)
