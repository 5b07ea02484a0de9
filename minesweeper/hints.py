"""Safe-cell hint selection."""
import random
from typing import List, Optional, Tuple

from minesweeper.types import Board


def find_hint_cell(board: Board, rng: random.Random) -> Optional[Tuple[int, int]]:
    """Pick a random closed, unflagged, safe cell, preferring zero-adjacency ones.

    Returns None when only mines remain closed.
    """
    zeros: List[Tuple[int, int]] = []
    candidates: List[Tuple[int, int]] = []

    for row, cells in enumerate(board.cells):
        for col, cell in enumerate(cells):
            if cell.is_open or cell.is_flagged or cell.is_mine:
                continue
            if cell.adjacent == 0:
                zeros.append((row, col))
            else:
                candidates.append((row, col))

    pool = zeros if zeros else candidates
    if not pool:
        return None
    return pool[rng.randrange(len(pool))]
