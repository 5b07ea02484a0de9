"""Board generation: empty grids, deferred mine placement and adjacency counts."""
import logging
import random
from typing import List, Set, Tuple

from minesweeper.types import Board, Cell, GameState

logger = logging.getLogger(__name__)


def create_board(rows: int, cols: int) -> Board:
    """Create a board with every cell closed and mine-free."""
    cells: List[List[Cell]] = []
    for row in range(rows):
        cells.append([])
        for col in range(cols):
            cells[row].append(Cell())
    return Board(cells=cells, rows=rows, cols=cols)


def neighbors(rows: int, cols: int, row: int, col: int) -> List[Tuple[int, int]]:
    """Return the in-bounds 8-neighborhood of (row, col)."""
    result = []
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            if dr == 0 and dc == 0:
                continue
            new_row = row + dr
            new_col = col + dc
            if 0 <= new_row < rows and 0 <= new_col < cols:
                result.append((new_row, new_col))
    return result


def count_adjacent_mines(board: Board, row: int, col: int) -> int:
    """Count the number of mines in neighboring cells."""
    count = 0
    for new_row, new_col in neighbors(board.rows, board.cols, row, col):
        if board.cells[new_row][new_col].is_mine:
            count += 1
    return count


def exclusion_zone(rows: int, cols: int, mines: int, first_row: int, first_col: int) -> Set[int]:
    """Linear indexes that must stay mine-free for a first reveal at (first_row, first_col).

    The clicked cell and its neighbors are excluded. When the remaining cells
    cannot hold every mine, only the clicked cell is kept safe.
    """
    exclusions = {first_row * cols + first_col}
    for new_row, new_col in neighbors(rows, cols, first_row, first_col):
        exclusions.add(new_row * cols + new_col)

    if rows * cols - len(exclusions) < mines:
        exclusions = {first_row * cols + first_col}
    return exclusions


def place_mines(state: GameState, first_row: int, first_col: int,
                rng: random.Random) -> None:
    """Lay out mines once, keeping the first reveal safe, then fill in adjacency counts."""
    if state.mines_placed:
        raise ValueError("Mines have already been placed")

    board = state.board
    rows, cols, mines = board.rows, board.cols, state.config.mines
    exclusions = exclusion_zone(rows, cols, mines, first_row, first_col)

    positions = [index for index in range(rows * cols) if index not in exclusions]

    # Fisher-Yates via random.shuffle, first `mines` positions get a mine
    rng.shuffle(positions)
    for index in positions[:mines]:
        row, col = divmod(index, cols)
        board.cells[row][col].is_mine = True

    for row in range(rows):
        for col in range(cols):
            if not board.cells[row][col].is_mine:
                board.cells[row][col].adjacent = count_adjacent_mines(board, row, col)

    state.mines_placed = True
    logger.debug(
        "Placed %d mines on %dx%d board, %d cells excluded around (%d, %d)",
        mines, cols, rows, len(exclusions), first_row, first_col,
    )
