"""Cell opening, cascade and end-of-game reveal rules."""
from typing import List, Tuple

from minesweeper.board import neighbors
from minesweeper.types import GameState

Coord = Tuple[int, int]


def open_cell(state: GameState, row: int, col: int) -> Tuple[bool, List[Coord]]:
    """Open a cell and cascade through zero-adjacency regions.

    Returns whether a safe cell was opened plus every coordinate whose
    state changed. Opening a mine leaves it exposed and reports False;
    the caller is responsible for ending the game.
    """
    cell = state.board.cells[row][col]
    if cell.is_open or cell.is_flagged:
        return False, []

    cell.is_open = True
    state.open_count += 1
    changed: List[Coord] = [(row, col)]

    if cell.is_mine:
        return False, changed

    if cell.adjacent == 0:
        changed.extend(flood_open(state, row, col))
    return True, changed


def flood_open(state: GameState, start_row: int, start_col: int) -> List[Coord]:
    """Open every safe cell reachable through zero-adjacency cells.

    Uses an explicit stack so board size never hits the recursion limit.
    Flagged cells are left closed even when safe.
    """
    board = state.board
    opened: List[Coord] = []
    stack: List[Coord] = [(start_row, start_col)]

    while stack:
        row, col = stack.pop()
        for new_row, new_col in neighbors(board.rows, board.cols, row, col):
            neighbor = board.cells[new_row][new_col]
            if neighbor.is_open or neighbor.is_flagged or neighbor.is_mine:
                continue
            neighbor.is_open = True
            state.open_count += 1
            opened.append((new_row, new_col))
            if neighbor.adjacent == 0:
                stack.append((new_row, new_col))

    return opened


def check_win(state: GameState) -> bool:
    """Every non-mine cell is open. Flags do not matter."""
    config = state.config
    return state.open_count >= config.rows * config.cols - config.mines


def toggle_flag(state: GameState, row: int, col: int) -> bool:
    """Toggle flag on a closed cell. Returns False when the cell is open."""
    cell = state.board.cells[row][col]
    if cell.is_open:
        return False

    cell.is_flagged = not cell.is_flagged
    state.flags += 1 if cell.is_flagged else -1
    return True


def reveal_mines(state: GameState) -> List[Coord]:
    """Expose every mine and every wrongly flagged cell after a loss."""
    changed: List[Coord] = []
    for row, cells in enumerate(state.board.cells):
        for col, cell in enumerate(cells):
            if cell.is_mine:
                if not cell.is_open:
                    cell.is_open = True
                    changed.append((row, col))
            elif cell.is_flagged:
                cell.is_open = True
                cell.is_wrong_flag = True
                changed.append((row, col))
    return changed
