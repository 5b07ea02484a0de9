from typing import Iterable, Tuple

import pytest

from minesweeper.board import count_adjacent_mines, create_board
from minesweeper.types import GameConfig, GameState


def make_state(rows: int, cols: int, mines_at: Iterable[Tuple[int, int]]) -> GameState:
    """Game state with a fixed mine layout, as if placement already happened."""
    mines_at = list(mines_at)
    board = create_board(rows, cols)
    for row, col in mines_at:
        board.cells[row][col].is_mine = True
    for row in range(rows):
        for col in range(cols):
            if not board.cells[row][col].is_mine:
                board.cells[row][col].adjacent = count_adjacent_mines(board, row, col)
    state = GameState(config=GameConfig(rows=rows, cols=cols, mines=len(mines_at)), board=board)
    state.mines_placed = True
    return state


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("MINESWEEPER_DATA_DIR", str(tmp_path))
    return tmp_path
