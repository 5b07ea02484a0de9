import random

import pytest

from minesweeper.board import create_board, exclusion_zone, neighbors, place_mines
from minesweeper.types import GameConfig, GameState


def new_state(rows, cols, mines):
    return GameState(config=GameConfig(rows=rows, cols=cols, mines=mines), board=create_board(rows, cols))


def mine_coords(state):
    return {
        (row, col)
        for row in range(state.board.rows)
        for col in range(state.board.cols)
        if state.board.cells[row][col].is_mine
    }


def test_create_board_is_blank():
    board = create_board(3, 4)
    assert board.rows == 3 and board.cols == 4
    assert len(board.cells) == 3 and all(len(row) == 4 for row in board.cells)
    for row in board.cells:
        for cell in row:
            assert not cell.is_mine and not cell.is_open and not cell.is_flagged
            assert cell.adjacent == 0 and not cell.is_wrong_flag


def test_neighbors_are_clipped_at_corners_and_edges():
    assert sorted(neighbors(3, 3, 0, 0)) == [(0, 1), (1, 0), (1, 1)]
    assert len(neighbors(3, 3, 1, 1)) == 8
    assert len(neighbors(3, 3, 0, 1)) == 5


@pytest.mark.parametrize("seed", range(20))
def test_first_click_and_neighbors_are_mine_free(seed):
    state = new_state(9, 9, 10)
    place_mines(state, 4, 4, random.Random(seed))

    mines = mine_coords(state)
    assert len(mines) == 10
    for row in range(3, 6):
        for col in range(3, 6):
            assert (row, col) not in mines
    assert state.mines_placed


@pytest.mark.parametrize("seed", range(10))
def test_corner_click_excludes_clipped_neighborhood(seed):
    state = new_state(5, 5, 20)
    place_mines(state, 0, 0, random.Random(seed))
    mines = mine_coords(state)
    assert len(mines) == 20
    assert not mines & {(0, 0), (0, 1), (1, 0), (1, 1)}


@pytest.mark.parametrize("rows,cols,mines", [(3, 3, 1), (3, 3, 8), (4, 4, 10), (4, 4, 15), (5, 5, 20)])
def test_fallback_keeps_only_clicked_cell_safe(rows, cols, mines):
    for seed in range(10):
        state = new_state(rows, cols, mines)
        place_mines(state, 1, 1, random.Random(seed))
        found = mine_coords(state)
        assert len(found) == mines
        assert (1, 1) not in found


def test_exclusion_zone_fallback():
    assert exclusion_zone(3, 3, 1, 1, 1) == {1 * 3 + 1}
    assert len(exclusion_zone(9, 9, 10, 4, 4)) == 9
    assert exclusion_zone(4, 4, 8, 0, 0) == {0, 1, 4, 5}


@pytest.mark.parametrize("seed", range(10))
def test_adjacency_matches_recount(seed):
    state = new_state(16, 30, 99)
    place_mines(state, 8, 15, random.Random(seed))
    board = state.board
    for row in range(board.rows):
        for col in range(board.cols):
            cell = board.cells[row][col]
            if cell.is_mine:
                continue
            expected = sum(
                1
                for dr in (-1, 0, 1)
                for dc in (-1, 0, 1)
                if (dr or dc)
                and 0 <= row + dr < board.rows
                and 0 <= col + dc < board.cols
                and board.cells[row + dr][col + dc].is_mine
            )
            assert cell.adjacent == expected


def test_mines_cannot_be_placed_twice():
    state = new_state(9, 9, 10)
    place_mines(state, 0, 0, random.Random(1))
    with pytest.raises(ValueError):
        place_mines(state, 0, 0, random.Random(1))
