"""A single game: the state machine around board, reveal, hint and timer rules."""
import logging
import random
from typing import Callable, List, Optional, Tuple

from minesweeper.board import create_board, place_mines
from minesweeper.hints import find_hint_cell
from minesweeper.reveal import check_win, open_cell, reveal_mines, toggle_flag
from minesweeper.timer import GameTimer
from minesweeper.types import (
    GameConfig, GameSnapshot, GameState, GameStatus, MoveOutcome, MoveRequest, find_difficulty,
)

logger = logging.getLogger(__name__)

HINT_OPENED_MESSAGE = 'Hint opened the board for you'
HINT_MARKED_MESSAGE = 'Safe cell highlighted'
HINT_EXHAUSTED_MESSAGE = 'No safe cell to hint'


class GameSession:
    """Owns one game from READY through PLAYING to WON or LOST.

    Starting a new game means constructing a new session; nothing here is
    reset in place except the timer. Every operation runs to completion and
    returns a MoveOutcome describing what changed. Operations that do not
    apply (terminal game, open or flagged cell, out of bounds) are no-ops.
    """

    def __init__(self, config: GameConfig, rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], float]] = None, game_id: str = ''):
        config.validate()
        self.id = game_id
        self.state = GameState(config=config, board=create_board(config.rows, config.cols))
        self.rng = rng or random.Random()
        self.timer = GameTimer(clock)
        self.status = GameStatus.READY
        self.last_outcome: Optional[MoveOutcome] = None

    @property
    def config(self) -> GameConfig:
        return self.state.config

    @property
    def mines_left(self) -> int:
        return self.state.config.mines - self.state.flags

    @property
    def elapsed(self) -> int:
        return self.timer.elapsed

    @property
    def hints_used(self) -> int:
        return self.state.hints_used

    @property
    def is_game_over(self) -> bool:
        return self.status.is_terminal

    def _outcome(self, changed: Optional[List[Tuple[int, int]]] = None,
                 sound: Optional[str] = None, message: Optional[str] = None,
                 hint: Optional[Tuple[int, int]] = None) -> MoveOutcome:
        self.last_outcome = MoveOutcome(
            status=self.status,
            changed=[[row, col] for row, col in (changed or [])],
            sound=sound,
            message=message,
            hint=list(hint) if hint else None,
        )
        return self.last_outcome

    def _end_game(self, did_win: bool) -> None:
        self.state.is_game_over = True
        self.state.did_win = did_win
        self.timer.stop()
        self.status = GameStatus.WON if did_win else GameStatus.LOST
        logger.debug(f"Game {self.id} ended: {self.status.value} after {self.timer.elapsed}s")

    def reveal(self, row: int, col: int) -> MoveOutcome:
        if self.is_game_over or not self.state.board.in_bounds(row, col):
            return self._outcome()

        cell = self.state.board.cells[row][col]
        if cell.is_open or cell.is_flagged:
            return self._outcome()

        if not self.state.mines_placed:
            place_mines(self.state, row, col, self.rng)
            self.timer.start()
            self.status = GameStatus.PLAYING

        opened, changed = open_cell(self.state, row, col)

        if cell.is_mine:
            self._end_game(did_win=False)
            changed.extend(reveal_mines(self.state))
            return self._outcome(changed, sound='lose')

        if check_win(self.state):
            self._end_game(did_win=True)
            return self._outcome(changed, sound='win')

        return self._outcome(changed, sound='open' if opened else None)

    def toggle_flag(self, row: int, col: int) -> MoveOutcome:
        if self.is_game_over or not self.state.board.in_bounds(row, col):
            return self._outcome()
        if not toggle_flag(self.state, row, col):
            return self._outcome()
        return self._outcome([(row, col)], sound='flag')

    def hint(self) -> MoveOutcome:
        """Reveal a random first cell, or point at a safe cell once mines exist."""
        if self.is_game_over:
            return self._outcome()

        if not self.state.mines_placed:
            board = self.state.board
            closed = [
                (row, col)
                for row in range(board.rows)
                for col in range(board.cols)
                if not board.cells[row][col].is_flagged
            ]
            if not closed:
                return self._outcome(message=HINT_EXHAUSTED_MESSAGE)
            row, col = closed[self.rng.randrange(len(closed))]
            outcome = self.reveal(row, col)
            self.state.hints_used += 1
            outcome.message = HINT_OPENED_MESSAGE
            outcome.hint = [row, col]
            if outcome.sound != 'win':
                outcome.sound = 'hint'
            return outcome

        target = find_hint_cell(self.state.board, self.rng)
        if target is None:
            return self._outcome(message=HINT_EXHAUSTED_MESSAGE)

        self.state.hints_used += 1
        return self._outcome(sound='hint', message=HINT_MARKED_MESSAGE, hint=target)

    def reset_timer(self) -> MoveOutcome:
        self.timer.reset()
        return self._outcome()

    def tick(self) -> int:
        return self.timer.tick()

    def set_active_cell(self, row: int, col: int) -> MoveOutcome:
        if self.state.board.in_bounds(row, col):
            self.state.active_row = row
            self.state.active_col = col
        return self._outcome()

    def move_active_cell(self, d_row: int, d_col: int) -> MoveOutcome:
        board = self.state.board
        row = min(max(self.state.active_row + d_row, 0), board.rows - 1)
        col = min(max(self.state.active_col + d_col, 0), board.cols - 1)
        return self.set_active_cell(row, col)

    def apply(self, move: MoveRequest) -> MoveOutcome:
        """Dispatch a move request to the matching operation."""
        action = move.action
        if action == 'reveal':
            return self.reveal(move.row, move.col)
        elif action == 'flag':
            return self.toggle_flag(move.row, move.col)
        elif action == 'hint':
            return self.hint()
        elif action == 'reset_timer':
            return self.reset_timer()
        elif action == 'focus':
            return self.set_active_cell(move.row, move.col)
        elif action == 'move_focus':
            return self.move_active_cell(move.row, move.col)
        raise ValueError(f"Unknown move action: {action}")

    def snapshot(self) -> GameSnapshot:
        config = self.state.config
        return GameSnapshot(
            id=self.id,
            config=config,
            config_key=config.key,
            difficulty=find_difficulty(config).value,
            board=self.state.board,
            status=self.status,
            status_label=self.status.label,
            mines_left=self.mines_left,
            elapsed=self.timer.elapsed,
            hints_used=self.state.hints_used,
            active_row=self.state.active_row,
            active_col=self.state.active_col,
            last_outcome=self.last_outcome,
        )
