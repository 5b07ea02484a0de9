"""Temporal workflow hosting a single Minesweeper game session."""
import asyncio
from datetime import timedelta
from typing import Optional
from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from minesweeper.activities import record_win
    from minesweeper.session import GameSession
    from minesweeper.timer import MAX_ELAPSED
    from minesweeper.types import GameConfig, GameSnapshot, GameStatus, MoveRequest, RecordWinRequest

MOVE_ACTIONS = ('reveal', 'flag', 'hint', 'reset_timer', 'focus', 'move_focus')


@workflow.defn
class MinesweeperWorkflow:
    """Owns the current session of one game and replaces it on restart."""

    def __init__(self):
        self.game_id: str = ""
        self.session: GameSession | None = None
        self.last_activity_time: float = 0
        self.should_close: bool = False

    def _new_session(self, config: GameConfig) -> GameSession:
        return GameSession(
            config,
            rng=workflow.random(),
            clock=workflow.time,
            game_id=self.game_id,
        )

    def needs_tick(self) -> bool:
        """True while the clock runs and can still move. A saturated clock needs no wakeups."""
        return self.session is not None and self.session.timer.running \
            and self.session.elapsed < MAX_ELAPSED

    @workflow.run
    async def run(self, game_id: str, initial_config: GameConfig) -> None:
        """Main workflow entry point."""
        self.game_id = game_id
        self.last_activity_time = workflow.time()
        self.session = self._new_session(initial_config)

        # Auto-close workflow after 24 hours of inactivity
        inactivity_timeout = timedelta(hours=24)
        check_interval = timedelta(minutes=1)
        tick_interval = timedelta(seconds=1)

        while not self.should_close:
            ticking = self.needs_tick()
            try:
                await workflow.wait_condition(
                    lambda: self.should_close or self.needs_tick() != ticking,
                    timeout=tick_interval if ticking else check_interval,
                )
            except asyncio.TimeoutError:
                pass

            self.session.tick()

            if (workflow.time() - self.last_activity_time) >= inactivity_timeout.total_seconds():
                workflow.logger.info(f"Game {game_id} auto-closing due to 24 hours of inactivity")
                break

        self.session.timer.stop()
        workflow.logger.info(f"Minesweeper workflow {game_id} completed")

    @workflow.update
    async def make_move_update(self, move_request: MoveRequest) -> GameSnapshot:
        """Apply a move and return the updated state, recording the time on a win."""
        self.last_activity_time = workflow.time()

        was_over = self.session.is_game_over
        self.session.apply(move_request)

        if not was_over and self.session.status == GameStatus.WON:
            try:
                await workflow.execute_activity(
                    record_win,
                    RecordWinRequest(config=self.session.config, time=self.session.elapsed),
                    start_to_close_timeout=timedelta(seconds=60),
                )
            except Exception as error:
                workflow.logger.error(f"Error recording win: {error}")

        return self.session.snapshot()

    @make_move_update.validator
    def validate_move(self, move_request: MoveRequest) -> None:
        if not self.session:
            raise ValueError("Game state not initialized")
        if move_request.action not in MOVE_ACTIONS:
            raise ValueError(f"Unknown move action: {move_request.action}")

    @workflow.update
    async def restart_game_update(self, config: GameConfig) -> GameSnapshot:
        """Discard the current session and start a fresh one."""
        self.last_activity_time = workflow.time()
        self.session = self._new_session(config)
        return self.session.snapshot()

    @restart_game_update.validator
    def validate_restart(self, config: GameConfig) -> None:
        if self.should_close:
            raise ValueError("Game is closed")
        config.validate()

    @workflow.signal
    def close_game_signal(self) -> None:
        """Signal to close the game."""
        self.should_close = True

    @workflow.query
    def get_game_state_query(self) -> Optional[GameSnapshot]:
        """Query to get the current game state."""
        if not self.session:
            return None
        return self.session.snapshot()
