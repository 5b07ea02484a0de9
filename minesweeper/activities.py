"""Temporal activities for persisted state."""
from temporalio import activity

from minesweeper import config
from minesweeper.display import config_label, leaderboard_lines
from minesweeper.leaderboard import LeaderboardStore
from minesweeper.settings import load_settings
from minesweeper.types import GameConfig, LeaderboardEntry, LeaderboardView, RecordWinRequest


def open_leaderboard() -> LeaderboardStore:
    store = LeaderboardStore(config.get_store())
    store.load()
    return store


def build_view(game_config: GameConfig, store: LeaderboardStore) -> LeaderboardView:
    entries = store.entries(game_config.key)
    return LeaderboardView(
        key=game_config.key,
        label=config_label(game_config),
        entries=entries,
        lines=leaderboard_lines(entries),
    )


@activity.defn
async def record_win(request: RecordWinRequest) -> LeaderboardView:
    """Store a won game's time under the nickname saved at the moment of the win."""
    store = open_leaderboard()
    entry = LeaderboardEntry(name=load_settings(config.get_store()).nickname, time=request.time)
    store.record_win(request.config.key, entry)
    activity.logger.info(f"Recorded {entry.time}s for {entry.name} on {request.config.key}")
    return build_view(request.config, store)
