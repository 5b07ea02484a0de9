"""Text formatting for counters, labels and leaderboard rows."""
from typing import List

from minesweeper.leaderboard import DEFAULT_NICKNAME, LEADERBOARD_LIMIT
from minesweeper.types import Difficulty, GameConfig, LeaderboardEntry, find_difficulty

DIFFICULTY_LABELS = {
    Difficulty.EASY: 'Easy',
    Difficulty.MEDIUM: 'Medium',
    Difficulty.HARD: 'Hard',
}

EMPTY_LEADERBOARD = 'No records yet'


def format_counter(value: int) -> str:
    """Three-digit, zero-padded counter with a leading minus when negative."""
    padded = str(abs(value)).zfill(3)
    return f"-{padded}" if value < 0 else padded


def format_time(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds}s"
    minutes, remain = divmod(seconds, 60)
    return f"{minutes}:{remain:02d}"


def config_label(config: GameConfig) -> str:
    difficulty = find_difficulty(config)
    if difficulty in DIFFICULTY_LABELS:
        return DIFFICULTY_LABELS[difficulty]
    return f"Custom {config.cols}x{config.rows} / {config.mines}"


def leaderboard_lines(entries: List[LeaderboardEntry]) -> List[str]:
    if not entries:
        return [EMPTY_LEADERBOARD]
    return [
        f"#{index}  {entry.name or DEFAULT_NICKNAME}  {format_time(entry.time)}"
        for index, entry in enumerate(entries[:LEADERBOARD_LIMIT], start=1)
    ]
