"""Type definitions for the Minesweeper engine."""
from dataclasses import dataclass, field
from typing import Any, List, Optional
from enum import Enum


@dataclass
class GameConfig:
    """Board dimensions and mine count; identifies a leaderboard partition."""
    rows: int
    cols: int
    mines: int

    @property
    def key(self) -> str:
        return f"{self.cols}x{self.rows}-{self.mines}"

    def validate(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError("rows and cols must be positive")
        if not 0 < self.mines < self.rows * self.cols:
            raise ValueError("mines must be between 1 and rows*cols - 1")


class Difficulty(str, Enum):
    """Named board presets."""
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'
    CUSTOM = 'custom'


PRESETS = {
    Difficulty.EASY: GameConfig(rows=9, cols=9, mines=10),
    Difficulty.MEDIUM: GameConfig(rows=16, cols=16, mines=40),
    Difficulty.HARD: GameConfig(rows=16, cols=30, mines=99),
}


def find_difficulty(config: GameConfig) -> Difficulty:
    """Return the preset matching config, or CUSTOM."""
    for difficulty, preset in PRESETS.items():
        if (preset.rows, preset.cols, preset.mines) == (config.rows, config.cols, config.mines):
            return difficulty
    return Difficulty.CUSTOM


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def _whole_number(value: Any, default: int) -> int:
    """Blank input takes the default; anything else must read as a whole number."""
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Invalid board dimension: {value!r}")


def custom_config(cols: Optional[int] = None, rows: Optional[int] = None,
                  mines: Optional[int] = None) -> GameConfig:
    """Build a custom config, clamping input to the ranges the settings panel allows.

    Zero is a real value and clamps to the lower bound. Raises ValueError on
    input that is not a number.
    """
    cols = _clamp(_whole_number(cols, 12), 6, 40)
    rows = _clamp(_whole_number(rows, 12), 6, 30)
    mines = _clamp(_whole_number(mines, 10), 1, rows * cols - 1)
    return GameConfig(rows=rows, cols=cols, mines=mines)


def config_for(difficulty: Difficulty) -> GameConfig:
    preset = PRESETS[difficulty]
    return GameConfig(rows=preset.rows, cols=preset.cols, mines=preset.mines)


@dataclass
class Cell:
    """Represents a single cell on the minesweeper board."""
    is_mine: bool = False
    is_open: bool = False
    is_flagged: bool = False
    adjacent: int = 0
    is_wrong_flag: bool = False


@dataclass
class Board:
    """Represents the game board."""
    cells: List[List[Cell]]
    rows: int
    cols: int

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


class GameStatus(str, Enum):
    """Possible game states."""
    READY = 'READY'
    PLAYING = 'PLAYING'
    WON = 'WON'
    LOST = 'LOST'

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


STATUS_LABELS = {
    GameStatus.READY: 'Ready',
    GameStatus.PLAYING: 'Playing',
    GameStatus.WON: 'You won',
    GameStatus.LOST: 'Hit a mine',
}


@dataclass
class GameState:
    """Mutable state of a single game, owned by one GameSession."""
    config: GameConfig
    board: Board
    flags: int = 0
    open_count: int = 0
    hints_used: int = 0
    mines_placed: bool = False
    is_game_over: bool = False
    did_win: bool = False
    active_row: int = 0
    active_col: int = 0


@dataclass
class LeaderboardEntry:
    """A single best-time record."""
    name: str
    time: int


@dataclass
class Settings:
    """Per-user preferences persisted next to the leaderboard."""
    sound_enabled: bool = True
    nickname: str = ''


@dataclass
class MoveRequest:
    """Request to make a move."""
    action: str  # 'reveal', 'flag', 'hint', 'reset_timer', 'focus', 'move_focus'
    row: int = 0
    col: int = 0


@dataclass
class MoveOutcome:
    """What a single session operation changed."""
    status: GameStatus
    changed: List[List[int]] = field(default_factory=list)
    sound: Optional[str] = None  # 'open', 'flag', 'hint', 'win', 'lose'
    message: Optional[str] = None
    hint: Optional[List[int]] = None


@dataclass
class GameSnapshot:
    """Serializable view of a session for the presentation layer."""
    id: str
    config: GameConfig
    config_key: str
    difficulty: str
    board: Board
    status: GameStatus
    status_label: str
    mines_left: int
    elapsed: int
    hints_used: int
    active_row: int
    active_col: int
    last_outcome: Optional[MoveOutcome] = None


@dataclass
class RecordWinRequest:
    """Activity input for storing a finished game's time."""
    config: GameConfig
    time: int


@dataclass
class LeaderboardView:
    """Ranked entries of one configuration plus its display label."""
    key: str
    label: str
    entries: List[LeaderboardEntry]
    lines: List[str]
