"""Best-time leaderboard, partitioned by board configuration."""
import json
import logging
import math
from typing import Any, Dict, List, Tuple

from minesweeper.storage import LEADERBOARD_KEY, KeyValueStore
from minesweeper.types import LeaderboardEntry

logger = logging.getLogger(__name__)

LEADERBOARD_LIMIT = 5
MAX_NICKNAME_LENGTH = 12
DEFAULT_NICKNAME = 'Player'
MAX_TIME = 999

Store = Dict[str, List[LeaderboardEntry]]


def normalize_nickname(value: Any) -> str:
    """Trim and truncate a name, falling back to the default when blank."""
    if not isinstance(value, str):
        return DEFAULT_NICKNAME
    trimmed = value.strip()
    if not trimmed:
        return DEFAULT_NICKNAME
    return trimmed[:MAX_NICKNAME_LENGTH]


def _coerce_time(value: Any) -> int:
    """Floor a stored time, returning -1 when it is not a usable number."""
    if isinstance(value, bool):
        return -1
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return -1
    if not math.isfinite(number):
        return -1
    time = math.floor(number)
    if time < 0 or time > MAX_TIME:
        return -1
    return time


def rank(entries: List[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Stable sort by time and keep the top entries. Equal times keep insertion order."""
    return sorted(entries, key=lambda entry: entry.time)[:LEADERBOARD_LIMIT]


def parse_leaderboard(raw: Any) -> Tuple[Store, bool]:
    """Parse persisted leaderboard JSON. Never raises.

    Returns the sanitized store and whether anything had to be migrated from
    a legacy shape (bare times, or names that needed normalizing).
    """
    if not raw:
        return {}, False
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        return {}, False
    if not isinstance(parsed, dict):
        return {}, False

    sanitized: Store = {}
    migrated = False
    for key, value in parsed.items():
        if not isinstance(value, list):
            continue
        entries: List[LeaderboardEntry] = []
        for item in value:
            if isinstance(item, (int, float, str)) and not isinstance(item, bool):
                time = _coerce_time(item)
                if time >= 0:
                    entries.append(LeaderboardEntry(name=DEFAULT_NICKNAME, time=time))
                    migrated = True
                continue
            if not isinstance(item, dict):
                continue
            time = _coerce_time(item.get('time'))
            if time < 0:
                continue
            name = normalize_nickname(item.get('name'))
            if item.get('name') != name:
                migrated = True
            entries.append(LeaderboardEntry(name=name, time=time))
        if entries:
            sanitized[key] = rank(entries)

    return sanitized, migrated


def dump_leaderboard(store: Store) -> str:
    return json.dumps({
        key: [{'name': entry.name, 'time': entry.time} for entry in entries]
        for key, entries in store.items()
    }, ensure_ascii=False)


class LeaderboardStore:
    """In-memory leaderboard backed by a key-value store.

    The in-memory copy is authoritative; persistence is best effort.
    """

    def __init__(self, kv: KeyValueStore):
        self.kv = kv
        self.records: Store = {}

    def load(self) -> Store:
        try:
            raw = self.kv.get(LEADERBOARD_KEY)
        except OSError:
            raw = None
        self.records, migrated = parse_leaderboard(raw)
        if migrated:
            logger.debug("Migrated legacy leaderboard data")
            self.save()
        return self.records

    def save(self) -> None:
        try:
            self.kv.set(LEADERBOARD_KEY, dump_leaderboard(self.records))
        except OSError as error:
            logger.debug(f"Ignoring failed leaderboard write: {error}")

    def entries(self, config_key: str) -> List[LeaderboardEntry]:
        return list(self.records.get(config_key, []))

    def record_win(self, config_key: str, entry: LeaderboardEntry) -> List[LeaderboardEntry]:
        """Insert a finished game's time and keep the top five for its configuration."""
        records = self.records.get(config_key, [])
        records.append(entry)
        self.records[config_key] = rank(records)
        self.save()
        return self.entries(config_key)

    def clear(self) -> None:
        self.records = {}
        self.save()
