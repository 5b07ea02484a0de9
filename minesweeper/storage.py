"""String key-value persistence used for settings and the leaderboard."""
import logging
import pathlib
from typing import Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_KEY = 'minesweeper_settings_v1'
LEADERBOARD_KEY = 'minesweeper_leaderboard_v1'


class KeyValueStore:
    """Get and set strings by key. Writes may fail silently."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore(KeyValueStore):
    """One `<key>.json` file per key under a data directory."""

    def __init__(self, directory: pathlib.Path):
        self.directory = pathlib.Path(directory)

    def _path(self, key: str) -> pathlib.Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError):
            return None

    def set(self, key: str, value: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._path(key).write_text(value, encoding='utf-8')
        except OSError as error:
            # In-memory state stays authoritative for this run
            logger.debug(f"Ignoring failed write of {key}: {error}")
