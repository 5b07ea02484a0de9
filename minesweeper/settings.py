"""Persisted player settings: sound toggle and nickname."""
import json
import logging

from minesweeper.leaderboard import normalize_nickname
from minesweeper.storage import SETTINGS_KEY, KeyValueStore
from minesweeper.types import Settings

logger = logging.getLogger(__name__)


def default_settings() -> Settings:
    return Settings(sound_enabled=True, nickname=normalize_nickname(None))


def load_settings(kv: KeyValueStore) -> Settings:
    """Read settings, falling back to defaults on absent or malformed data."""
    try:
        raw = kv.get(SETTINGS_KEY)
        if not raw:
            return default_settings()
        parsed = json.loads(raw)
    except (OSError, ValueError, RecursionError):
        return default_settings()
    if not isinstance(parsed, dict):
        return default_settings()

    return Settings(
        sound_enabled=parsed.get('soundEnabled') is not False,
        nickname=normalize_nickname(parsed.get('nickname')),
    )


def save_settings(kv: KeyValueStore, settings: Settings) -> None:
    try:
        kv.set(SETTINGS_KEY, json.dumps({
            'soundEnabled': settings.sound_enabled,
            'nickname': settings.nickname,
        }, ensure_ascii=False))
    except OSError as error:
        logger.debug(f"Ignoring failed settings write: {error}")


def update_settings(kv: KeyValueStore, current: Settings, sound_enabled=None,
                    nickname=None) -> Settings:
    """Apply a partial change, normalize the nickname and persist."""
    updated = Settings(
        sound_enabled=current.sound_enabled if sound_enabled is None else bool(sound_enabled),
        nickname=normalize_nickname(current.nickname if nickname is None else nickname),
    )
    save_settings(kv, updated)
    return updated
