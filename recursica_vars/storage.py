"""Key-value stores for remembered user choices.

The palette builder reads the user's chosen primary level through an
injected ``KeyValueStore``; nothing here is a process-wide singleton.
"""

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

from .vars_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.STORAGE)

PRIMARY_LEVEL_PREFIX = "palette-primary-level"


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string store interface."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryStore:
    """Dict-backed store, mainly for tests and one-shot builds."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStore:
    """Store persisted as one JSON object in a file.

    The file is read lazily on first access and rewritten in full on every
    ``set``.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            self._data = {}
            if self.path.exists():
                data = json.loads(self.path.read_text())
                if isinstance(data, dict):
                    self._data = {str(k): str(v) for k, v in data.items()}
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True))


def primary_level_key(palette: str, mode: str) -> str:
    """Store key for a palette's remembered primary level."""
    return f"{PRIMARY_LEVEL_PREFIX}:{palette}:{mode.lower()}"


def read_primary_level(
    store: KeyValueStore | None, palette: str, mode: str
) -> str | None:
    """Read a remembered primary level.

    Storage failures and malformed stored JSON both count as "no override".
    """
    if store is None:
        return None
    key = primary_level_key(palette, mode)
    try:
        raw = store.get(key)
        if raw is None:
            return None
        value = json.loads(raw)
    except (OSError, ValueError, TypeError) as e:
        logger.debug(f"Ignoring unreadable primary level {key}: {e}")
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(int(value)).zfill(3)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def write_primary_level(
    store: KeyValueStore, palette: str, mode: str, level: str
) -> None:
    store.set(primary_level_key(palette, mode), json.dumps(level))
