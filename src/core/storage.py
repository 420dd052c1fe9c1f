"""
Local key-value persistence.

Holds the signed-in user's identifiers (userId, username, accessToken) that the
gateway reads to build request bodies and headers. Stored as a single JSON
file, e.g. ~/.journey/store.json.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger

USER_ID_KEY = "userId"
USERNAME_KEY = "username"
ACCESS_TOKEN_KEY = "accessToken"


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for the local key-value store."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: object) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


def _to_text(value: object) -> str:
    """Stringify a value the way the mobile store does; None/NaN become ''."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    text = str(value)
    if text in ("nan", "NaN", "inf", "-inf", "Infinity", "-Infinity"):
        return ""
    return text


class MemoryStore:
    """In-process store, used in tests and for embedding without a file."""

    def __init__(self, initial: dict[str, object] | None = None):
        self._data: dict[str, str] = {k: _to_text(v) for k, v in (initial or {}).items()}

    def get(self, key: str) -> str | None:
        value = self._data.get(key)
        return value or None

    def set(self, key: str, value: object) -> None:
        self._data[key] = _to_text(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """
    Key-value store backed by one JSON file.

    Read errors are logged and treated as an empty store; the file is
    rewritten in full on every set/remove.
    """

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error reading key-value store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value or None

    def set(self, key: str, value: object) -> None:
        data = self._load()
        data[key] = _to_text(value)
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)
