"""Local-first key-value cache for survey and progress state.

All entries live in one JSON file of string keys to string values, written
atomically (temp file, then rename) on every save. Reads of a missing key
return the ABSENT marker rather than a default, so callers must decide
explicitly what a missing value means.
"""

import json
import os
import tempfile
from pathlib import Path

import config.settings as settings

# Cache keys
ANSWERS_KEY = "homeapp_survey"
STEPS_KEY = "homeapp_steps"
SAVED_AMOUNT_KEY = "homeapp_saved"
COMMITTED_TIMELINE_KEY = "homeapp_timeline_commit"
SURVEY_COMPLETED_KEY = "homeapp_surveyed"
TOKEN_KEY = "auth_token"
USER_KEY = "auth_user"

CACHE_KEYS = (
    ANSWERS_KEY,
    STEPS_KEY,
    SAVED_AMOUNT_KEY,
    COMMITTED_TIMELINE_KEY,
    SURVEY_COMPLETED_KEY,
    TOKEN_KEY,
    USER_KEY,
)


class _Absent:
    """Marker for a key that has never been saved (or was cleared)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


def _check_key(key: str) -> None:
    if key not in CACHE_KEYS:
        raise ValueError(f"Unknown cache key: {key}. Must be one of {list(CACHE_KEYS)}")


class LocalCache:
    """JSON-file backed string store scoped to the known cache keys."""

    def __init__(self, path: str | Path | None = None):
        if path is None:
            path = Path(settings.CACHE_DIR) / settings.CACHE_FILENAME
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            return {}
        return data

    def _write_all(self, data: dict) -> None:
        """Write the whole store atomically: temp file in the same dir, then replace."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), suffix=".tmp", prefix="cache_"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, str(self.path))
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def save(self, key: str, value: str) -> None:
        """Persist a text value under key.

        Raises:
            ValueError: If key is not a known cache key.
            TypeError: If value is not a string.
        """
        _check_key(key)
        if not isinstance(value, str):
            raise TypeError(f"Cache values are text, got {type(value).__name__} for {key}")
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def load(self, key: str):
        """Return the stored text for key, or ABSENT if it was never saved."""
        _check_key(key)
        return self._read_all().get(key, ABSENT)

    def remove(self, key: str) -> None:
        _check_key(key)
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def save_json(self, key: str, value) -> None:
        """Serialize value to JSON text and save it."""
        self.save(key, json.dumps(value, ensure_ascii=False))

    def load_json(self, key: str):
        """Load and decode a JSON value, or ABSENT.

        Raises:
            json.JSONDecodeError: If the stored text is not valid JSON.
        """
        raw = self.load(key)
        if raw is ABSENT:
            return ABSENT
        return json.loads(raw)

    def clear_all(self) -> None:
        """Remove every cache entry, including keys this version does not know."""
        if self.path.exists():
            self.path.unlink()

    def keys(self) -> list[str]:
        return [k for k in self._read_all() if k in CACHE_KEYS]
