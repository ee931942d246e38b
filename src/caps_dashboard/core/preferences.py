"""
File-backed key/value store for user preferences (selected hospital).
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from caps_dashboard.core.config import PREFERENCES_FILE

log = logging.getLogger(__name__)

class PreferenceStore:
    """Small JSON document on disk, read on every get and rewritten on every set."""

    def __init__(self, path: str | Path = PREFERENCES_FILE):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default=None):
        return self._read().get(key, default)

    def set(self, key: str, value) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        log.debug("Saved preference %s=%r to %s", key, value, self.path)
