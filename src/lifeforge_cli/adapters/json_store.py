"""JSON-encoded key-value store backed by one file per key.

Reads never raise: a missing file, invalid JSON or invalid UTF-8 yields
the caller's default. Writes report failure through their return value and
are logged; callers keep their in-memory state whether or not the write
landed.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonKeyValueStore:
    """Persist JSON values under ``<directory>/<key>.json``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for *key*, or *default* if unreadable."""
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return default

    def set(self, key: str, value: Any) -> bool:
        """
        Write *value* under *key*.

        The value is written to a temporary sibling file and moved into place
        so a failed write never truncates the previous contents.

        Returns:
            True if the value was persisted, False otherwise
        """
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")

        try:
            payload = json.dumps(value, indent=2)
        except (TypeError, ValueError) as e:
            logger.error("Refusing to store unserializable value for %s: %s", key, e)
            return False

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.warning("Could not write %s: %s", path, e)
            return False

        return True

    def delete(self, key: str) -> None:
        """Remove the value stored under *key*, if any."""
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not delete %s: %s", path, e)
