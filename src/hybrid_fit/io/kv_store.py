"""
Key-value persistence backed by one JSON file per key.

Both durable collections (plans and history) are stored through this
get/set interface, each under its own fixed key.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..core.config import DATA_DIR_ENV, DATA_DIR_NAME

logger = logging.getLogger(__name__)


class JsonKeyValueStore:
    """
    Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace(), so a crash never leaves a half-written file.
    """

    def __init__(self, directory: str | Path):
        """
        Initialize the store.

        Args:
            directory: Directory holding the JSON files (created on first write)
        """
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Return the file path backing *key*."""
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Any | None:
        """
        Load the value stored under *key*.

        Returns:
            Decoded JSON value, or None if the key has never been written

        Raises:
            json.JSONDecodeError: If the file exists but is corrupt
        """
        path = self.path_for(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def set(self, key: str, value: Any) -> None:
        """
        Store *value* under *key*, replacing any previous value.

        Args:
            key: Collection name
            value: JSON-compatible value
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s", path)


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    ``$HYBRID_FIT_HOME`` wins when set; otherwise ``~/.hybrid-fit``.

    Returns:
        Default data directory
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / DATA_DIR_NAME
