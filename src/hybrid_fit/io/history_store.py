"""
Append-only history log of finished sessions.

The log is one JSON list under the "history" key, newest entry first.
"""

from __future__ import annotations

import logging

from ..core.config import HISTORY_KEY
from ..core.models import HistoryEntry
from .plan_store import KeyValueStore
from .serializers import ValidationError, dict_to_history_entry, history_entry_to_dict

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Manages the history log.

    Entries are only ever prepended; existing entries are never edited,
    reordered or removed.
    """

    def __init__(self, kv: KeyValueStore, key: str = HISTORY_KEY):
        """
        Initialize the history store.

        Args:
            kv: Key-value persistence service
            key: Key of the history collection
        """
        self.kv = kv
        self.key = key

    def list(self) -> list[HistoryEntry]:
        """
        Load the log, most recent entry first.

        Returns:
            List of HistoryEntry (empty if nothing was logged yet)

        Raises:
            ValidationError: If a stored entry is invalid
        """
        raw = self.kv.get(self.key)
        if raw is None:
            return []

        entries: list[HistoryEntry] = []
        for index, data in enumerate(raw):
            try:
                entries.append(dict_to_history_entry(data))
            except ValidationError as e:
                raise ValidationError(f"Error parsing history entry #{index + 1}: {e}") from e
        return entries

    def append(self, entry: HistoryEntry) -> None:
        """
        Insert an entry at the front of the log.

        Stored records are carried over as-is so that nothing already in the
        log is rewritten.

        Args:
            entry: Finished session to archive
        """
        raw = self.kv.get(self.key) or []
        self.kv.set(self.key, [history_entry_to_dict(entry), *raw])
        logger.info(
            "Logged session %r: %s sets in %ds",
            entry.plan_name,
            entry.summary,
            entry.duration_seconds,
        )

    def latest(self) -> HistoryEntry | None:
        """Return the most recent entry, or None if the log is empty."""
        entries = self.list()
        return entries[0] if entries else None
