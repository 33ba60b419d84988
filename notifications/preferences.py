"""
Notification preference storage and lookup.

Design decisions:
- The store is an interface; the in-memory implementation is a placeholder
  and production deployments plug in a shared store behind the same methods
- One record per user, replaced whole on update (last writer wins)
- Records are re-validated on the way in and copied on the way out, so a
  reader sees either the old or the new record and never a half-mutated one
- Users without a record get a synthesized all-enabled default that is not
  persisted
"""

import json
import logging
import threading
from pathlib import Path
from typing import Optional, Protocol

from notifications.models import Channel, NotificationPreference

logger = logging.getLogger("preferences")


class PreferenceStore(Protocol):
    """Key-value storage of one NotificationPreference per user."""

    def get(self, user_id: str) -> Optional[NotificationPreference]:
        ...

    def put(self, user_id: str, preference: NotificationPreference) -> None:
        ...


class InMemoryPreferenceStore:
    """
    Thread-safe in-process preference store.

    Each get/put is a single atomic operation on one key. There are no
    multi-key transactions and nothing is ever deleted.
    """

    def __init__(self, preferences: Optional[dict[str, NotificationPreference]] = None):
        self._lock = threading.Lock()
        self._preferences: dict[str, NotificationPreference] = {}
        for user_id, preference in (preferences or {}).items():
            self.put(user_id, preference)

    @classmethod
    def from_json(cls, path: Path) -> "InMemoryPreferenceStore":
        """
        Seed a store from a JSON fixture file.

        The file holds a list of preference objects, each with a user_id.
        Entries without one are skipped. A missing file yields an empty store.
        """
        path = Path(path)
        if not path.exists():
            logger.warning(f"Preference fixture not found: {path}")
            return cls()
        with open(path, "r") as f:
            data = json.load(f)
        preferences: dict[str, NotificationPreference] = {}
        for entry in data:
            record = NotificationPreference(**entry)
            if not record.user_id:
                logger.warning(f"Skipping preference entry without user_id in {path}")
                continue
            preferences[record.user_id] = record
        return cls(preferences)

    def get(self, user_id: str) -> Optional[NotificationPreference]:
        with self._lock:
            stored = self._preferences.get(user_id)
        return stored.model_copy(deep=True) if stored is not None else None

    def put(self, user_id: str, preference: NotificationPreference) -> None:
        snapshot = NotificationPreference.model_validate(preference.model_dump())
        with self._lock:
            self._preferences[user_id] = snapshot

    def __len__(self) -> int:
        with self._lock:
            return len(self._preferences)


class NotificationPreferenceService:
    """
    Reads and updates user preferences and answers channel lookups.

    Example:
        service = NotificationPreferenceService(InMemoryPreferenceStore())
        service.is_channel_enabled("u1", "email")   # True, nothing stored yet
    """

    def __init__(self, store: Optional[PreferenceStore] = None):
        self.store = store if store is not None else InMemoryPreferenceStore()

    def get_preferences(self, user_id: str) -> NotificationPreference:
        """Stored preferences, or an all-enabled default if none are stored."""
        stored = self.store.get(user_id)
        if stored is None:
            return NotificationPreference.default(user_id)
        return stored

    def update_preferences(
        self,
        user_id: str,
        preferences: NotificationPreference,
    ) -> NotificationPreference:
        """
        Replace the preferences for a user.

        The record is stored under `user_id` regardless of any user_id it
        already carries.

        Returns:
            The record as stored
        """
        record = NotificationPreference.model_validate({**preferences.model_dump(), "user_id": user_id})
        self.store.put(user_id, record)
        logger.debug(f"Updated notification preferences for user: {user_id}")
        return record

    def is_channel_enabled(self, user_id: str, channel: str) -> bool:
        """Check if a channel is enabled for a user."""
        return self.get_preferences(user_id).is_channel_enabled(channel)

    def enabled_channels(self, user_id: str) -> list[Channel]:
        return self.get_preferences(user_id).enabled_channels()
