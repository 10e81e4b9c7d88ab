"""Key-value persistence port for small client preferences."""

import json
import logging
from dataclasses import dataclass, field
from typing import Protocol

_logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
MEDICINES_KEY = "nao_medicines"
MICRONUTRIENT_REPORTS_KEY = "micronutrientReports"
NOTIFY_PREFS_KEY = "notifyPrefs"
LANGUAGE_KEY = "language"
TIME_ZONE_KEY = "timeZone"
SESSION_TIMEOUT_KEY = "sessionTimeoutMinutes"
ONBOARDING_COMPLETE_KEY = "onboardingComplete"
USER_GOALS_KEY = "userGoals"
ALLERGEN_HISTORY_KEY = "allergenScanHistory"


class KeyValueStore(Protocol):
    """String key-value store, unsynchronized across writers."""

    def get(self, key: str) -> str | None:
        """Return the stored value or None."""

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def remove(self, key: str) -> None:
        """Delete a key if present."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)


def load_json(store: KeyValueStore, key: str, default: object = None) -> object:
    """Decode a JSON value, returning the default when absent or corrupt."""
    raw = store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        _logger.warning("Ignoring corrupt JSON stored under %s", key)
        return default


def save_json(store: KeyValueStore, key: str, value: object) -> None:
    store.set(key, json.dumps(value))
