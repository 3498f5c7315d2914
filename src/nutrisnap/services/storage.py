"""Key-value storage abstractions."""

from dataclasses import dataclass
from typing import Protocol


class KeyValueStore(Protocol):
    """String key-value store, the durable backing for all app data."""

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store used for development and tests."""

    _values: dict[str, str]

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values = dict(values or {})

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        self._values[key] = value

    def remove(self, key: str) -> None:
        """Delete a key if present."""
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        """Return all stored keys."""
        return list(self._values)
