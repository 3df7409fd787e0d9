"""Relay list management.

The list is persisted under `relays` and re-read on every operation.
Until a list has been saved, the built-in defaults are used.
"""

from __future__ import annotations

from ..config import DEFAULT_RELAYS
from ..core.errors import DuplicateRelay, InvalidScheme
from ..storage import JsonStateStore


RELAYS_KEY = "relays"
VALID_SCHEMES = ("wss://", "ws://")


def is_relay_url(endpoint: str) -> bool:
    return endpoint.startswith(VALID_SCHEMES)


class RelaySetManager:
    """Ordered, duplicate-free list of relay endpoints."""

    def __init__(self, storage: JsonStateStore, defaults: list[str] | None = None):
        self._storage = storage
        self._defaults = list(defaults) if defaults is not None else list(DEFAULT_RELAYS)

    def load_or_default(self) -> list[str]:
        stored = self._storage.get(RELAYS_KEY)
        if stored is None:
            return list(self._defaults)
        return [str(relay) for relay in stored]

    def list(self) -> list[str]:
        return self.load_or_default()

    def add(self, endpoint: str) -> list[str]:
        """Append a relay.

        Raises:
            InvalidScheme: If the URL is not ws:// or wss://
            DuplicateRelay: If the exact URL is already in the list
        """
        endpoint = endpoint.strip()
        if not is_relay_url(endpoint):
            raise InvalidScheme(endpoint)
        relays = self.load_or_default()
        if endpoint in relays:
            raise DuplicateRelay(endpoint)
        relays.append(endpoint)
        self._storage.set(**{RELAYS_KEY: relays})
        return relays

    def remove(self, index: int) -> list[str]:
        """Remove the relay at a zero-based position.

        Raises:
            IndexError: If index is out of range
        """
        relays = self.load_or_default()
        if index < 0 or index >= len(relays):
            raise IndexError(f"No relay at position {index}")
        del relays[index]
        self._storage.set(**{RELAYS_KEY: relays})
        return relays
