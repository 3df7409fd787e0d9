"""Tests for relay list management."""

import pytest

from reader_to_nostr.config import DEFAULT_RELAYS
from reader_to_nostr.core.errors import DuplicateRelay, InvalidScheme
from reader_to_nostr.nostr.relays import RelaySetManager


def test_defaults_used_until_a_list_is_saved(storage):
    """The built-in relays apply until the user saves a list."""
    assert RelaySetManager(storage).list() == DEFAULT_RELAYS
    assert storage.get("relays") is None


def test_add_appends_and_persists(storage):
    """Added relays are stripped, appended and stored."""
    manager = RelaySetManager(storage, ["wss://one"])
    relays = manager.add("  wss://two  ")

    assert relays == ["wss://one", "wss://two"]
    assert storage.get("relays") == ["wss://one", "wss://two"]
    assert RelaySetManager(storage, []).list() == ["wss://one", "wss://two"]


def test_plain_ws_is_accepted(storage):
    """Unencrypted ws URLs are allowed."""
    assert RelaySetManager(storage, []).add("ws://localhost:7000") == ["ws://localhost:7000"]


@pytest.mark.parametrize("url", ["https://relay.example", "relay.example", "", "WSS//x"])
def test_add_rejects_non_websocket_urls(storage, url):
    """Non-WebSocket URLs are rejected without saving."""
    manager = RelaySetManager(storage, ["wss://one"])
    with pytest.raises(InvalidScheme):
        manager.add(url)
    assert storage.get("relays") is None


def test_add_rejects_duplicates(storage):
    """Adding an existing relay is rejected."""
    manager = RelaySetManager(storage, ["wss://one"])
    with pytest.raises(DuplicateRelay) as excinfo:
        manager.add("wss://one")
    assert "wss://one" in str(excinfo.value)
    assert manager.list() == ["wss://one"]


def test_remove_by_position(storage):
    """Removing by index keeps the remaining order."""
    manager = RelaySetManager(storage, ["wss://a", "wss://b", "wss://c"])
    assert manager.remove(1) == ["wss://a", "wss://c"]
    assert manager.list() == ["wss://a", "wss://c"]


def test_remove_out_of_range(storage):
    """Out-of-range removals raise and change nothing."""
    manager = RelaySetManager(storage, ["wss://a"])
    for index in (-1, 1, 5):
        with pytest.raises(IndexError):
            manager.remove(index)
    assert manager.list() == ["wss://a"]


def test_removing_every_relay_keeps_an_empty_list(storage):
    """An emptied list stays empty instead of reverting to defaults."""
    manager = RelaySetManager(storage, ["wss://a"])
    manager.remove(0)
    assert manager.list() == []
    assert storage.get("relays") == []
