"""
Nostr protocol support: keys, event construction and relay publishing.
"""

from .event import build_event, metadata_header
from .keys import KeyManager, finalize_event, get_public_key, verify_event
from .publisher import RelayPublisher, RelayState, event_message
from .relays import RelaySetManager

__all__ = [
    "build_event",
    "metadata_header",
    "KeyManager",
    "finalize_event",
    "get_public_key",
    "verify_event",
    "RelayPublisher",
    "RelayState",
    "event_message",
    "RelaySetManager",
]
