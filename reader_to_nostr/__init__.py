"""
reader-to-nostr - share readable web articles as Nostr long-form events.

This package extracts the readable part of a web page, converts it to
Markdown, signs it as a NIP-23 event (kind 30023) and publishes it to a
list of relays, reporting how many relays accepted the connection.

Main entry point is the CLI via `reader-to-nostr` commands.

Example:
    $ reader-to-nostr login
    $ reader-to-nostr extract https://example.com/post
    $ reader-to-nostr publish
"""

__all__ = ["__version__", "Article", "PublishReport", "SignedEvent", "build_event", "extract_article"]
__version__ = "0.1.0"

from .core.types import Article, PublishReport, SignedEvent
from .fetch.extractor import extract_article
from .nostr.event import build_event
