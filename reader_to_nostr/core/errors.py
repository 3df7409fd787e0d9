"""Domain errors raised by reader-to-nostr.

Extraction failures and per-relay delivery failures are not exceptions;
they are reported through Article.extracted_successfully and PublishReport.
"""

from __future__ import annotations


class ReaderToNostrError(Exception):
    """Base class for all domain errors."""


class InvalidKeyFormat(ReaderToNostrError, ValueError):
    """The supplied nsec or hex private key could not be used."""


class MissingIdentity(ReaderToNostrError):
    """A signing operation was attempted without a logged-in identity."""

    def __init__(self, message: str = "Please login with your nsec first"):
        super().__init__(message)


class NoArticle(ReaderToNostrError):
    """There is no article, or the article has no readable content."""

    def __init__(self, message: str = "No article to post"):
        super().__init__(message)


class StaleArticle(ReaderToNostrError):
    """The stored article is older than the freshness window."""

    def __init__(self, message: str = "Article data has expired. Please extract again."):
        super().__init__(message)


class NoRelays(ReaderToNostrError):
    """Publishing was requested with an empty relay list."""

    def __init__(self, message: str = "No relays configured"):
        super().__init__(message)


class RelaySetError(ReaderToNostrError, ValueError):
    """A relay list mutation was rejected."""


class InvalidScheme(RelaySetError):
    def __init__(self, endpoint: str):
        super().__init__(f"Relay URL must start with wss:// or ws://: {endpoint!r}")
        self.endpoint = endpoint


class DuplicateRelay(RelaySetError):
    def __init__(self, endpoint: str):
        super().__init__(f"Relay already added: {endpoint}")
        self.endpoint = endpoint
