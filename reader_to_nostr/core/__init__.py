"""
Core domain models and session handling.

This package contains the data types, errors and session context that
are independent of any specific pipeline stage.
"""

from .errors import (
    DuplicateRelay,
    InvalidKeyFormat,
    InvalidScheme,
    MissingIdentity,
    NoArticle,
    NoRelays,
    ReaderToNostrError,
    RelaySetError,
    StaleArticle,
)
from .session import ArticleStore, FRESHNESS_WINDOW_MS, Session, is_expired
from .types import (
    Article,
    ContentEvent,
    LONG_FORM_KIND,
    PublishOutcome,
    PublishReport,
    PublishState,
    SignedEvent,
    SigningIdentity,
)

__all__ = [
    "Article",
    "ArticleStore",
    "ContentEvent",
    "DuplicateRelay",
    "FRESHNESS_WINDOW_MS",
    "InvalidKeyFormat",
    "InvalidScheme",
    "LONG_FORM_KIND",
    "MissingIdentity",
    "NoArticle",
    "NoRelays",
    "PublishOutcome",
    "PublishReport",
    "PublishState",
    "ReaderToNostrError",
    "RelaySetError",
    "Session",
    "SignedEvent",
    "SigningIdentity",
    "StaleArticle",
    "is_expired",
]
