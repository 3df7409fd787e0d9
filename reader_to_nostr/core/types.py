"""
Core data types for reader-to-nostr.

This module defines the fixed-shape records passed between pipeline stages:
- Article: Readable content extracted from a web page
- SigningIdentity: A Nostr secret key and its derived public key
- ContentEvent: An unsigned NIP-23 long-form event
- SignedEvent: A ContentEvent bound to a pubkey by id and signature
- PublishOutcome / PublishReport: Per-relay and aggregate delivery results
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


LONG_FORM_KIND = 30023


@dataclass(frozen=True)
class Article:
    """Readable article extracted from a single page.

    Created once per extraction attempt and never modified afterwards.
    A failed extraction is still an Article, with extracted_successfully
    False and error_detail describing what went wrong.

    Attributes:
        title: Article headline (document title or "Untitled" as fallback)
        html_content: Simplified article HTML
        text_content: Plain text of the article body
        excerpt: Short description or first paragraph
        byline: Author line, empty when unknown
        source_url: URL of the page the article was extracted from
        extracted_successfully: Whether the extractor produced an article
        error_detail: Extractor error message on failure
    """

    title: str
    html_content: str = ""
    text_content: str = ""
    excerpt: str = ""
    byline: str = ""
    source_url: str = ""
    extracted_successfully: bool = True
    error_detail: str | None = None

    @property
    def has_content(self) -> bool:
        return bool(self.html_content or self.text_content)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted `currentArticle` shape."""
        payload: dict[str, Any] = {
            "title": self.title,
            "content": self.html_content,
            "textContent": self.text_content,
            "excerpt": self.excerpt,
            "byline": self.byline,
            "url": self.source_url,
            "success": self.extracted_successfully,
        }
        if self.error_detail is not None:
            payload["error"] = self.error_detail
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        return cls(
            title=str(data.get("title") or "Untitled"),
            html_content=str(data.get("content") or ""),
            text_content=str(data.get("textContent") or ""),
            excerpt=str(data.get("excerpt") or ""),
            byline=str(data.get("byline") or ""),
            source_url=str(data.get("url") or ""),
            extracted_successfully=bool(data.get("success", False)),
            error_detail=data.get("error"),
        )


@dataclass(frozen=True)
class SigningIdentity:
    """A Nostr signing key pair.

    The public key is always derived from the secret; the secret is kept
    out of repr so it never ends up in logs or tracebacks.
    """

    secret_key_bytes: bytes = field(repr=False)
    public_key_hex: str

    def __post_init__(self) -> None:
        if len(self.secret_key_bytes) != 32:
            raise ValueError("secret key must be exactly 32 bytes")


@dataclass(frozen=True)
class ContentEvent:
    """Unsigned long-form content event."""

    created_at: int
    tags: list[list[str]]
    content: str
    kind: int = LONG_FORM_KIND

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "created_at": self.created_at,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
        }


@dataclass(frozen=True)
class SignedEvent:
    """Signed Nostr event as sent to relays.

    Attributes:
        id: Hex sha256 of the NIP-01 serialization
        pubkey: Hex x-only public key of the signer
        created_at: Unix seconds
        kind: Event kind
        tags: Ordered tag list
        content: Event body
        sig: Hex BIP-340 Schnorr signature over id
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: list[list[str]]
    content: str
    sig: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "sig": self.sig,
        }


class PublishState(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class PublishOutcome:
    """Terminal result of publishing to one relay endpoint."""

    endpoint: str
    state: PublishState
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is PublishState.SUCCESS


@dataclass
class PublishReport:
    """Aggregate of per-relay outcomes, in endpoint order."""

    outcomes: list[PublishOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failure_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.ok)

    @property
    def failed(self) -> list[PublishOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]
