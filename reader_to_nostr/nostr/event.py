"""
Construction of signed NIP-23 long-form events from extracted articles.
"""

from __future__ import annotations

from typing import Iterable

from ..core.errors import MissingIdentity, NoArticle
from ..core.types import Article, ContentEvent, LONG_FORM_KIND, SignedEvent, SigningIdentity
from ..markdown import article_body
from .keys import finalize_event


DEFAULT_CLIENT_NAME = "Reader to Nostr"


def metadata_header(source_url: str, client_name: str = DEFAULT_CLIENT_NAME) -> str:
    """Header prepended to every event body.

    An empty URL still renders a link line, with "Unknown" as its label.
    """
    return "\n".join(
        [
            f"**Original source:** [{source_url or 'Unknown'}]({source_url or ''})",
            f"**Shared with:** {client_name}",
            "",
            "---",
            "",
        ]
    )


def topic_tags(topics: Iterable[str]) -> list[list[str]]:
    """One "t" tag per distinct, non-blank topic, first occurrence wins."""
    seen: set[str] = set()
    tags: list[list[str]] = []
    for topic in topics:
        value = topic.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        tags.append(["t", value])
    return tags


def build_tags(article: Article, now_seconds: int, topics: Iterable[str] = ()) -> list[list[str]]:
    tags = [
        ["title", article.title or "Untitled"],
        ["url", article.source_url or ""],
        ["published_at", str(now_seconds)],
    ]
    tags.extend(topic_tags(topics))
    if article.byline:
        tags.append(["author", article.byline])
    return tags


def build_event(
    article: Article | None,
    identity: SigningIdentity | None,
    now_seconds: int,
    topics: Iterable[str] = (),
    client_name: str = DEFAULT_CLIENT_NAME,
) -> SignedEvent:
    """Build and sign a long-form event for an article.

    Args:
        article: The extracted article to share
        identity: The logged-in signing identity
        now_seconds: Unix time used for created_at and published_at
        topics: Values for "t" tags
        client_name: Shown in the "Shared with" header line

    Returns:
        The signed event

    Raises:
        MissingIdentity: If no identity is given
        NoArticle: If the article is missing or has no content
    """
    if identity is None:
        raise MissingIdentity()
    if article is None or not article.has_content:
        raise NoArticle()

    content = metadata_header(article.source_url, client_name) + article_body(article)
    unsigned = ContentEvent(
        kind=LONG_FORM_KIND,
        created_at=now_seconds,
        tags=build_tags(article, now_seconds, topics),
        content=content,
    )
    return finalize_event(unsigned, identity.secret_key_bytes)
