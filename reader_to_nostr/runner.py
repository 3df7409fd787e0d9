"""
Pipeline orchestration for reader-to-nostr.

This module coordinates the two user-facing workflows:
1. Extract: fetch or load a page, extract the article, store it with its
   extraction time
2. Publish: restore the session, check identity, article freshness and
   relays, build and sign the event, fan it out to the relays

All checks that can block a publish happen before any connection is opened.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import time

from .config import AppConfig
from .core.errors import NoArticle, NoRelays
from .core.session import ArticleStore, Session, now_ms
from .core.types import Article, PublishReport, SignedEvent
from .fetch.extractor import extract_article
from .fetch.fetcher import FetchResult, fetch_url, read_local_page
from .logging_utils import log_event
from .nostr.event import build_event
from .nostr.keys import KeyManager
from .nostr.publisher import RelayPublisher
from .nostr.relays import RelaySetManager
from .storage import JsonStateStore


def build_storage(cfg: AppConfig) -> JsonStateStore:
    return JsonStateStore(Path(cfg.storage.path))


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _load_page(source: str, cfg: AppConfig, transport=None) -> FetchResult:  # noqa: ANN001
    if _is_url(source):
        return fetch_url(
            source,
            timeout=cfg.fetch.timeout_seconds,
            retries=cfg.fetch.retries,
            user_agent=cfg.fetch.user_agent,
            trust_env=cfg.fetch.trust_env,
            transport=transport,
        )
    return read_local_page(Path(source).expanduser())


def run_extract(
    source: str,
    cfg: AppConfig,
    storage: JsonStateStore,
    logger: logging.Logger | None = None,
    now: int | None = None,
    transport=None,  # noqa: ANN001
) -> Article:
    """Extract the article at a URL or local path and make it current.

    A page that cannot be loaded still produces a stored Article, marked
    as failed, so `show` can explain what happened.

    Args:
        source: http(s) URL or path to a saved HTML file
        cfg: Application configuration
        storage: Persisted state
        logger: Logger for events
        now: Extraction time in unix milliseconds (defaults to now)
        transport: Optional httpx transport, used by tests

    Returns:
        The stored Article
    """
    logger = logger or logging.getLogger("reader_to_nostr")
    log_event(logger, "Extract start", event="extract_start", source=source)

    result = _load_page(source, cfg, transport)
    if not result.ok:
        article = Article(
            title="Error",
            source_url=source,
            extracted_successfully=False,
            error_detail=f"Failed to extract article content: {result.error}",
        )
    else:
        article = extract_article(result.text or "", result.final_url or source, cfg.extract)

    ArticleStore(storage).save(article, now if now is not None else now_ms())
    log_event(
        logger,
        "Extract done",
        event="extract_done",
        source=source,
        title=article.title,
        success=article.extracted_successfully,
        error=article.error_detail,
        chars=len(article.text_content),
    )
    return article


def load_session(storage: JsonStateStore, logger: logging.Logger | None = None, now: int | None = None) -> Session:
    """Restore the identity and the current article.

    Raises:
        StaleArticle: If the stored article is past the freshness window
    """
    identity = KeyManager(storage, logger).restore()
    article = ArticleStore(storage).load(now)
    return Session(identity=identity, article=article)


async def publish_current_article(
    cfg: AppConfig,
    storage: JsonStateStore,
    logger: logging.Logger | None = None,
    publisher: RelayPublisher | None = None,
    now: int | None = None,
) -> tuple[SignedEvent, PublishReport]:
    """Sign the current article and publish it to the configured relays.

    Args:
        cfg: Application configuration
        storage: Persisted state
        logger: Logger for events
        publisher: RelayPublisher to use (a WebSocket publisher by default)
        now: Current time in unix milliseconds (defaults to now)

    Returns:
        Tuple of (signed event, publish report)

    Raises:
        MissingIdentity: If nobody is logged in
        StaleArticle: If the article is past the freshness window
        NoArticle: If there is no usable article
        NoRelays: If the relay list is empty
    """
    logger = logger or logging.getLogger("reader_to_nostr")
    current = now if now is not None else now_ms()

    identity = KeyManager(storage, logger).restore()
    session = Session(identity=identity)
    session.require_identity()
    session.article = ArticleStore(storage).load(current)
    article = session.require_article()
    if not article.extracted_successfully:
        raise NoArticle(article.error_detail or "Could not extract readable content from the page")

    relays = RelaySetManager(storage, cfg.publish.default_relays).load_or_default()
    if not relays:
        raise NoRelays()

    event = build_event(
        article,
        session.identity,
        now_seconds=current // 1000,
        topics=cfg.publish.topics,
        client_name=cfg.publish.client_name,
    )
    log_event(logger, "Event signed", event="event_signed", event_id=event.id, kind=event.kind, tags=len(event.tags))

    publisher = publisher or RelayPublisher(logger=logging.getLogger("reader_to_nostr.publish"))
    report = await publisher.publish(
        event,
        relays,
        connect_timeout_ms=cfg.publish.connect_timeout_ms,
        linger_ms=cfg.publish.linger_ms,
    )
    return event, report


def run_publish(
    cfg: AppConfig,
    storage: JsonStateStore,
    logger: logging.Logger | None = None,
    publisher: RelayPublisher | None = None,
) -> tuple[SignedEvent, PublishReport]:
    """Synchronous entry point for publish_current_article."""
    started = time.monotonic()
    event, report = asyncio.run(publish_current_article(cfg, storage, logger, publisher))
    log_event(
        logger,
        "Publish finished",
        event="publish_finished",
        event_id=event.id,
        elapsed_ms=int((time.monotonic() - started) * 1000),
    )
    return event, report
