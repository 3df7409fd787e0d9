"""Tests for the current article store and its freshness window."""

import pytest

from reader_to_nostr.core.errors import MissingIdentity, NoArticle, StaleArticle
from reader_to_nostr.core.session import FRESHNESS_WINDOW_MS, ArticleStore, Session, is_expired
from reader_to_nostr.core.types import Article

NOW = 1_700_000_000_000
MINUTE = 60 * 1000


def test_window_is_five_minutes():
    """Articles stay fresh for five minutes."""
    assert FRESHNESS_WINDOW_MS == 5 * MINUTE


def test_is_expired_boundaries():
    """Only timestamps strictly older than the window expire."""
    assert not is_expired(NOW - MINUTE, NOW)
    assert not is_expired(NOW - FRESHNESS_WINDOW_MS, NOW)
    assert is_expired(NOW - FRESHNESS_WINDOW_MS - 1, NOW)
    assert not is_expired(None, NOW)


def test_round_trip_keeps_article_fields(storage, article):
    """A saved article loads back unchanged."""
    store = ArticleStore(storage)
    store.save(article, NOW)

    assert storage.get("extractedAt") == NOW
    assert storage.get("currentArticle")["url"] == article.source_url
    assert store.load(NOW + MINUTE) == article


def test_six_minute_old_article_is_stale(storage, article):
    """A six minute old article raises StaleArticle."""
    store = ArticleStore(storage)
    store.save(article, NOW - 6 * MINUTE)
    with pytest.raises(StaleArticle) as excinfo:
        store.load(NOW)
    assert str(excinfo.value) == "Article data has expired. Please extract again."


def test_missing_timestamp_counts_as_fresh(storage, article):
    """An article without extractedAt still loads."""
    storage.set(currentArticle=article.to_dict())
    assert ArticleStore(storage).load(NOW) == article


def test_nothing_extracted_yet(storage):
    """Loading with nothing stored returns None."""
    assert ArticleStore(storage).load(NOW) is None


def test_clear(storage, article):
    """Clearing removes the article and its timestamp."""
    store = ArticleStore(storage)
    store.save(article, NOW)
    store.clear()
    assert store.load(NOW) is None
    assert storage.get("extractedAt") is None


def test_from_dict_defaults():
    """Missing stored fields get safe defaults."""
    restored = Article.from_dict({"content": "<p>x</p>"})
    assert restored.title == "Untitled"
    assert restored.html_content == "<p>x</p>"
    assert not restored.extracted_successfully


def test_session_requirements(identity, article):
    """Session checks identity and article content in turn."""
    session = Session()
    with pytest.raises(MissingIdentity) as excinfo:
        session.require_identity()
    assert str(excinfo.value) == "Please login with your nsec first"
    with pytest.raises(NoArticle):
        session.require_article()

    session.identity = identity
    session.article = Article(title="blank")
    assert session.require_identity() is identity
    with pytest.raises(NoArticle):
        session.require_article()

    session.article = article
    assert session.require_article() is article

    session.end()
    assert session.identity is None
    assert session.article is None
