"""Session context: the current signing identity and the current article.

The article handed over by `extract` is only usable for a short while;
anything older than FRESHNESS_WINDOW_MS must be extracted again.
"""

from __future__ import annotations

from dataclasses import dataclass
import time

from ..storage import JsonStateStore
from .errors import MissingIdentity, NoArticle, StaleArticle
from .types import Article, SigningIdentity


FRESHNESS_WINDOW_MS = 5 * 60 * 1000

ARTICLE_KEY = "currentArticle"
EXTRACTED_AT_KEY = "extractedAt"


def now_ms() -> int:
    return int(time.time() * 1000)


def is_expired(extracted_at_ms: int | None, now: int, window_ms: int = FRESHNESS_WINDOW_MS) -> bool:
    """Return True when an extraction timestamp falls outside the window.

    A missing timestamp is treated as fresh, matching articles stored
    before timestamps were recorded.
    """
    if extracted_at_ms is None:
        return False
    return extracted_at_ms < now - window_ms


class ArticleStore:
    """Reads and writes the current article with its extraction time."""

    def __init__(self, storage: JsonStateStore, window_ms: int = FRESHNESS_WINDOW_MS):
        self._storage = storage
        self._window_ms = window_ms

    def save(self, article: Article, extracted_at_ms: int | None = None) -> None:
        stamp = extracted_at_ms if extracted_at_ms is not None else now_ms()
        self._storage.set(**{ARTICLE_KEY: article.to_dict(), EXTRACTED_AT_KEY: stamp})

    def load(self, now: int | None = None) -> Article | None:
        """Load the current article.

        Returns:
            The stored Article, or None if nothing was extracted yet

        Raises:
            StaleArticle: If the article is older than the freshness window
        """
        data = self._storage.get_many(ARTICLE_KEY, EXTRACTED_AT_KEY)
        raw = data.get(ARTICLE_KEY)
        if not raw:
            return None
        current = now if now is not None else now_ms()
        if is_expired(data.get(EXTRACTED_AT_KEY), current, self._window_ms):
            raise StaleArticle()
        return Article.from_dict(raw)

    def clear(self) -> None:
        self._storage.remove(ARTICLE_KEY, EXTRACTED_AT_KEY)


@dataclass
class Session:
    """Explicit holder for the per-run identity and article."""

    identity: SigningIdentity | None = None
    article: Article | None = None

    def require_identity(self) -> SigningIdentity:
        if self.identity is None:
            raise MissingIdentity()
        return self.identity

    def require_article(self) -> Article:
        if self.article is None or not self.article.has_content:
            raise NoArticle()
        return self.article

    def end(self) -> None:
        self.identity = None
        self.article = None
