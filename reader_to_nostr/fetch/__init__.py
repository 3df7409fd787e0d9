"""
Page fetching and article extraction.

This package turns a URL or a saved HTML page into an Article.
"""

from .extractor import extract_article
from .fetcher import FetchResult, fetch_url, read_local_page

__all__ = [
    "extract_article",
    "FetchResult",
    "fetch_url",
    "read_local_page",
]
