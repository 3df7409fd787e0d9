"""
Readable article extraction with multiple fallback strategies.

This module provides a chain of extraction methods:
1. readability: Mozilla's readability algorithm via readability-lxml (optional extra)
2. bs4: BeautifulSoup content-density heuristic (always available)

Every method takes a parsed document and returns the same record shape
({title, content, textContent, excerpt, byline}) or None. Extraction never
raises: failures are reported on the returned Article.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable

from bs4 import BeautifulSoup, Tag

from ..config import ExtractConfig
from ..core.types import Article


ParsedArticle = dict[str, str]

_NOISE_TAGS = ["script", "style", "noscript", "nav", "footer", "header", "aside", "form", "iframe", "svg", "button"]
_EXCERPT_CHARS = 200

logger = logging.getLogger("reader_to_nostr.extract")


def extract_article(document: str | BeautifulSoup, url: str, cfg: ExtractConfig | None = None) -> Article:
    """Extract a readable Article from an HTML document.

    The document is copied before any method touches it, so a caller's
    BeautifulSoup tree is never mutated.

    Args:
        document: Raw HTML or an already parsed BeautifulSoup document
        url: Source URL recorded on the article
        cfg: Extraction method chain; defaults to ExtractConfig()

    Returns:
        An Article; extracted_successfully is False when every method failed
    """
    cfg = cfg or ExtractConfig()
    try:
        source = _clone_document(document)
    except Exception as exc:  # noqa: BLE001
        return _failed_article("Untitled", url, f"{type(exc).__name__}: {exc}")

    fallback_title = _document_title(source) or "Untitled"
    order = [cfg.primary] + [name for name in cfg.fallback if name != cfg.primary]
    last_error: str | None = None

    for method in order:
        parser = _get_parser(method)
        if not parser:
            continue
        try:
            parsed = parser(copy.copy(source))
        except Exception as exc:  # noqa: BLE001
            last_error = f"{type(exc).__name__}: {exc}"
            logger.debug("Extraction method %s failed: %s", method, last_error)
            continue
        if parsed and (parsed.get("content") or parsed.get("textContent")):
            return Article(
                title=parsed.get("title") or fallback_title,
                html_content=parsed.get("content") or "",
                text_content=parsed.get("textContent") or "",
                excerpt=parsed.get("excerpt") or "",
                byline=parsed.get("byline") or "",
                source_url=url,
                extracted_successfully=True,
            )

    return _failed_article(
        fallback_title,
        url,
        last_error or "Could not extract readable content from the page",
    )


def _failed_article(title: str, url: str, error: str) -> Article:
    return Article(
        title=title,
        source_url=url,
        extracted_successfully=False,
        error_detail=error,
    )


def _clone_document(document: str | BeautifulSoup) -> BeautifulSoup:
    if isinstance(document, BeautifulSoup):
        return copy.copy(document)
    return BeautifulSoup(document or "", "html.parser")


def _get_parser(name: str) -> Callable[[BeautifulSoup], ParsedArticle | None] | None:
    """Get the parse function for a given method name.

    Args:
        name: The name of the extraction method ("readability", "bs4")

    Returns:
        The corresponding parse function, or None if name is unrecognized
    """
    if name == "readability":
        return _parse_readability
    if name == "bs4":
        return _parse_bs4
    return None


def _parse_readability(soup: BeautifulSoup) -> ParsedArticle | None:
    """Extract the article using Mozilla's readability algorithm.

    readability-lxml is an optional dependency; when it is not installed
    this method fails with ImportError and the chain moves on.
    """
    from readability import Document

    doc = Document(str(soup))
    content_html = doc.summary(html_partial=True)
    content_soup = BeautifulSoup(content_html, "html.parser")
    text = _clean_text(content_soup.get_text(separator="\n"))
    if not text:
        return None
    return {
        "title": doc.short_title() or _document_title(soup),
        "content": content_html,
        "textContent": text,
        "excerpt": _find_excerpt(soup, content_soup),
        "byline": _find_byline(soup),
    }


def _parse_bs4(soup: BeautifulSoup) -> ParsedArticle | None:
    """Extract the article using a simple content-density heuristic.

    Prefers <article>, then <main>, then the block with the most
    paragraph text directly inside it.
    """
    title = _document_title(soup)
    byline = _find_byline(soup)
    for tag in soup(_NOISE_TAGS):
        tag.decompose()

    container = soup.find("article") or soup.find("main") or _densest_block(soup)
    if container is None:
        return None
    text = _clean_text(container.get_text(separator="\n"))
    if not text:
        return None
    return {
        "title": title,
        "content": container.decode_contents().strip(),
        "textContent": text,
        "excerpt": _find_excerpt(soup, container),
        "byline": byline,
    }


def _densest_block(soup: BeautifulSoup) -> Tag | None:
    best: Tag | None = None
    best_score = 0
    for candidate in soup.find_all(["div", "section", "td"]):
        score = sum(len(p.get_text(strip=True)) for p in candidate.find_all("p", recursive=False))
        if score > best_score:
            best, best_score = candidate, score
    if best is None and soup.body is not None and soup.body.get_text(strip=True):
        return soup.body
    return best


def _document_title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.string and soup.title.string.strip():
        return soup.title.string.strip()
    og_title = _meta_content(soup, "og:title")
    if og_title:
        return og_title
    heading = soup.find("h1")
    return heading.get_text(strip=True) if heading else ""


def _find_byline(soup: BeautifulSoup) -> str:
    author = _meta_content(soup, "author", "article:author")
    if author:
        return author
    node = soup.find(attrs={"rel": "author"}) or soup.select_one(".byline, [itemprop=author]")
    if node is None:
        return ""
    return " ".join(node.get_text(" ", strip=True).split())


def _find_excerpt(soup: BeautifulSoup, container: Any) -> str:
    description = _meta_content(soup, "description", "og:description")
    if description:
        return description
    paragraph = container.find("p") if container is not None else None
    if paragraph is None:
        return ""
    return paragraph.get_text(" ", strip=True)[:_EXCERPT_CHARS]


def _meta_content(soup: BeautifulSoup, *names: str) -> str:
    for name in names:
        node = soup.find("meta", attrs={"name": name}) or soup.find("meta", attrs={"property": name})
        if node and node.get("content", "").strip():
            return node["content"].strip()
    return ""


def _clean_text(text: str) -> str:
    return "\n".join(line.strip() for line in text.splitlines() if line.strip())
