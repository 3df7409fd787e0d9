"""
HTML to Markdown conversion for event content.

Wraps markdownify with fixed formatting rules: ATX headings, "-" bullets,
fenced code blocks, "*" emphasis, "**" strong and inline links.
"""

from __future__ import annotations

from bs4 import BeautifulSoup
from markdownify import ATX, ASTERISK, MarkdownConverter

from .core.types import Article


class ArticleMarkdownConverter(MarkdownConverter):
    """MarkdownConverter that drops paragraphs with no visible text."""

    class Options(MarkdownConverter.DefaultOptions):
        heading_style = ATX
        bullets = "-"
        strong_em_symbol = ASTERISK
        autolinks = False
        code_language = ""

    def convert_p(self, el, text, parent_tags):
        if not el.get_text().strip():
            return ""
        return super().convert_p(el, text, parent_tags)

def contains_html(text: str) -> bool:
    return BeautifulSoup(text, "html.parser").find() is not None

def convert(html: str | None) -> str:
    """Convert article HTML to Markdown.

    Text without any HTML elements is returned unchanged, so converting
    already-converted output is a no-op.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    if soup.find() is None:
        return html
    return ArticleMarkdownConverter().convert_soup(soup).strip()

def article_body(article: Article) -> str:
    """Markdown body for an article: converted HTML, else plain text."""
    if article.html_content:
        return convert(article.html_content)
    return article.text_content or ""
