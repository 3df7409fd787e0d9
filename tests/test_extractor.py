"""Tests for readable article extraction."""

from bs4 import BeautifulSoup

from reader_to_nostr.config import ExtractConfig
from reader_to_nostr.fetch import extractor
from reader_to_nostr.fetch.extractor import extract_article

BS4_ONLY = ExtractConfig(primary="bs4", fallback=[])

PAGE = """
<html>
  <head>
    <title>Why Relays Matter</title>
    <meta name="author" content="Ada Writer">
    <meta name="description" content="A short tour of relays.">
  </head>
  <body>
    <nav><a href="/">Home</a> <a href="/about">About</a></nav>
    <article>
      <h1>Why Relays Matter</h1>
      <p>Relays accept events from clients and keep them around.</p>
      <p>Clients pick the relays they trust.</p>
      <script>trackEverything()</script>
    </article>
    <footer>Copyright</footer>
  </body>
</html>
"""


def test_bs4_extracts_article_block():
    """The article element is extracted without navigation or scripts."""
    article = extract_article(PAGE, "https://example.com/relays", BS4_ONLY)

    assert article.extracted_successfully
    assert article.title == "Why Relays Matter"
    assert article.byline == "Ada Writer"
    assert article.excerpt == "A short tour of relays."
    assert article.source_url == "https://example.com/relays"
    assert "Clients pick the relays they trust." in article.text_content
    assert "<p>Relays accept events" in article.html_content
    assert "trackEverything" not in article.html_content
    assert "Home" not in article.text_content
    assert "Copyright" not in article.text_content


def test_densest_block_used_without_article_tag():
    """Without article or main, the densest paragraph block wins."""
    html = """
    <html><head><title>Notes</title></head><body>
      <div class="sidebar"><p>Ad</p></div>
      <div class="post">
        <p>First long paragraph about signing events with Schnorr keys.</p>
        <p>Second long paragraph about relays and subscriptions.</p>
      </div>
    </body></html>
    """
    article = extract_article(html, "https://example.com/notes", BS4_ONLY)

    assert article.extracted_successfully
    assert "Schnorr" in article.text_content
    assert "Ad" not in article.text_content.split("\n")
    assert article.excerpt.startswith("First long paragraph")


def test_parsed_document_is_not_mutated():
    """A caller's parsed document is left untouched."""
    soup = BeautifulSoup(PAGE, "html.parser")
    before = str(soup)

    article = extract_article(soup, "https://example.com/relays", BS4_ONLY)

    assert article.extracted_successfully
    assert str(soup) == before
    assert soup.find("script") is not None
    assert soup.find("nav") is not None


def test_empty_page_reports_failure_with_title_fallback():
    """An empty page is a failed article titled Untitled."""
    article = extract_article("<html><head></head><body>   </body></html>", "https://example.com/x", BS4_ONLY)

    assert not article.extracted_successfully
    assert article.title == "Untitled"
    assert article.error_detail == "Could not extract readable content from the page"
    assert not article.has_content


def test_failure_keeps_document_title():
    """A failed extraction still carries the document title."""
    article = extract_article("<title>Only a title</title>", "https://example.com/x", BS4_ONLY)
    assert not article.extracted_successfully
    assert article.title == "Only a title"


def test_unknown_methods_are_skipped():
    """Unknown method names in the chain are ignored."""
    cfg = ExtractConfig(primary="nonexistent", fallback=["bs4"])
    article = extract_article(PAGE, "https://example.com/relays", cfg)
    assert article.extracted_successfully


def test_default_chain_extracts_content():
    """The default chain extracts the article body."""
    article = extract_article(PAGE, "https://example.com/relays")
    assert article.extracted_successfully
    assert "Clients pick the relays they trust." in article.text_content


def test_raising_method_is_reported_not_raised(monkeypatch):
    """An exception inside a method becomes the error detail."""
    def explode(soup):
        raise RuntimeError("parser exploded")

    monkeypatch.setattr(extractor, "_parse_bs4", explode)

    article = extract_article(PAGE, "https://example.com/relays", BS4_ONLY)

    assert not article.extracted_successfully
    assert article.error_detail == "RuntimeError: parser exploded"
    assert article.title == "Why Relays Matter"
    assert article.source_url == "https://example.com/relays"


def test_later_method_recovers_from_earlier_failure(monkeypatch):
    """A failing primary method falls through to the next one."""
    def explode(soup):
        raise RuntimeError("parser exploded")

    monkeypatch.setattr(extractor, "_parse_readability", explode)

    article = extract_article(PAGE, "https://example.com/relays", ExtractConfig(primary="readability", fallback=["bs4"]))

    assert article.extracted_successfully
    assert article.error_detail is None
