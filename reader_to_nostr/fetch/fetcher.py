"""
HTTP page fetching for article extraction.

Fetches the page a user wants to share. Supports retry logic with
backoff, timeout configuration and environment proxy support.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import time

import httpx


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was requested
        final_url: The URL after redirects, used as the article source URL
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        error: Error message if fetch failed, None on success
    """
    url: str
    final_url: str | None
    status_code: int | None
    text: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.text is not None and self.error is None


def fetch_url(
    url: str,
    timeout: float,
    retries: int,
    user_agent: str,
    trust_env: bool,
    transport: httpx.BaseTransport | None = None,
) -> FetchResult:
    """Fetch a page using httpx with retry logic.

    HTTP error statuses are not retried; only transport-level failures are.

    Args:
        url: The URL to fetch
        timeout: Request timeout in seconds
        retries: Number of retry attempts after initial failure
        user_agent: User-Agent header string
        trust_env: Whether to respect system proxy settings from environment
        transport: Optional httpx transport, used by tests

    Returns:
        FetchResult with text on success or error message on failure
    """
    headers = {"User-Agent": user_agent, "Accept": "text/html,application/xhtml+xml"}
    last_error: str | None = None

    for attempt in range(retries + 1):
        try:
            with httpx.Client(
                timeout=timeout,
                headers=headers,
                follow_redirects=True,
                trust_env=trust_env,
                transport=transport,
            ) as client:
                resp = client.get(url)
            final_url = str(resp.url)
            if resp.status_code >= 400:
                return FetchResult(
                    url=url,
                    final_url=final_url,
                    status_code=resp.status_code,
                    text=None,
                    error=f"HTTP {resp.status_code}",
                )
            return FetchResult(url=url, final_url=final_url, status_code=resp.status_code, text=resp.text, error=None)
        except httpx.HTTPError as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < retries:
                # Linear backoff: 0.5s, 1.0s, 1.5s...
                time.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, final_url=None, status_code=None, text=None, error=last_error)


def read_local_page(path: Path) -> FetchResult:
    """Load a saved HTML page from disk as if it had been fetched."""
    url = path.resolve().as_uri()
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        return FetchResult(url=url, final_url=None, status_code=None, text=None, error=f"{type(exc).__name__}: {exc}")
    return FetchResult(url=url, final_url=url, status_code=None, text=text, error=None)
