from __future__ import annotations

from pathlib import Path

import pytest

from reader_to_nostr.core.types import Article, SigningIdentity
from reader_to_nostr.nostr.keys import get_public_key
from reader_to_nostr.storage import JsonStateStore


SECRET_HEX = "67dea2ed018072d675f5415ecfaed7d2597555e202d85b3d65ea4e58d2d92ffa"


@pytest.fixture
def storage(tmp_path: Path) -> JsonStateStore:
    return JsonStateStore(tmp_path / "state.json")


@pytest.fixture
def identity() -> SigningIdentity:
    secret = bytes.fromhex(SECRET_HEX)
    return SigningIdentity(secret_key_bytes=secret, public_key_hex=get_public_key(secret))


@pytest.fixture
def article() -> Article:
    return Article(
        title="How Relays Work",
        html_content="<h2>Intro</h2><p>Relays store <strong>events</strong>.</p>",
        text_content="Intro\nRelays store events.",
        excerpt="Relays store events.",
        byline="Jane",
        source_url="https://example.com/relays",
    )
