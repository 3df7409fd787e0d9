"""
Key management and event signing.

Keys are parsed, encoded (NIP-19) and used for signing through nostr_sdk.
Signed events are converted back into plain SignedEvent records so the
rest of the package never handles nostr_sdk objects directly.
"""

from __future__ import annotations

import json
import logging

from nostr_sdk import Event, EventBuilder, Keys, Kind, NostrSdkError, PublicKey, SecretKey, Tag, Timestamp

from ..core.errors import InvalidKeyFormat
from ..core.types import ContentEvent, SignedEvent, SigningIdentity
from ..logging_utils import log_event
from ..storage import JsonStateStore


SECRET_KEY = "secretKey"


def _keys_from_bytes(secret: bytes) -> Keys:
    return Keys(SecretKey.parse(secret.hex()))


def get_public_key(secret: bytes) -> str:
    """Derive the hex x-only public key for a 32-byte secret."""
    return _keys_from_bytes(secret).public_key().to_hex()


def npub_encode(pubkey_hex: str) -> str:
    return PublicKey.parse(pubkey_hex).to_bech32()


def finalize_event(event: ContentEvent, secret: bytes) -> SignedEvent:
    """Sign an unsigned event, filling in pubkey, id and sig."""
    keys = _keys_from_bytes(secret)
    builder = (
        EventBuilder(Kind(event.kind), event.content)
        .tags([Tag.parse(list(tag)) for tag in event.tags])
        .custom_created_at(Timestamp.from_secs(event.created_at))
    )
    signed = builder.sign_with_keys(keys)
    data = json.loads(signed.as_json())
    return SignedEvent(
        id=data["id"],
        pubkey=data["pubkey"],
        created_at=int(data["created_at"]),
        kind=int(data["kind"]),
        tags=[list(tag) for tag in data["tags"]],
        content=data["content"],
        sig=data["sig"],
    )


def verify_event(event: SignedEvent) -> bool:
    """Check that id matches the event fields and sig matches the id."""
    try:
        parsed = Event.from_json(json.dumps(event.to_dict(), ensure_ascii=False))
        return parsed.verify()
    except NostrSdkError:
        return False


def parse_secret_key(value: str) -> bytes:
    """Parse an nsec string or a hex private key into raw key bytes.

    Raises:
        InvalidKeyFormat: If the value is empty, is not an nsec or 64 hex
            characters, or is not a valid secp256k1 scalar
    """
    value = value.strip()
    if not value:
        raise InvalidKeyFormat("Please enter your nsec or private key")
    if value.startswith("npub1"):
        raise InvalidKeyFormat("This is a public key; enter your nsec")
    try:
        secret = SecretKey.parse(value)
    except NostrSdkError as exc:
        label = "nsec" if value.startswith("nsec1") else "private key"
        raise InvalidKeyFormat(f"Invalid {label} format") from exc
    return bytes.fromhex(secret.to_hex())


class KeyManager:
    """Owns the signing identity and its persisted secret key.

    The secret is stored as a list of byte values under `secretKey`.
    """

    def __init__(self, storage: JsonStateStore, logger: logging.Logger | None = None):
        self._storage = storage
        self._logger = logger or logging.getLogger("reader_to_nostr.keys")
        self.identity: SigningIdentity | None = None

    def login(self, value: str) -> SigningIdentity:
        """Validate a key, persist it and make it the current identity.

        Raises:
            InvalidKeyFormat: Stored key material is left untouched
        """
        secret = parse_secret_key(value)
        identity = SigningIdentity(secret_key_bytes=secret, public_key_hex=get_public_key(secret))
        self._storage.set(**{SECRET_KEY: list(secret)})
        self.identity = identity
        log_event(self._logger, "Logged in", event="login", npub=self.display_identity(identity.public_key_hex))
        return identity

    def logout(self) -> None:
        self._storage.remove(SECRET_KEY)
        self.identity = None
        log_event(self._logger, "Logged out", event="logout")

    def restore(self) -> SigningIdentity | None:
        """Reload the persisted key, or return None when logged out."""
        raw = self._storage.get(SECRET_KEY)
        if not raw:
            self.identity = None
            return None
        try:
            secret = bytes(raw)
            identity = SigningIdentity(secret_key_bytes=secret, public_key_hex=get_public_key(secret))
        except (TypeError, ValueError, NostrSdkError) as exc:
            self._logger.warning("Ignoring malformed stored key: %s", type(exc).__name__)
            self.identity = None
            return None
        self.identity = identity
        return identity

    @staticmethod
    def display_identity(pubkey_hex: str) -> str:
        return npub_encode(pubkey_hex)
