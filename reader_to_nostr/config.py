"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings for article pages
- ExtractConfig: Article extraction method chain
- PublishConfig: Relay timeouts, topic tags and default relays
- StorageConfig: Location of the persisted state file
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


DEFAULT_RELAYS = [
    "wss://relay.damus.io",
    "wss://nostr.wine",
    "wss://relay.primal.net",
    "wss://nostr.lol",
    "wss://nostr.mom",
]


@dataclass
class FetchConfig:
    """Configuration for fetching article pages over HTTP.

    Attributes:
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts for failed requests
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 20.0
    retries: int = 2
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )


@dataclass
class ExtractConfig:
    """Configuration for article extraction.

    Attributes:
        primary: Primary extraction method ("readability" or "bs4")
        fallback: List of fallback methods to try if primary fails
    """

    primary: str = "readability"
    fallback: list[str] = field(default_factory=lambda: ["bs4"])


@dataclass
class PublishConfig:
    """Configuration for publishing events to relays.

    Attributes:
        connect_timeout_ms: Per-relay limit for the WebSocket handshake
        linger_ms: How long a connection stays open after sending the event
        topics: Values emitted as "t" tags on every event
        client_name: Name shown in the "Shared with" header line
        default_relays: Relay list used until the user saves their own
    """

    connect_timeout_ms: int = 5000
    linger_ms: int = 1000
    topics: list[str] = field(default_factory=lambda: ["web-archive", "wayback", "ReadToRelay"])
    client_name: str = "Reader to Nostr"
    default_relays: list[str] = field(default_factory=lambda: list(DEFAULT_RELAYS))


@dataclass
class StorageConfig:
    """Configuration for persisted state.

    Attributes:
        path: JSON file holding keys, relays, preferences and the current article
        secret_key_env: Environment variable consulted by `login` when no key is passed
    """

    path: str = "~/.config/reader-to-nostr/state.json"
    secret_key_env: str = "NOSTR_SECRET_KEY"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        directory: Folder for the log file
        filename: Name of the log file
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    directory: str = "~/.config/reader-to-nostr/logs"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS = {
    "fetch": FetchConfig,
    "extract": ExtractConfig,
    "publish": PublishConfig,
    "storage": StorageConfig,
    "logging": LoggingConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    A missing path returns a fresh default configuration so that CLI
    overrides never leak into other callers.
    """
    if not path or not os.path.exists(path):
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Unknown sections and unknown keys inside a section are ignored.
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data or not isinstance(value, dict):
            continue
        known = {name: item for name, item in value.items() if name in data[key]}
        data[key].update(known)
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})


def get_secret_key(cfg: StorageConfig) -> str | None:
    """Get a secret key from the configured environment variable."""
    value = os.getenv(cfg.secret_key_env)
    return value.strip() if value else None
