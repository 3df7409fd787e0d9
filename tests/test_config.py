"""Tests for YAML configuration loading and logging setup."""

import json
import logging

import pytest

from reader_to_nostr.config import AppConfig, DEFAULT_RELAYS, LoggingConfig, get_secret_key, load_config
from reader_to_nostr.logging_utils import JsonlFormatter, log_event, redact_secrets, setup_logging


def test_missing_file_gives_defaults(tmp_path):
    """A missing config file yields the default configuration."""
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg == AppConfig()
    assert cfg.publish.connect_timeout_ms == 5000
    assert cfg.publish.linger_ms == 1000
    assert cfg.publish.default_relays == DEFAULT_RELAYS
    assert load_config(None) == AppConfig()


def test_defaults_are_not_shared():
    """Each load returns independent default lists."""
    first = load_config(None)
    first.publish.topics.append("extra")
    assert "extra" not in load_config(None).publish.topics


def test_yaml_overrides_known_keys(tmp_path):
    """Known YAML keys override defaults; unknown ones are ignored."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "publish:\n"
        "  linger_ms: 250\n"
        "  topics: [nostr]\n"
        "  mystery: 1\n"
        "extract:\n"
        "  primary: bs4\n"
        "unknown_section:\n"
        "  a: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.publish.linger_ms == 250
    assert cfg.publish.topics == ["nostr"]
    assert cfg.publish.connect_timeout_ms == 5000
    assert cfg.extract.primary == "bs4"
    assert cfg.extract.fallback == ["bs4"]


def test_non_mapping_config_is_rejected(tmp_path):
    """A YAML document that is not a mapping raises ValueError."""
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_secret_key_from_environment(monkeypatch):
    """The secret key env var is read and stripped."""
    cfg = AppConfig().storage
    monkeypatch.delenv(cfg.secret_key_env, raising=False)
    assert get_secret_key(cfg) is None
    monkeypatch.setenv(cfg.secret_key_env, "  nsec1abc \n")
    assert get_secret_key(cfg) == "nsec1abc"


def test_redact_secrets():
    """nsec strings are masked in log text."""
    text = "login with nsec1vl029mgpspedva04g90vltkh6fvh240zqtv9k0t9af8935ke9laqsnlfe5 please"
    assert redact_secrets(text) == "login with nsec1[REDACTED] please"


def test_jsonl_file_logging(tmp_path):
    """log_event fields land in the JSONL log file."""
    cfg = LoggingConfig(level="INFO", console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, log_dir=tmp_path)

    log_event(logger, "Publish start", event="publish_start", relays=3)
    for handler in logger.handlers:
        handler.flush()
        handler.close()

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[-1])
    assert record["message"] == "Publish start"
    assert record["event"] == "publish_start"
    assert record["relays"] == 3
    assert record["level"] == "INFO"


def test_jsonl_formatter_redacts_messages():
    """The JSONL formatter masks secrets in messages."""
    record = logging.LogRecord("reader_to_nostr", logging.INFO, __file__, 1, "key %s", ("nsec1qqqq",), None)
    payload = json.loads(JsonlFormatter().format(record))
    assert payload["message"] == "key nsec1[REDACTED]"


def test_log_event_without_logger_is_noop():
    """log_event accepts a missing logger."""
    log_event(None, "ignored", event="x")
