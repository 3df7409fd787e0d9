"""Tests for reader display preferences."""

import pytest

from reader_to_nostr.preferences import (
    DEFAULT_FONT_SIZE,
    FONT_STEP,
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
    change_font_size,
    load_preferences,
    set_theme,
    toggle_theme,
)


def test_defaults(storage):
    """Fresh storage gives the light theme at 18px."""
    prefs = load_preferences(storage)
    assert prefs.theme == "light"
    assert prefs.font_size == DEFAULT_FONT_SIZE == 18


def test_theme_toggle_and_set(storage):
    """Themes toggle and only known themes can be set."""
    assert toggle_theme(storage).theme == "dark"
    assert toggle_theme(storage).theme == "light"
    assert set_theme(storage, "dark").theme == "dark"
    assert storage.get("theme") == "dark"
    with pytest.raises(ValueError):
        set_theme(storage, "sepia")


def test_font_size_steps_and_clamps(storage):
    """Font size moves in steps and stays within 12-28px."""
    assert change_font_size(storage, FONT_STEP).font_size == 20
    for _ in range(10):
        change_font_size(storage, FONT_STEP)
    assert load_preferences(storage).font_size == MAX_FONT_SIZE
    for _ in range(20):
        change_font_size(storage, -FONT_STEP)
    assert load_preferences(storage).font_size == MIN_FONT_SIZE
    assert storage.get("fontSize") == MIN_FONT_SIZE


def test_bad_stored_values_fall_back(storage):
    """Unusable stored values fall back to defaults."""
    storage.set(theme="neon", fontSize="huge")
    prefs = load_preferences(storage)
    assert prefs.theme == "light"
    assert prefs.font_size == DEFAULT_FONT_SIZE
