"""Reader display preferences: color theme and base font size."""

from __future__ import annotations

from dataclasses import dataclass

from .storage import JsonStateStore


THEMES = ("light", "dark")
DEFAULT_THEME = "light"
DEFAULT_FONT_SIZE = 18
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 28
FONT_STEP = 2


@dataclass
class ReaderPreferences:
    theme: str = DEFAULT_THEME
    font_size: int = DEFAULT_FONT_SIZE


def clamp_font_size(size: int) -> int:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, size))


def load_preferences(storage: JsonStateStore) -> ReaderPreferences:
    data = storage.get_many("theme", "fontSize")
    theme = data.get("theme") if data.get("theme") in THEMES else DEFAULT_THEME
    try:
        font_size = clamp_font_size(int(data.get("fontSize") or DEFAULT_FONT_SIZE))
    except (TypeError, ValueError):
        font_size = DEFAULT_FONT_SIZE
    return ReaderPreferences(theme=theme, font_size=font_size)


def set_theme(storage: JsonStateStore, theme: str) -> ReaderPreferences:
    if theme not in THEMES:
        raise ValueError(f"Theme must be one of {', '.join(THEMES)}")
    storage.set(theme=theme)
    return load_preferences(storage)


def toggle_theme(storage: JsonStateStore) -> ReaderPreferences:
    current = load_preferences(storage)
    return set_theme(storage, "dark" if current.theme == "light" else "light")


def change_font_size(storage: JsonStateStore, delta: int) -> ReaderPreferences:
    current = load_preferences(storage)
    storage.set(fontSize=clamp_font_size(current.font_size + delta))
    return load_preferences(storage)
