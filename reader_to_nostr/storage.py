"""
Persisted key/value state stored as a single JSON document.

Holds the values a browser extension would keep in local storage:
secretKey, relays, theme, fontSize, currentArticle and extractedAt.
The file is read on every access so that concurrent CLI invocations
never act on a stale copy.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


class JsonStateStore:
    """Key/value store backed by a JSON file.

    Attributes:
        path: Location of the state file; parent folders are created on write
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"State file {self.path} does not contain a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file first so a crash never leaves half a document
        fd, tmp_name = tempfile.mkstemp(prefix=".state-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def get_many(self, *keys: str) -> dict[str, Any]:
        data = self._read()
        return {key: data[key] for key in keys if key in data}

    def set(self, **values: Any) -> None:
        data = self._read()
        data.update(values)
        self._write(data)

    def remove(self, *keys: str) -> None:
        data = self._read()
        changed = False
        for key in keys:
            if key in data:
                del data[key]
                changed = True
        if changed:
            self._write(data)
