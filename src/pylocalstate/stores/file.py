"""Durable store backed by a single JSON file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pylocalstate._redact import preview_for_log
from pylocalstate.exceptions import StoreError

_logger = logging.getLogger(__name__)


class JsonFileStore:
    """Store all records in one JSON object file: ``{key: record, ...}``.

    The file is re-read on every operation so several handles on the same
    path see each other's writes, and rewritten atomically (temp file +
    ``os.replace``) on every change.  A missing file is an empty store; an
    unreadable or corrupt file raises :class:`StoreError` rather than being
    silently reset.
    """

    def __init__(self, path: os.PathLike[str] | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self, *, key: str, operation: str) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StoreError(f"Cannot read {self._path}: {exc}", key=key, operation=operation) from exc

        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Corrupt store file {self._path}: {exc.msg}", key=key, operation=operation) from exc
        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise StoreError(
                f"Store file {self._path} must hold an object of string records",
                key=key,
                operation=operation,
            )
        return data

    def _save(self, records: dict[str, str], *, key: str, operation: str) -> None:
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2, sort_keys=True, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise StoreError(f"Cannot write {self._path}: {exc}", key=key, operation=operation) from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def get(self, key: str) -> str | None:
        return self._load(key=key, operation="get").get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(f"Records must be str, got {type(value).__name__}", key=key, operation="set")
        records = self._load(key=key, operation="set")
        records[key] = value
        self._save(records, key=key, operation="set")
        _logger.debug("Wrote %s to %s: %s", key, self._path, preview_for_log(value))

    def remove(self, key: str) -> None:
        records = self._load(key=key, operation="remove")
        if records.pop(key, None) is None:
            return
        self._save(records, key=key, operation="remove")
        _logger.debug("Removed %s from %s", key, self._path)

    def keys(self) -> list[str]:
        return list(self._load(key="", operation="keys"))
