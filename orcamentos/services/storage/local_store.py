"""
Local Key-Value Store Implementations

DESIGN DECISION: The collection lives in a small local key-value store,
the same shape as a browser's localStorage: string keys, string values.
Two backends:
1. InMemoryKeyValueStore - tests and throwaway sessions
2. JsonFileKeyValueStore - one JSON object on disk

TRADEOFFS:
- The whole file is rewritten on every set_item (fine for personal use)
- Writes go through a temp file + rename, so a crash mid-write leaves
  the previous file intact
- Transient OS errors are retried a few times before giving up
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from orcamentos.services.storage.interface import (
    KeyValueStore,
    StorageUnavailableError,
)


logger = structlog.get_logger(__name__)

_io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """
    File-backed store.

    The file holds a single JSON object mapping keys to stored text.
    A missing file is an empty store. A file that is not a UTF-8 JSON object
    is logged and read as empty; the next write replaces it.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @_io_retry
    def _read_bytes(self) -> Optional[bytes]:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None

    @_io_retry
    def _write_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._read_bytes()
        except OSError as e:
            raise StorageUnavailableError(
                f"Could not read local storage file {self._path}: {e}"
            ) from e

        if raw is None or not raw.strip():
            return {}

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(
                "local_store_unreadable",
                path=str(self._path),
                error=str(e),
            )
            return {}

        if not isinstance(data, dict):
            logger.error(
                "local_store_unreadable",
                path=str(self._path),
                error=f"expected a JSON object, got {type(data).__name__}",
            )
            return {}

        entries = {}
        for key, value in data.items():
            if isinstance(value, str):
                entries[key] = value
            else:
                logger.warning(
                    "local_store_entry_skipped",
                    path=str(self._path),
                    key=key,
                )
        return entries

    def _write_all(self, data: dict[str, str]) -> None:
        text = json.dumps(data, ensure_ascii=False, indent=2)
        try:
            self._write_text(text)
        except OSError as e:
            raise StorageUnavailableError(
                f"Could not write local storage file {self._path}: {e}"
            ) from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
