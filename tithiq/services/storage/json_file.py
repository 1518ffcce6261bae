"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document on disk holds every key.
1. The user can inspect their data with any text editor
2. No database setup required
3. Writes are atomic (temp file + rename)

TRADEOFFS:
- The whole file is rewritten on every mutation (fine at this size)
- Values are stored as UTF-8 text, so they must be JSON themselves
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from tithiq.config import get_settings
from tithiq.services.storage.interface import (
    KeyValueStorage,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStorage(KeyValueStorage):
    """
    Key-value storage backed by one JSON object on disk.

    Each key maps to the UTF-8 text of its value. The document is read
    once, lazily, and cached.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        write_attempts: Optional[int] = None,
    ):
        settings = get_settings().app
        self._path = Path(path).expanduser() if path else settings.resolved_storage_path
        self._write_attempts = (
            settings.storage_write_attempts if write_attempts is None else write_attempts
        )
        self._cache: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._cache is None:
            if not self._path.exists():
                self._cache = {}
            else:
                try:
                    document = json.loads(self._path.read_text(encoding="utf-8"))
                except OSError as e:
                    raise StorageReadError(f"Failed to read {self._path}: {e}")
                except ValueError as e:
                    # A corrupt document behaves like an empty one; each
                    # store then falls back to its defaults.
                    logger.warning(
                        "storage_document_corrupt",
                        path=str(self._path),
                        error=str(e),
                    )
                    document = {}
                if not isinstance(document, dict):
                    document = {}
                self._cache = {
                    k: v for k, v in document.items() if isinstance(v, str)
                }
        return self._cache

    def get(self, key: str) -> Optional[bytes]:
        value = self._load().get(key)
        return value.encode("utf-8") if value is not None else None

    def set(self, key: str, value: bytes) -> None:
        try:
            text = value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StorageWriteError(f"Value for {key!r} is not UTF-8: {e}")
        document = dict(self._load())
        document[key] = text
        self._write(document)
        self._cache = document

    def delete(self, key: str) -> None:
        document = dict(self._load())
        if document.pop(key, None) is not None:
            self._write(document)
            self._cache = document

    def _write(self, document: dict[str, str]) -> None:
        writer = retry(
            retry=retry_if_exception_type(OSError),
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            reraise=True,
        )(self._write_once)
        try:
            writer(document)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {self._path}: {e}")

    def _write_once(self, document: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            dir=str(self._path.parent),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("storage_written", path=str(self._path), keys=len(document))
