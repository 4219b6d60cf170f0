"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document on local disk is the system of
record because:
1. It survives process restarts with no database setup
2. The user can open and read their data directly
3. The data volume is tiny (one account, a handful of keys)

TRADEOFFS:
- Every write rewrites the whole document (fine at this size)
- No transactions across keys (the engine does not need them)

Writes go to a temporary file that then replaces the document, so a
crash mid-write leaves the previous version intact.
"""

import asyncio
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from mywallet.services.storage.interface import KeyValueStore, StoreUnavailableError


class JsonFileStore(KeyValueStore):
    """
    Key-value store persisted as one JSON object: {key: serialized value}.

    File IO runs in a worker thread so the event loop is never blocked.
    """

    def __init__(self, path: Path, write_attempts: int = 3):
        self._path = Path(path)
        self._lock = threading.Lock()
        self._write_document = retry(
            stop=stop_after_attempt(write_attempts),
            wait=wait_exponential(multiplier=0.1, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )(self._write_document_once)

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, str]:
        """Load the whole document. A missing file is an empty store."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read {self._path}: {e}")

        if not raw.strip():
            return {}

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreUnavailableError(f"Store file {self._path} is not valid JSON: {e}")

        if not isinstance(document, dict):
            raise StoreUnavailableError(f"Store file {self._path} does not hold a JSON object")

        return {str(k): v for k, v in document.items() if isinstance(v, str)}

    def _write_document_once(self, document: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _update(self, key: str, value: Optional[str]) -> None:
        with self._lock:
            document = self._read_document()
            if value is None:
                if key not in document:
                    return
                document.pop(key)
            else:
                document[key] = value
            try:
                self._write_document(document)
            except OSError as e:
                raise StoreUnavailableError(f"Cannot write {self._path}: {e}")

    def _get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_document().get(key)

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._update, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._update, key, None)
