"""
Per-user attribute stores.

This module contains:
- A narrow store Protocol (capability, not implementation)
- An in-memory store (tests, single-process demos)
- A JSON file store (single-host persistence)

Stores are opaque key/value persistence keyed by user id. They are not
transactional and offer no compare-and-swap; concurrent requests for the
same user are serialized by the gateway within one process only.

JSON store safety rules:
- The in-memory cache is the source of truth once loaded.
- Disk is read only when the cache has not been loaded yet.
- Writes serialize the whole cache and replace the file atomically
  (tempfile + os.replace).
- A corrupted file is logged and treated as empty.
"""

from __future__ import annotations

import asyncio
import copy
import json
import os
import tempfile
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from observability.logger import log_event

if TYPE_CHECKING:
    from config import AppConfig


Attributes = dict[str, Any]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


# ---------------------------------------------------------------------
# Store Protocol
# ---------------------------------------------------------------------

@runtime_checkable
class SessionStore(Protocol):
    async def load(self, user_id: str) -> Attributes | None: ...

    async def save(self, user_id: str, attributes: Attributes) -> None: ...

    async def create(self, user_id: str, attributes: Attributes) -> bool:
        """
        Write attributes only if the user has no record yet.

        Returns True if this call created the record (first write wins).
        """


# ---------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------

class InMemorySessionStore:
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self) -> None:
        self._records: dict[str, Attributes] = {}

    async def load(self, user_id: str) -> Attributes | None:
        record = self._records.get(user_id)
        return copy.deepcopy(record) if record is not None else None

    async def save(self, user_id: str, attributes: Attributes) -> None:
        self._records[user_id] = copy.deepcopy(attributes)

    async def create(self, user_id: str, attributes: Attributes) -> bool:
        if user_id in self._records:
            return False
        self._records[user_id] = copy.deepcopy(attributes)
        return True


# ---------------------------------------------------------------------
# JSON file
# ---------------------------------------------------------------------

class JsonFileSessionStore:
    """
    Single JSON document holding every user's attributes.

    One asyncio.Lock guards the cache and the file; blocking file IO runs
    in a worker thread.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._cache: dict[str, Attributes] = {}
        self._cache_loaded = False
        self._lock = asyncio.Lock()

    async def load(self, user_id: str) -> Attributes | None:
        async with self._lock:
            await self._ensure_loaded()
            record = self._cache.get(user_id)
            return copy.deepcopy(record) if record is not None else None

    async def save(self, user_id: str, attributes: Attributes) -> None:
        async with self._lock:
            await self._ensure_loaded()
            self._cache[user_id] = copy.deepcopy(attributes)
            await self._flush()

    async def create(self, user_id: str, attributes: Attributes) -> bool:
        async with self._lock:
            await self._ensure_loaded()
            if user_id in self._cache:
                return False
            self._cache[user_id] = copy.deepcopy(attributes)
            await self._flush()
            return True

    # ------------------------------------------------------------------
    # Disk
    # ------------------------------------------------------------------

    async def _ensure_loaded(self) -> None:
        if self._cache_loaded:
            return
        self._cache = await asyncio.to_thread(self._read_file)
        self._cache_loaded = True

    def _read_file(self) -> dict[str, Attributes]:
        if not self._path.exists():
            return {}

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "STORE_FILE_UNREADABLE",
                "level": "WARNING",
                "path": str(self._path),
                "error": str(e),
            })
            return {}

        if not isinstance(data, dict):
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "STORE_FILE_UNREADABLE",
                "level": "WARNING",
                "path": str(self._path),
                "error": "top-level value is not an object",
            })
            return {}

        return data

    async def _flush(self) -> None:
        snapshot = copy.deepcopy(self._cache)
        await asyncio.to_thread(self._write_file, snapshot)

    def _write_file(self, data: dict[str, Attributes]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, separators=(",", ":"))
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


# ---------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------

def build_store(config: AppConfig) -> SessionStore:
    """Construct the store selected by STORE_BACKEND."""
    backend = config.store_backend.lower()
    if backend == "memory":
        return InMemorySessionStore()
    if backend == "json":
        return JsonFileSessionStore(config.store_path)
    raise RuntimeError(f"Unknown STORE_BACKEND: {config.store_backend}")
