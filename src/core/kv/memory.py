"""In-memory KVStore for tests and local runs."""

import threading
import time
from collections.abc import Callable

from core.kv.interface import KeyEntry, KVStore, ListResult

DEFAULT_LIST_LIMIT = 1000


class InMemoryKVStore(KVStore):
    """Dict-backed store. Build one per test; instances share nothing."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._data: dict[str, str] = {}
        self._expiry: dict[str, float] = {}
        self._clock = clock
        self._lock = threading.RLock()

    def _evict_if_expired(self, key: str) -> None:
        expires = self._expiry.get(key)
        if expires is not None and expires <= self._clock():
            self._data.pop(key, None)
            self._expiry.pop(key, None)

    def get(self, key: str) -> str | None:
        with self._lock:
            self._evict_if_expired(key)
            return self._data.get(key)

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        with self._lock:
            self._data[key] = value
            if ttl_seconds:
                self._expiry[key] = self._clock() + ttl_seconds
            else:
                self._expiry.pop(key, None)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
            self._expiry.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def list(self, prefix: str, cursor: str | None = None, limit: int | None = None) -> ListResult:
        with self._lock:
            for key in list(self._data):
                self._evict_if_expired(key)
            names = sorted(k for k in self._data if k.startswith(prefix))

        if cursor is not None:
            # Cursor is the last name of the previous page.
            names = [n for n in names if n > cursor]

        page_size = limit or DEFAULT_LIST_LIMIT
        page = names[:page_size]
        complete = len(names) <= page_size
        return ListResult(
            keys=[KeyEntry(name=n) for n in page],
            complete=complete,
            cursor=None if complete else page[-1],
        )
