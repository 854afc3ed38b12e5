"""Lazy key listing over a paginated KVStore."""

import logging
from collections.abc import Iterator

from core.kv.interface import KVStore

logger = logging.getLogger(__name__)


class KeyListing:
    """Finite, restartable sequence of key names under a prefix.

    Nothing is fetched until iteration starts, and every new iteration
    begins again from the first page:

        listing = KeyListing(store, "trip:u1:", page_size=50)
        for page in listing.pages():
            ...
        names = list(listing)
    """

    def __init__(self, store: KVStore, prefix: str, page_size: int | None = None) -> None:
        self._store = store
        self._prefix = prefix
        self._page_size = page_size

    @property
    def prefix(self) -> str:
        return self._prefix

    def pages(self) -> Iterator[list[str]]:
        cursor: str | None = None
        while True:
            result = self._store.list(self._prefix, cursor=cursor, limit=self._page_size)
            names = [entry.name for entry in result.keys]
            if names:
                yield names

            if result.complete:
                return
            if not result.cursor or result.cursor == cursor:
                logger.warning("Store listing for %s stalled without a cursor; stopping", self._prefix)
                return
            cursor = result.cursor

    def __iter__(self) -> Iterator[str]:
        for page in self.pages():
            yield from page
