from abc import ABC, abstractmethod

from pydantic import BaseModel


class KeyEntry(BaseModel):
    name: str


class ListResult(BaseModel):
    keys: list[KeyEntry]
    complete: bool
    cursor: str | None = None


class KVStore(ABC):
    """Persistent string map with prefix-scoped, paginated listing.

    Implementations do not interpret values. Store failures are raised as
    StorageUnavailableError.
    """

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...

    @abstractmethod
    def list(self, prefix: str, cursor: str | None = None, limit: int | None = None) -> ListResult: ...
