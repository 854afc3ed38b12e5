"""Key-value store abstraction layer."""

from core.kv.dynamo import DynamoKVStore, build_kv_bindings
from core.kv.interface import KeyEntry, KVStore, ListResult
from core.kv.memory import InMemoryKVStore
from core.kv.pagination import KeyListing

__all__ = [
    "DynamoKVStore",
    "InMemoryKVStore",
    "KeyEntry",
    "KeyListing",
    "KVStore",
    "ListResult",
    "build_kv_bindings",
]
