"""Unit tests for the in-memory KV store."""

from core.kv import InMemoryKVStore


def test_put_get_delete(memory_store):
    memory_store.put("trip:u1:t1", '{"id": "t1"}')
    assert memory_store.get("trip:u1:t1") == '{"id": "t1"}'

    memory_store.delete("trip:u1:t1")
    assert memory_store.get("trip:u1:t1") is None


def test_delete_missing_key_is_noop(memory_store):
    memory_store.delete("trip:u1:nope")
    memory_store.delete("trip:u1:nope")
    assert len(memory_store) == 0


def test_list_filters_by_prefix(memory_store):
    memory_store.put("trip:u1:a", "{}")
    memory_store.put("trip:u2:b", "{}")
    memory_store.put("expense:u1:c", "{}")

    result = memory_store.list("trip:u1:")

    assert [k.name for k in result.keys] == ["trip:u1:a"]
    assert result.complete is True
    assert result.cursor is None


def test_list_paginates_with_cursor(memory_store):
    for i in range(5):
        memory_store.put(f"trip:u1:{i}", "{}")

    first = memory_store.list("trip:", limit=2)
    assert [k.name for k in first.keys] == ["trip:u1:0", "trip:u1:1"]
    assert first.complete is False

    second = memory_store.list("trip:", cursor=first.cursor, limit=2)
    assert [k.name for k in second.keys] == ["trip:u1:2", "trip:u1:3"]

    third = memory_store.list("trip:", cursor=second.cursor, limit=2)
    assert [k.name for k in third.keys] == ["trip:u1:4"]
    assert third.complete is True


def test_ttl_expires_values():
    now = [1000.0]
    store = InMemoryKVStore(clock=lambda: now[0])
    store.put("trip:u1:t1", "{}", ttl_seconds=60)

    now[0] += 59
    assert store.get("trip:u1:t1") == "{}"

    now[0] += 1
    assert store.get("trip:u1:t1") is None
    assert store.list("trip:").keys == []


def test_put_without_ttl_clears_previous_expiry():
    now = [0.0]
    store = InMemoryKVStore(clock=lambda: now[0])
    store.put("k", "old", ttl_seconds=10)
    store.put("k", "new")

    now[0] += 100
    assert store.get("k") == "new"


def test_instances_do_not_share_state():
    a = InMemoryKVStore()
    b = InMemoryKVStore()
    a.put("trip:u1:t1", "{}")
    assert b.get("trip:u1:t1") is None
