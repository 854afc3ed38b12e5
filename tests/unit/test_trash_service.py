"""Unit tests for cross-type trash operations."""

import pytest

from core.errors import InvalidInputError, NotFoundError, StorageUnavailableError
from core.kv import InMemoryKVStore
from core.services.resources import build_services
from core.services.trash import empty_all_trash, list_all_trash, purge_item, restore_item


@pytest.fixture
def services(clock):
    bindings = {"trip": InMemoryKVStore(), "mileage": InMemoryKVStore(), "expense": InMemoryKVStore()}
    return build_services(bindings, clock=clock)


@pytest.fixture
def trashed(services, clock):
    """One trashed item per type, deleted a minute apart: trip, then expense, then mileage."""
    services["trip"].create("u1", {"id": "t1", "date": "2026-03-10", "startAddress": "1 Main St"})
    services["expense"].create("u1", {"id": "e1", "date": "2026-03-10", "category": "tolls", "amount": 3})
    services["mileage"].create("u1", {"id": "m1", "date": "2026-03-10", "miles": 9})

    services["trip"].delete("u1", "t1")
    clock.advance(minutes=1)
    services["expense"].delete("u1", "e1")
    clock.advance(minutes=1)
    services["mileage"].delete("u1", "m1")
    return services


def test_list_all_trash_merges_types_newest_first(trashed):
    items = list_all_trash(trashed, "u1")

    assert [(i.record_type, i.id) for i in items] == [("mileage", "m1"), ("expense", "e1"), ("trip", "t1")]


def test_list_all_trash_filtered_by_type(trashed):
    assert [i.id for i in list_all_trash(trashed, "u1", "expense")] == ["e1"]


def test_list_all_trash_unknown_type(trashed):
    with pytest.raises(InvalidInputError):
        list_all_trash(trashed, "u1", "receipts")


def test_list_all_trash_unbound_type(clock):
    services = build_services({"trip": InMemoryKVStore(), "mileage": None}, clock=clock)

    assert list_all_trash(services, "u1") == []
    with pytest.raises(StorageUnavailableError):
        list_all_trash(services, "u1", "mileage")


def test_list_all_trash_other_user_sees_nothing(trashed):
    assert list_all_trash(trashed, "u2") == []


def test_restore_item_finds_type(trashed):
    restored = restore_item(trashed, "u1", "e1")

    assert restored["category"] == "tolls"
    assert trashed["expense"].get("u1", "e1") == restored
    assert [i.id for i in list_all_trash(trashed, "u1")] == ["m1", "t1"]


def test_restore_item_with_explicit_type(trashed):
    assert restore_item(trashed, "u1", "t1", "trip")["startAddress"] == "1 Main St"


def test_restore_item_missing(trashed):
    with pytest.raises(NotFoundError):
        restore_item(trashed, "u1", "nope")


def test_restore_item_wrong_type(trashed):
    with pytest.raises(NotFoundError):
        restore_item(trashed, "u1", "t1", "expense")


def test_purge_item(trashed):
    purge_item(trashed, "u1", "m1", "mileage")

    with pytest.raises(NotFoundError):
        restore_item(trashed, "u1", "m1")
    assert len(list_all_trash(trashed, "u1")) == 2


def test_empty_all_trash(trashed):
    trashed["trip"].create("u1", {"id": "live", "date": "2026-03-11", "startAddress": "9 Elm"})

    assert empty_all_trash(trashed, "u1") == 3
    assert list_all_trash(trashed, "u1") == []
    assert trashed["trip"].get("u1", "live")["startAddress"] == "9 Elm"


def test_purge_item_leaves_active_record_sharing_the_id(services):
    services["trip"].create("u1", {"id": "x1", "date": "2026-03-10", "startAddress": "1 Main St"})
    services["expense"].create("u1", {"id": "x1", "date": "2026-03-10", "category": "fuel", "amount": 4})
    services["expense"].delete("u1", "x1")

    assert purge_item(services, "u1", "x1") == 1

    assert services["trip"].get("u1", "x1")["startAddress"] == "1 Main St"
    assert list_all_trash(services, "u1") == []


def test_purge_item_with_type_never_touches_active_record(services):
    services["trip"].create("u1", {"id": "x1", "date": "2026-03-10", "startAddress": "1 Main St"})

    assert purge_item(services, "u1", "x1", "trip") == 0
    assert services["trip"].get("u1", "x1")["id"] == "x1"


def test_purge_item_not_in_trash_is_noop(services):
    assert purge_item(services, "u1", "nope") == 0
