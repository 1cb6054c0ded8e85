from datetime import datetime, timezone

import pytest

from app.api.v1.schemas.store import Store
from app.core.exceptions import StorageEncodingError
from app.services.durable_map import DurableMap

CREATED = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def make_store(store_id: str, name: str = "Lakeside") -> Store:
    return Store(
        id=store_id,
        name=name,
        location="Pier 3",
        image="img.png",
        owner="user_owner",
        created_at=CREATED,
    )


async def test_get_missing_key_returns_none(session):
    stores = DurableMap(session, 0, Store)
    assert await stores.get("nope") is None
    assert await stores.contains_key("nope") is False


async def test_insert_then_get_returns_equal_record(session):
    stores = DurableMap(session, 0, Store)
    record = make_store("s1")

    assert await stores.insert("s1", record) is None
    assert await stores.get("s1") == record
    assert await stores.count() == 1


async def test_insert_existing_key_replaces_and_returns_previous(session):
    stores = DurableMap(session, 0, Store)
    await stores.insert("s1", make_store("s1", name="Old"))

    previous = await stores.insert("s1", make_store("s1", name="New"))

    assert previous.name == "Old"
    assert (await stores.get("s1")).name == "New"
    assert await stores.count() == 1


async def test_remove_returns_removed_value_once(session):
    stores = DurableMap(session, 0, Store)
    await stores.insert("s1", make_store("s1"))

    removed = await stores.remove("s1")

    assert removed.id == "s1"
    assert await stores.get("s1") is None
    assert await stores.remove("s1") is None


async def test_values_are_ordered_by_key_not_insertion(session):
    stores = DurableMap(session, 0, Store)
    for key in ["c", "a", "b"]:
        await stores.insert(key, make_store(key))

    assert [store.id for store in await stores.values()] == ["a", "b", "c"]


async def test_maps_with_different_tags_do_not_collide(session):
    first = DurableMap(session, 0, Store)
    second = DurableMap(session, 1, Store)

    await first.insert("shared", make_store("shared", name="First"))
    await second.insert("shared", make_store("shared", name="Second"))

    assert (await first.get("shared")).name == "First"
    assert (await second.get("shared")).name == "Second"
    await first.remove("shared")
    assert await second.contains_key("shared")


async def test_oversized_value_is_an_encoding_error(session):
    stores = DurableMap(session, 0, Store, max_value_size=64)

    with pytest.raises(StorageEncodingError):
        await stores.insert("s1", make_store("s1"))
    assert await stores.count() == 0


async def test_oversized_key_is_an_encoding_error(session):
    stores = DurableMap(session, 0, Store, max_key_size=8)

    with pytest.raises(StorageEncodingError):
        await stores.insert("a-much-too-long-key", make_store("a-much-too-long-key"))


async def test_values_persist_across_sessions(session_maker):
    async with session_maker() as session:
        await DurableMap(session, 0, Store).insert("s1", make_store("s1"))
        await session.commit()

    async with session_maker() as session:
        assert (await DurableMap(session, 0, Store).get("s1")).id == "s1"


async def test_lookup_of_oversized_key_is_absent(session):
    stores = DurableMap(session, 0, Store, max_key_size=8)

    assert await stores.get("a-much-too-long-key") is None
    assert await stores.remove("a-much-too-long-key") is None
