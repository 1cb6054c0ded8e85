from datetime import datetime, timedelta, timezone

import pytest

from app.api.v1.schemas.item import Item
from app.api.v1.schemas.store import Store
from app.core.database import session_scope
from app.core.exceptions import InvalidInputError, NotFoundError
from app.services.durable_map import DurableMap
from app.services.item import ItemService
from app.services.store import StoreService
from conftest import OWNER, item_payload, store_payload


async def test_create_item_links_item_and_store(store_service, item_service):
    store = await store_service.create_store(store_payload(), OWNER)

    item = await item_service.create_item(store.id, item_payload())

    assert item.store_id == store.id
    assert item.updated_at is None
    assert (await item_service.get_item(item.id)).store_id == store.id
    assert await store_service.get_items_in_store(store.id) == [item.id]


async def test_create_item_ignores_store_id_in_payload(store_service, item_service):
    store = await store_service.create_store(store_payload(), OWNER)

    item = await item_service.create_item(store.id, item_payload(store_id="something-else"))

    assert item.store_id == store.id


async def test_create_item_in_unknown_store_writes_nothing(item_service, maps):
    stores, items = maps
    with pytest.raises(NotFoundError):
        await item_service.create_item("missing", item_payload())
    assert await items.count() == 0
    assert await stores.count() == 0


async def test_create_item_with_empty_store_id_is_invalid(item_service):
    with pytest.raises(InvalidInputError):
        await item_service.create_item("", item_payload())


@pytest.mark.parametrize("price", [0, -5])
async def test_create_item_with_non_positive_price_writes_nothing(store_service, item_service, maps, price):
    _, items = maps
    store = await store_service.create_store(store_payload(), OWNER)

    with pytest.raises(InvalidInputError):
        await item_service.create_item(store.id, item_payload(price=price))

    assert await items.count() == 0
    assert (await store_service.get_store(store.id)).item_ids == []


async def test_get_unknown_item_is_not_found(item_service):
    with pytest.raises(NotFoundError):
        await item_service.get_item("missing")


async def test_get_all_items(store_service, item_service):
    assert await item_service.get_all_items() == []
    store = await store_service.create_store(store_payload(), OWNER)
    first = await item_service.create_item(store.id, item_payload())
    second = await item_service.create_item(store.id, item_payload())

    assert [item.id for item in await item_service.get_all_items()] == [first.id, second.id]


async def test_update_item_sets_updated_at_and_keeps_identity(maps, id_factory):
    stores, items = maps
    ticks = iter(datetime(2026, 5, 1, tzinfo=timezone.utc) + timedelta(minutes=n) for n in range(10))
    store_service = StoreService(stores, items, id_factory=id_factory)
    item_service = ItemService(stores, items, id_factory=id_factory, clock=lambda: next(ticks))
    store = await store_service.create_store(store_payload(), OWNER)
    created = await item_service.create_item(store.id, item_payload())

    payload = item_payload(size="L", power="-2.0", glass_type="polycarbonate", gender="female", price=79.5)
    first = await item_service.update_item(created.id, payload)
    second = await item_service.update_item(created.id, payload)

    assert first.updated_at is not None
    assert (first.id, first.store_id, first.created_at) == (created.id, created.store_id, created.created_at)
    assert first.model_dump(exclude={"updated_at"}) == second.model_dump(exclude={"updated_at"})
    assert (second.size, second.price) == ("L", 79.5)
    assert second.updated_at > first.updated_at


async def test_update_item_validates_payload(store_service, item_service):
    store = await store_service.create_store(store_payload(), OWNER)
    item = await item_service.create_item(store.id, item_payload())

    with pytest.raises(InvalidInputError):
        await item_service.update_item(item.id, item_payload(gender=""))
    assert await item_service.get_item(item.id) == item


async def test_update_unknown_item_is_not_found(item_service):
    with pytest.raises(NotFoundError):
        await item_service.update_item("missing", item_payload())


async def test_delete_item_keeps_id_in_store_by_default(store_service, item_service):
    store = await store_service.create_store(store_payload(), OWNER)
    item = await item_service.create_item(store.id, item_payload())

    removed = await item_service.delete_item(item.id)

    assert removed == item
    with pytest.raises(NotFoundError):
        await item_service.get_item(item.id)
    assert await store_service.get_items_in_store(store.id) == [item.id]


async def test_delete_item_with_cascade_prunes_store_list(maps, id_factory):
    stores, items = maps
    store_service = StoreService(stores, items, id_factory=id_factory)
    item_service = ItemService(stores, items, id_factory=id_factory, cascade_deletes=True)
    store = await store_service.create_store(store_payload(), OWNER)
    first = await item_service.create_item(store.id, item_payload())
    second = await item_service.create_item(store.id, item_payload())

    await item_service.delete_item(first.id)

    assert await store_service.get_items_in_store(store.id) == [second.id]


async def test_delete_unknown_item_is_not_found(item_service):
    with pytest.raises(NotFoundError):
        await item_service.delete_item("missing")


class FailingStoreMap(DurableMap):
    """Store map whose writes fail, standing in for a crash between the two writes"""

    async def insert(self, key, value):
        raise RuntimeError("write failed")


async def test_create_item_is_all_or_nothing(session_maker):
    async with session_scope(session_maker) as session:
        stores = DurableMap(session, 0, Store)
        store = await StoreService(stores, DurableMap(session, 1, Item)).create_store(store_payload(), OWNER)

    with pytest.raises(RuntimeError):
        async with session_scope(session_maker) as session:
            service = ItemService(FailingStoreMap(session, 0, Store), DurableMap(session, 1, Item))
            await service.create_item(store.id, item_payload())

    async with session_maker() as session:
        assert await DurableMap(session, 1, Item).count() == 0
        assert (await DurableMap(session, 0, Store).get(store.id)).item_ids == []
