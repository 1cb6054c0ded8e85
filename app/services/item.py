"""
Item service: CRUD for eyewear units.

Creating an item writes two rows, the item itself and its owning store with
the new id appended. Both writes share the caller's session, so they commit
or roll back together.
"""

import logging
from datetime import datetime
from typing import Callable, List

from app.api.v1.schemas.item import Item, ItemPayload
from app.api.v1.schemas.store import Store
from app.core.exceptions import NotFoundError
from app.core.generators import new_id, utc_now
from app.services.durable_map import DurableMap
from app.services.validation import validate_id, validate_item_payload

logger = logging.getLogger(__name__)


class ItemService:
    """Service for managing items"""

    def __init__(
        self,
        stores: DurableMap[Store],
        items: DurableMap[Item],
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
        cascade_deletes: bool = False,
    ):
        self.stores = stores
        self.items = items
        self.id_factory = id_factory
        self.clock = clock
        self.cascade_deletes = cascade_deletes

    async def _require_item(self, item_id: str) -> Item:
        validate_id(item_id, "item id")
        item = await self.items.get(item_id)
        if item is None:
            raise NotFoundError(f"Item with id={item_id} not found.")
        return item

    async def create_item(self, store_id: str, payload: ItemPayload) -> Item:
        """
        Create an item under an existing store.

        The owning store is looked up first, then the payload is validated.
        The item's store_id always comes from the store_id argument.

        Args:
            store_id: ID of the owning store
            payload: Item fields

        Returns:
            Created item

        Raises:
            InvalidInputError: If store_id is empty or the payload is invalid
            NotFoundError: If the store does not exist
        """
        validate_id(store_id, "store id")
        store = await self.stores.get(store_id)
        if store is None:
            raise NotFoundError(f"Store with id={store_id} not found.")

        validate_item_payload(payload)

        item = Item(
            id=self.id_factory(),
            size=payload.size,
            power=payload.power,
            glass_type=payload.glass_type,
            gender=payload.gender,
            price=payload.price,
            store_id=store.id,
            created_at=self.clock(),
            updated_at=None,
        )
        await self.items.insert(item.id, item)

        store = store.model_copy(update={"item_ids": [*store.item_ids, item.id]})
        await self.stores.insert(store.id, store)

        logger.info(f"Created item {item.id} in store {store.id}")
        return item

    async def get_item(self, item_id: str) -> Item:
        """
        Get an item by ID.

        Raises:
            InvalidInputError: If item_id is empty
            NotFoundError: If no item has this ID
        """
        return await self._require_item(item_id)

    async def get_all_items(self) -> List[Item]:
        return await self.items.values()

    async def update_item(self, item_id: str, payload: ItemPayload) -> Item:
        """
        Replace an item's descriptive fields and price.

        id, store_id and created_at are carried over unchanged; updated_at is
        set to the current time. A store_id in the payload is ignored.
        """
        validate_id(item_id, "item id")
        validate_item_payload(payload)
        existing = await self._require_item(item_id)

        updated = existing.model_copy(
            update={
                "size": payload.size,
                "power": payload.power,
                "glass_type": payload.glass_type,
                "gender": payload.gender,
                "price": payload.price,
                "updated_at": self.clock(),
            }
        )
        await self.items.insert(updated.id, updated)
        logger.info(f"Updated item {updated.id}")
        return updated

    async def delete_item(self, item_id: str) -> Item:
        """
        Delete an item.

        The owning store keeps listing the id unless cascade deletes are
        enabled, in which case the id is pruned from the store's list.

        Returns:
            The removed item
        """
        existing = await self._require_item(item_id)
        await self.items.remove(item_id)

        if self.cascade_deletes:
            store = await self.stores.get(existing.store_id)
            if store is not None and item_id in store.item_ids:
                store = store.model_copy(
                    update={"item_ids": [i for i in store.item_ids if i != item_id]}
                )
                await self.stores.insert(store.id, store)

        logger.info(f"Deleted item {item_id}")
        return existing
