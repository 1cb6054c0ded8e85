"""
Store service: CRUD and ownership rules for eyewear stores, plus maintenance
of each store's ordered list of item ids.

Reads and writes go through the durable maps handed to the constructor; the
service keeps no state of its own between calls.
"""

import logging
from datetime import datetime
from typing import Callable, List

from app.api.v1.schemas.auth import Caller
from app.api.v1.schemas.item import Item
from app.api.v1.schemas.store import Store, StorePayload
from app.core.exceptions import NotFoundError, UnauthorizedError
from app.core.generators import new_id, utc_now
from app.services.durable_map import DurableMap
from app.services.validation import validate_id, validate_store_payload

logger = logging.getLogger(__name__)


class StoreService:
    """Service for managing stores and the item ids they list"""

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

    async def _require_store(self, store_id: str) -> Store:
        validate_id(store_id, "store id")
        store = await self.stores.get(store_id)
        if store is None:
            raise NotFoundError(f"Store with id={store_id} not found.")
        return store

    async def create_store(self, payload: StorePayload, caller: Caller) -> Store:
        """
        Create a new store owned by the caller.

        Args:
            payload: Store fields (name, location, image)
            caller: Resolved identity of the creating party

        Returns:
            Created store, with an empty item list and no update timestamp

        Raises:
            InvalidInputError: If a required field is missing
        """
        validate_store_payload(payload)

        store = Store(
            id=self.id_factory(),
            name=payload.name,
            location=payload.location,
            image=payload.image,
            owner=caller.id,
            item_ids=[],
            created_at=self.clock(),
            updated_at=None,
        )
        await self.stores.insert(store.id, store)
        logger.info(f"Created store '{store.name}' (ID: {store.id}) for owner {caller.id}")
        return store

    async def get_store(self, store_id: str) -> Store:
        """
        Get a store by ID.

        Raises:
            InvalidInputError: If store_id is empty
            NotFoundError: If no store has this ID
        """
        return await self._require_store(store_id)

    async def get_all_stores(self) -> List[Store]:
        return await self.stores.values()

    async def update_store(self, store_id: str, payload: StorePayload) -> Store:
        """
        Replace a store's name, location and image.

        id, owner, item_ids and created_at are carried over unchanged;
        updated_at is set to the current time.

        Raises:
            InvalidInputError: If store_id is empty or a payload field is missing
            NotFoundError: If no store has this ID
        """
        validate_id(store_id, "store id")
        validate_store_payload(payload)
        existing = await self._require_store(store_id)

        updated = existing.model_copy(
            update={
                "name": payload.name,
                "location": payload.location,
                "image": payload.image,
                "updated_at": self.clock(),
            }
        )
        await self.stores.insert(updated.id, updated)
        logger.info(f"Updated store {updated.id}")
        return updated

    async def delete_store(self, store_id: str, caller: Caller) -> Store:
        """
        Delete a store. Only its owner may do so.

        Items created under the store are left in place (and keep pointing at
        the deleted store) unless cascade deletes are enabled.

        Returns:
            The removed store

        Raises:
            InvalidInputError: If store_id is empty
            NotFoundError: If no store has this ID
            UnauthorizedError: If the caller is not the store's owner
        """
        existing = await self._require_store(store_id)
        if not caller.owns(existing.owner):
            logger.warning(f"Caller {caller.id} tried to delete store {store_id} owned by {existing.owner}")
            raise UnauthorizedError("User does not have the right to delete this store")

        await self.stores.remove(store_id)

        if self.cascade_deletes:
            removed = 0
            for item in await self.items.values():
                if item.store_id == store_id:
                    await self.items.remove(item.id)
                    removed += 1
            logger.info(f"Deleted store {store_id} and {removed} of its items")
        else:
            logger.info(f"Deleted store {store_id}")
        return existing

    async def get_items_in_store(self, store_id: str) -> List[str]:
        """Ids of the items listed by the store, in the order they were added"""
        store = await self._require_store(store_id)
        return list(store.item_ids)

    async def get_store_items(self, store_id: str) -> List[Item]:
        """
        Item records listed by the store.

        Ids whose item no longer exists are skipped.
        """
        store = await self._require_store(store_id)
        resolved: List[Item] = []
        for item_id in store.item_ids:
            item = await self.items.get(item_id)
            if item is not None:
                resolved.append(item)
        return resolved

    async def add_item_to_store(self, store_id: str, item_id: str) -> Store:
        """
        Append an item id to the store's list.

        The id is not checked against the item map. Adding an id that is
        already listed leaves the list unchanged.
        """
        validate_id(item_id, "item id")
        store = await self._require_store(store_id)
        if item_id in store.item_ids:
            return store

        store = store.model_copy(update={"item_ids": [*store.item_ids, item_id]})
        await self.stores.insert(store.id, store)
        logger.info(f"Added item {item_id} to store {store_id}")
        return store

    async def remove_item_from_store(self, store_id: str, item_id: str) -> Store:
        """Drop every occurrence of an item id from the store's list"""
        validate_id(item_id, "item id")
        store = await self._require_store(store_id)

        store = store.model_copy(
            update={"item_ids": [existing for existing in store.item_ids if existing != item_id]}
        )
        await self.stores.insert(store.id, store)
        logger.info(f"Removed item {item_id} from store {store_id}")
        return store
