"""
Routes for eyewear stores and the items they list.

GET routes are queries; POST, PUT and DELETE routes are updates and run
serialized through the update session.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.errors import http_error, unexpected_error
from app.api.v1.schemas.auth import Caller
from app.api.v1.schemas.item import Item, ItemPayload
from app.api.v1.schemas.store import Store, StorePayload
from app.core.dependencies import (
    get_current_caller,
    get_item_service_for_update,
    get_store_service,
    get_store_service_for_update,
)
from app.core.exceptions import MarketplaceError
from app.services.item import ItemService
from app.services.store import StoreService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/stores",
    tags=["stores"],
    responses={
        500: {"description": "Internal server error"},
    },
)


@router.post(
    "",
    response_model=Store,
    summary="Create store",
    description="Create a new store owned by the authenticated caller.",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Store created successfully"},
        400: {"description": "Missing required fields"},
        401: {"description": "Unauthorized - authentication required"},
    },
)
async def create_store(
    payload: StorePayload,
    caller: Caller = Depends(get_current_caller),
    store_service: StoreService = Depends(get_store_service_for_update),
) -> Store:
    try:
        return await store_service.create_store(payload, caller)
    except MarketplaceError as e:
        logger.warning(f"Rejected store creation: {e.message}")
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error creating store: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("creating the store") from e


@router.get(
    "",
    response_model=List[Store],
    summary="Get all stores",
    description="Get every store, ordered by ID.",
    status_code=status.HTTP_200_OK,
)
async def get_all_stores(
    store_service: StoreService = Depends(get_store_service),
) -> List[Store]:
    try:
        stores = await store_service.get_all_stores()
        logger.info(f"Retrieved {len(stores)} stores")
        return stores
    except Exception as e:
        logger.error(f"Unexpected error getting stores: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("retrieving stores") from e


@router.get(
    "/{store_id}",
    response_model=Store,
    summary="Get store",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Store not found"},
    },
)
async def get_store(
    store_id: str,
    store_service: StoreService = Depends(get_store_service),
) -> Store:
    try:
        return await store_service.get_store(store_id)
    except MarketplaceError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error getting store {store_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("retrieving the store") from e


@router.put(
    "/{store_id}",
    response_model=Store,
    summary="Update store",
    description="Replace the name, location and image of a store.",
    status_code=status.HTTP_200_OK,
    responses={
        400: {"description": "Missing required fields"},
        404: {"description": "Store not found"},
    },
)
async def update_store(
    store_id: str,
    payload: StorePayload,
    caller: Caller = Depends(get_current_caller),
    store_service: StoreService = Depends(get_store_service_for_update),
) -> Store:
    try:
        return await store_service.update_store(store_id, payload)
    except MarketplaceError as e:
        logger.warning(f"Rejected update of store {store_id} by {caller.id}: {e.message}")
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error updating store {store_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("updating the store") from e


@router.delete(
    "/{store_id}",
    response_model=Store,
    summary="Delete store",
    description="Delete a store. Only the store's owner may delete it.",
    status_code=status.HTTP_200_OK,
    responses={
        403: {"description": "Caller does not own the store"},
        404: {"description": "Store not found"},
    },
)
async def delete_store(
    store_id: str,
    caller: Caller = Depends(get_current_caller),
    store_service: StoreService = Depends(get_store_service_for_update),
) -> Store:
    try:
        return await store_service.delete_store(store_id, caller)
    except MarketplaceError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error deleting store {store_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("deleting the store") from e


@router.get(
    "/{store_id}/items",
    response_model=Union[List[Item], List[str]],
    summary="Get items in store",
    description="Ids of the items listed by a store, or the item records with resolve=true.",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Store not found"},
    },
)
async def get_items_in_store(
    store_id: str,
    resolve: bool = Query(
        False, description="Return item records instead of ids, skipping deleted items"
    ),
    store_service: StoreService = Depends(get_store_service),
) -> Union[List[Item], List[str]]:
    try:
        if resolve:
            return await store_service.get_store_items(store_id)
        return await store_service.get_items_in_store(store_id)
    except MarketplaceError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error listing items of store {store_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("retrieving the store's items") from e


@router.post(
    "/{store_id}/items",
    response_model=Item,
    summary="Create item",
    description="Create an item under a store and append it to the store's item list.",
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or invalid fields"},
        404: {"description": "Store not found"},
    },
)
async def create_item(
    store_id: str,
    payload: ItemPayload,
    caller: Caller = Depends(get_current_caller),
    item_service: ItemService = Depends(get_item_service_for_update),
) -> Item:
    try:
        return await item_service.create_item(store_id, payload)
    except MarketplaceError as e:
        logger.warning(f"Rejected item creation in store {store_id} by {caller.id}: {e.message}")
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error creating item in store {store_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("creating the item") from e


@router.put(
    "/{store_id}/items/{item_id}",
    response_model=Store,
    summary="Add item to store",
    description="Append an item id to a store's list. The id is not checked against existing items.",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Store not found"},
    },
)
async def add_item_to_store(
    store_id: str,
    item_id: str,
    caller: Caller = Depends(get_current_caller),
    store_service: StoreService = Depends(get_store_service_for_update),
) -> Store:
    try:
        return await store_service.add_item_to_store(store_id, item_id)
    except MarketplaceError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error adding item {item_id} to store {store_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("adding the item to the store") from e


@router.delete(
    "/{store_id}/items/{item_id}",
    response_model=Store,
    summary="Remove item from store",
    description="Remove an item id from a store's list. The item itself is not deleted.",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Store not found"},
    },
)
async def remove_item_from_store(
    store_id: str,
    item_id: str,
    caller: Caller = Depends(get_current_caller),
    store_service: StoreService = Depends(get_store_service_for_update),
) -> Store:
    try:
        return await store_service.remove_item_from_store(store_id, item_id)
    except MarketplaceError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error removing item {item_id} from store {store_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("removing the item from the store") from e
