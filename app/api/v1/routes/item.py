"""
Routes for individual eyewear items.
Items are created through POST /stores/{store_id}/items.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from app.api.v1.errors import http_error, unexpected_error
from app.api.v1.schemas.auth import Caller
from app.api.v1.schemas.item import Item, ItemPayload
from app.core.dependencies import (
    get_current_caller,
    get_item_service,
    get_item_service_for_update,
)
from app.core.exceptions import MarketplaceError
from app.services.item import ItemService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/items",
    tags=["items"],
    responses={
        500: {"description": "Internal server error"},
    },
)


@router.get(
    "",
    response_model=List[Item],
    summary="Get all items",
    description="Get every item, ordered by ID.",
    status_code=status.HTTP_200_OK,
)
async def get_all_items(
    item_service: ItemService = Depends(get_item_service),
) -> List[Item]:
    try:
        items = await item_service.get_all_items()
        logger.info(f"Retrieved {len(items)} items")
        return items
    except Exception as e:
        logger.error(f"Unexpected error getting items: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("retrieving items") from e


@router.get(
    "/{item_id}",
    response_model=Item,
    summary="Get item",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Item not found"},
    },
)
async def get_item(
    item_id: str,
    item_service: ItemService = Depends(get_item_service),
) -> Item:
    try:
        return await item_service.get_item(item_id)
    except MarketplaceError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error getting item {item_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("retrieving the item") from e


@router.put(
    "/{item_id}",
    response_model=Item,
    summary="Update item",
    description="Replace the descriptive fields and price of an item. The owning store cannot change.",
    status_code=status.HTTP_200_OK,
    responses={
        400: {"description": "Missing or invalid fields"},
        404: {"description": "Item not found"},
    },
)
async def update_item(
    item_id: str,
    payload: ItemPayload,
    caller: Caller = Depends(get_current_caller),
    item_service: ItemService = Depends(get_item_service_for_update),
) -> Item:
    try:
        return await item_service.update_item(item_id, payload)
    except MarketplaceError as e:
        logger.warning(f"Rejected update of item {item_id} by {caller.id}: {e.message}")
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error updating item {item_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("updating the item") from e


@router.delete(
    "/{item_id}",
    response_model=Item,
    summary="Delete item",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Item not found"},
    },
)
async def delete_item(
    item_id: str,
    caller: Caller = Depends(get_current_caller),
    item_service: ItemService = Depends(get_item_service_for_update),
) -> Item:
    try:
        return await item_service.delete_item(item_id)
    except MarketplaceError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error deleting item {item_id}: {type(e).__name__}: {e}", exc_info=True)
        raise unexpected_error("deleting the item") from e
