"""
Request dependencies: caller identity and per-request service construction
Reference: https://fastapi.tiangolo.com/tutorial/dependencies/
"""
import logging
from functools import lru_cache
from typing import Tuple

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.auth import Caller
from app.api.v1.schemas.item import Item
from app.api.v1.schemas.store import Store
from app.core.config import settings
from app.core.database import get_db, get_update_db
from app.services.auth import AuthService
from app.services.durable_map import DurableMap
from app.services.item import ItemService
from app.services.store import StoreService

logger = logging.getLogger(__name__)

# HTTPBearer automatically extracts Bearer token from Authorization header
# Reference: https://fastapi.tiangolo.com/reference/security/#fastapi.security.HTTPBearer
security = HTTPBearer()


@lru_cache()
def get_auth_service() -> AuthService:
    """
    Get a singleton AuthService instance.

    Reusing the instance keeps its JWKS cache alive across requests.
    Reference: https://docs.python.org/3/library/functools.html#functools.lru_cache
    """
    return AuthService()


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Caller:
    """
    Dependency resolving the verified identity of the caller.

    Identity is re-resolved on every request; nothing is cached per user.

    Usage:
        @router.delete("/{store_id}")
        async def delete(caller: Caller = Depends(get_current_caller)): ...

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no subject
    """
    auth_service = get_auth_service()
    try:
        session_data = await auth_service.verify_session(credentials.credentials)
    except ValueError as e:
        # Map error to RFC6750-compliant WWW-Authenticate header
        msg = str(e)
        description = "The access token expired" if "expired" in msg.lower() else (msg or "The access token is invalid")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=msg,
            headers={
                "WWW-Authenticate": f'Bearer realm="api", error="invalid_token", error_description="{description}"'
            },
        ) from e

    user_id = session_data.get("user_id")
    if not user_id:
        logger.error("Token missing user_id (sub claim)")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user information",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Caller(id=user_id)


def open_maps(session: AsyncSession) -> Tuple[DurableMap[Store], DurableMap[Item]]:
    """
    Build the store and item map handles around one session.

    Raises:
        ValueError: If both maps are configured with the same namespace tag
    """
    if settings.STORE_MAP_ID == settings.ITEM_MAP_ID:
        raise ValueError("STORE_MAP_ID and ITEM_MAP_ID must differ")
    stores = DurableMap(
        session,
        settings.STORE_MAP_ID,
        Store,
        max_key_size=settings.MAP_MAX_KEY_SIZE,
        max_value_size=settings.MAP_MAX_VALUE_SIZE,
    )
    items = DurableMap(
        session,
        settings.ITEM_MAP_ID,
        Item,
        max_key_size=settings.MAP_MAX_KEY_SIZE,
        max_value_size=settings.MAP_MAX_VALUE_SIZE,
    )
    return stores, items


def _store_service(session: AsyncSession) -> StoreService:
    stores, items = open_maps(session)
    return StoreService(stores, items, cascade_deletes=settings.CASCADE_DELETES)


def _item_service(session: AsyncSession) -> ItemService:
    stores, items = open_maps(session)
    return ItemService(stores, items, cascade_deletes=settings.CASCADE_DELETES)


# Query operations share an unlocked session
async def get_store_service(db: AsyncSession = Depends(get_db)) -> StoreService:
    return _store_service(db)


async def get_item_service(db: AsyncSession = Depends(get_db)) -> ItemService:
    return _item_service(db)


# Update operations run serialized, see get_update_db
async def get_store_service_for_update(db: AsyncSession = Depends(get_update_db)) -> StoreService:
    return _store_service(db)


async def get_item_service_for_update(db: AsyncSession = Depends(get_update_db)) -> ItemService:
    return _item_service(db)
