"""
Pydantic schemas for API request/response models
"""

from app.api.v1.schemas.auth import Caller
from app.api.v1.schemas.item import Item, ItemPayload
from app.api.v1.schemas.store import Store, StorePayload

__all__ = ["Caller", "Item", "ItemPayload", "Store", "StorePayload"]
