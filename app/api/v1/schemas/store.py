"""
Store Pydantic schemas
Request payload and persisted record for eyewear stores
Reference: https://fastapi.tiangolo.com/tutorial/body/
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StorePayload(BaseModel):
    """
    Schema for creating or updating a store

    Fields default to empty strings so a missing field reaches the
    validation layer and is reported as invalid input, not a 422.
    """
    name: str = Field("", description="Store name")
    location: str = Field("", description="Where the store is located")
    image: str = Field("", description="URL or path of the store image")


class Store(BaseModel):
    """
    Persisted store record, also used as the response schema

    Serialized with camelCase aliases (itemIds, createdAt, updatedAt),
    both in the durable map and over the wire.
    """
    id: str = Field(..., description="Store ID")
    name: str = Field(..., description="Store name")
    location: str = Field(..., description="Where the store is located")
    image: str = Field(..., description="URL or path of the store image")
    owner: str = Field(..., description="Identity of the caller who created the store")
    item_ids: List[str] = Field(
        default_factory=list, description="Ids of the items belonging to this store"
    )
    created_at: datetime = Field(..., description="Timestamp when store was created")
    updated_at: Optional[datetime] = Field(
        None, description="Timestamp of the last update, absent until the first one"
    )

    # Reference: https://docs.pydantic.dev/latest/api/config/#pydantic.config.ConfigDict.alias_generator
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
