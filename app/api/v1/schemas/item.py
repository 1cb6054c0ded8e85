"""
Item Pydantic schemas
Request payload and persisted record for eyewear units
Reference: https://fastapi.tiangolo.com/tutorial/body/
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ItemPayload(BaseModel):
    """
    Schema for creating or updating an item

    store_id is accepted for compatibility with clients that send it, but the
    owning store always comes from the path of the create call.
    """
    size: str = Field("", description="Frame size (e.g., 'M')")
    power: str = Field("", description="Lens power (e.g., '+1.5')")
    glass_type: str = Field("", description="Lens material (e.g., 'glass', 'polycarbonate')")
    gender: str = Field("", description="Target gender (e.g., 'unisex')")
    price: float = Field(0, description="Selling price, must be greater than zero")
    store_id: Optional[str] = Field(None, description="Owning store ID (informational)")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Item(BaseModel):
    """
    Persisted item record, also used as the response schema
    """
    id: str = Field(..., description="Item ID")
    size: str = Field(..., description="Frame size")
    power: str = Field(..., description="Lens power")
    glass_type: str = Field(..., description="Lens material")
    gender: str = Field(..., description="Target gender")
    price: float = Field(..., gt=0, allow_inf_nan=False, description="Selling price")
    store_id: str = Field(..., description="ID of the store the item was created under")
    created_at: datetime = Field(..., description="Timestamp when item was created")
    updated_at: Optional[datetime] = Field(
        None, description="Timestamp of the last update, absent until the first one"
    )

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
