"""
Payload validation for stores and items.

Pure checks run before any storage access; a failure raises InvalidInputError
and the operation stops without touching either durable map.
"""

import math
from typing import List

from app.api.v1.schemas.item import ItemPayload
from app.api.v1.schemas.store import StorePayload
from app.core.exceptions import InvalidInputError


def _missing(fields: dict) -> List[str]:
    return [name for name, value in fields.items() if not value]


def validate_id(value: str, name: str = "id") -> None:
    """Identifier arguments must be non-empty strings"""
    if not value:
        raise InvalidInputError(f"Invalid {name}={value!r}.")


def validate_store_payload(payload: StorePayload) -> None:
    """
    A store payload is valid iff name, location and image are non-empty.

    Raises:
        InvalidInputError: Naming every missing field
    """
    missing = _missing(
        {"name": payload.name, "location": payload.location, "image": payload.image}
    )
    if missing:
        raise InvalidInputError(f"Missing required fields in payload: {', '.join(missing)}")


def validate_item_payload(payload: ItemPayload) -> None:
    """
    An item payload is valid iff size, power, glassType and gender are
    non-empty and price is finite and strictly positive.

    Raises:
        InvalidInputError: Naming every missing or invalid field
    """
    problems = _missing(
        {
            "size": payload.size,
            "power": payload.power,
            "glassType": payload.glass_type,
            "gender": payload.gender,
        }
    )
    if not (math.isfinite(payload.price) and payload.price > 0):
        problems.append("price (must be a finite number greater than 0)")
    if problems:
        raise InvalidInputError(f"Missing or invalid fields in payload: {', '.join(problems)}")
