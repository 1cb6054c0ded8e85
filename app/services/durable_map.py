"""
Durable map: an ordered, size-bounded key/value container persisted in the
durable_entries table.

Each map is addressed by a numeric namespace tag (map_id) and stores pydantic
records as JSON text. Handles are cheap: one is built per request around the
request's session, so all maps touched by an operation share its transaction.

Reference: https://docs.sqlalchemy.org/en/20/orm/session_basics.html
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageEncodingError
from app.models.durable_entry import DurableEntry

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

DEFAULT_MAX_KEY_SIZE = 44
DEFAULT_MAX_VALUE_SIZE = 16384


class DurableMap(Generic[RecordT]):
    """Key/value view over one map_id region of the durable_entries table"""

    def __init__(
        self,
        session: AsyncSession,
        map_id: int,
        record_type: Type[RecordT],
        max_key_size: int = DEFAULT_MAX_KEY_SIZE,
        max_value_size: int = DEFAULT_MAX_VALUE_SIZE,
    ):
        self.session = session
        self.map_id = map_id
        self.record_type = record_type
        self.max_key_size = max_key_size
        self.max_value_size = max_value_size

    def _key_fits(self, key: str) -> bool:
        return len(key.encode("utf-8")) <= self.max_key_size

    def _check_key(self, key: str) -> None:
        size = len(key.encode("utf-8"))
        if size > self.max_key_size:
            raise StorageEncodingError(
                f"Key of {size} bytes exceeds the {self.max_key_size}-byte bound of map {self.map_id}"
            )

    def _encode(self, value: RecordT) -> str:
        data = value.model_dump_json(by_alias=True)
        size = len(data.encode("utf-8"))
        if size > self.max_value_size:
            raise StorageEncodingError(
                f"Value of {size} bytes exceeds the {self.max_value_size}-byte bound of map {self.map_id}"
            )
        return data

    def _decode(self, data: str) -> RecordT:
        return self.record_type.model_validate_json(data)

    async def _entry(self, key: str) -> Optional[DurableEntry]:
        return await self.session.get(DurableEntry, (self.map_id, key))

    async def get(self, key: str) -> Optional[RecordT]:
        """
        Look up a value by key.

        Args:
            key: Entity identifier

        Returns:
            The stored record, or None if the key is absent
        """
        if not self._key_fits(key):
            return None
        entry = await self._entry(key)
        if entry is None:
            return None
        return self._decode(entry.value)

    async def contains_key(self, key: str) -> bool:
        if not self._key_fits(key):
            return False
        return await self._entry(key) is not None

    async def insert(self, key: str, value: RecordT) -> Optional[RecordT]:
        """
        Create or overwrite the value stored under key.

        Args:
            key: Entity identifier
            value: Record to store

        Returns:
            The previous record, or None if the key was new

        Raises:
            StorageEncodingError: If the key or the serialized value is too large
        """
        self._check_key(key)
        data = self._encode(value)

        entry = await self._entry(key)
        previous = None
        if entry is None:
            self.session.add(DurableEntry(map_id=self.map_id, key=key, value=data))
        else:
            previous = self._decode(entry.value)
            entry.value = data

        await self.session.flush()
        logger.debug(f"Map {self.map_id}: {'replaced' if previous else 'inserted'} key {key}")
        return previous

    async def remove(self, key: str) -> Optional[RecordT]:
        """
        Delete the value stored under key.

        Returns:
            The removed record, or None if the key was absent
        """
        if not self._key_fits(key):
            return None
        entry = await self._entry(key)
        if entry is None:
            return None

        removed = self._decode(entry.value)
        await self.session.delete(entry)
        await self.session.flush()
        logger.debug(f"Map {self.map_id}: removed key {key}")
        return removed

    async def values(self) -> List[RecordT]:
        """All stored records, ordered by key"""
        result = await self.session.execute(
            select(DurableEntry.value)
            .where(DurableEntry.map_id == self.map_id)
            .order_by(DurableEntry.key)
        )
        return [self._decode(data) for data in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(DurableEntry).where(DurableEntry.map_id == self.map_id)
        )
        return result.scalar_one()
