"""
Durable entry database model
Backing table shared by every durable map; each map owns one region of it
Reference: https://docs.sqlalchemy.org/en/20/orm/declarative_styles.html
"""
from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class DurableEntry(Base):
    """
    One key/value row of a durable map

    Attributes:
        map_id: Namespace tag of the map owning the row (0 = stores, 1 = items)
        key: Entity identifier, unique within its map
        value: JSON-serialized entity record

    The composite primary key keeps rows of different maps apart even when
    two entity kinds happen to share an identifier.
    """
    __tablename__ = "durable_entries"

    map_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        """String representation of DurableEntry"""
        return f"<DurableEntry(map_id={self.map_id}, key='{self.key}')>"
