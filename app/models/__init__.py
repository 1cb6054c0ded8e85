"""
Database models
All SQLAlchemy models should be defined here or imported here
"""

# Import Base for models to inherit from
from app.core.database import Base
from app.models.durable_entry import DurableEntry

# Export all models for easy imports
__all__ = [
    "Base",
    "DurableEntry",
]
