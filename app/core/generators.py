"""
Default sources of identifiers and timestamps.
Services take these as constructor arguments so tests can pin them.
"""
import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Random 128-bit identifier in canonical UUID string form"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
