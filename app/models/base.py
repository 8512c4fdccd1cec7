"""
Base helpers shared by all stored records
"""

from datetime import datetime, timezone
from typing import Collection, Optional
import uuid


def generate_id(taken: Optional[Collection[str]] = None) -> str:
    """Mint a record id that is not already in ``taken``"""
    while True:
        new_id = str(uuid.uuid4())
        if not taken or new_id not in taken:
            return new_id


def utc_now() -> str:
    """Current time as an ISO-8601 string, the format stored in documents"""
    return datetime.now(timezone.utc).isoformat()


def stamp_created(record: dict) -> dict:
    now = utc_now()
    record["createdAt"] = now
    record["updatedAt"] = now
    return record
