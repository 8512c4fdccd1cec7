"""
Record vocabulary for AssetTree
"""

from app.models.asset import (
    ATTACHMENT_FIELDS,
    AttachmentCategory,
    AttachmentField,
    EntityKind,
    blank_warranty,
)
from app.models.base import generate_id, stamp_created, utc_now

__all__ = [
    "ATTACHMENT_FIELDS",
    "AttachmentCategory",
    "AttachmentField",
    "EntityKind",
    "blank_warranty",
    "generate_id",
    "stamp_created",
    "utc_now",
]
