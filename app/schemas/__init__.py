"""
Pydantic schemas for request/response validation
"""

from app.schemas.asset import (
    AssetCreate,
    AssetUpdate,
    DeleteResponse,
    DuplicateRequest,
    DuplicateResponse,
    FileInfo,
    MaintenanceEvent,
    SubAssetCreate,
    SubAssetUpdate,
    Warranty
)
from app.schemas.common import (
    AssetBulkCreate,
    BulkOperationResult,
    FileDeleteRequest,
    SubAssetBulkCreate
)

__all__ = [
    "AssetCreate",
    "AssetUpdate",
    "DeleteResponse",
    "DuplicateRequest",
    "DuplicateResponse",
    "FileInfo",
    "MaintenanceEvent",
    "SubAssetCreate",
    "SubAssetUpdate",
    "Warranty",
    "AssetBulkCreate",
    "BulkOperationResult",
    "FileDeleteRequest",
    "SubAssetBulkCreate"
]
