"""
Common schemas used across the application
"""

from typing import List
from pydantic import BaseModel, Field

from app.schemas.asset import AssetCreate, SubAssetCreate


class AssetBulkCreate(BaseModel):
    """Bulk asset creation request"""
    items: List[AssetCreate] = Field(default_factory=list)


class SubAssetBulkCreate(BaseModel):
    """Bulk sub-asset creation request"""
    items: List[SubAssetCreate] = Field(default_factory=list)


class BulkOperationResult(BaseModel):
    """Result of a bulk operation"""
    success: bool
    created: int
    items: List[dict] = Field(default_factory=list)


class FileDeleteRequest(BaseModel):
    """Attachment to delete, as stored on a record"""
    path: str = Field(..., min_length=1)
