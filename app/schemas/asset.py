"""
Asset and sub-asset schemas for validation
"""

from typing import Optional, List, Any
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Stored documents use camelCase keys; unknown keys are kept as-is"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class Warranty(CamelModel):
    """Warranty block (primary or secondary)"""
    scope: str = ""
    expiration_date: Optional[str] = None
    is_lifetime: bool = False


class MaintenanceEvent(CamelModel):
    """Recurring or one-off maintenance reminder"""
    id: Optional[str] = None
    name: str = ""
    type: str = Field(default="frequency", pattern="^(frequency|specific)$")
    frequency: Optional[int] = Field(default=None, ge=1)
    frequency_unit: Optional[str] = None
    specific_date: Optional[str] = None
    notes: str = ""


class FileInfo(CamelModel):
    """Metadata kept index-aligned with an attachment path list"""
    original_name: str = ""
    size: int = Field(default=0, ge=0)


class EntityBase(CamelModel):
    """Fields shared by assets and sub-assets"""
    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    manufacturer: str = ""
    model_number: str = ""
    serial_number: str = ""
    purchase_date: Optional[str] = None
    link: str = ""
    quantity: int = Field(default=1, ge=1)
    tags: List[str] = Field(default_factory=list)
    warranty: Warranty = Field(default_factory=Warranty)
    maintenance_events: List[MaintenanceEvent] = Field(default_factory=list)
    photo_paths: List[str] = Field(default_factory=list)
    photo_info: List[FileInfo] = Field(default_factory=list)
    receipt_paths: List[str] = Field(default_factory=list)
    receipt_info: List[FileInfo] = Field(default_factory=list)
    manual_paths: List[str] = Field(default_factory=list)
    manual_info: List[FileInfo] = Field(default_factory=list)
    files_to_delete: List[str] = Field(default_factory=list)


class AssetCreate(EntityBase):
    """Asset creation schema"""
    description: str = ""
    price: Optional[float] = None
    secondary_warranty: Optional[Warranty] = None


class SubAssetCreate(EntityBase):
    """Sub-asset creation schema"""
    parent_id: str = Field(..., min_length=1)
    parent_sub_id: Optional[str] = None
    notes: str = ""
    purchase_price: Optional[float] = None


class EntityUpdate(CamelModel):
    """Merge-update fields shared by assets and sub-assets (all optional)"""
    name: Optional[str] = Field(None, min_length=1)
    manufacturer: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[str] = None
    link: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=1)
    tags: Optional[List[str]] = None
    warranty: Optional[Warranty] = None
    maintenance_events: Optional[List[MaintenanceEvent]] = None
    photo_paths: Optional[List[str]] = None
    photo_info: Optional[List[FileInfo]] = None
    receipt_paths: Optional[List[str]] = None
    receipt_info: Optional[List[FileInfo]] = None
    manual_paths: Optional[List[str]] = None
    manual_info: Optional[List[FileInfo]] = None
    files_to_delete: Optional[List[str]] = None


class AssetUpdate(EntityUpdate):
    """Asset update schema"""
    description: Optional[str] = None
    price: Optional[float] = None
    secondary_warranty: Optional[Warranty] = None


class SubAssetUpdate(EntityUpdate):
    """Sub-asset update schema"""
    parent_id: Optional[str] = None
    parent_sub_id: Optional[str] = None
    notes: Optional[str] = None
    purchase_price: Optional[float] = None


class DuplicateRequest(CamelModel):
    """Duplication request; range and presence checks happen in the engine"""
    source: Optional[Any] = None
    count: Optional[Any] = None
    selected_properties: Optional[Any] = None


class DuplicateResponse(CamelModel):
    """Result of a duplication batch"""
    created_count: int
    items: List[dict]
    nested_count: int = 0
    nested_items: List[dict] = Field(default_factory=list)


class DeleteResponse(CamelModel):
    """Result of a cascading delete"""
    deleted_count: int
