"""
Sub-asset (component) management endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from app.models.asset import EntityKind
from app.schemas.asset import SubAssetCreate, SubAssetUpdate
from app.schemas.common import BulkOperationResult, SubAssetBulkCreate
from app.services import Inventory, get_inventory

router = APIRouter()


@router.get("", response_model=List[dict])
async def get_sub_assets(
    parent_id: Optional[str] = Query(default=None, alias="parentId"),
    inventory: Inventory = Depends(get_inventory)
):
    """Get all sub-assets, optionally only those owned by one asset"""
    return await inventory.entities.list_all(EntityKind.SUB_ASSET, parent_id=parent_id)


@router.get("/{sub_asset_id}", response_model=dict)
async def get_sub_asset(sub_asset_id: str, inventory: Inventory = Depends(get_inventory)):
    """Get a specific sub-asset by ID"""
    return await inventory.entities.get(EntityKind.SUB_ASSET, sub_asset_id)


@router.get("/{sub_asset_id}/descendants", response_model=List[dict])
async def get_sub_asset_descendants(sub_asset_id: str, inventory: Inventory = Depends(get_inventory)):
    """Get every nested component under a sub-asset, parents before children"""
    return await inventory.entities.descendants(sub_asset_id)


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_sub_asset(
    sub_asset_data: SubAssetCreate,
    inventory: Inventory = Depends(get_inventory)
):
    """Create a new sub-asset under an asset or another sub-asset"""
    return await inventory.entities.create(
        EntityKind.SUB_ASSET,
        sub_asset_data.model_dump(by_alias=True)
    )


@router.post("/bulk", response_model=BulkOperationResult, status_code=status.HTTP_201_CREATED)
async def create_sub_assets_bulk(
    request: SubAssetBulkCreate,
    inventory: Inventory = Depends(get_inventory)
):
    """Create several sub-assets in one write"""
    created = await inventory.entities.create_many(
        EntityKind.SUB_ASSET,
        [item.model_dump(by_alias=True) for item in request.items]
    )
    return BulkOperationResult(success=True, created=len(created), items=created)


@router.put("/{sub_asset_id}", response_model=dict)
async def update_sub_asset(
    sub_asset_id: str,
    sub_asset_data: SubAssetUpdate,
    inventory: Inventory = Depends(get_inventory)
):
    """Update an existing sub-asset (fields not sent are kept)"""
    return await inventory.entities.update(
        EntityKind.SUB_ASSET,
        sub_asset_id,
        sub_asset_data.model_dump(by_alias=True, exclude_unset=True)
    )
