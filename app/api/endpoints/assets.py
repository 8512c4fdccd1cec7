"""
Asset management endpoints
"""

from typing import List
from fastapi import APIRouter, Depends, status

from app.models.asset import EntityKind
from app.schemas.asset import AssetCreate, AssetUpdate
from app.schemas.common import AssetBulkCreate, BulkOperationResult
from app.services import Inventory, get_inventory

router = APIRouter()


@router.get("", response_model=List[dict])
async def get_assets(inventory: Inventory = Depends(get_inventory)):
    """Get all assets"""
    return await inventory.entities.list_all(EntityKind.ASSET)


@router.get("/{asset_id}", response_model=dict)
async def get_asset(asset_id: str, inventory: Inventory = Depends(get_inventory)):
    """Get a specific asset by ID"""
    return await inventory.entities.get(EntityKind.ASSET, asset_id)


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_asset(
    asset_data: AssetCreate,
    inventory: Inventory = Depends(get_inventory)
):
    """Create a new asset"""
    return await inventory.entities.create(
        EntityKind.ASSET,
        asset_data.model_dump(by_alias=True)
    )


@router.post("/bulk", response_model=BulkOperationResult, status_code=status.HTTP_201_CREATED)
async def create_assets_bulk(
    request: AssetBulkCreate,
    inventory: Inventory = Depends(get_inventory)
):
    """Create up to the configured number of assets in one write"""
    created = await inventory.entities.create_many(
        EntityKind.ASSET,
        [item.model_dump(by_alias=True) for item in request.items]
    )
    return BulkOperationResult(success=True, created=len(created), items=created)


@router.put("/{asset_id}", response_model=dict)
async def update_asset(
    asset_id: str,
    asset_data: AssetUpdate,
    inventory: Inventory = Depends(get_inventory)
):
    """Update an existing asset (fields not sent are kept)"""
    return await inventory.entities.update(
        EntityKind.ASSET,
        asset_id,
        asset_data.model_dump(by_alias=True, exclude_unset=True)
    )
