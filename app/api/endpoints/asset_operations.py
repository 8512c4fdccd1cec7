"""
Asset operations endpoints (duplicate, cascading delete, attachment delete)
"""

from fastapi import APIRouter, Depends, status

from app.core.exceptions import StorageError, ValidationError
from app.models.asset import EntityKind
from app.schemas.asset import DeleteResponse, DuplicateRequest, DuplicateResponse
from app.schemas.common import FileDeleteRequest
from app.services import Inventory, get_inventory

router = APIRouter()


async def _duplicate(kind: EntityKind, request: DuplicateRequest, inventory: Inventory) -> DuplicateResponse:
    result = await inventory.duplication.duplicate(
        request.source,
        request.count,
        request.selected_properties,
        kind
    )
    return DuplicateResponse(
        created_count=result.created_count,
        items=result.items,
        nested_count=len(result.nested_items),
        nested_items=result.nested_items
    )


@router.post("/assets/duplicate", response_model=DuplicateResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_asset(request: DuplicateRequest, inventory: Inventory = Depends(get_inventory)):
    """Create 1-100 copies of an asset

    Each property in ``selectedProperties`` is copied only when selected and
    present on the source. With ``subAssets`` selected every copy gets its own
    clone of the full component tree.
    """
    return await _duplicate(EntityKind.ASSET, request, inventory)


@router.post("/subassets/duplicate", response_model=DuplicateResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_sub_asset(request: DuplicateRequest, inventory: Inventory = Depends(get_inventory)):
    """Create 1-100 copies of a sub-asset next to the original"""
    return await _duplicate(EntityKind.SUB_ASSET, request, inventory)


@router.delete("/assets/{asset_id}", response_model=DeleteResponse)
async def delete_asset(asset_id: str, inventory: Inventory = Depends(get_inventory)):
    """Delete an asset, all of its components at every depth, and their files"""
    deleted = await inventory.deletion.delete_with_descendants(asset_id, EntityKind.ASSET)
    return DeleteResponse(deleted_count=deleted)


@router.delete("/subassets/{sub_asset_id}", response_model=DeleteResponse)
async def delete_sub_asset(sub_asset_id: str, inventory: Inventory = Depends(get_inventory)):
    """Delete a sub-asset and its nested components; siblings are untouched"""
    deleted = await inventory.deletion.delete_with_descendants(sub_asset_id, EntityKind.SUB_ASSET)
    return DeleteResponse(deleted_count=deleted)


@router.post("/files/delete")
async def delete_file(request: FileDeleteRequest, inventory: Inventory = Depends(get_inventory)):
    """Delete one attachment; a file that is already gone counts as deleted"""
    if inventory.attachments.resolve(request.path) is None:
        raise ValidationError("Path must name a file in an attachment folder", field="path")
    try:
        await inventory.attachments.delete(request.path)
    except OSError:
        raise StorageError("Failed to delete file", operation="delete")
    return {"message": "File deleted"}
