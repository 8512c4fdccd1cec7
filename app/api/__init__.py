"""
API router aggregation
"""

from fastapi import APIRouter
from app.api.endpoints import assets, subassets, asset_operations, system

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    system.router,
    prefix="/system",
    tags=["System"]
)

api_router.include_router(
    asset_operations.router,
    prefix="",
    tags=["Asset Operations"]
)

api_router.include_router(
    assets.router,
    prefix="/assets",
    tags=["Assets"]
)

api_router.include_router(
    subassets.router,
    prefix="/subassets",
    tags=["Sub-assets"]
)
