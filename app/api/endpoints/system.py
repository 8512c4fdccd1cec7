"""
System information endpoints
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.storage import Collection
from app.services import Inventory, get_inventory

router = APIRouter()

# Store server start time
server_start_time = datetime.now(timezone.utc)


def format_uptime(uptime_seconds: float) -> str:
    days = int(uptime_seconds // (24 * 3600))
    hours = int((uptime_seconds % (24 * 3600)) // 3600)
    minutes = int((uptime_seconds % 3600) // 60)
    seconds = int(uptime_seconds % 60)

    uptime_parts = []
    if days > 0:
        uptime_parts.append(f"{days}d")
    if hours > 0:
        uptime_parts.append(f"{hours}h")
    if minutes > 0:
        uptime_parts.append(f"{minutes}m")
    uptime_parts.append(f"{seconds}s")
    return " ".join(uptime_parts)


@router.get("/info")
async def get_system_info(inventory: Inventory = Depends(get_inventory)):
    """Get version, uptime and collection sizes"""
    current_time = datetime.now(timezone.utc)
    uptime_seconds = (current_time - server_start_time).total_seconds()

    assets = await inventory.store.read_all(Collection.ASSETS)
    sub_assets = await inventory.store.read_all(Collection.SUB_ASSETS)

    return {
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "uptime": format_uptime(uptime_seconds),
        "uptime_seconds": int(uptime_seconds),
        "server_start_time": server_start_time.isoformat(),
        "current_time": current_time.isoformat(),
        "total_assets": len(assets),
        "total_sub_assets": len(sub_assets)
    }
