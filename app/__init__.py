"""
AssetTree Application Factory
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.models.asset import AttachmentCategory
from app.services import Inventory


def configure_logging() -> None:
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


def create_app(data_dir: Optional[str] = None) -> FastAPI:
    """Create and configure the FastAPI application"""

    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Inventory of assets, their nested components and attachments",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Documents and attachment folders
    inventory = Inventory(
        data_dir or settings.DATA_DIR,
        max_duplicate_count=settings.MAX_DUPLICATE_COUNT,
        max_bulk_items=settings.MAX_BULK_ITEMS,
    )
    inventory.initialize()
    app.state.inventory = inventory

    # Import routers here to avoid circular imports
    from app.api import api_router

    # Serve uploaded files
    for category in AttachmentCategory:
        app.mount(
            f"/{category.value}",
            StaticFiles(directory=str(inventory.attachments.data_dir / category.value)),
            name=category.value.lower(),
        )

    # Include routers
    app.include_router(api_router, prefix="/api")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors()), "error_code": "VALIDATION_ERROR"},
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": settings.APP_NAME}

    return app
