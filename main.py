#!/usr/bin/env python3
"""
AssetTree - inventory of assets, components and attachments
Main application entry point
"""

import uvicorn
from app import create_app
from app.core.config import settings

# Create the FastAPI application
app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else settings.LOG_LEVEL.lower()
    )
