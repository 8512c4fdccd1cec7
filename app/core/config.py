"""
Application configuration
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "AssetTree"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = Field(default=False, env="DEBUG")
    HOST: str = Field(default="0.0.0.0", env="HOST")
    PORT: int = Field(default=3000, env="PORT")
    LOG_LEVEL: str = Field(default="INFO", env="LOG_LEVEL")

    # Document storage (Assets.json, SubAssets.json and attachment folders)
    DATA_DIR: str = Field(default="data", env="DATA_DIR")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default=["*"],
        env="CORS_ORIGINS"
    )

    # Batch limits
    MAX_DUPLICATE_COUNT: int = Field(default=100, env="MAX_DUPLICATE_COUNT")
    MAX_BULK_ITEMS: int = Field(default=100, env="MAX_BULK_ITEMS")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


# Create settings instance
settings = Settings()
