"""Application configuration settings."""

import os
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Basic settings
    PROJECT_NAME: str = "Production Site Tracker"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3333
    RELOAD: bool = False

    # CORS
    FRONTEND_URL: str = "http://localhost:3000"
    BACKEND_CORS_ORIGINS: List[str] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS origins."""
        if isinstance(v, str):
            if not v.startswith("["):
                return [i.strip() for i in v.split(",") if i.strip()]
            else:
                # Handle JSON array string format
                import json

                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    raise ValueError(f"Invalid JSON format for CORS origins: {v}")
        elif isinstance(v, list):
            return v
        raise ValueError(f"CORS origins must be string or list, got {type(v)}")

    # Document store
    DATABASE_URL: str = "sqlite+aiosqlite:///./sitetracker.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False
    DB_POOL_PRE_PING: bool = True
    DB_POOL_RECYCLE: int = 300

    # Collections
    PRODUCTION_SITES_TABLE: str = "ProductionSiteTable"
    PRODUCTION_TABLE: str = "ProductionTable"

    # Testing
    TESTING: bool = os.getenv("TESTING", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def cors_origins(self) -> List[str]:
        """Frontend origin followed by any extra configured origins."""
        origins = [self.FRONTEND_URL] if self.FRONTEND_URL else []
        return origins + [o for o in self.BACKEND_CORS_ORIGINS if o not in origins]

    @property
    def database_url_async(self) -> str:
        """Get asynchronous database URL for SQLAlchemy."""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("sqlite:///"):
            return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return url


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
