"""
Runtime configuration for Icon Atlas.
Everything comes from environment variables so the same code runs locally and in the cloud.
"""

import os
from typing import Optional

# Database (favorites). SQLite by default, any SQLAlchemy URL accepted.
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./iconatlas.db")

# Connection pooling settings (only used for PostgreSQL)
POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "3600"))

# Catalog
PAGE_SIZE: int = int(os.getenv("ICON_PAGE_SIZE", "120"))
DEFAULT_ICON_SIZE: int = int(os.getenv("DEFAULT_ICON_SIZE", "48"))
GRID_ICON_SIZE: int = int(os.getenv("GRID_ICON_SIZE", "24"))
DEFAULT_PROVIDER: str = os.getenv("DEFAULT_PROVIDER", "lucide")

# Remote assets
ICONIFY_API_BASE: str = os.getenv("ICONIFY_API_BASE", "https://api.iconify.design").rstrip("/")
ICONIFY_COLLECTIONS_DIR: Optional[str] = os.getenv("ICONIFY_COLLECTIONS_DIR") or None
ASSET_TIMEOUT: float = float(os.getenv("ASSET_TIMEOUT", "10"))

# Write safety
FAVORITE_WRITES_PER_MINUTE: int = int(os.getenv("FAVORITE_WRITES_PER_MINUTE", "30"))

# Endpoint configuration
APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT: int = int(os.getenv("APP_PORT", "8080"))


def is_postgres_url(url: str) -> bool:
    return url.startswith("postgresql://") or url.startswith("postgresql+") or url.startswith("postgres://")


def get_database_url() -> str:
    """
    Get SQLAlchemy-compatible URL.
    PostgreSQL URLs are rewritten to use the psycopg2 driver.
    """
    url = DATABASE_URL
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return url


def get_pool_config() -> dict:
    """
    Return connection pool configuration for PostgreSQL.
    """
    return {
        "pool_size": POOL_SIZE,
        "max_overflow": MAX_OVERFLOW,
        "pool_timeout": POOL_TIMEOUT,
        "pool_recycle": POOL_RECYCLE,
        "pool_pre_ping": True,  # Test connection before using (prevents stale connections)
    }


if __name__ == "__main__":
    # Debug: print resolved configuration
    print(f"Database URL: {get_database_url()}")
    print(f"Pool config: {get_pool_config()}")
    print(f"Iconify API: {ICONIFY_API_BASE}")
    print(f"Iconify collections dir: {ICONIFY_COLLECTIONS_DIR}")
    print(f"App endpoint: {APP_HOST}:{APP_PORT}")
