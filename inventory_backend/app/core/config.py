"""
Configuration settings for the Shop Ledger Backend.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Shop Ledger Backend"
    api_version: str = "v1"
    debug: bool = False
    log_level: str = "INFO"

    # Database Configuration (embedded SQLite store)
    database_url: str = "sqlite+aiosqlite:///./data/shop.db"
    db_echo: bool = False
    reset_db_on_startup: bool = True

    # File storage
    uploads_dir: str = "./data/uploads"
    max_logo_bytes: int = 2 * 1024 * 1024
    max_backup_bytes: int = 100 * 1024 * 1024

    # Security Configuration (JWT)
    secret_key: str = "your-secret-key-change-this-in-production-min-32-chars"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Seeded administrator
    default_admin_username: str = "admin"
    default_admin_password: str = "password123"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
