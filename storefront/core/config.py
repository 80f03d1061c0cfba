"""
Application configuration management using Pydantic Settings
Handles all environment variables and storefront settings
"""

from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache


class Settings(BaseSettings):
    """Main application settings"""

    # Application Settings
    APP_NAME: str = "Sparsh NFC Storefront"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Firebase Configuration
    FIREBASE_CREDENTIALS_JSON: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None
    FIREBASE_WEB_API_KEY: Optional[str] = None
    IDENTITY_TOOLKIT_URL: str = "https://identitytoolkit.googleapis.com/v1"

    # Local key-value storage ("memory", "file" or "redis")
    STORAGE_BACKEND: str = "file"
    STORAGE_FILE_PATH: str = ".storefront/local_storage.json"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Storage slot names
    CART_STORAGE_KEY: str = "sparshCart"
    USER_STORAGE_KEY: str = "sparshUser"
    PROFILE_STORAGE_KEY: str = "sparshUserProfile"
    REDIRECT_STORAGE_KEY: str = "redirectAfterLogin"

    # Business Logic Settings
    GST_RATE: str = "0.18"  # kept as a string so Decimal stays exact
    ORDERS_FETCH_LIMIT: int = 100
    USERS_FETCH_LIMIT: int = 100
    USER_ORDERS_LIMIT: int = 10

    # Admin access
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Create cached settings instance
    This ensures settings are loaded only once
    """
    return Settings()

# Global settings instance
settings = get_settings()
