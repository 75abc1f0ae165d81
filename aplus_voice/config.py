"""
Application Configuration

Loads settings from environment variables
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""
    
    # Application
    APP_NAME: str = "A Plus Auto Voice Agent"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    
    # Upstream store (WordPress / WooCommerce)
    UPSTREAM_BASE_URL: str = "https://aplusauto.parts"
    UPSTREAM_TIMEOUT: float = 15.0  # seconds per outbound call, no retries
    UPSTREAM_USER_AGENT: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    MAX_RESULTS: int = 10
    
    # API
    CORS_ORIGINS: list = ["*"]
    
    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance
    
    Settings don't change during runtime
    """
    return Settings()
