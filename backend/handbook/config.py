from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    SERVICE_NAME: str = "Neumo Handbook"

    # Database
    DATABASE_URL: str = "sqlite:///./handbook.db"

    # Published content tree (file takes precedence over URL)
    CONTENT_TREE_PATH: Optional[str] = None
    CONTENT_TREE_URL: Optional[str] = None
    CONTENT_TREE_TIMEOUT: float = 5.0

    # Rate Limiting
    RECORD_CLICK_RATE_LIMIT: str = "300/minute"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
