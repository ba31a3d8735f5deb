from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    # API Settings
    PROJECT_NAME: str = "Academy Records API"
    API_PREFIX: str = "/api"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Member, expense and donation records for the academy"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # MongoDB
    # Local default only; deployments must set MONGODB_URI.
    MONGODB_URI: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "academy"
    MONGODB_TIMEOUT_MS: int = 5000
    MONGODB_RETRY_DELAY_SECONDS: float = 5.0
    MONGODB_HEALTH_INTERVAL_SECONDS: float = 30.0

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Static application shell
    STATIC_DIR: str = "public"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
