"""
Application configuration using Pydantic Settings
"""
from typing import List
from pydantic_settings import BaseSettings


# Upload constraints shared by the transport filter and the validation layer
ALLOWED_MIME_TYPES: List[str] = [
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
]
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "LTI ATS"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3010

    # Database
    DATABASE_URL: str = "sqlite:///./ats.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # File Upload
    UPLOAD_DIR: str = "./uploads/candidates"

    # CORS
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ALLOW_CREDENTIALS: bool = True

    # Observability
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
