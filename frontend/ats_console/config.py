"""
Console client configuration
"""
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Where the console finds the ATS API"""

    ATS_API_URL: str = "http://localhost:3010/api"
    ATS_API_TIMEOUT: float = 10.0
    LOG_LEVEL: str = "WARNING"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"
